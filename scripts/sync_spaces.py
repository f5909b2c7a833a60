#!/usr/bin/env python3
"""Sync one user's spaces from the backend into the local cache.

Usage:
    python scripts/sync_spaces.py --user-id 42

Exits 0 on success, 1 on failure (nothing is written locally on failure).
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from hearhome.db.session import SessionLocal
from hearhome.errors import HearHomeError
from hearhome.remote.client import HearHomeClient
from hearhome.services.space_sync import SyncResult, refresh_spaces


async def _run(user_id: int) -> SyncResult:
    db = SessionLocal()
    try:
        async with HearHomeClient.from_settings() as client:
            return await refresh_spaces(db, client, user_id)
    finally:
        db.close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Sync a user's spaces into the local cache.")
    parser.add_argument("--user-id", type=int, required=True, help="User whose spaces to sync")
    args = parser.parse_args(argv)

    try:
        result = asyncio.run(_run(args.user_id))
    except HearHomeError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    print(
        f"status=completed user_id={result.user_id} "
        f"spaces_synced={result.spaces_synced} "
        f"owner_protected={result.owner_protected} "
        f"pending_protected={result.pending_protected} "
        f"check_in_preserved={result.check_in_preserved}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
