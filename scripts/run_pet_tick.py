#!/usr/bin/env python3
"""Run the pet tick job locally.

Usage:
    python scripts/run_pet_tick.py

Applies one decay tick to the pet of every cached space. Schedule it every
PET_TICK_INTERVAL_MINUTES (default 30) from cron or a systemd timer.
Exits 0 on success, 1 on failure.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from hearhome.db.session import SessionLocal
from hearhome.pet.tick_job import run_pet_tick
from hearhome.remote.client import HearHomeClient


async def _run() -> dict:
    db = SessionLocal()
    try:
        async with HearHomeClient.from_settings() as client:
            return await run_pet_tick(db, client)
    finally:
        db.close()


def main() -> int:
    try:
        result = asyncio.run(_run())
        print(
            f"status={result['status']} "
            f"spaces_ticked={result['spaces_ticked']} "
            f"spaces_failed={result['spaces_failed']}"
        )
        if result.get("error"):
            print(f"error={result['error']}", file=sys.stderr)
        return 0 if result["status"] == "completed" else 1
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
