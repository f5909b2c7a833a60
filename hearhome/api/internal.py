"""Internal job endpoints for cron/schedulers.

These endpoints are secured with a static token (X-Internal-Token header).
They are meant for automated triggers only.
"""

from __future__ import annotations

import logging
import secrets
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from sqlalchemy.orm import Session

from hearhome.config import get_settings
from hearhome.db.session import get_db
from hearhome.errors import HearHomeError
from hearhome.remote.client import HearHomeClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/internal", include_in_schema=False)


# ── Dependencies ────────────────────────────────────────────────────


def _require_internal_token(x_internal_token: str = Header(...)) -> None:
    """Validate the internal job token from the request header.

    Uses constant-time comparison. Raises 403 if the token is empty or does
    not match the configured value.
    """
    expected = get_settings().internal_job_token
    if not expected or not secrets.compare_digest(x_internal_token, expected):
        logger.warning("Internal endpoint auth failed: invalid or missing token")
        raise HTTPException(status_code=403, detail="Invalid internal token")


async def get_client() -> AsyncGenerator[HearHomeClient, None]:
    """Backend client scoped to one request."""
    client = HearHomeClient.from_settings()
    try:
        yield client
    finally:
        await client.aclose()


# ── Endpoints ───────────────────────────────────────────────────────


@router.post("/sync_spaces")
async def sync_spaces(
    user_id: int = Query(..., gt=0, description="User whose spaces to sync"),
    db: Session = Depends(get_db),
    client: HearHomeClient = Depends(get_client),
    _token: None = Depends(_require_internal_token),
):
    """Fetch the user's spaces from the backend and merge them into the local cache."""
    from hearhome.services.space_sync import refresh_spaces

    try:
        result = await refresh_spaces(db, client, user_id)
        return {"status": "completed", **result.as_dict()}
    except HearHomeError as exc:
        logger.exception("Internal space sync failed for user_id=%s", user_id)
        return {"status": "failed", "user_id": user_id, "error": str(exc)}


@router.post("/pet_tick")
async def pet_tick(
    db: Session = Depends(get_db),
    client: HearHomeClient = Depends(get_client),
    _token: None = Depends(_require_internal_token),
):
    """Apply one decay tick to every cached space's pet."""
    from hearhome.pet.tick_job import run_pet_tick

    return await run_pet_tick(db, client)
