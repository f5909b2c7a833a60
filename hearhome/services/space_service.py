"""Space create and join-by-code flows.

Both flows talk to the server first and only write locally once the server
has accepted the request. Remote and decoding failures never escape as
exceptions: join returns a JoinFailed carrying a user-facing message, create
returns None.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx
from pydantic import ValidationError
from sqlalchemy.orm import Session

from hearhome.errors import (
    ConflictFailure,
    DecodeFailure,
    HearHomeError,
    NetworkFailure,
    NotFoundFailure,
    PersistenceFailure,
)
from hearhome.models import Space
from hearhome.models.space import DEFAULT_COVER_COLOR
from hearhome.remote.client import HearHomeClient
from hearhome.schemas.space import CreateSpaceRequest, JoinSpaceRequest, SpaceSummary
from hearhome.services.space_store import SpaceStore
from hearhome.services.space_sync import refresh_spaces, space_from_summary

logger = logging.getLogger(__name__)

JOINED_MESSAGE = "Successfully joined space! Waiting for approval..."
INVALID_CODE_MESSAGE = "Invite code is invalid or the space does not exist."
NETWORK_ERROR_MESSAGE = "Network error. Please check your connection and try again."
LOCAL_SAVE_ERROR_MESSAGE = "Joined the space, but it could not be saved on this device."


@dataclass(frozen=True)
class Joined:
    """The server accepted the join; the local membership is pending approval."""

    space: Space
    message: str


@dataclass(frozen=True)
class JoinFailed:
    message: str


JoinResult = Joined | JoinFailed


def decode_join_response(response: httpx.Response) -> SpaceSummary:
    """Map a POST /space/join response to the joined space.

    Each failure carries the message shown to the user: the server's own text
    for 409 and for an undecodable body.
    """
    logger.debug("Join response status=%s", response.status_code)
    if response.status_code == httpx.codes.CONFLICT:
        raise ConflictFailure(response.text)
    if response.status_code == httpx.codes.NOT_FOUND:
        raise NotFoundFailure(INVALID_CODE_MESSAGE)
    if response.status_code != httpx.codes.OK:
        raise NetworkFailure(
            f"An unexpected error occurred: {response.status_code}",
            status_code=response.status_code,
        )
    try:
        return SpaceSummary.model_validate_json(response.content)
    except ValidationError as exc:
        raise DecodeFailure(response.text) from exc


async def join_space_by_code(
    db: Session,
    client: HearHomeClient,
    user_id: int,
    invite_code: str,
) -> JoinResult:
    """Ask the server to join the space behind ``invite_code``.

    On success the space is cached together with a pending member row for the
    user, and a full space sync follows. The pending row is written before the
    sync, so the sync keeps it pending.
    """
    logger.debug("Joining space with code=%s for user_id=%s", invite_code, user_id)
    try:
        request = JoinSpaceRequest(user_id=user_id, invite_code=invite_code.strip())
    except ValidationError:
        return JoinFailed(INVALID_CODE_MESSAGE)

    try:
        response = await client.join_space(request)
    except NetworkFailure:
        logger.exception("Join request failed for user_id=%s", user_id)
        return JoinFailed(NETWORK_ERROR_MESSAGE)

    try:
        summary = decode_join_response(response)
    except HearHomeError as exc:
        logger.warning("Join rejected for user_id=%s: %s", user_id, exc)
        return JoinFailed(str(exc))

    store = SpaceStore(db)
    try:
        space = store.save_pending_join(space_from_summary(summary), user_id)
    except PersistenceFailure:
        return JoinFailed(LOCAL_SAVE_ERROR_MESSAGE)
    logger.info("Created pending membership user_id=%s space_id=%s", user_id, space.id)

    try:
        await refresh_spaces(db, client, user_id)
    except HearHomeError as exc:
        # The pending row is already saved; the next sync picks up the rest
        logger.warning("Space sync after join failed for user_id=%s: %s", user_id, exc)

    return Joined(space=space, message=JOINED_MESSAGE)


async def create_space(
    db: Session,
    client: HearHomeClient,
    space: Space,
    creator_id: int,
    partner_id: int | None = None,
) -> Space | None:
    """Create ``space`` on the server and cache it with ``creator_id`` as owner.

    Returns the cached Space, or None if anything failed (nothing is cached then).
    """
    logger.debug("Creating space name=%s partner_id=%s", space.name, partner_id)
    try:
        request = CreateSpaceRequest(
            name=space.name,
            type=space.type,
            description=space.description,
            creator_id=creator_id,
            partner_id=partner_id,
            cover_color=space.cover_color or DEFAULT_COVER_COLOR,
        )
        response = await client.create_space(request)
    except ValidationError as exc:
        logger.error("Invalid space to create: %s", exc)
        return None
    except NetworkFailure:
        logger.exception("Create space request failed")
        return None

    if response.status_code != httpx.codes.CREATED:
        logger.error("Failed to create space. Server returned %s", response.status_code)
        return None

    try:
        summary = SpaceSummary.model_validate_json(response.content)
    except ValidationError as exc:
        logger.error("Undecodable create-space response: %s", exc)
        return None

    try:
        created = SpaceStore(db).create_space_with_owner(space_from_summary(summary), creator_id)
    except PersistenceFailure:
        return None
    logger.info("Created space id=%s owner=%s", created.id, creator_id)
    return created
