"""Space sync: merge the server's view of a user's spaces into the local cache.

The server snapshot is authoritative except for three facts the local cache
knows better:

- a check-in interval configured locally (> 0) is kept over the server's value;
- a local owner membership is never demoted to member by the snapshot;
- a local pending membership is never promoted to active by the snapshot.

The merge is computed in memory, then written in one transaction. Re-running
it against the same snapshot leaves the cache unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

import httpx
from pydantic import TypeAdapter, ValidationError
from sqlalchemy.orm import Session

from hearhome.errors import DecodeFailure, NetworkFailure
from hearhome.models import MemberRole, MemberStatus, Space, SpaceMember
from hearhome.models.space_member import now_millis
from hearhome.remote.client import HearHomeClient
from hearhome.schemas.space import SpaceSummary
from hearhome.services.space_store import SpaceStore

logger = logging.getLogger(__name__)

_SPACE_LIST = TypeAdapter(list[SpaceSummary])


@dataclass
class SyncResult:
    """Outcome of one space sync for a user."""

    user_id: int
    spaces_synced: int = 0
    members_synced: int = 0
    check_in_preserved: int = 0
    owner_protected: int = 0
    pending_protected: int = 0

    def as_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "spaces_synced": self.spaces_synced,
            "members_synced": self.members_synced,
            "check_in_preserved": self.check_in_preserved,
            "owner_protected": self.owner_protected,
            "pending_protected": self.pending_protected,
        }


def space_from_summary(summary: SpaceSummary) -> Space:
    """Map a server summary onto a (transient) local Space row."""
    return Space(
        id=summary.id,
        name=summary.name,
        type=summary.type,
        description=summary.description,
        creator_id=summary.creator_id,
        invite_code=summary.invite_code,
        cover_color=summary.cover_color,
        created_at=summary.created_at,
        status=summary.status,
        check_in_interval_seconds=summary.check_in_interval_seconds,
    )


def merge_snapshot(
    user_id: int,
    summaries: Iterable[SpaceSummary],
    current_members: Iterable[SpaceMember],
    local_check_in: Callable[[int], int | None],
    now: int | None = None,
) -> tuple[list[Space], list[SpaceMember], SyncResult]:
    """Compute the spaces and memberships to upsert for ``user_id``.

    ``local_check_in(space_id)`` returns the cached interval for a space, or
    None when the space is not cached. Pure apart from that lookup.
    """
    now = now_millis() if now is None else now
    members = list(current_members)
    owner_space_ids = {m.space_id for m in members if m.role == MemberRole.OWNER}
    pending_space_ids = {m.space_id for m in members if m.status == MemberStatus.PENDING}

    # One row per space id; a later duplicate in the snapshot wins
    by_id: dict[int, SpaceSummary] = {}
    for summary in summaries:
        if summary.id in by_id:
            logger.warning("Duplicate space id=%s in snapshot; keeping last", summary.id)
        by_id[summary.id] = summary

    result = SyncResult(user_id=user_id)
    spaces: list[Space] = []
    new_members: list[SpaceMember] = []

    for space_id, summary in by_id.items():
        space = space_from_summary(summary)
        existing_interval = local_check_in(space_id)
        if existing_interval is not None and existing_interval > 0:
            if existing_interval != space.check_in_interval_seconds:
                logger.debug(
                    "Preserving check_in_interval_seconds=%s for space %s",
                    existing_interval,
                    space_id,
                )
                result.check_in_preserved += 1
            space.check_in_interval_seconds = existing_interval
        spaces.append(space)

        role = summary.user_role or MemberRole.MEMBER
        status = summary.user_status or MemberStatus.ACTIVE
        if space_id in owner_space_ids and role == MemberRole.MEMBER:
            logger.debug("Protecting owner role for space %s", space_id)
            role = MemberRole.OWNER
            result.owner_protected += 1
        if space_id in pending_space_ids and status == MemberStatus.ACTIVE:
            logger.debug("Protecting pending status for space %s", space_id)
            status = MemberStatus.PENDING
            result.pending_protected += 1

        new_members.append(
            SpaceMember(
                space_id=space_id,
                user_id=user_id,
                role=role,
                status=status,
                nickname=None,
                joined_at=now,
            )
        )

    result.spaces_synced = len(spaces)
    result.members_synced = len(new_members)
    return spaces, new_members, result


def reconcile(store: SpaceStore, user_id: int, summaries: list[SpaceSummary]) -> SyncResult:
    """Merge ``summaries`` into the local cache for ``user_id`` in one transaction.

    Raises PersistenceFailure if the batch cannot be written; nothing is applied then.
    """

    def _local_check_in(space_id: int) -> int | None:
        existing = store.get_space(space_id)
        return existing.check_in_interval_seconds if existing is not None else None

    spaces, members, result = merge_snapshot(
        user_id,
        summaries,
        store.get_members_by_user(user_id),
        _local_check_in,
    )
    store.sync_user_spaces_and_members(user_id, spaces, members)
    logger.info(
        "Space sync user_id=%s spaces=%d preserved_check_in=%d owner_protected=%d "
        "pending_protected=%d",
        user_id,
        result.spaces_synced,
        result.check_in_preserved,
        result.owner_protected,
        result.pending_protected,
    )
    return result


def decode_space_list(response: httpx.Response) -> list[SpaceSummary]:
    """Decode GET /space. Any malformed row rejects the whole list."""
    if response.status_code != httpx.codes.OK:
        raise NetworkFailure(
            f"Failed to refresh spaces. Server returned {response.status_code}",
            status_code=response.status_code,
        )
    try:
        return _SPACE_LIST.validate_python(response.json())
    except (ValueError, ValidationError) as exc:
        raise DecodeFailure(f"Malformed space list: {exc}") from exc


async def refresh_spaces(db: Session, client: HearHomeClient, user_id: int) -> SyncResult:
    """Fetch the user's spaces from the server and reconcile them locally.

    Raises NetworkFailure or DecodeFailure before any local write, and
    PersistenceFailure if the write is rolled back.
    """
    logger.debug("Refreshing spaces for user_id=%s", user_id)
    response = await client.get_spaces(user_id)
    summaries = decode_space_list(response)
    logger.debug("Fetched %d spaces for user_id=%s", len(summaries), user_id)
    return reconcile(SpaceStore(db), user_id, summaries)
