"""Space store: local persistence for spaces and memberships.

All writes are upserts keyed by the table's primary key, so a space or a
(space_id, user_id) membership never ends up duplicated. Multi-row writes run
in a single transaction: either every row lands or none do.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hearhome.errors import PersistenceFailure
from hearhome.models import MemberRole, MemberStatus, Space, SpaceMember
from hearhome.models.space_member import now_millis

logger = logging.getLogger(__name__)

# Columns a space sync may change on an existing membership. nickname and
# joined_at are local facts and survive every sync.
SYNC_MEMBER_COLUMNS = ("role", "status")
REPLACE_MEMBER_COLUMNS = tuple(
    col.name for col in SpaceMember.__table__.columns if not col.primary_key
)


def _row(obj: Space | SpaceMember) -> dict:
    """Column values of a transient model, with column defaults filled in."""
    row = {}
    for col in obj.__table__.columns:
        value = getattr(obj, col.name)
        if value is None and not col.nullable and col.default is not None:
            value = now_millis() if col.default.is_callable else col.default.arg
        row[col.name] = value
    return row


class SpaceStore:
    """Persistence collaborator for the space sync and the create/join flows."""

    def __init__(self, db: Session) -> None:
        self.db = db

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_members_by_user(self, user_id: int) -> list[SpaceMember]:
        return self.db.query(SpaceMember).filter(SpaceMember.user_id == user_id).all()

    def get_space(self, space_id: int) -> Space | None:
        return self.db.get(Space, space_id)

    def get_member(self, space_id: int, user_id: int) -> SpaceMember | None:
        return self.db.get(SpaceMember, (space_id, user_id))

    def list_spaces(self) -> list[Space]:
        return self.db.query(Space).order_by(Space.id).all()

    def get_spaces_joined_by_user(self, user_id: int) -> list[Space]:
        """Active spaces in which the user is an active (approved) member, newest join first."""
        return (
            self.db.query(Space)
            .join(SpaceMember, SpaceMember.space_id == Space.id)
            .filter(
                SpaceMember.user_id == user_id,
                SpaceMember.status == MemberStatus.ACTIVE,
                Space.status == "active",
            )
            .order_by(SpaceMember.joined_at.desc())
            .all()
        )

    def get_pending_members(self, space_id: int) -> list[SpaceMember]:
        return (
            self.db.query(SpaceMember)
            .filter(
                SpaceMember.space_id == space_id,
                SpaceMember.status == MemberStatus.PENDING,
            )
            .order_by(SpaceMember.joined_at.desc())
            .all()
        )

    # ------------------------------------------------------------------
    # Single-row writes
    # ------------------------------------------------------------------

    def insert_space(self, space: Space) -> Space:
        """Insert or fully replace a space row."""
        self._write(lambda: self._upsert_spaces([space]), "insert_space")
        return self.get_space(space.id)

    def insert_member(self, member: SpaceMember) -> SpaceMember:
        """Insert or fully replace the membership row for (space_id, user_id)."""
        self._write(lambda: self._upsert_members([member], REPLACE_MEMBER_COLUMNS), "insert_member")
        return self.get_member(member.space_id, member.user_id)

    def update_check_in_interval(self, space_id: int, interval_seconds: int) -> bool:
        """Set the local check-in interval. Returns False if the space is not cached."""
        space = self.get_space(space_id)
        if space is None:
            return False
        space.check_in_interval_seconds = interval_seconds
        self._write(lambda: None, "update_check_in_interval")
        return True

    # ------------------------------------------------------------------
    # Transactional batches
    # ------------------------------------------------------------------

    def sync_user_spaces_and_members(
        self,
        user_id: int,
        spaces: list[Space],
        members: list[SpaceMember],
    ) -> None:
        """Upsert a user's spaces and memberships in one transaction.

        Existing memberships only take role and status from the batch.
        """
        foreign = [m for m in members if m.user_id != user_id]
        if foreign:
            raise ValueError(
                f"sync for user {user_id} got memberships of other users: "
                f"{sorted({m.user_id for m in foreign})}"
            )

        def _apply() -> None:
            self._upsert_spaces(spaces)
            self._upsert_members(members, SYNC_MEMBER_COLUMNS)

        self._write(_apply, "sync_user_spaces_and_members")
        logger.debug(
            "Synced user_id=%s spaces=%d members=%d", user_id, len(spaces), len(members)
        )

    def create_space_with_owner(self, space: Space, owner_id: int) -> Space:
        """Persist a newly created space and its owner membership atomically."""
        owner = SpaceMember(
            space_id=space.id,
            user_id=owner_id,
            role=MemberRole.OWNER,
            status=MemberStatus.ACTIVE,
        )
        return self._save_space_with_member(space, owner, "create_space_with_owner")

    def save_pending_join(self, space: Space, user_id: int) -> Space:
        """Persist a joined space and the user's pending membership atomically.

        Any previous membership row for the pair is replaced.
        """
        pending = SpaceMember(
            space_id=space.id,
            user_id=user_id,
            role=MemberRole.MEMBER,
            status=MemberStatus.PENDING,
        )
        return self._save_space_with_member(space, pending, "save_pending_join")

    def _save_space_with_member(self, space: Space, member: SpaceMember, operation: str) -> Space:
        def _apply() -> None:
            self._upsert_spaces([space])
            self._upsert_members([member], REPLACE_MEMBER_COLUMNS)

        self._write(_apply, operation)
        return self.get_space(space.id)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _insert(self, model):
        if self.db.get_bind().dialect.name == "postgresql":
            return pg_insert(model)
        return sqlite_insert(model)

    def _upsert_spaces(self, spaces: Iterable[Space]) -> None:
        rows = [_row(s) for s in spaces]
        if not rows:
            return
        stmt = self._insert(Space).values(rows)
        excluded = stmt.excluded
        stmt = stmt.on_conflict_do_update(
            index_elements=["id"],
            set_={
                col.name: excluded[col.name]
                for col in Space.__table__.columns
                if not col.primary_key
            },
        )
        self.db.execute(stmt)

    def _upsert_members(self, members: Iterable[SpaceMember], update_columns: tuple[str, ...]) -> None:
        rows = [_row(m) for m in members]
        if not rows:
            return
        stmt = self._insert(SpaceMember).values(rows)
        excluded = stmt.excluded
        stmt = stmt.on_conflict_do_update(
            index_elements=["space_id", "user_id"],
            set_={name: excluded[name] for name in update_columns},
        )
        self.db.execute(stmt)

    def _write(self, apply, operation: str) -> None:
        try:
            apply()
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("%s failed; rolled back", operation)
            raise PersistenceFailure(f"{operation} failed: {exc}") from exc
        # Core upserts bypass the identity map; drop cached rows so reads see them
        self.db.expire_all()
