"""SpaceMember model: the current user's (or a peer's) membership in a space."""

from __future__ import annotations

import time

from sqlalchemy import BigInteger, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from hearhome.db.session import Base
from hearhome.models.enums import MemberRole, MemberStatus, enum_values


def now_millis() -> int:
    """Local wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class SpaceMember(Base):
    """Membership keyed by (space_id, user_id); at most one row per pair."""

    __tablename__ = "space_members"

    space_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("spaces.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    role: Mapped[MemberRole] = mapped_column(
        Enum(MemberRole, native_enum=False, length=16, values_callable=enum_values),
        nullable=False,
        default=MemberRole.MEMBER,
    )
    status: Mapped[MemberStatus] = mapped_column(
        Enum(MemberStatus, native_enum=False, length=16, values_callable=enum_values),
        nullable=False,
        default=MemberStatus.ACTIVE,
    )
    nickname: Mapped[str | None] = mapped_column(String(255), nullable=True)
    joined_at: Mapped[int] = mapped_column(BigInteger, nullable=False, default=now_millis)

    def __repr__(self) -> str:
        return (
            f"<SpaceMember space_id={self.space_id} user_id={self.user_id} "
            f"role={self.role.value} status={self.status.value}>"
        )
