"""Space model: locally cached copy of a shared couple/family space."""

from __future__ import annotations

from sqlalchemy import BigInteger, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hearhome.db.session import Base

DEFAULT_COVER_COLOR = "#FF9800"


class Space(Base):
    """Space row keyed by the server-assigned id.

    check_in_interval_seconds is locally authoritative once set (> 0): space
    sync never overwrites it with the server's value.
    """

    __tablename__ = "spaces"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    creator_id: Mapped[int] = mapped_column(Integer, nullable=False)
    invite_code: Mapped[str] = mapped_column(String(32), nullable=False, default="", index=True)
    cover_color: Mapped[str] = mapped_column(
        String(16), nullable=False, default=DEFAULT_COVER_COLOR
    )
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)  # epoch ms
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="active")
    check_in_interval_seconds: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<Space id={self.id} name={self.name!r} type={self.type}>"
