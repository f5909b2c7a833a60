"""SpacePet model: local cache of the pet/plant living in a space."""

from __future__ import annotations

from sqlalchemy import BigInteger, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from hearhome.db.session import Base
from hearhome.models.enums import PetType, enum_values
from hearhome.models.space_member import now_millis


class SpacePet(Base):
    """One pet per space; attribute columns mirror pet.engine.Attributes."""

    __tablename__ = "space_pets"

    space_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("spaces.id", ondelete="CASCADE"),
        primary_key=True,
    )
    remote_id: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[PetType] = mapped_column(
        Enum(PetType, native_enum=False, length=16, values_callable=enum_values),
        nullable=False,
        default=PetType.PET,
    )
    mood: Mapped[int] = mapped_column(Integer, nullable=False, default=50)
    health: Mapped[int] = mapped_column(Integer, nullable=False, default=80)
    energy: Mapped[int] = mapped_column(Integer, nullable=False, default=60)
    hydration: Mapped[int] = mapped_column(Integer, nullable=False, default=60)
    intimacy: Mapped[int] = mapped_column(Integer, nullable=False, default=50)
    updated_at: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=now_millis, onupdate=now_millis
    )
