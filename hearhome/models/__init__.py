"""SQLAlchemy models."""

from hearhome.models.enums import MemberRole, MemberStatus, PetType, SpaceType
from hearhome.models.space import Space
from hearhome.models.space_member import SpaceMember
from hearhome.models.space_pet import SpacePet

__all__ = [
    "MemberRole",
    "MemberStatus",
    "PetType",
    "Space",
    "SpaceMember",
    "SpacePet",
    "SpaceType",
]
