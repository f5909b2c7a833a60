"""Shared *Enum* definitions for SQLAlchemy & Pydantic models.

The Enums inherit from ``str`` so that JSON serialisation renders plain
strings and equality against raw literals (``role == "owner"``) keeps working.
"""

from __future__ import annotations

from enum import Enum


class MemberRole(str, Enum):
    OWNER = "owner"
    MEMBER = "member"


class MemberStatus(str, Enum):
    ACTIVE = "active"
    PENDING = "pending"


class SpaceType(str, Enum):
    COUPLE = "couple"
    FAMILY = "family"


class PetType(str, Enum):
    PET = "pet"
    PLANT = "plant"


def enum_values(enum_cls: type[Enum]) -> list[str]:
    """Persist enum *values* (``"owner"``) rather than member names (``"OWNER"``)."""
    return [member.value for member in enum_cls]
