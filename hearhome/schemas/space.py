"""Space wire schemas: what the HearHome backend sends and accepts (camelCase JSON)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from hearhome.models.enums import MemberRole, MemberStatus, SpaceType
from hearhome.models.space import DEFAULT_COVER_COLOR

_WIRE_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SpaceSummary(BaseModel):
    """A space as returned by GET /space, POST /space and POST /space/join.

    user_role / user_status describe the *caller's* membership and are absent
    from older endpoints. Unknown role/status strings fail validation.
    """

    model_config = _WIRE_CONFIG

    id: int
    name: str
    type: str
    description: str | None = None
    creator_id: int
    invite_code: str = ""
    cover_color: str = DEFAULT_COVER_COLOR
    created_at: int = 0
    status: str = "active"
    check_in_interval_seconds: int = 0
    user_member_id: int | None = None
    user_role: MemberRole | None = None
    user_status: MemberStatus | None = None


class CreateSpaceRequest(BaseModel):
    """Body for POST /space."""

    model_config = _WIRE_CONFIG

    name: str = Field(..., min_length=1, max_length=255)
    type: SpaceType
    description: str | None = None
    creator_id: int
    partner_id: int | None = None
    cover_color: str = DEFAULT_COVER_COLOR


class JoinSpaceRequest(BaseModel):
    """Body for POST /space/join."""

    model_config = _WIRE_CONFIG

    user_id: int
    invite_code: str = Field(..., min_length=1)
    nickname: str | None = None
