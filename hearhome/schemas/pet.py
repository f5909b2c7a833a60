"""Pet wire schemas for GET/POST /space/{id}/pet."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from hearhome.models.enums import PetType

_WIRE_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiPetAttributes(BaseModel):
    mood: int = 50
    health: int = 80
    energy: int = 60
    hydration: int = 60
    intimacy: int = 50


class ApiSpacePet(BaseModel):
    """Pet as stored by the backend."""

    model_config = _WIRE_CONFIG

    id: int = 0
    space_id: int
    name: str
    type: PetType = PetType.PET
    attributes: ApiPetAttributes
    updated_at: int = 0


class ApiSpacePetRequest(BaseModel):
    """Body for POST /space/{id}/pet. name/type are optional on update."""

    model_config = _WIRE_CONFIG

    name: str | None = None
    type: PetType | None = None
    attributes: ApiPetAttributes = Field(default_factory=ApiPetAttributes)
