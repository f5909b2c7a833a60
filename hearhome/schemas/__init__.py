"""Pydantic schemas for the HearHome backend wire format."""

from hearhome.schemas.pet import ApiPetAttributes, ApiSpacePet, ApiSpacePetRequest
from hearhome.schemas.space import CreateSpaceRequest, JoinSpaceRequest, SpaceSummary

__all__ = [
    "ApiPetAttributes",
    "ApiSpacePet",
    "ApiSpacePetRequest",
    "CreateSpaceRequest",
    "JoinSpaceRequest",
    "SpaceSummary",
]
