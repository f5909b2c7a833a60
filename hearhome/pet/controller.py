"""Pet controller: drives the engine for one space's pet and keeps it in sync.

Every change is applied locally first, then pushed to the server. When the
server answers, its copy replaces the local one; when it does not, the local
result stands and the next push or refresh reconciles it.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hearhome.config import get_settings
from hearhome.errors import HearHomeError, PersistenceFailure
from hearhome.models import PetType, SpacePet
from hearhome.pet.engine import ActionType, Attributes, apply_action, set_intimacy, tick_decay
from hearhome.remote.client import HearHomeClient
from hearhome.schemas.pet import ApiPetAttributes, ApiSpacePet, ApiSpacePetRequest

logger = logging.getLogger(__name__)


def attributes_of(pet: SpacePet) -> Attributes:
    return Attributes(
        mood=pet.mood,
        health=pet.health,
        energy=pet.energy,
        hydration=pet.hydration,
        intimacy=pet.intimacy,
    )


def attributes_from_api(api: ApiPetAttributes) -> Attributes:
    return Attributes(
        mood=api.mood,
        health=api.health,
        energy=api.energy,
        hydration=api.hydration,
        intimacy=api.intimacy,
    )


def attributes_to_api(attrs: Attributes) -> ApiPetAttributes:
    return ApiPetAttributes(
        mood=attrs.mood,
        health=attrs.health,
        energy=attrs.energy,
        hydration=attrs.hydration,
        intimacy=attrs.intimacy,
    )


def _assign(pet: SpacePet, attrs: Attributes) -> None:
    pet.mood = attrs.mood
    pet.health = attrs.health
    pet.energy = attrs.energy
    pet.hydration = attrs.hydration
    pet.intimacy = attrs.intimacy


def store_remote_pet(db: Session, remote: ApiSpacePet) -> SpacePet:
    """Cache the server's copy of a pet, replacing any local one."""
    pet = db.get(SpacePet, remote.space_id)
    if pet is None:
        pet = SpacePet(space_id=remote.space_id)
        db.add(pet)
    pet.remote_id = remote.id
    pet.name = remote.name
    pet.type = remote.type
    # Server values are trusted but still clamped into range
    _assign(pet, attributes_from_api(remote.attributes).clamp())
    _commit(db, "store_remote_pet")
    return pet


def _commit(db: Session, operation: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("%s failed; rolled back", operation)
        raise PersistenceFailure(f"{operation} failed: {exc}") from exc


class PetController:
    """Pet-state controller for the spaces on this device."""

    def __init__(self, db: Session, client: HearHomeClient) -> None:
        self.db = db
        self.client = client

    def get_pet(self, space_id: int) -> SpacePet | None:
        return self.db.get(SpacePet, space_id)

    def init_pet(self, space_id: int, name: str | None = None) -> SpacePet:
        """Return the cached pet for the space, creating a default one if missing."""
        pet = self.get_pet(space_id)
        if pet is not None:
            return pet
        pet = SpacePet(
            space_id=space_id,
            remote_id=0,
            name=name or get_settings().default_pet_name,
            type=PetType.PET,
        )
        _assign(pet, Attributes())
        self.db.add(pet)
        _commit(self.db, "init_pet")
        return pet

    async def apply_action(self, space_id: int, action: ActionType) -> SpacePet | None:
        pet = self.get_pet(space_id)
        if pet is None:
            return None
        return await self._update(pet, apply_action(attributes_of(pet), action))

    async def tick(self, space_id: int) -> SpacePet | None:
        """Apply one decay tick to the cached pet."""
        pet = self.get_pet(space_id)
        if pet is None:
            return None
        return await self._update(pet, tick_decay(attributes_of(pet)))

    async def update_intimacy(self, space_id: int, value: int) -> SpacePet | None:
        pet = self.get_pet(space_id)
        if pet is None:
            return None
        return await self._update(pet, set_intimacy(attributes_of(pet), value))

    async def refresh_from_cloud(self, space_id: int) -> SpacePet | None:
        """Replace the cached pet with the server's copy. None if the fetch fails."""
        try:
            remote = await self.client.get_space_pet(space_id)
        except HearHomeError as exc:
            logger.warning("Pet refresh failed for space_id=%s: %s", space_id, exc)
            return None
        return store_remote_pet(self.db, remote)

    async def sync_pet(self, space_id: int) -> SpacePet | None:
        """Push the cached pet to the server without changing it."""
        pet = self.get_pet(space_id)
        if pet is None:
            return None
        return await self._push(pet)

    async def _update(self, pet: SpacePet, attrs: Attributes) -> SpacePet:
        _assign(pet, attrs)
        _commit(self.db, "update_pet")
        return await self._push(pet)

    async def _push(self, pet: SpacePet) -> SpacePet:
        request = ApiSpacePetRequest(
            name=pet.name,
            type=pet.type,
            attributes=attributes_to_api(attributes_of(pet)),
        )
        try:
            remote = await self.client.save_space_pet(pet.space_id, request)
        except HearHomeError as exc:
            logger.warning("Pet sync failed for space_id=%s: %s", pet.space_id, exc)
            return pet
        return store_remote_pet(self.db, remote)
