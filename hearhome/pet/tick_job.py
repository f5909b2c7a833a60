"""Periodic pet tick job.

Invoked by an external scheduler (cron, systemd timer, /internal/pet_tick)
every ``PET_TICK_INTERVAL_MINUTES``. For each cached space: fetch the server's
pet, apply one decay tick, save it back, cache the result. One space failing
does not stop the run.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hearhome.errors import HearHomeError
from hearhome.pet.controller import attributes_from_api, attributes_to_api, store_remote_pet
from hearhome.pet.engine import tick_decay
from hearhome.remote.client import HearHomeClient
from hearhome.schemas.pet import ApiSpacePetRequest
from hearhome.services.space_store import SpaceStore

logger = logging.getLogger(__name__)


async def run_pet_tick(db: Session, client: HearHomeClient) -> dict:
    """Decay every cached space's pet by one tick.

    Returns:
        dict with status, spaces_ticked, spaces_failed, error
    """
    ticked = 0
    failed = 0
    try:
        spaces = SpaceStore(db).list_spaces()
    except SQLAlchemyError as exc:
        logger.exception("Pet tick could not list spaces")
        return {"status": "failed", "spaces_ticked": 0, "spaces_failed": 0, "error": str(exc)}

    for space in spaces:
        try:
            remote = await client.get_space_pet(space.id)
            decayed = tick_decay(attributes_from_api(remote.attributes))
            saved = await client.save_space_pet(
                space.id,
                ApiSpacePetRequest(
                    name=remote.name,
                    type=remote.type,
                    attributes=attributes_to_api(decayed),
                ),
            )
            store_remote_pet(db, saved)
            ticked += 1
        except HearHomeError as exc:
            logger.warning("Pet tick failed for space_id=%s: %s", space.id, exc)
            failed += 1

    logger.info("Pet tick completed: spaces_ticked=%d spaces_failed=%d", ticked, failed)
    return {"status": "completed", "spaces_ticked": ticked, "spaces_failed": failed, "error": None}
