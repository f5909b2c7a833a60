"""
Centralized test credentials and fixture data.

Test-only credentials are loaded from environment variables when available,
with clearly non-production placeholders as fallbacks.
"""

from __future__ import annotations

import os

# Internal job token (X-Internal-Token header for /internal/* endpoints)
TEST_INTERNAL_JOB_TOKEN = os.environ.get("TEST_INTERNAL_JOB_TOKEN") or "test-internal-token"

# Backend base URL used with httpx.MockTransport; never contacted for real
TEST_API_BASE_URL = "http://backend.test"


def space_payload(space_id: int = 1, **overrides) -> dict:
    """JSON body of a space as the backend sends it (camelCase)."""
    payload = {
        "id": space_id,
        "name": f"Space {space_id}",
        "type": "couple",
        "description": None,
        "creatorId": 100,
        "inviteCode": f"CODE{space_id:02d}",
        "coverColor": "#FF9800",
        "createdAt": 1_700_000_000_000,
        "status": "active",
        "checkInIntervalSeconds": 0,
    }
    payload.update(overrides)
    return payload


def pet_payload(space_id: int = 1, **attributes) -> dict:
    """JSON body of a space pet as the backend sends it."""
    attrs = {"mood": 50, "health": 80, "energy": 60, "hydration": 60, "intimacy": 50}
    attrs.update(attributes)
    return {
        "id": 500 + space_id,
        "spaceId": space_id,
        "name": "Mochi",
        "type": "pet",
        "attributes": attrs,
        "updatedAt": 1_700_000_000_000,
    }
