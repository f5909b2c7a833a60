"""Tests for internal job endpoints (/internal/sync_spaces, /internal/pet_tick)."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest
from fastapi.testclient import TestClient

from hearhome.errors import NetworkFailure
from hearhome.services.space_sync import SyncResult
from tests.test_constants import TEST_INTERNAL_JOB_TOKEN, pet_payload, space_payload

VALID_TOKEN = TEST_INTERNAL_JOB_TOKEN  # matches conftest.py env setup


@pytest.fixture
def backend_override(make_backend):
    """Route get_client to a mocked backend answering with ``handler``."""
    from hearhome.api.internal import get_client
    from hearhome.main import app

    def _install(handler):
        async def override_get_client():
            async with make_backend(handler) as backend:
                yield backend

        app.dependency_overrides[get_client] = override_get_client

    yield _install
    app.dependency_overrides.pop(get_client, None)


# ── /internal/sync_spaces ───────────────────────────────────────────


class TestSyncSpaces:
    @patch("hearhome.services.space_sync.refresh_spaces", new_callable=AsyncMock)
    def test_valid_token_calls_refresh_spaces(self, mock_refresh, client: TestClient):
        """POST /internal/sync_spaces with valid token triggers a sync."""
        mock_refresh.return_value = SyncResult(user_id=7, spaces_synced=3, members_synced=3)

        response = client.post(
            "/internal/sync_spaces",
            headers={"X-Internal-Token": VALID_TOKEN},
            params={"user_id": 7},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "completed"
        assert data["user_id"] == 7
        assert data["spaces_synced"] == 3
        mock_refresh.assert_called_once()
        assert mock_refresh.call_args[0][2] == 7

    @patch("hearhome.services.space_sync.refresh_spaces", new_callable=AsyncMock)
    def test_remote_failure_reported_not_raised(self, mock_refresh, client: TestClient):
        mock_refresh.side_effect = NetworkFailure("GET /space failed", status_code=502)

        response = client.post(
            "/internal/sync_spaces",
            headers={"X-Internal-Token": VALID_TOKEN},
            params={"user_id": 7},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "failed"
        assert data["user_id"] == 7
        assert "GET /space failed" in data["error"]

    def test_missing_token_returns_422(self, client: TestClient):
        """POST /internal/sync_spaces without token header returns 422."""
        response = client.post("/internal/sync_spaces", params={"user_id": 7})
        assert response.status_code == 422

    def test_wrong_token_returns_403(self, client: TestClient):
        response = client.post(
            "/internal/sync_spaces",
            headers={"X-Internal-Token": "wrong-token"},
            params={"user_id": 7},
        )
        assert response.status_code == 403

    def test_invalid_user_id_returns_422(self, client: TestClient):
        response = client.post(
            "/internal/sync_spaces",
            headers={"X-Internal-Token": VALID_TOKEN},
            params={"user_id": 0},
        )
        assert response.status_code == 422

    def test_end_to_end_with_mocked_backend(self, client_with_db: TestClient, backend_override, db):
        """The endpoint writes the backend's spaces into the local cache."""
        from hearhome.services.space_store import SpaceStore

        backend_override(
            lambda request: httpx.Response(200, json=[space_payload(1, userRole="owner")])
        )

        response = client_with_db.post(
            "/internal/sync_spaces",
            headers={"X-Internal-Token": VALID_TOKEN},
            params={"user_id": 7},
        )

        assert response.status_code == 200
        assert response.json()["status"] == "completed"
        assert SpaceStore(db).get_member(1, 7).role == "owner"


# ── /internal/pet_tick ──────────────────────────────────────────────


class TestPetTick:
    @patch("hearhome.pet.tick_job.run_pet_tick", new_callable=AsyncMock)
    def test_valid_token_calls_run_pet_tick(self, mock_tick, client: TestClient):
        mock_tick.return_value = {
            "status": "completed",
            "spaces_ticked": 2,
            "spaces_failed": 0,
            "error": None,
        }

        response = client.post("/internal/pet_tick", headers={"X-Internal-Token": VALID_TOKEN})

        assert response.status_code == 200
        assert response.json()["spaces_ticked"] == 2
        mock_tick.assert_called_once()

    def test_wrong_token_returns_403(self, client: TestClient):
        response = client.post("/internal/pet_tick", headers={"X-Internal-Token": "nope"})
        assert response.status_code == 403

    def test_empty_configured_token_rejects_everything(
        self, client: TestClient, monkeypatch: pytest.MonkeyPatch
    ):
        """With INTERNAL_JOB_TOKEN unset, every call is refused."""
        from hearhome.config import get_settings

        monkeypatch.setenv("INTERNAL_JOB_TOKEN", "")
        get_settings.cache_clear()

        response = client.post("/internal/pet_tick", headers={"X-Internal-Token": "anything"})
        assert response.status_code == 403

    def test_end_to_end_with_mocked_backend(self, client_with_db: TestClient, backend_override, db):
        from hearhome.models import Space, SpacePet

        db.add(Space(id=3, name="Home", type="couple", creator_id=1))
        db.commit()

        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "GET":
                return httpx.Response(200, json=pet_payload(3))
            return httpx.Response(200, json=pet_payload(3, energy=57, hydration=57))

        backend_override(handler)

        response = client_with_db.post(
            "/internal/pet_tick", headers={"X-Internal-Token": VALID_TOKEN}
        )

        assert response.status_code == 200
        assert response.json() == {
            "status": "completed",
            "spaces_ticked": 1,
            "spaces_failed": 0,
            "error": None,
        }
        pet = db.get(SpacePet, 3)
        assert (pet.energy, pet.hydration) == (57, 57)
