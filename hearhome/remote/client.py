"""HTTP client for the HearHome backend, built on httpx.AsyncClient.

One client instance is created per process (or per job) and injected into the
services that need it; nothing here is a module-level singleton.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from hearhome import __version__
from hearhome.config import get_settings
from hearhome.errors import DecodeFailure, NetworkFailure
from hearhome.schemas.pet import ApiSpacePet, ApiSpacePetRequest
from hearhome.schemas.space import CreateSpaceRequest, JoinSpaceRequest

logger = logging.getLogger(__name__)

USER_AGENT = f"HearHome/{__version__}"


class HearHomeClient:
    """Thin wrapper over the backend's space and pet endpoints.

    Space endpoints return the raw httpx.Response: callers map status codes
    to their own outcomes. Pet endpoints decode the body and raise
    NetworkFailure / DecodeFailure. Transport errors always surface as
    NetworkFailure.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers={"User-Agent": USER_AGENT},
            transport=transport,
        )

    @classmethod
    def from_settings(cls) -> HearHomeClient:
        settings = get_settings()
        return cls(settings.api_base_url, timeout=settings.http_timeout)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> HearHomeClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Space endpoints
    # ------------------------------------------------------------------

    async def get_spaces(self, user_id: int) -> httpx.Response:
        """GET /space?userId=: the caller's spaces with their role/status."""
        return await self._request("GET", "/space", params={"userId": user_id})

    async def create_space(self, request: CreateSpaceRequest) -> httpx.Response:
        """POST /space: 201 with the created space on success."""
        return await self._request(
            "POST", "/space", json=request.model_dump(by_alias=True, mode="json")
        )

    async def join_space(self, request: JoinSpaceRequest) -> httpx.Response:
        """POST /space/join: 200 with the space, 409 with a message, or 404."""
        return await self._request(
            "POST",
            "/space/join",
            json=request.model_dump(by_alias=True, mode="json", exclude_none=True),
        )

    # ------------------------------------------------------------------
    # Pet endpoints
    # ------------------------------------------------------------------

    async def get_space_pet(self, space_id: int) -> ApiSpacePet:
        response = await self._request("GET", f"/space/{space_id}/pet")
        return self._decode_pet(response)

    async def save_space_pet(self, space_id: int, request: ApiSpacePetRequest) -> ApiSpacePet:
        response = await self._request(
            "POST",
            f"/space/{space_id}/pet",
            json=request.model_dump(by_alias=True, mode="json", exclude_none=True),
        )
        return self._decode_pet(response)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("%s %s failed: %s", method, url, exc)
            raise NetworkFailure(f"{method} {url} failed: {exc}") from exc
        logger.debug("%s %s -> %s", method, url, response.status_code)
        return response

    @staticmethod
    def _decode_pet(response: httpx.Response) -> ApiSpacePet:
        if not response.is_success:
            raise NetworkFailure(
                f"HTTP {response.status_code} for {response.request.url}",
                status_code=response.status_code,
            )
        try:
            return ApiSpacePet.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise DecodeFailure(f"Malformed pet payload: {exc}") from exc
