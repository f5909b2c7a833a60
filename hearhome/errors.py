"""Failure taxonomy shared by the remote client, space sync and space flows."""

from __future__ import annotations


class HearHomeError(Exception):
    """Base class for HearHome core failures."""


class NetworkFailure(HearHomeError):
    """Transport-level error or a non-success HTTP status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DecodeFailure(HearHomeError):
    """Response body could not be decoded into the expected shape."""


class ConflictFailure(HearHomeError):
    """Server reported a state conflict (e.g. already a member)."""


class NotFoundFailure(HearHomeError):
    """Server could not find the referenced resource (e.g. unknown invite code)."""


class PersistenceFailure(HearHomeError):
    """Local transactional write failed and was rolled back."""
