"""
Pytest configuration and fixtures.
"""

from __future__ import annotations

import os
from collections.abc import Callable

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from tests.test_constants import TEST_API_BASE_URL, TEST_INTERNAL_JOB_TOKEN

# Force an in-memory DB when pytest runs; don't inherit from .env
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["API_BASE_URL"] = TEST_API_BASE_URL
os.environ.setdefault("INTERNAL_JOB_TOKEN", TEST_INTERNAL_JOB_TOKEN)


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> None:
    """Settings are cached per process; reload them around every test."""
    from hearhome.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def db() -> Session:
    """Fresh in-memory SQLite database with the full schema, one per test."""
    import hearhome.models  # noqa: F401  (register tables)
    from hearhome.db.session import Base

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session = Session(bind=engine)
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def make_backend() -> Callable:
    """Factory for a HearHomeClient whose requests are answered by ``handler``.

    ``handler(request) -> httpx.Response`` may also raise httpx errors to
    simulate transport failures.
    """
    from hearhome.remote.client import HearHomeClient

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> HearHomeClient:
        return HearHomeClient(TEST_API_BASE_URL, transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture
def client() -> TestClient:
    """FastAPI test client."""
    from hearhome.main import app

    return TestClient(app)


@pytest.fixture
def client_with_db(db: Session) -> TestClient:
    """TestClient with get_db overridden to use the test db session."""
    from hearhome.db.session import get_db
    from hearhome.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    c = TestClient(app)
    yield c
    app.dependency_overrides.pop(get_db, None)
