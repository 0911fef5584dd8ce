"""Shared test fixtures.

The app is imported with the in-memory backend and a throwaway JWT secret,
so no database or .env file is needed.
"""

import os

os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")
os.environ.setdefault("DATA_BACKEND", "memory")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from config.settings import settings  # noqa: E402
from src.main import app  # noqa: E402
from src.rn_common.backend import build_repositories  # noqa: E402


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client over fresh in-memory repositories.

    ASGITransport does not run the lifespan, so the repositories it would
    build are installed here, one clean set per test.
    """
    app.state.repositories = build_repositories(settings)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
