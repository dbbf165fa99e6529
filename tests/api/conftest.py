"""API test fixtures — FastAPI app over a fake or in-memory SQLite backend.

Invariants:
    - client talks to an app whose backend is the recording FakeBackend
    - sql_client talks to an app backed by a fresh in-memory SQLite database
    - Lifespan is not run by ASGITransport: everything the routes need is built
      by create_app() itself
"""

import pytest
from httpx import ASGITransport, AsyncClient

from querygate.main import create_app


@pytest.fixture
async def client(settings, fake_backend):
    app = create_app(settings, backend=fake_backend)
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c


@pytest.fixture
async def sql_client(settings, sql_database):
    app = create_app(settings, backend=sql_database)
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
