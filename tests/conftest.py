"""Root conftest — shared test configuration.

Invariants:
    - Environment defaults are set before querygate.main is imported, so the
      module-level app builds against a fake secret and in-memory SQLite
    - Every test gets its own in-memory database
"""

import os

from tests.fakes import TEST_SECRET

os.environ.setdefault("APP_SECRET", TEST_SECRET)
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest  # noqa: E402

from querygate.config import Settings  # noqa: E402
from querygate.infrastructure.database import SqlDatabase  # noqa: E402
from tests.fakes import FakeBackend  # noqa: E402

MEMORY_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def settings():
    return Settings(app_secret=TEST_SECRET, database_url=MEMORY_URL)


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
async def sql_database():
    database = SqlDatabase(MEMORY_URL)
    yield database
    await database.close()
