"""
Shared fixtures.

Every test gets its own SQLite file under tmp_path, so tests never share
state and need no running database server.
"""

import sqlite3
from contextlib import closing

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from shortlink.core.setting import Settings
from shortlink.db.session import Database
from shortlink.main import create_app

TEST_BASE_URL = "http://sho.rt"


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "shortlink-test.db"


@pytest.fixture
def database_url(db_path):
    return f"sqlite+aiosqlite:///{db_path}"


@pytest.fixture
def test_settings(database_url):
    return Settings(_env_file=None, DATABASE_URL=database_url, BASE_URL=TEST_BASE_URL)


@pytest.fixture
def client(test_settings):
    """Test client; entering it runs the lifespan, which creates the schema."""
    app = create_app(test_settings)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def count_links(db_path):
    """Count stored link records straight from the SQLite file."""
    def _count() -> int:
        with closing(sqlite3.connect(db_path)) as conn:
            return conn.execute("SELECT COUNT(*) FROM urls").fetchone()[0]
    return _count


@pytest_asyncio.fixture
async def database(database_url):
    database = Database(database_url)
    await database.connect()
    yield database
    await database.dispose()


@pytest_asyncio.fixture
async def session(database):
    async with database.session() as session:
        yield session
