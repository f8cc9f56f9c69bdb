"""
Notes API: Test Configuration (conftest.py)
===========================================

What:  Shared pytest fixtures for the entire test suite.
How:   A real SQLite file (via aiosqlite) stands in for the production
       database; the upstream posts source is an httpx.MockTransport; the
       app is driven in-process through httpx's ASGITransport.

Fixture Hierarchy:
    database              Database on a fresh SQLite file, schema created
    unreachable_database  Database whose file path cannot be opened
    upstream_posts        Payload served by the mocked upstream
    posts_client          PostsClient wired to the mocked upstream
    mock_database         MagicMock standing in for Database
    test_client           AsyncClient against create_app(database, posts_client)
    unreachable_client    Same, but every database call fails
"""

import os

# Override settings for testing BEFORE any notes_api imports
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["DB_CREATE_SCHEMA"] = "false"
os.environ["POSTS_SOURCE_URL"] = "http://upstream.test/posts"

from unittest.mock import MagicMock  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import func, select  # noqa: E402

from notes_api.database import Database  # noqa: E402
from notes_api.models.note import Note  # noqa: E402
from notes_api.services.posts_client import PostsClient  # noqa: E402

UPSTREAM_URL = "http://upstream.test/posts"


def sqlite_url(path) -> str:
    return f"sqlite+aiosqlite:///{path}"


async def count_notes(db: Database) -> int:
    """Number of rows in the notes table."""
    async with db.connection() as conn:
        result = await conn.execute(select(func.count(Note.id)))
        return result.scalar_one()


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def database(tmp_path):
    """
    Provides a Database backed by a temporary SQLite file.

    Usage:
        async def test_list(database):
            assert await note_service.list_notes(database) == []
    """
    db = Database(sqlite_url(tmp_path / "notes.db"), pool_size=10, pool_timeout=5.0)
    await db.create_schema()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def unreachable_database(tmp_path):
    """A Database pointing into a directory that does not exist."""
    db = Database(
        sqlite_url(tmp_path / "missing-dir" / "notes.db"),
        pool_size=2,
        pool_timeout=1.0,
    )
    yield db
    await db.dispose()


@pytest.fixture
def mock_database():
    """
    Provides a MagicMock in place of Database.

    Usage:
        mock_database.connection.side_effect = RuntimeError("boom")
    """
    return MagicMock(spec=Database)


# ══════════════════════════════════════════════════════════════════════════
# Upstream Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def upstream_posts():
    """Eight posts shaped like the public placeholder API."""
    return [
        {
            "userId": 1,
            "id": i,
            "title": f"post title {i}",
            "body": f"post body {i}",
        }
        for i in range(1, 9)
    ]


def make_posts_client(handler, limit: int = 5) -> PostsClient:
    """PostsClient whose HTTP traffic is answered by `handler`."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return PostsClient(source_url=UPSTREAM_URL, limit=limit, client=client)


@pytest_asyncio.fixture
async def posts_client(upstream_posts):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=upstream_posts)

    client = make_posts_client(handler)
    yield client
    await client.aclose()


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(database, posts_client):
    """
    Provides an async HTTP client talking to a fresh app instance.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from notes_api.main import create_app

    app = create_app(database=database, posts_client=posts_client)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def unreachable_client(unreachable_database, posts_client):
    from notes_api.main import create_app

    app = create_app(database=unreachable_database, posts_client=posts_client)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
