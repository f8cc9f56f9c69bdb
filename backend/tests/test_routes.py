"""
Notes API: HTTP Endpoint Tests
==============================

What:  End-to-end tests of every route through the ASGI app.
How:   httpx AsyncClient + ASGITransport against create_app() with a SQLite
       Database and a mocked upstream (see conftest).
"""

import logging
from datetime import datetime

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from conftest import make_posts_client, sqlite_url
from notes_api.config import Settings
from notes_api.database import Database
from notes_api.main import create_app, lifespan


class TestHealthRoutes:

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["ok"] is True
        parsed = datetime.fromisoformat(body["time"].replace("Z", "+00:00"))
        assert parsed.tzinfo is not None

    @pytest.mark.asyncio
    async def test_health_ignores_database_state(self, unreachable_client):
        response = await unreachable_client.get("/health")
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_request_id_header(self, test_client):
        generated = await test_client.get("/health")
        echoed = await test_client.get("/health", headers={"X-Request-ID": "trace-123"})

        assert generated.headers["X-Request-ID"]
        assert echoed.headers["X-Request-ID"] == "trace-123"

    @pytest.mark.asyncio
    async def test_request_id_header_rejects_oversized_value(self, test_client):
        response = await test_client.get("/health", headers={"X-Request-ID": "x" * 200})

        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_db_check(self, test_client):
        response = await test_client.get("/db-check")

        assert response.status_code == 200
        assert response.json() == {"db": {"ok": 1}}

    @pytest.mark.asyncio
    async def test_db_check_unreachable(self, unreachable_client):
        response = await unreachable_client.get("/db-check")

        assert response.status_code == 500
        body = response.json()
        assert set(body) == {"error", "message", "code"}
        assert body["error"] == "DB connection failed"
        assert "unable to open database file" in body["message"]
        assert body["code"]


class TestNotesRoutes:

    @pytest.mark.asyncio
    async def test_list_empty(self, test_client):
        response = await test_client.get("/notes")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_create_then_list(self, test_client):
        await test_client.post("/notes", json={"title": "Earlier note"})

        created = await test_client.post("/notes", json={"title": "Ship it"})
        assert created.status_code == 201
        body = created.json()
        assert set(body) == {"id", "title"}
        assert isinstance(body["id"], int)
        assert body["title"] == "Ship it"

        listing = await test_client.get("/notes")
        assert listing.status_code == 200
        notes = listing.json()
        assert [n["title"] for n in notes] == ["Ship it", "Earlier note"]
        assert notes[0]["id"] == body["id"]
        assert set(notes[0]) == {"id", "title", "created_at"}

    @pytest.mark.asyncio
    async def test_create_trims_title(self, test_client):
        response = await test_client.post("/notes", json={"title": "  Buy  milk \t"})

        assert response.status_code == 201
        assert response.json()["title"] == "Buy  milk"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"title": "   "},
            {"title": ""},
            {"title": 5},
            {"title": None},
            {},
            ["Ship it"],
            "Ship it",
        ],
    )
    async def test_create_rejects_missing_title(self, test_client, payload):
        response = await test_client.post("/notes", json=payload)

        assert response.status_code == 400
        assert response.json() == {"error": "title is required"}
        assert (await test_client.get("/notes")).json() == []

    @pytest.mark.asyncio
    async def test_create_without_body(self, test_client):
        response = await test_client.post("/notes")

        assert response.status_code == 400
        assert response.json() == {"error": "title is required"}

    @pytest.mark.asyncio
    async def test_create_with_malformed_json(self, test_client):
        response = await test_client.post(
            "/notes",
            content=b'{"title": ',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON body"}

    @pytest.mark.asyncio
    async def test_create_with_undecodable_body(self, test_client):
        response = await test_client.post(
            "/notes",
            content=b'{"title": "\xff"}',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON body"}
        assert (await test_client.get("/notes")).json() == []

    @pytest.mark.asyncio
    async def test_database_unreachable(self, unreachable_client):
        listing = await unreachable_client.get("/notes")
        assert listing.status_code == 500
        assert listing.json() == {"error": "Failed to fetch notes"}

        created = await unreachable_client.post("/notes", json={"title": "Ship it"})
        assert created.status_code == 500
        assert created.json() == {"error": "Failed to create note"}

        invalid = await unreachable_client.post("/notes", json={"title": " "})
        assert invalid.status_code == 400


class TestPostsRoutes:

    @pytest.mark.asyncio
    async def test_posts_truncated(self, test_client):
        response = await test_client.get("/posts")

        assert response.status_code == 200
        posts = response.json()
        assert len(posts) == 5
        assert all(set(p) == {"id", "title"} for p in posts)
        assert [p["id"] for p in posts] == [1, 2, 3, 4, 5]

    @pytest.mark.asyncio
    async def test_posts_upstream_failure(self, database):
        posts_client = make_posts_client(lambda request: httpx.Response(503))
        app = create_app(database=database, posts_client=posts_client)

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/posts")
        await posts_client.aclose()

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch posts"}


class TestFrameworkErrors:

    @pytest.mark.asyncio
    async def test_method_not_allowed(self, test_client):
        response = await test_client.delete("/notes")

        assert response.status_code == 405
        assert response.json() == {"error": "Method Not Allowed"}
        assert "GET" in response.headers["Allow"]
        assert response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_unknown_path(self, test_client):
        response = await test_client.get("/missing")

        assert response.status_code == 404
        assert response.json() == {"error": "Not Found"}

    @pytest.mark.asyncio
    async def test_unexpected_error_keeps_request_id(self, database, posts_client):
        app = create_app(database=database, posts_client=posts_client)

        async def explode():
            raise RuntimeError("unexpected")

        app.add_api_route("/explode", explode)

        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/explode", headers={"X-Request-ID": "rid-1"})

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}
        assert response.headers["X-Request-ID"] == "rid-1"


class TestAccessLog:

    @pytest.mark.asyncio
    async def test_success_logged_at_info(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="notes_api.access")

        await test_client.post("/notes", json={"title": "Ship it"})

        records = [r for r in caplog.records if r.name == "notes_api.access"]
        assert len(records) == 1
        assert records[0].levelno == logging.INFO
        assert "POST /notes 201" in records[0].getMessage()

    @pytest.mark.asyncio
    async def test_storage_outage_logged_as_critical(self, unreachable_client, caplog):
        caplog.set_level(logging.INFO, logger="notes_api.access")

        await unreachable_client.get("/notes")
        await unreachable_client.get("/health")

        records = [r for r in caplog.records if r.name == "notes_api.access"]
        assert [r.levelno for r in records] == [logging.CRITICAL]


class TestLifespan:

    @pytest.mark.asyncio
    async def test_lifespan_builds_and_releases_collaborators(self, tmp_path):
        settings = Settings(
            _env_file=None,
            database_url=sqlite_url(tmp_path / "notes.db"),
            db_create_schema=True,
            log_level="WARNING",
        )
        app = create_app(settings=settings)
        assert app.state.database is None

        async with lifespan(app):
            assert isinstance(app.state.database, Database)
            assert await app.state.database.ping() == {"ok": 1}
            # Schema was created, so the notes table is queryable
            async with app.state.database.connection() as conn:
                await conn.exec_driver_sql("SELECT count(*) FROM notes")
