"""
Notes API: Database Connection Pool
===================================

What:  The `Database` lifecycle object: async SQLAlchemy engine with a bounded
       connection pool, a lease helper, and the FastAPI dependency that hands
       the instance to route handlers.
How:   One `Database` is built in the application lifespan and stored on
       `app.state.database`. Handlers receive it through `get_database()`;
       nothing in the package holds a module-level engine.
Who:   NoteService (list/create), the /db-check route, and the lifespan.

Pool policy:
    pool_size=10      fixed capacity (DB_POOL_SIZE)
    max_overflow=0    never open connections beyond capacity
    pool_timeout=30   a caller waits at most this many seconds for a free
                      connection, then sqlalchemy.exc.TimeoutError is raised
                      (DB_POOL_TIMEOUT); services report it as StorageError
    pool_pre_ping     validates connections before use
    pool_recycle=3600 recycles connections every hour
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional, Tuple, Union

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from notes_api.config import Settings

logger = logging.getLogger(__name__)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""
    pass


class Database:
    """
    Bounded pool of database connections with acquire/release semantics.

    Every lease returned by connection() goes back to the pool when the
    `async with` block exits, whether the statement succeeded or raised.
    Uncommitted work on a released connection is rolled back.
    """

    def __init__(
        self,
        url: Union[str, URL],
        *,
        pool_size: int = 10,
        pool_timeout: float = 30.0,
        pool_pre_ping: bool = True,
        echo: bool = False,
    ):
        self.pool_size = pool_size
        self.pool_timeout = pool_timeout
        self.engine: AsyncEngine = create_async_engine(
            url,
            pool_size=pool_size,
            max_overflow=0,
            pool_timeout=pool_timeout,
            pool_pre_ping=pool_pre_ping,
            pool_recycle=3600,
            echo=echo,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build the pool from application settings."""
        return cls(
            settings.sqlalchemy_url(),
            pool_size=settings.db_pool_size,
            pool_timeout=settings.db_pool_timeout,
            pool_pre_ping=settings.db_pool_pre_ping,
            # SQL logging only when explicitly debugging
            echo=settings.log_level == "DEBUG",
        )

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[AsyncConnection]:
        """
        Lease one pooled connection for the duration of the block.

        Raises:
            sqlalchemy.exc.TimeoutError: no connection became free within
                pool_timeout seconds.
            sqlalchemy.exc.DBAPIError: the driver could not connect.
        """
        async with self.engine.connect() as conn:
            yield conn

    async def ping(self) -> Dict[str, Any]:
        """Round-trip `SELECT 1 AS ok` and return the row, e.g. {"ok": 1}."""
        async with self.connection() as conn:
            result = await conn.execute(text("SELECT 1 AS ok"))
            return dict(result.mappings().one())

    async def create_schema(self) -> None:
        """Create any missing tables registered on Base.metadata."""
        from notes_api.models import note  # noqa: F401  (registers the table)

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ensured")

    async def dispose(self) -> None:
        """Close all pooled connections (application shutdown)."""
        await self.engine.dispose()


def driver_error_details(exc: BaseException) -> Tuple[str, Optional[str]]:
    """
    Extract (message, code) from a database failure.

    SQLAlchemy wraps driver exceptions in DBAPIError and keeps the original
    on `.orig`. The code is looked up on the driver exception:
        asyncpg   → sqlstate        (e.g. "28P01")
        sqlite3   → sqlite_errorname (e.g. "SQLITE_CANTOPEN")
        pymysql   → errno / args[0] (e.g. 1045)
    falling back to the exception class name.
    """
    orig = getattr(exc, "orig", None) or exc
    message = str(orig) or type(orig).__name__

    for attr in ("sqlstate", "sqlite_errorname", "errno"):
        value = getattr(orig, attr, None)
        if value:
            return message, str(value)

    args = getattr(orig, "args", ())
    if args and isinstance(args[0], int):
        return message, str(args[0])

    return message, type(orig).__name__


# ── Dependency ────────────────────────────────────────────────────────────
def get_database(request: Request) -> Database:
    """
    FastAPI dependency returning the application's Database.

    Example usage in a route:
        @router.get("/notes")
        async def list_notes(db: Database = Depends(get_database)):
            return await note_service.list_notes(db)
    """
    return request.app.state.database
