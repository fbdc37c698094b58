"""
Notas API — Store Access
=========================

What:  Async SQLAlchemy engine wrapped in a single `execute` capability.
Why:   Every operation in the API is exactly one parameterized statement.
       Routes and services only ever need "run this SQL, give me the rows".
How:   `Store` owns an AsyncEngine (connection pool). Each `execute` borrows
       one connection, runs one `text()` statement inside its own
       transaction, materializes the rows as dicts and returns the
       connection to the pool.
Who:   Built once by the application lifespan, injected into routes with
       the `get_store` dependency.
When:  Engine is created at startup and disposed at shutdown.

Architecture Decision:
    The tables are owned by the database and consumed as-is, so there is no
    ORM mapping here. Named binds (`:cedula`) keep every statement
    parameterized; the only identifiers interpolated into SQL text are
    table/column names fixed in code.

Connection Pooling Strategy:
    pool_size / max_overflow / pool_pre_ping come from settings.
    SQLite (tests, local experiments) keeps SQLAlchemy's default pool.
"""

import logging
import ssl
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from starlette.requests import Request

from notas_api.config import Settings
from notas_api.exceptions import StoreError

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


def _driver_message(exc: SQLAlchemyError) -> str:
    """
    Extracts the database driver's own error text.

    SQLAlchemy's str() adds the SQL text and a documentation link; the
    underlying DBAPI exception carries just the driver message
    (e.g. 'duplicate key value violates unique constraint ...').
    """
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return str(exc.orig)
    return str(exc)


def build_engine(settings: Settings) -> AsyncEngine:
    """Creates the async engine described by `settings`."""
    kwargs: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}

    if not settings.database_url.startswith("sqlite"):
        kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )

    if settings.db_ssl:
        # Managed Postgres hosts present certificates we cannot verify
        context = ssl.create_default_context()
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
        kwargs["connect_args"] = {"ssl": context}

    return create_async_engine(settings.database_url, **kwargs)


class Store:
    """
    Single-statement access to the relational store.

    Usage:
        rows = await store.execute(
            "SELECT * FROM usuarios WHERE cedula = :cedula",
            {"cedula": "V-123"},
        )
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    @classmethod
    def from_settings(cls, settings: Settings) -> "Store":
        return cls(build_engine(settings))

    async def execute(
        self,
        statement: str,
        parameters: Optional[Mapping[str, Any]] = None,
    ) -> List[Row]:
        """
        Runs one statement and returns its rows.

        Args:
            statement:  SQL with named `:param` binds
            parameters: Values for the binds

        Returns:
            Rows as plain dicts; an empty list for statements without rows.

        Raises:
            StoreError: The driver rejected the statement or the database
                        is unreachable. The message is the driver's own.
        """
        try:
            async with self.engine.begin() as conn:
                result = await conn.execute(text(statement), dict(parameters or {}))
                if not result.returns_rows:
                    return []
                return [dict(row) for row in result.mappings().all()]
        except SQLAlchemyError as e:
            message = _driver_message(e)
            logger.error("Statement failed: %s", message)
            raise StoreError(message=message, context={"error_type": type(e).__name__}) from e

    async def ping(self) -> None:
        """Round-trips a trivial query; raises StoreError if that fails."""
        await self.execute("SELECT 1")

    async def dispose(self) -> None:
        """Closes every pooled connection."""
        await self.engine.dispose()


# ── Dependency ────────────────────────────────────────────────────────────
def get_store(request: Request) -> Store:
    """
    FastAPI dependency returning the process-wide store.

    The store lives on `app.state` (set by the lifespan handler), so tests
    can swap it for a fake without touching module globals.
    """
    return request.app.state.store
