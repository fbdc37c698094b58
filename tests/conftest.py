"""
Notas API — Test Configuration (conftest.py)
=============================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Provides reusable test infrastructure (fake store, SQLite store, API client).
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── fake_store:     Records every statement, returns scripted rows
    ├── test_client:    HTTPX AsyncClient on an app wired to fake_store
    ├── sqlite_store:   Real Store on a temporary SQLite file with the
    │                   four tables created
    └── sqlite_client:  HTTPX AsyncClient on an app wired to sqlite_store
"""

import os
import tempfile

# Override settings for testing BEFORE any app imports
# Why: settings and the credential guard are module-level singletons
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="notas_test_"), "unused.db"
)
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["CREDENTIAL_ROUNDS"] = "4"  # minimum bcrypt cost keeps tests fast

from typing import Any, Dict, List, Mapping, Optional, Tuple  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402

from notas_api.database import Store  # noqa: E402
from notas_api.main import create_app  # noqa: E402


SCHEMA = [
    """
    CREATE TABLE usuarios (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        cedula TEXT UNIQUE,
        nombre TEXT,
        clave TEXT
    )
    """,
    """
    CREATE TABLE materia (
        id_materia INTEGER PRIMARY KEY AUTOINCREMENT,
        nombre_materia TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE estudiantes (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        cedula TEXT,
        nombre TEXT,
        correo TEXT
    )
    """,
    """
    CREATE TABLE notas (
        id_nota INTEGER PRIMARY KEY AUTOINCREMENT,
        id_estudiante INTEGER REFERENCES estudiantes(id),
        id_materia INTEGER REFERENCES materia(id_materia),
        calificacion NUMERIC
    )
    """,
]


class FakeStore:
    """
    Stand-in for Store that never touches a database.

    Usage:
        fake_store.queue([{"id_materia": 1, "nombre_materia": "Math"}])
        ...
        assert fake_store.calls[0][1] == {"nombre_materia": "Math"}

    Each queued item answers one `execute` call, in order. An exception
    instance is raised instead of returned. With nothing queued, `execute`
    returns no rows.
    """

    def __init__(self):
        self.calls: List[Tuple[str, Dict[str, Any]]] = []
        self._results: List[Any] = []

    def queue(self, *results: Any) -> None:
        self._results.extend(results)

    async def execute(
        self, statement: str, parameters: Optional[Mapping[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        self.calls.append((statement, dict(parameters or {})))
        result = self._results.pop(0) if self._results else []
        if isinstance(result, Exception):
            raise result
        return result

    async def ping(self) -> None:
        await self.execute("SELECT 1")

    async def dispose(self) -> None:
        pass


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest_asyncio.fixture
async def test_client(fake_store):
    """
    HTTPX AsyncClient talking to an app whose store is `fake_store`.

    raise_app_exceptions=False: the catch-all 500 handler re-raises after
    answering (Starlette behaviour); tests want the answer, not the raise.
    """
    app = create_app(store=fake_store)
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def sqlite_store(tmp_path):
    """A real Store on a fresh SQLite file holding the four tables."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'notas.db'}")

    # SQLite only enforces REFERENCES when asked, per connection
    @event.listens_for(engine.sync_engine, "connect")
    def _enforce_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    store = Store(engine)
    for ddl in SCHEMA:
        await store.execute(ddl)
    yield store
    await store.dispose()


@pytest_asyncio.fixture
async def sqlite_client(sqlite_store):
    app = create_app(store=sqlite_store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
