import os
import tempfile

# Antes de importar la app: DB y media de prueba
_TMP = tempfile.mkdtemp(prefix="thethought-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP}/boot.db"
os.environ["MEDIA_DIR"] = os.path.join(_TMP, "media")
os.environ["SECRET_KEY"] = "test-secret"

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession

from thethought.core.config import settings
from thethought.db.init_db import init_models
from thethought.db.session import get_session
from thethought.main import app


@pytest_asyncio.fixture
async def engine(tmp_path):
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")

    # SQLite: FKs activas (cascade como en Postgres) y SAVEPOINT fiable
    @event.listens_for(eng.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(eng.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    await init_models(bind=eng)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "MEDIA_DIR", str(tmp_path / "media"))

    async def _get_session():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = _get_session
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


async def register(client, username: str, password: str = "secret123", **extra) -> dict:
    """Registra y devuelve {"id", "username", "token", "headers"}."""
    payload = {"username": username, "email": f"{username}@example.com", "password": password}
    payload.update(extra)
    r = await client.post("/api/users/register/", json=payload)
    assert r.status_code == 201, r.text
    body = r.json()
    return {
        "id": body["user"]["id"],
        "username": username,
        "token": body["access_token"],
        "headers": auth(body["access_token"]),
    }


@pytest_asyncio.fixture
async def alice(client):
    return await register(client, "alice", displayName="Alice")


@pytest_asyncio.fixture
async def bob(client):
    return await register(client, "bob")


@pytest_asyncio.fixture
async def carol(client):
    return await register(client, "carol")
