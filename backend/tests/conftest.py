"""Test fixtures for the Guidebook booking backend."""
from __future__ import annotations

import os
import uuid
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.pop("REDIS_URL", None)

from guidebook.core.config import get_settings
from guidebook.core.security import create_access_token
from guidebook.db.base import Base
from guidebook.db.session import dispose_engine, get_sessionmaker
from guidebook.main import app
from guidebook.models import Provider, ServiceType


def auth_headers(subject: str, role: str, **claims: object) -> dict[str, str]:
    token = create_access_token(subject, role=role, **claims)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="session")
def db_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Provide a temporary SQLite database URL for the test session."""
    db_path = tmp_path_factory.mktemp("db") / "test.db"
    return f"sqlite+aiosqlite:///{db_path}"


@pytest_asyncio.fixture()
async def reset_database(db_url: str) -> AsyncIterator[None]:
    """Drop and recreate the database schema for an isolated test."""
    os.environ["DATABASE_URL"] = db_url
    get_settings.cache_clear()
    get_settings()

    await dispose_engine(db_url)
    engine = create_async_engine(db_url, future=True)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)
    await engine.dispose()
    yield
    await dispose_engine(db_url)


@pytest_asyncio.fixture()
async def providers(reset_database: None, db_url: str) -> dict[str, uuid.UUID]:
    """Seed an active translator, an active guide and an inactive provider."""
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        translator = Provider(
            display_name="Ayu Lestari",
            email="ayu@example.com",
            service_type=ServiceType.TRANSLATOR,
            timezone="Asia/Jakarta",
        )
        guide = Provider(
            display_name="Made Wirawan",
            email="made@example.com",
            service_type=ServiceType.TOUR_GUIDE,
            timezone="Asia/Makassar",
        )
        retired = Provider(
            display_name="Budi Santoso",
            email="budi@example.com",
            service_type=ServiceType.BOTH,
            timezone="Asia/Jakarta",
            is_active=False,
        )
        session.add_all([translator, guide, retired])
        await session.commit()
        return {
            "translator": translator.id,
            "guide": guide.id,
            "retired": retired.id,
        }


@pytest_asyncio.fixture()
async def app_context(
    providers: dict[str, uuid.UUID],
) -> AsyncIterator[dict[str, object]]:
    """Yield an async client, seeded provider ids and ready-made auth headers."""
    translator_id = providers["translator"]
    context: dict[str, object] = {
        **providers,
        "client_headers": auth_headers(
            "client-1", "client", email="traveller@example.com"
        ),
        "other_client_headers": auth_headers(
            "client-2", "client", email="someone@example.com"
        ),
        "provider_headers": auth_headers(
            "provider-1", "provider", provider_id=str(translator_id)
        ),
        "admin_headers": auth_headers("admin-1", "admin"),
    }

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        context["client"] = client
        yield context
