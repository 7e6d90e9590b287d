"""
Shared fixtures: an isolated SQLite database per test, handler-level
sessions and an API client with collaborators swapped for in-memory ones.
"""

import asyncio

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

from main import app
from samudra.core.database import get_session
from samudra.db.repository import ensure_counters
from samudra.handlers.auth import LocalAuthProvider
from samudra.handlers.chain import SimulatedChainClient
from samudra.handlers.payments import MockPaymentProvider
from samudra.handlers.storage import LocalFileStore
from samudra.models.kv import KVEntry  # noqa: F401
from samudra.models.user import AuthUser
from samudra.routes.deps import (
    get_auth_provider,
    get_chain_client,
    get_file_store,
    get_payment_provider,
)


def _make_engine(tmp_path):
    # NullPool: no connection outlives the event loop that opened it
    return create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'registry.db'}", poolclass=NullPool)


def _make_session_factory(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)


async def _create_tables(engine):
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    async with _make_session_factory(engine)() as db_session:
        await ensure_counters(db_session)
        await db_session.commit()


@pytest.fixture
async def session_factory(tmp_path):
    """Independent sessions on one database, for concurrent writers."""
    engine = _make_engine(tmp_path)
    await _create_tables(engine)
    yield _make_session_factory(engine)
    await engine.dispose()


@pytest.fixture
async def session(session_factory):
    async with session_factory() as db_session:
        yield db_session


@pytest.fixture
def chain():
    return SimulatedChainClient()


@pytest.fixture
def manager():
    return AuthUser(id="user_manager_1", email="manager@example.com", name="Field Team", role="project_manager")


@pytest.fixture
def other_manager():
    return AuthUser(id="user_manager_2", email="other@example.com", name="Other Team", role="project_manager")


@pytest.fixture
def client(tmp_path):
    engine = _make_engine(tmp_path)
    asyncio.run(_create_tables(engine))
    maker = _make_session_factory(engine)

    async def override_get_session():
        async with maker() as db_session:
            yield db_session

    auth = LocalAuthProvider()
    chain_client = SimulatedChainClient()
    payments = MockPaymentProvider()
    store = LocalFileStore(str(tmp_path / "uploads"))

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_auth_provider] = lambda: auth
    app.dependency_overrides[get_chain_client] = lambda: chain_client
    app.dependency_overrides[get_payment_provider] = lambda: payments
    app.dependency_overrides[get_file_store] = lambda: store

    # Lifespan is not entered; tables already exist on the test engine
    yield TestClient(app)

    app.dependency_overrides.clear()
    asyncio.run(engine.dispose())


def register(client, email, role, name="Test User", password="correct-horse"):
    """Sign up and log in; returns auth headers."""
    response = client.post("/signup", json={"email": email, "password": password, "name": name, "role": role})
    assert response.status_code == 200, response.text
    response = client.post("/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['accessToken']}"}


@pytest.fixture
def manager_headers(client):
    return register(client, "manager@example.com", "project_manager", name="Sundarbans Field Team")


@pytest.fixture
def verifier_headers(client):
    return register(client, "nccr.admin@gov.in", "nccr_verifier", name="NCCR Admin")


@pytest.fixture
def buyer_headers(client):
    return register(client, "buyer@example.com", "buyer", name="Coastal Offsets Ltd")
