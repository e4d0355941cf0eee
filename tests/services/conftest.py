"""Service test fixtures — async DB, seeded users, services and FastAPI test client.

Invariants:
    - Every test gets a fresh SQLite database file (tmp_path)
    - get_db dependency overridden to use the test session factory
    - db_manager patched so readiness probes hit the test database
    - Bearer tokens minted with the real issue_token (real verification path)

Design Decisions:
    - File-backed SQLite over :memory:: concurrency tests need independent connections
"""

from uuid import UUID

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

import mutual_aid.infrastructure.database as db_module
import mutual_aid.models  # noqa: F401
from mutual_aid.auth.models import Principal
from mutual_aid.auth.tokens import issue_token
from mutual_aid.db.base import Base
from mutual_aid.infrastructure.database import get_db, DatabaseSessionManager
from mutual_aid.main import app
from mutual_aid.models.user import User
from mutual_aid.services.help_request_service import HelpRequestService
from mutual_aid.services.help_request_store import HelpRequestStore
from mutual_aid.services.user_directory import DatabaseUserDirectory

ALICE_ID = UUID("00000000-0000-4000-8000-00000000a11c")
BOB_ID = UUID("00000000-0000-4000-8000-000000000b0b")
CAROL_ID = UUID("00000000-0000-4000-8000-0000000ca201")


@pytest.fixture
async def test_engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'mutual_aid_test.db'}", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def users(test_db):
    """Alice requests help, Bob helps, Carol is an unrelated neighbour."""
    alice = User(
        id=ALICE_ID, first_name="Alice", last_name="Archer",
        email="alice@example.org", phone="+1 555 0100",
    )
    bob = User(
        id=BOB_ID, first_name="Bob", last_name="Baker", email="bob@example.org",
    )
    carol = User(
        id=CAROL_ID, first_name="Carol", last_name="Cole", email="carol@example.org",
    )
    test_db.add_all([alice, bob, carol])
    await test_db.commit()
    return {"alice": alice, "bob": bob, "carol": carol}


@pytest.fixture
def principals():
    return {
        "alice": Principal(user_id=ALICE_ID),
        "bob": Principal(user_id=BOB_ID),
        "carol": Principal(user_id=CAROL_ID),
    }


@pytest.fixture
def auth_headers():
    """Build an Authorization header for a user id."""
    def _headers(user_id: UUID) -> dict:
        token = issue_token(Principal(user_id=user_id))
        return {"Authorization": f"Bearer {token}"}
    return _headers


def _make_service(
    session: AsyncSession, max_update_attempts: int = 5,
) -> HelpRequestService:
    return HelpRequestService(
        HelpRequestStore(session, max_update_attempts=max_update_attempts),
        DatabaseUserDirectory(session),
    )


@pytest.fixture
def service(test_db):
    return _make_service(test_db)


@pytest.fixture
def service_factory():
    """Build a service over any session (concurrency tests use one session each)."""
    return _make_service


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
