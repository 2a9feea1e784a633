import os

# The app builds its engine at import time; point it at SQLite before that happens.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

from collections.abc import AsyncIterator  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker  # noqa: E402

from cms_api.db.session import Base, build_engine, get_db  # noqa: E402
from cms_api.main import app  # noqa: E402
from cms_api.models import Role, User  # noqa: E402
from cms_api.rate_limit import InMemoryRateLimitStore, RateLimiter  # noqa: E402
from tests.factories import FakeMediaStorage, auth_headers, make_user  # noqa: E402

# Pytest only picks up fixtures from conftest.py files. Fixtures defined in other
# modules (like tests/seeds.py) are invisible unless we register them here.
pytest_plugins = ["tests.seeds"]


@pytest_asyncio.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """Fresh in-memory database per test; StaticPool shares one connection."""
    test_engine = build_engine("sqlite+aiosqlite://")
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Session for seeding and inspecting rows directly."""
    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def media_storage() -> FakeMediaStorage:
    return FakeMediaStorage()


@pytest_asyncio.fixture
async def client(
    engine: AsyncEngine, db: AsyncSession, media_storage: FakeMediaStorage
) -> AsyncIterator[AsyncClient]:
    """HTTP client; every request gets its own session, committed like in production."""
    session_factory = async_sessionmaker(engine, expire_on_commit=False)

    async def override_get_db() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.state.rate_limiter = RateLimiter(
        InMemoryRateLimitStore(), max_requests=1000, window_seconds=60
    )
    app.state.media_storage = media_storage

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def admin_user(db: AsyncSession) -> User:
    user = make_user(name="Site Admin", email="admin@example.com", role=Role.ADMIN)
    db.add(user)
    await db.commit()
    return user


@pytest_asyncio.fixture
async def regular_user(db: AsyncSession) -> User:
    user = make_user(name="Regular Reader", email="reader@example.com", role=Role.USER)
    db.add(user)
    await db.commit()
    return user


@pytest.fixture
def admin_headers(admin_user: User) -> dict[str, str]:
    return auth_headers(admin_user)


@pytest.fixture
def user_headers(regular_user: User) -> dict[str, str]:
    return auth_headers(regular_user)
