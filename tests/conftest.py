import os
import sys
from pathlib import Path

# Ensure the project's src directory is on sys.path for tests
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))
sys.path.insert(0, str(ROOT))

# Point any Settings() constructed during imports at sqlite, never at a real
# database; individual fixtures build their own per-test engines.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.pop("SENDGRID_API_KEY", None)

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402

from flixauth.infrastructure.db.models import Base  # noqa: E402
from flixauth.infrastructure.email.mock import MockEmailSender  # noqa: E402


@pytest.fixture
def database_url(tmp_path):
    """Return a sqlite+aiosqlite URL backed by a per-test file in pytest's tmp_path."""
    db_file = tmp_path / "test.db"
    # Use POSIX path so SQLAlchemy parses correctly on Windows
    return f"sqlite+aiosqlite:///{db_file.as_posix()}"


@pytest.fixture
async def engine(database_url):
    engine = create_async_engine(database_url, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def AsyncSessionLocal(engine):
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def db_session(AsyncSessionLocal):
    async with AsyncSessionLocal() as session:
        yield session


@pytest.fixture
def mailer():
    return MockEmailSender()


@pytest.fixture
def test_app(engine, AsyncSessionLocal, mailer):
    """Create an app wired to the per-test database and the in-memory mailer.

    Yields (client, engine, AsyncSessionLocal).
    """
    from tests.fixtures.app_factory import create_test_app

    client = create_test_app(AsyncSessionLocal, mailer=mailer)
    try:
        yield client, engine, AsyncSessionLocal
    finally:
        client.app.dependency_overrides.clear()
