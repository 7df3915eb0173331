from typing import Any, Optional, cast

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from .config import Settings

# Database engine and session factory, rebound at startup (and by tests)
engine: Optional[Any] = None
AsyncSessionLocal: Any = None


def build_database_url(settings: Settings) -> str:
    if settings.database_url:
        return settings.database_url
    return (
        f"postgresql+asyncpg://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )


def create_engine(settings: Settings) -> Any:
    """Create an async engine for the given settings and register it on the module.

    Pool sizing only applies to PostgreSQL; sqlite URLs get a plain engine since
    aiosqlite does not accept the queue pool arguments.
    """
    global engine
    database_url = build_database_url(settings)

    if "postgresql" in database_url:
        engine = create_async_engine(
            database_url,
            echo=False,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_recycle=settings.db_pool_recycle,
            pool_pre_ping=settings.db_pool_pre_ping,
            connect_args={"command_timeout": 30},
        )
    else:
        engine = create_async_engine(database_url, echo=False)
    return engine


def create_sessionmaker(bind_engine: Any) -> Any:
    """Create and register an AsyncSession factory bound to the provided engine."""
    global AsyncSessionLocal
    AsyncSessionLocal = cast(
        Any, async_sessionmaker(bind=bind_engine, expire_on_commit=False, class_=AsyncSession)
    )
    return AsyncSessionLocal

