import os

from sqlalchemy.ext.asyncio import AsyncEngine

from . import db as db_mod
from .infrastructure.db.models import Base
from .logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_FALLBACK_URL = "sqlite+aiosqlite:///./flixauth-dev.db"


def _in_ci() -> bool:
    return bool(os.environ.get("CI") or os.environ.get("GITHUB_ACTIONS"))


async def _create_tables(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def create_all(engine: AsyncEngine | None = None) -> AsyncEngine:
    """Create the users, token and audit tables on the configured engine.

    If the database cannot be reached during local development the module
    engine is rebound to a sqlite file (``FALLBACK_DATABASE_URL``) and the
    tables are created there instead. In CI the connection error is raised.
    Returns the engine the tables were created on.
    """
    use_engine = engine or db_mod.engine
    if use_engine is None:
        raise RuntimeError("create_engine() must run before create_all()")

    try:
        await _create_tables(use_engine)
        return use_engine
    except Exception as exc:
        logger.error("database_unreachable", url=str(use_engine.url), error=str(exc))
        if _in_ci():
            raise

    from .config import Settings

    fallback_url = os.environ.get("FALLBACK_DATABASE_URL") or DEFAULT_FALLBACK_URL
    fallback = db_mod.create_engine(Settings(database_url=fallback_url))
    db_mod.create_sessionmaker(fallback)
    await _create_tables(fallback)
    logger.warning("using_sqlite_fallback_database", url=fallback_url)
    return fallback
