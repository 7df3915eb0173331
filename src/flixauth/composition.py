from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from fastapi import FastAPI

from . import db as db_mod
from .config import Settings
from .deps import providers
from .logging_config import get_logger
from .setup_db import create_all

logger = get_logger(__name__)


@dataclass
class WireResult:
    app: FastAPI
    engine: Any
    sessionmaker: Any
    email_sender: Any
    teardown: Callable[[], Awaitable[None]]


async def wire_app(app: FastAPI, settings: Settings | None = None) -> WireResult:
    """Build the process-wide collaborators and attach them to ``app``.

    Must run at startup rather than import time: the engine is created from
    whatever DATABASE_URL is set when the server starts.
    """
    settings = settings or Settings()

    email_sender = providers.build_email_sender(settings)
    providers.set_email_sender(email_sender)
    app.state.email_sender = email_sender
    logger.info("email_sender_ready", sender=type(email_sender).__name__)

    engine = db_mod.create_engine(settings)
    db_mod.create_sessionmaker(engine)
    # create_all may swap in the sqlite fallback engine
    engine = await create_all(engine=engine)
    logger.info("database_ready", url=engine.url.render_as_string(hide_password=True))

    async def _teardown() -> None:
        await engine.dispose()
        providers.set_email_sender(None)

    return WireResult(
        app=app,
        engine=engine,
        sessionmaker=db_mod.AsyncSessionLocal,
        email_sender=email_sender,
        teardown=_teardown,
    )
