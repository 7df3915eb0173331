"""Dependency injection functions for FastAPI.

This module provides FastAPI Depends() functions for repositories, services
and database sessions.
"""

from typing import Any, AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import Settings
from ..ports.email import EmailSender
from ..ports.repositories import UserRepository
from .providers import get_email_sender, get_settings


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get database session.

    Import the db module at call time so any runtime rebinds performed by
    `setup_db.create_all()` are respected (for example when falling back to sqlite).
    """
    from .. import db as db_mod

    async with db_mod.AsyncSessionLocal() as db_session:
        yield db_session


async def get_user_repo(db_session: AsyncSession = Depends(get_db)) -> UserRepository:
    from ..infrastructure.repositories import get_repositories

    result: UserRepository = get_repositories(db_session)["users"]
    return result


async def get_verification_tokens_repo(db_session: AsyncSession = Depends(get_db)):
    from ..infrastructure.repositories import get_repositories

    return get_repositories(db_session)["verification_tokens"]


async def get_password_reset_tokens_repo(db_session: AsyncSession = Depends(get_db)):
    from ..infrastructure.repositories import get_repositories

    return get_repositories(db_session)["password_reset_tokens"]


async def get_audit_repo(db_session: AsyncSession = Depends(get_db)):
    """Get audit repository instance from the repository factory."""
    from ..infrastructure.repositories import get_repositories

    return get_repositories(db_session)["audit"]


async def get_event_recorder(audit_repo=Depends(get_audit_repo)) -> Any:
    """Event sink writing both a structured log line and an audit row."""
    from ..infrastructure.events import (
        AuditEventRecorder,
        CompositeEventRecorder,
        LoggingEventRecorder,
    )

    return CompositeEventRecorder([LoggingEventRecorder(), AuditEventRecorder(audit_repo)])


async def get_token_issuer(
    verification_tokens=Depends(get_verification_tokens_repo),
    reset_tokens=Depends(get_password_reset_tokens_repo),
    settings: Settings = Depends(get_settings),
) -> Any:
    from ..services.token_service import TokenIssuer

    return TokenIssuer(verification_tokens, reset_tokens, ttl=settings.token_ttl_seconds)


async def get_verification_service(
    verification_tokens=Depends(get_verification_tokens_repo),
    user_repo: UserRepository = Depends(get_user_repo),
    events=Depends(get_event_recorder),
) -> Any:
    """Get VerificationService instance."""
    from ..services.verification_service import VerificationService

    return VerificationService(verification_tokens, user_repo, events)


async def get_password_reset_service(
    user_repo: UserRepository = Depends(get_user_repo),
    issuer=Depends(get_token_issuer),
    mailer: EmailSender = Depends(get_email_sender),
    events=Depends(get_event_recorder),
    settings: Settings = Depends(get_settings),
) -> Any:
    """Get PasswordResetService instance."""
    from ..services.password_reset_service import PasswordResetService

    return PasswordResetService(
        user_repo, issuer, mailer, events, hash_schemes=settings.password_hash_schemes
    )


async def get_registration_service(
    user_repo: UserRepository = Depends(get_user_repo),
    issuer=Depends(get_token_issuer),
    mailer: EmailSender = Depends(get_email_sender),
    events=Depends(get_event_recorder),
    settings: Settings = Depends(get_settings),
) -> Any:
    """Get RegistrationService instance."""
    from ..services.registration_service import RegistrationService

    return RegistrationService(
        user_repo, issuer, mailer, events, hash_schemes=settings.password_hash_schemes
    )


async def get_account_email_service(
    user_repo: UserRepository = Depends(get_user_repo),
    issuer=Depends(get_token_issuer),
    mailer: EmailSender = Depends(get_email_sender),
    events=Depends(get_event_recorder),
    settings: Settings = Depends(get_settings),
) -> Any:
    """Get AccountEmailService instance."""
    from ..services.account_email_service import AccountEmailService

    return AccountEmailService(
        user_repo, issuer, mailer, events, hash_schemes=settings.password_hash_schemes
    )
