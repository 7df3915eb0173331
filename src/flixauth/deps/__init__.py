"""Dependency injection for FastAPI.

This package provides all FastAPI dependency functions organized by responsibility:
- providers: Singleton providers (settings, email sender)
- injection: Repository and service dependency injection
"""

from .injection import (
    get_account_email_service,
    get_audit_repo,
    get_db,
    get_event_recorder,
    get_password_reset_service,
    get_password_reset_tokens_repo,
    get_registration_service,
    get_token_issuer,
    get_user_repo,
    get_verification_service,
    get_verification_tokens_repo,
)
from .providers import get_email_sender, get_settings, set_email_sender

__all__ = [
    # Providers
    "get_settings",
    "get_email_sender",
    "set_email_sender",
    # Injection
    "get_account_email_service",
    "get_db",
    "get_user_repo",
    "get_verification_tokens_repo",
    "get_password_reset_tokens_repo",
    "get_audit_repo",
    "get_event_recorder",
    "get_token_issuer",
    "get_verification_service",
    "get_password_reset_service",
    "get_registration_service",
]
