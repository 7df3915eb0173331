"""Singleton providers for application-wide services and clients.

This module handles lazy initialization of singleton instances like Settings
and the email sender.
"""

from typing import Any

from ..config import Settings
from ..infrastructure.email.mock import MockEmailSender
from ..logging_config import get_logger
from ..ports.email import EmailSender

logger = get_logger(__name__)

# Lazy singletons to avoid import-time side-effects
_settings: Settings | None = None
_app_email_sender: Any = None


def get_settings() -> Settings:
    """Get or create singleton Settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def build_email_sender(settings: Settings) -> EmailSender:
    """SendGrid when an API key is configured, otherwise the in-memory mock."""
    if settings.sendgrid_api_key:
        from ..infrastructure.email.sendgrid import SendGridEmailSender

        return SendGridEmailSender(
            api_key=settings.sendgrid_api_key,
            from_email=settings.email_from,
            app_url=settings.app_url,
        )
    logger.info("sendgrid_not_configured_using_mock_sender")
    return MockEmailSender()


def set_email_sender(sender: Any) -> None:
    global _app_email_sender
    _app_email_sender = sender


def get_email_sender() -> EmailSender:
    """Get email sender: prefer the app-initialized sender, else build one from settings."""
    global _app_email_sender
    if _app_email_sender is None:
        _app_email_sender = build_email_sender(get_settings())
    return _app_email_sender  # type: ignore[no-any-return]
