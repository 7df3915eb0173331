"""Unit tests for VerificationService."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from flixauth.domain.account import Account
from flixauth.domain.events import EventSeverity, FlowEvent
from flixauth.domain.result import Err, FlowErrorKind, Ok
from flixauth.domain.tokens import VerificationToken
from flixauth.services.verification_service import VerificationService

NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_token(expires: datetime, token: str = "abc", email: str = "a@x.com") -> VerificationToken:
    return VerificationToken(id="t1", email=email, token=token, expires=expires)


@pytest.fixture
def collaborators():
    tokens = AsyncMock()
    users = AsyncMock()
    events = AsyncMock()
    return tokens, users, events


@pytest.fixture
def service(collaborators):
    tokens, users, events = collaborators
    return VerificationService(tokens, users, events, clock=lambda: NOW)


@pytest.mark.asyncio
async def test_verify_email_success(service, collaborators):
    tokens, users, events = collaborators
    tokens.get_by_token.return_value = make_token(NOW + timedelta(hours=1))
    users.get_by_email.return_value = Account(id="u1", email="a@x.com")

    result = await service.verify_email("abc")

    assert isinstance(result, Ok)
    assert result.to_response() == {"success": "Email verified!"}
    assert result.data == {"email": "a@x.com"}
    users.update.assert_awaited_once_with("u1", email_verified=NOW, email="a@x.com")
    tokens.delete.assert_awaited_once_with("t1")
    events.record.assert_awaited_once_with(
        FlowEvent.NEW_VERIFICATION_SUCCESS, {"email": "a@x.com"}, EventSeverity.INFO
    )


@pytest.mark.asyncio
async def test_verify_email_token_not_found(service, collaborators):
    tokens, users, events = collaborators
    tokens.get_by_token.return_value = None

    result = await service.verify_email("bad-token")

    assert isinstance(result, Err)
    assert result.kind == FlowErrorKind.TOKEN_NOT_FOUND
    assert result.to_response() == {"error": "Token does not exist!"}
    assert result.context == {"token": "bad-token"}
    users.get_by_email.assert_not_awaited()
    users.update.assert_not_awaited()
    tokens.delete.assert_not_awaited()
    events.record.assert_awaited_once_with(
        FlowEvent.NEW_VERIFICATION_TOKEN_NOT_EXIST, {"token": "bad-token"}, EventSeverity.ERROR
    )


@pytest.mark.asyncio
async def test_verify_email_expired_token(service, collaborators):
    tokens, users, events = collaborators
    tokens.get_by_token.return_value = make_token(NOW - timedelta(seconds=1))

    result = await service.verify_email("abc")

    assert result.kind == FlowErrorKind.TOKEN_EXPIRED
    assert result.to_response() == {"error": "Token has expired!"}
    users.get_by_email.assert_not_awaited()
    users.update.assert_not_awaited()
    tokens.delete.assert_not_awaited()
    assert events.record.await_count == 1


@pytest.mark.asyncio
async def test_verify_email_accepts_token_expiring_now(service, collaborators):
    """The expiry boundary is inclusive: expires == now is still valid."""
    tokens, users, events = collaborators
    tokens.get_by_token.return_value = make_token(NOW)
    users.get_by_email.return_value = Account(id="u1", email="a@x.com")

    result = await service.verify_email("abc")

    assert result.ok
    users.update.assert_awaited_once()
    tokens.delete.assert_awaited_once()


@pytest.mark.asyncio
async def test_verify_email_accepts_naive_expiry(service, collaborators):
    tokens, users, events = collaborators
    tokens.get_by_token.return_value = make_token(
        (NOW + timedelta(minutes=5)).replace(tzinfo=None)
    )
    users.get_by_email.return_value = Account(id="u1", email="a@x.com")

    result = await service.verify_email("abc")

    assert result.ok


@pytest.mark.asyncio
async def test_verify_email_account_missing(service, collaborators):
    tokens, users, events = collaborators
    tokens.get_by_token.return_value = make_token(NOW + timedelta(hours=1))
    users.get_by_email.return_value = None

    result = await service.verify_email("abc")

    assert result.kind == FlowErrorKind.ACCOUNT_NOT_FOUND
    assert result.to_response() == {"error": "Email dows not exist!"}
    assert result.context == {"email": "a@x.com"}
    users.update.assert_not_awaited()
    tokens.delete.assert_not_awaited()
    events.record.assert_awaited_once_with(
        FlowEvent.NEW_VERIFICATION_EMAIL_NOT_EXIST, {"email": "a@x.com"}, EventSeverity.ERROR
    )


@pytest.mark.asyncio
async def test_verify_email_applies_pending_email_change(service, collaborators):
    tokens, users, events = collaborators
    token = make_token(NOW + timedelta(hours=1), email="new@x.com")
    token.account_id = "u1"
    tokens.get_by_token.return_value = token
    users.get_by_id.return_value = Account(id="u1", email="old@x.com")
    users.get_by_email.return_value = None

    result = await service.verify_email("abc")

    assert result.to_response() == {"success": "Email verified!"}
    users.get_by_id.assert_awaited_once_with("u1")
    users.get_by_email.assert_awaited_once_with("new@x.com")
    users.update.assert_awaited_once_with("u1", email_verified=NOW, email="new@x.com")
    tokens.delete.assert_awaited_once_with("t1")


@pytest.mark.asyncio
async def test_verify_email_refuses_change_to_address_taken_meanwhile(service, collaborators):
    tokens, users, events = collaborators
    token = make_token(NOW + timedelta(hours=1), email="new@x.com")
    token.account_id = "u1"
    tokens.get_by_token.return_value = token
    users.get_by_id.return_value = Account(id="u1", email="old@x.com")
    users.get_by_email.return_value = Account(id="u2", email="new@x.com")

    result = await service.verify_email("abc")

    assert result.kind == FlowErrorKind.EMAIL_IN_USE
    assert result.to_response() == {"error": "Email already in use!"}
    users.update.assert_not_awaited()
    tokens.delete.assert_not_awaited()
    events.record.assert_awaited_once_with(
        FlowEvent.NEW_VERIFICATION_EMAIL_IN_USE, {"email": "new@x.com"}, EventSeverity.ERROR
    )


@pytest.mark.asyncio
async def test_verify_email_change_for_deleted_account(service, collaborators):
    tokens, users, events = collaborators
    token = make_token(NOW + timedelta(hours=1), email="new@x.com")
    token.account_id = "gone"
    tokens.get_by_token.return_value = token
    users.get_by_id.return_value = None

    result = await service.verify_email("abc")

    assert result.kind == FlowErrorKind.ACCOUNT_NOT_FOUND
    users.update.assert_not_awaited()


@pytest.mark.asyncio
async def test_verify_email_propagates_store_failures(service, collaborators):
    tokens, users, events = collaborators
    tokens.get_by_token.return_value = make_token(NOW + timedelta(hours=1))
    users.get_by_email.return_value = Account(id="u1", email="a@x.com")
    users.update.side_effect = RuntimeError("database unreachable")

    with pytest.raises(RuntimeError, match="database unreachable"):
        await service.verify_email("abc")

    tokens.delete.assert_not_awaited()


@pytest.mark.asyncio
async def test_verify_email_second_use_reports_missing_token(service, collaborators):
    tokens, users, events = collaborators
    tokens.get_by_token.side_effect = [make_token(NOW + timedelta(hours=1)), None]
    users.get_by_email.return_value = Account(id="u1", email="a@x.com")

    first = await service.verify_email("abc")
    second = await service.verify_email("abc")

    assert first.ok
    assert second.kind == FlowErrorKind.TOKEN_NOT_FOUND
    assert users.update.await_count == 1
