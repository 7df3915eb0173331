from datetime import datetime, timedelta, timezone

import pytest

from flixauth.domain.tokens import PasswordResetToken, VerificationToken, as_utc
from flixauth.infrastructure.repositories import get_repositories

EXPIRES = datetime(2030, 1, 1, tzinfo=timezone.utc)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "kind,domain_type",
    [("verification_tokens", VerificationToken), ("password_reset_tokens", PasswordResetToken)],
)
async def test_create_lookup_delete(db_session, kind, domain_type):
    repo = get_repositories(db_session)[kind]

    created = await repo.create("a@example.com", "tok-1", EXPIRES)

    assert isinstance(created, domain_type)
    assert created.id
    by_token = await repo.get_by_token("tok-1")
    by_email = await repo.get_by_email("a@example.com")
    assert by_token.id == created.id
    assert by_email.token == "tok-1"
    assert as_utc(by_token.expires) == EXPIRES

    await repo.delete(created.id)

    assert await repo.get_by_token("tok-1") is None
    assert await repo.get_by_email("a@example.com") is None


@pytest.mark.asyncio
async def test_unknown_token_returns_none(db_session):
    repo = get_repositories(db_session)["verification_tokens"]
    assert await repo.get_by_token("nope") is None


@pytest.mark.asyncio
async def test_stored_expiry_round_trips_for_expiry_check(db_session):
    repo = get_repositories(db_session)["password_reset_tokens"]
    now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    await repo.create("a@example.com", "tok-2", now - timedelta(seconds=1))

    stored = await repo.get_by_token("tok-2")

    assert stored.has_expired(now)
    assert not stored.has_expired(now - timedelta(seconds=1))


@pytest.mark.asyncio
async def test_verification_token_account_binding_round_trips(db_session):
    repo = get_repositories(db_session)["verification_tokens"]

    await repo.create("new@example.com", "tok-3", EXPIRES, account_id="u1")

    stored = await repo.get_by_email("new@example.com")
    assert stored.account_id == "u1"


@pytest.mark.asyncio
async def test_reset_tokens_reject_account_binding(db_session):
    repo = get_repositories(db_session)["password_reset_tokens"]

    with pytest.raises(TypeError):
        await repo.create("a@example.com", "tok-4", EXPIRES, account_id="u1")
