"""Integration tests for the email verification endpoint."""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from flixauth.infrastructure.repositories import get_repositories
from tests.fixtures.accounts import create_account_direct, create_token_direct


def _in(seconds: int) -> datetime:
    return datetime.now(timezone.utc) + timedelta(seconds=seconds)


@pytest.mark.asyncio
async def test_verify_email_with_token(test_app):
    """GET with a valid token marks the account verified and consumes the token."""
    client, engine, AsyncSessionLocal = test_app
    await create_account_direct(AsyncSessionLocal, "ev1@example.com", "pass123")
    await create_token_direct(
        AsyncSessionLocal, "verification_tokens", "ev1@example.com", "tok-ev1", _in(3600)
    )

    async with AsyncClient(
        transport=ASGITransport(app=client.app), base_url="http://testserver"
    ) as http:
        resp = await http.get("/api/v1/auth/new-verification?token=tok-ev1")
        assert resp.status_code == 200
        assert resp.json() == {"success": "Email verified!"}

    async with AsyncSessionLocal() as session:
        repos = get_repositories(session)
        account = await repos["users"].get_by_email("ev1@example.com")
        assert account.is_verified
        assert await repos["verification_tokens"].get_by_token("tok-ev1") is None


@pytest.mark.asyncio
async def test_verify_email_post_method(test_app):
    client, engine, AsyncSessionLocal = test_app
    await create_account_direct(AsyncSessionLocal, "ev2@example.com")
    await create_token_direct(
        AsyncSessionLocal, "verification_tokens", "ev2@example.com", "tok-ev2", _in(3600)
    )

    async with AsyncClient(
        transport=ASGITransport(app=client.app), base_url="http://testserver"
    ) as http:
        resp = await http.post("/api/v1/auth/new-verification", json={"token": "tok-ev2"})
        assert resp.status_code == 200
        assert resp.json() == {"success": "Email verified!"}


@pytest.mark.asyncio
async def test_verify_email_with_invalid_token(test_app):
    client, engine, AsyncSessionLocal = test_app

    async with AsyncClient(
        transport=ASGITransport(app=client.app), base_url="http://testserver"
    ) as http:
        resp = await http.get("/api/v1/auth/new-verification?token=invalid_token_xyz")
        assert resp.status_code == 200
        assert resp.json() == {"error": "Token does not exist!"}


@pytest.mark.asyncio
async def test_verify_email_without_token_is_bad_request(test_app):
    client, engine, AsyncSessionLocal = test_app

    async with AsyncClient(
        transport=ASGITransport(app=client.app), base_url="http://testserver"
    ) as http:
        resp = await http.post("/api/v1/auth/new-verification")
        assert resp.status_code == 400
        assert "token" in resp.json()["detail"].lower()


@pytest.mark.asyncio
async def test_email_token_expiration(test_app):
    """Expired tokens are rejected and the account stays unverified."""
    client, engine, AsyncSessionLocal = test_app
    await create_account_direct(AsyncSessionLocal, "ev3@example.com")
    await create_token_direct(
        AsyncSessionLocal, "verification_tokens", "ev3@example.com", "tok-ev3", _in(-60)
    )

    async with AsyncClient(
        transport=ASGITransport(app=client.app), base_url="http://testserver"
    ) as http:
        resp = await http.get("/api/v1/auth/new-verification?token=tok-ev3")
        assert resp.json() == {"error": "Token has expired!"}

    async with AsyncSessionLocal() as session:
        repos = get_repositories(session)
        account = await repos["users"].get_by_email("ev3@example.com")
        assert not account.is_verified
        assert await repos["verification_tokens"].get_by_token("tok-ev3") is not None


@pytest.mark.asyncio
async def test_verify_email_for_missing_account(test_app):
    client, engine, AsyncSessionLocal = test_app
    await create_token_direct(
        AsyncSessionLocal, "verification_tokens", "ghost@example.com", "tok-ghost", _in(3600)
    )

    async with AsyncClient(
        transport=ASGITransport(app=client.app), base_url="http://testserver"
    ) as http:
        resp = await http.get("/api/v1/auth/new-verification?token=tok-ghost")
        assert resp.json() == {"error": "Email dows not exist!"}


@pytest.mark.asyncio
async def test_email_token_cannot_be_reused(test_app):
    client, engine, AsyncSessionLocal = test_app
    await create_account_direct(AsyncSessionLocal, "ev4@example.com")
    await create_token_direct(
        AsyncSessionLocal, "verification_tokens", "ev4@example.com", "tok-ev4", _in(3600)
    )

    async with AsyncClient(
        transport=ASGITransport(app=client.app), base_url="http://testserver"
    ) as http:
        first = await http.get("/api/v1/auth/new-verification?token=tok-ev4")
        assert first.json() == {"success": "Email verified!"}

        second = await http.get("/api/v1/auth/new-verification?token=tok-ev4")
        assert second.json() == {"error": "Token does not exist!"}


@pytest.mark.asyncio
async def test_verification_outcomes_are_audited(test_app):
    client, engine, AsyncSessionLocal = test_app

    async with AsyncClient(
        transport=ASGITransport(app=client.app), base_url="http://testserver"
    ) as http:
        await http.get("/api/v1/auth/new-verification?token=unknown")

    async with AsyncSessionLocal() as session:
        events = await get_repositories(session)["audit"].list_events(
            event_name="new_verification_token_not_exist"
        )
        assert len(events) == 1
        assert events[0].severity == "error"
        assert events[0].context == {"token": "unknown"}
