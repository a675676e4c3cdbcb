"""
Integration tests for the authentication flow.

Register -> Login -> Me -> Logout, credential checks and session revocation.
"""

import pytest
from sqlalchemy import select, func

from flowmanager.app.core import security
from flowmanager.app.core.exceptions import AuthenticationError, INVALID_CREDENTIALS_MESSAGE
from flowmanager.app.models.audit_log import AuditLog
from flowmanager.app.models.user import User
from flowmanager.app.services.audit import AuditAction
from flowmanager.app.services.auth import authenticate_user
from conftest import TestingSessionLocal, TEST_PASSWORD

REGISTER_PAYLOAD = {
    "email": "  Nowy.Pracownik@Firma.PL ",
    "password": "haslo1234",
    "first_name": "Nowy",
    "last_name": "Pracownik",
    "position": "Tester",
}


@pytest.mark.asyncio
async def test_register_login_me(client):
    """Registration stores the normalized email and gives the default role and a starter profile."""
    response = await client.post("/api/auth/register", json=REGISTER_PAYLOAD)
    assert response.status_code == 201
    body = response.json()
    assert body["ok"] is True
    assert body["data"]["email"] == "nowy.pracownik@firma.pl"
    assert body["data"]["role"] == "Użytkownik"

    response = await client.post("/api/auth/login", json={
        "email": "NOWY.PRACOWNIK@firma.pl",
        "password": "haslo1234",
    })
    assert response.status_code == 200
    token = response.json()["data"]["access_token"]

    response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    me = response.json()["data"]
    assert me["email"] == "nowy.pracownik@firma.pl"
    assert me["profile"]["employment_type"] == "full-time"
    assert me["profile"]["vacation_days_total"] == 20


@pytest.mark.asyncio
async def test_register_duplicate_email_conflict(client):
    assert (await client.post("/api/auth/register", json=REGISTER_PAYLOAD)).status_code == 201

    response = await client.post("/api/auth/register", json={
        **REGISTER_PAYLOAD, "email": "nowy.pracownik@firma.pl"
    })
    assert response.status_code == 409
    assert response.json()["ok"] is False

    async with TestingSessionLocal() as session:
        count = await session.scalar(
            select(func.count()).select_from(User).where(User.email == "nowy.pracownik@firma.pl")
        )
    assert count == 1


@pytest.mark.asyncio
async def test_register_validation(client):
    response = await client.post("/api/auth/register", json={"email": "a@b.pl", "password": "haslo1234"})
    assert response.status_code == 400
    assert set(response.json()["details"]["missing"]) == {"first_name", "last_name", "position"}

    response = await client.post("/api/auth/register", json={**REGISTER_PAYLOAD, "password": "krotkie"})
    assert response.status_code == 400

    response = await client.post("/api/auth/register", json={**REGISTER_PAYLOAD, "email": "not-an-email"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_login_failures_are_indistinguishable(client, admin_user):
    """Unknown account, wrong password and empty input answer the same way."""
    attempts = [
        {"email": "nobody@flowmanager.pl", "password": TEST_PASSWORD},
        {"email": admin_user.email, "password": "wrong-password"},
        {"email": "", "password": ""},
        {},
    ]
    bodies = []
    for payload in attempts:
        response = await client.post("/api/auth/login", json=payload)
        assert response.status_code == 401
        bodies.append(response.json())

    assert all(body["error"] == INVALID_CREDENTIALS_MESSAGE for body in bodies)
    assert len({body["error_code"] for body in bodies}) == 1


@pytest.mark.asyncio
async def test_authenticate_user_always_compares_a_hash(db_session, admin_user, mocker):
    """An unknown email still costs one password comparison."""
    verify = mocker.patch("flowmanager.app.services.auth.verify_password", return_value=False)

    with pytest.raises(AuthenticationError):
        await authenticate_user(db_session, "ghost@flowmanager.pl", "whatever")
    with pytest.raises(AuthenticationError):
        await authenticate_user(db_session, admin_user.email, "whatever")

    assert verify.call_count == 2


@pytest.mark.asyncio
async def test_unknown_email_login_does_not_hash(db_session, admin_user, mocker):
    """The placeholder already exists, so a missing account costs one verify and no hashing."""
    assert security.pwd_context.identify(security.PLACEHOLDER_HASH) == "bcrypt"
    hash_spy = mocker.spy(security.pwd_context, "hash")
    verify_spy = mocker.spy(security.pwd_context, "verify")

    with pytest.raises(AuthenticationError):
        await authenticate_user(db_session, "ghost@firma.pl", TEST_PASSWORD)

    assert hash_spy.call_count == 0
    assert verify_spy.call_count == 1


@pytest.mark.asyncio
async def test_login_attempts_are_audited(client, admin_user):
    await client.post("/api/auth/login", json={"email": admin_user.email, "password": "bad"})
    await client.post("/api/auth/login", json={"email": "", "password": ""})
    await client.post("/api/auth/login", json={"email": admin_user.email, "password": TEST_PASSWORD})

    async with TestingSessionLocal() as session:
        actions = (await session.execute(select(AuditLog.action).order_by(AuditLog.id))).scalars().all()
    assert actions == [AuditAction.LOGIN_FAILED, AuditAction.LOGIN_FAILED, AuditAction.LOGIN_SUCCESS]

    async with TestingSessionLocal() as session:
        failures = (await session.execute(
            select(AuditLog).where(AuditLog.action == AuditAction.LOGIN_FAILED).order_by(AuditLog.id)
        )).scalars().all()
    assert [log.meta_data["reason"] for log in failures] == ["invalid_credentials", "missing_credentials"]
    assert failures[1].actor_email is None


@pytest.mark.asyncio
async def test_protected_route_requires_session(client):
    response = await client.get("/api/projects")
    assert response.status_code == 401

    response = await client.get("/api/projects", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_logout_revokes_token(client, admin_user):
    response = await client.post("/api/auth/login", json={"email": admin_user.email, "password": TEST_PASSWORD})
    headers = {"Authorization": f"Bearer {response.json()['data']['access_token']}"}

    assert (await client.get("/api/auth/me", headers=headers)).status_code == 200
    assert (await client.post("/api/auth/logout", headers=headers)).status_code == 200

    response = await client.get("/api/auth/me", headers=headers)
    assert response.status_code == 401
    assert "revoked" in response.json()["error"].lower()


@pytest.mark.asyncio
async def test_deleted_user_cannot_log_in_or_use_session(client, admin_headers):
    """Create -> log in -> delete -> both the old session and new logins fail."""
    response = await client.post("/api/users", headers=admin_headers, json={
        "email": "short.lived@flowmanager.pl",
        "password": "Temp1234!",
    })
    assert response.status_code == 201
    user_id = response.json()["data"]["id"]

    response = await client.post("/api/auth/login", json={
        "email": "short.lived@flowmanager.pl", "password": "Temp1234!"
    })
    assert response.status_code == 200
    user_headers = {"Authorization": f"Bearer {response.json()['data']['access_token']}"}

    assert (await client.delete(f"/api/users/{user_id}", headers=admin_headers)).status_code == 200

    assert (await client.get("/api/auth/me", headers=user_headers)).status_code == 401
    response = await client.post("/api/auth/login", json={
        "email": "short.lived@flowmanager.pl", "password": "Temp1234!"
    })
    assert response.status_code == 401
