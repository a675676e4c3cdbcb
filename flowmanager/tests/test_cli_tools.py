"""
Tests for the interactive command line tools.

Prompts are answered by patching input() and getpass().
"""

import pytest
from sqlalchemy import select, func

from flowmanager.app.models.audit_log import AuditLog
from flowmanager.app.models.enums import RoleName
from flowmanager.app.models.user import User
from flowmanager.app.models.user_profile import UserProfile
from flowmanager.app.models.user_role import UserRole
from flowmanager.app.services.audit import AuditAction
from flowmanager.app.services.users import create_user
from flowmanager.scripts.create_user import create_user_interactively
from flowmanager.scripts.delete_user import delete_user_interactively
from flowmanager.scripts.list_users import list_all_users
from flowmanager.scripts.seed_lookups import seed
from flowmanager.scripts.seed_test_users import seed_test_users, TEST_USERS, TEST_PASSWORD
from conftest import TestingSessionLocal, engine as test_engine


async def user_count(*conditions) -> int:
    async with TestingSessionLocal() as session:
        return await session.scalar(select(func.count()).select_from(User).where(*conditions))


@pytest.mark.asyncio
async def test_delete_user_flow(mocker, session_factory, db_session, capsys):
    """Invalid and unknown emails are asked again; "y" deletes."""
    await create_user(db_session, "do.usuniecia@test.pl", "Haslo123!", profile={"first_name": "Do"})
    mocker.patch("builtins.input", side_effect=[
        "not-an-email",
        "nieistnieje@test.pl",
        "  DO.USUNIECIA@test.pl ",
        "y",
    ])

    assert await delete_user_interactively(session_factory) is True

    output = capsys.readouterr().out
    assert "Invalid email format" in output
    assert "No user with email nieistnieje@test.pl" in output
    assert "profile:             yes" in output
    assert await user_count(User.email == "do.usuniecia@test.pl") == 0

    async with TestingSessionLocal() as session:
        entry = (await session.execute(select(AuditLog).where(AuditLog.action == AuditAction.USER_DELETED))).scalar_one()
    assert entry.target_email == "do.usuniecia@test.pl"
    assert entry.actor_id is None
    assert entry.meta_data["source"] == "cli"


@pytest.mark.asyncio
@pytest.mark.parametrize("answer", ["", "n", "nie"])
async def test_delete_user_aborts_without_yes(mocker, session_factory, db_session, answer):
    await create_user(db_session, "zostaje@test.pl", "Haslo123!")
    mocker.patch("builtins.input", side_effect=["zostaje@test.pl", answer])

    assert await delete_user_interactively(session_factory) is False
    assert await user_count(User.email == "zostaje@test.pl") == 1


@pytest.mark.asyncio
async def test_create_user_flow(mocker, session_factory, db_session):
    await create_user(db_session, "zajety@test.pl", "Haslo123!")
    mocker.patch("builtins.input", side_effect=[
        "zajety@test.pl",      # taken, asked again
        "Nowa.Osoba@Test.pl",
        "kadrowiec",           # unknown role, asked again
        "hr",
        "y",                   # add a profile
        "Nowa",
        "Osoba",
        "Analityk",
        "",
        "95.50",
        "",
    ])
    mocker.patch("getpass.getpass", side_effect=["Haslo123!", "Haslo123!"])

    user = await create_user_interactively(session_factory)

    async with TestingSessionLocal() as session:
        role_name = await session.scalar(select(UserRole.name).where(UserRole.id == user.role_id))
        profile = (await session.execute(
            select(UserProfile).where(UserProfile.user_id == user.id)
        )).scalar_one()
    assert user.email == "nowa.osoba@test.pl"
    assert role_name == RoleName.HR.value
    assert profile.employment_type == "full-time"
    assert profile.vacation_days_total == 20

    async with TestingSessionLocal() as session:
        entry = (await session.execute(select(AuditLog).where(AuditLog.action == AuditAction.USER_CREATED))).scalar_one()
    assert entry.target_id == user.id
    assert entry.meta_data == {"source": "cli"}


@pytest.mark.asyncio
async def test_create_user_enter_selects_default_role(mocker, session_factory):
    mocker.patch("builtins.input", side_effect=["domyslna@test.pl", "", "n"])
    mocker.patch("getpass.getpass", side_effect=["Haslo123!", "Haslo123!"])

    user = await create_user_interactively(session_factory)

    async with TestingSessionLocal() as session:
        role_name = await session.scalar(select(UserRole.name).where(UserRole.id == user.role_id))
    assert role_name == RoleName.USER.value


@pytest.mark.asyncio
async def test_seed_test_users_is_rerunnable(session_factory):
    summary = await seed_test_users(session_factory)
    assert len(summary["created"]) == len(TEST_USERS)
    assert summary["failed"] == []

    async with TestingSessionLocal() as session:
        supervisor = (await session.execute(select(User).where(User.email == TEST_USERS[0][0]))).scalar_one()
        supervised = await session.scalar(
            select(func.count()).select_from(UserProfile).where(UserProfile.supervisor_id == supervisor.id)
        )
    assert supervised == len(TEST_USERS) - 1

    summary = await seed_test_users(session_factory)
    assert summary["created"] == []
    assert len(summary["skipped"]) == len(TEST_USERS)
    assert await user_count() == len(TEST_USERS)


@pytest.mark.asyncio
async def test_seeded_users_can_log_in(client, session_factory):
    await seed_test_users(session_factory)
    response = await client.post("/api/auth/login", json={"email": TEST_USERS[3][0], "password": TEST_PASSWORD})
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_list_users_prints_roles(session_factory, admin_user, capsys):
    users = await list_all_users(session_factory)
    assert len(users) == 1
    output = capsys.readouterr().out
    assert admin_user.email in output
    assert RoleName.ADMINISTRATOR.value in output


@pytest.mark.asyncio
async def test_seed_lookups_is_idempotent(mocker, session_factory, capsys):
    """Lookup rows already exist (seeded per test); another run adds nothing."""
    mocker.patch("flowmanager.app.db.session.engine", test_engine)
    added = await seed(session_factory)
    assert set(added) == {"user_roles", "vacation_types", "vacation_statuses", "expense_categories", "expense_statuses"}
    assert not any(added.values())
    assert "user_roles: 0 added" in capsys.readouterr().out


def test_missing_database_url_exits_with_message(mocker, capsys):
    from pydantic import ValidationError
    from flowmanager.scripts import cli

    error = ValidationError.from_exception_data("Settings", [
        {"type": "missing", "loc": ("database_url",), "input": {}}
    ])
    real_import = __import__

    def fake_import(name, *args, **kwargs):
        if name == "flowmanager.app.db.session":
            raise error
        return real_import(name, *args, **kwargs)

    mocker.patch("builtins.__import__", side_effect=fake_import)
    with pytest.raises(SystemExit) as exc_info:
        cli.load_session_factory()
    mocker.stopall()

    assert exc_info.value.code == 1
    assert "DATABASE_URL is not set" in capsys.readouterr().out
