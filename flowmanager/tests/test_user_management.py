"""
Integration tests for user and employee management.

Covers account creation and updates, supervisor rules, role guards,
cascading deletion and the audit trail of account changes.
"""

import pytest
from sqlalchemy import select, func

from flowmanager.app.models.enums import RoleName
from flowmanager.app.models.project import Project
from flowmanager.app.models.project_assignment import ProjectAssignment
from flowmanager.app.models.task import Task
from flowmanager.app.models.user import User
from flowmanager.app.models.user_credential import UserCredential
from flowmanager.app.models.user_profile import UserProfile
from flowmanager.app.models.vacation import Vacation
from flowmanager.app.models.work_log import WorkLog
from flowmanager.app.services.audit import AuditAction
from flowmanager.app.services.deletion import preview_user_deletion
from conftest import TestingSessionLocal


async def count_rows(model, *conditions) -> int:
    async with TestingSessionLocal() as session:
        return await session.scalar(select(func.count()).select_from(model).where(*conditions))


@pytest.mark.asyncio
async def test_create_user_with_profile(client, admin_headers, admin_user):
    response = await client.post("/api/users", headers=admin_headers, json={
        "email": " Anna.Nowak@Test.PL",
        "password": "Haslo123!",
        "role_name": "hr",
        "profile": {
            "first_name": "Anna",
            "last_name": "Nowak",
            "position": "Specjalista HR",
            "employment_type": "full-time",
            "supervisor_id": admin_user.id,
            "salary_rate": "120.50",
            "vacation_days_total": 26,
        },
    })
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["email"] == "anna.nowak@test.pl"
    assert data["role_name"] == RoleName.HR.value
    assert data["profile"]["supervisor_id"] == admin_user.id

    response = await client.get(f"/api/users/{data['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"]["profile"]["last_name"] == "Nowak"


@pytest.mark.asyncio
async def test_create_user_defaults_to_default_role(client, admin_headers):
    response = await client.post("/api/users", headers=admin_headers, json={
        "email": "bez.roli@test.pl", "password": "Haslo123!"
    })
    assert response.status_code == 201
    assert response.json()["data"]["role_name"] == RoleName.USER.value
    assert response.json()["data"]["profile"] is None


@pytest.mark.asyncio
async def test_create_user_validation(client, admin_headers):
    response = await client.post("/api/users", headers=admin_headers, json={"email": "bad", "password": "x"})
    assert response.status_code == 400

    response = await client.post("/api/users", headers=admin_headers, json={"email": "ok@test.pl"})
    assert response.status_code == 400

    response = await client.post("/api/users", headers=admin_headers, json={
        "email": "ok@test.pl", "password": "Haslo123!", "role_name": "Astronauta"
    })
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_duplicate_email_returns_conflict(client, admin_headers, admin_user):
    response = await client.post("/api/users", headers=admin_headers, json={
        "email": "ADMIN@flowmanager.pl", "password": "Haslo123!"
    })
    assert response.status_code == 409
    assert str(admin_user.id) in response.json()["error"]
    assert await count_rows(User, User.email == "admin@flowmanager.pl") == 1


@pytest.mark.asyncio
async def test_supervisor_must_be_admin_tier(client, admin_headers, employee_user):
    """A regular employee cannot supervise anyone."""
    response = await client.post("/api/users", headers=admin_headers, json={
        "email": "podwladny@test.pl",
        "password": "Haslo123!",
        "profile": {"first_name": "Piotr", "supervisor_id": employee_user.id},
    })
    assert response.status_code == 400
    assert await count_rows(User, User.email == "podwladny@test.pl") == 0

    response = await client.post("/api/users", headers=admin_headers, json={
        "email": "podwladny@test.pl",
        "password": "Haslo123!",
        "profile": {"first_name": "Piotr", "supervisor_id": 99999},
    })
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_user_cannot_supervise_themselves(client, admin_headers, admin_user):
    response = await client.put(f"/api/users/{admin_user.id}", headers=admin_headers, json={
        "profile": {"supervisor_id": admin_user.id}
    })
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_user(client, admin_headers, employee_user):
    response = await client.put(f"/api/users/{employee_user.id}", headers=admin_headers, json={
        "email": "Nowy.Adres@Test.PL",
        "password": "NoweHaslo1!",
        "role_name": RoleName.ACCOUNTING.value,
        "profile": {"position": "Księgowa", "vacation_days_total": 12},
    })
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["email"] == "nowy.adres@test.pl"
    assert data["role_name"] == RoleName.ACCOUNTING.value
    assert data["profile"]["position"] == "Księgowa"

    response = await client.post("/api/auth/login", json={"email": "nowy.adres@test.pl", "password": "NoweHaslo1!"})
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_update_unknown_user_returns_404(client, admin_headers):
    response = await client.put("/api/users/424242", headers=admin_headers, json={"email": "x@test.pl"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_invalid_user_id_is_rejected(client, admin_headers):
    response = await client.get("/api/users/0", headers=admin_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_regular_user_cannot_manage_accounts(client, employee_headers, admin_user):
    response = await client.post("/api/users", headers=employee_headers, json={
        "email": "intruz@test.pl", "password": "Haslo123!"
    })
    assert response.status_code == 403

    response = await client.delete(f"/api/users/{admin_user.id}", headers=employee_headers)
    assert response.status_code == 403

    response = await client.get("/api/audit-logs", headers=employee_headers)
    assert response.status_code == 403

    # Reading stays available to every signed-in user
    response = await client.get("/api/users", headers=employee_headers)
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_hr_can_manage_accounts(client, make_headers, db_session):
    from flowmanager.app.services.users import create_user

    hr_user, _ = await create_user(db_session, "kadry@test.pl", "Haslo123!", role_name=RoleName.HR.value)
    response = await client.post("/api/users", headers=make_headers(hr_user, RoleName.HR), json={
        "email": "nowa.osoba@test.pl", "password": "Haslo123!"
    })
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_demoted_user_loses_account_management_with_old_token(client, admin_headers, db_session):
    from flowmanager.app.services.users import create_user

    hr_user, _ = await create_user(db_session, "kadry@test.pl", "Haslo123!", role_name=RoleName.HR.value)
    response = await client.post("/api/auth/login", json={"email": "kadry@test.pl", "password": "Haslo123!"})
    hr_headers = {"Authorization": f"Bearer {response.json()['data']['access_token']}"}

    response = await client.put(f"/api/users/{hr_user.id}", headers=admin_headers, json={
        "role_name": RoleName.USER.value
    })
    assert response.status_code == 200

    response = await client.post("/api/users", headers=hr_headers, json={
        "email": "po.degradacji@test.pl", "password": "Haslo123!"
    })
    assert response.status_code == 403
    assert response.json()["error_code"] == "ERR_PERM_001"
    assert response.json()["details"]["role"] == RoleName.USER.value

    # The session itself stays valid for regular reads
    response = await client.get("/api/users", headers=hr_headers)
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_list_and_filter_users(client, admin_headers, employee_user):
    response = await client.get("/api/users", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"]["total"] == 2

    response = await client.get("/api/users", headers=admin_headers, params={"last_name": "pracow"})
    users = response.json()["data"]["users"]
    assert [u["email"] for u in users] == [employee_user.email]

    response = await client.get("/api/users", headers=admin_headers, params={"role_name": "ADMIN"})
    assert response.json()["data"]["total"] == 1


@pytest.mark.asyncio
async def test_lookup_routes(client, admin_headers, admin_user, employee_user):
    response = await client.get("/api/users/roles", headers=admin_headers)
    assert {r["name"] for r in response.json()["data"]} == {r.value for r in RoleName}

    response = await client.get("/api/users/supervisors", headers=admin_headers)
    assert [s["id"] for s in response.json()["data"]] == [admin_user.id]

    await client.put(f"/api/users/{employee_user.id}", headers=admin_headers, json={
        "profile": {"supervisor_id": admin_user.id}
    })
    response = await client.get("/api/users/employees", headers=admin_headers)
    employees = {e["id"]: e for e in response.json()["data"]}
    assert employees[employee_user.id]["supervisor_name"] == "Adam Admin"


async def _user_with_everything(db_session, user_id: int, supervised_user_id: int) -> int:
    """Give user_id an assignment, a task, a work log and a vacation; make them a supervisor."""
    from datetime import date
    from flowmanager.app.models.lookups import VacationType, VacationStatus

    project = Project(name="Kaskada")
    db_session.add(project)
    await db_session.flush()
    task = Task(project_id=project.id, title="Zadanie", assigned_to_id=user_id)
    db_session.add(task)
    await db_session.flush()
    vacation_type = (await db_session.execute(select(VacationType))).scalars().first()
    vacation_status = (await db_session.execute(select(VacationStatus))).scalars().first()
    db_session.add_all([
        ProjectAssignment(user_id=user_id, project_id=project.id, role_on_project="Developer"),
        WorkLog(user_id=user_id, project_id=project.id, task_id=task.id, date=date(2025, 3, 3), hours_worked=8),
        Vacation(user_id=user_id, type_id=vacation_type.id, status_id=vacation_status.id,
                 start_date=date(2025, 3, 10), end_date=date(2025, 3, 11)),
    ])
    result = await db_session.execute(select(UserProfile).where(UserProfile.user_id == supervised_user_id))
    result.scalar_one().supervisor_id = user_id
    await db_session.commit()
    return task.id


@pytest.mark.asyncio
async def test_delete_user_cascades(client, admin_headers, db_session, make_headers, employee_user):
    from flowmanager.app.services.users import create_user

    boss, _ = await create_user(
        db_session, "szef@test.pl", "Haslo123!", role_name=RoleName.BOARD.value, profile={"first_name": "Szef"}
    )
    task_id = await _user_with_everything(db_session, boss.id, employee_user.id)

    preview = await preview_user_deletion(db_session, boss.id)
    assert preview == {"profile": True, "credential": True, "assignments": 1, "work_logs": 1, "vacations": 1}

    response = await client.delete(f"/api/users/{boss.id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"]["email"] == "szef@test.pl"

    assert await count_rows(User, User.id == boss.id) == 0
    assert await count_rows(UserCredential, UserCredential.user_id == boss.id) == 0
    assert await count_rows(UserProfile, UserProfile.user_id == boss.id) == 0
    assert await count_rows(ProjectAssignment, ProjectAssignment.user_id == boss.id) == 0
    assert await count_rows(WorkLog, WorkLog.user_id == boss.id) == 0
    assert await count_rows(Vacation, Vacation.user_id == boss.id) == 0

    # Referencing rows survive with the reference cleared
    async with TestingSessionLocal() as session:
        task = await session.get(Task, task_id)
        profile = (await session.execute(
            select(UserProfile).where(UserProfile.user_id == employee_user.id)
        )).scalar_one()
    assert task is not None and task.assigned_to_id is None
    assert profile.supervisor_id is None


@pytest.mark.asyncio
async def test_delete_unknown_user_returns_404(client, admin_headers):
    response = await client.delete("/api/users/31337", headers=admin_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_bulk_delete_stops_at_first_failure(client, admin_headers, db_session):
    """Users before the failing id stay deleted, users after it are untouched."""
    from flowmanager.app.services.users import create_user

    first, _ = await create_user(db_session, "pierwszy@test.pl", "Haslo123!")
    third, _ = await create_user(db_session, "trzeci@test.pl", "Haslo123!")

    response = await client.request(
        "DELETE", "/api/users", headers=admin_headers, json={"user_ids": [first.id, 99999, third.id]}
    )
    assert response.status_code == 404

    assert await count_rows(User, User.id == first.id) == 0
    assert await count_rows(User, User.id == third.id) == 1


@pytest.mark.asyncio
async def test_bulk_delete_users(client, admin_headers, db_session):
    from flowmanager.app.services.users import create_user

    ids = [(await create_user(db_session, f"osoba{i}@test.pl", "Haslo123!"))[0].id for i in range(3)]

    response = await client.request("DELETE", "/api/users", headers=admin_headers, json={"user_ids": ids})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["deleted_count"] == 3
    assert data["emails"] == ["osoba0@test.pl", "osoba1@test.pl", "osoba2@test.pl"]

    response = await client.request("DELETE", "/api/users", headers=admin_headers, json={"user_ids": []})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_account_changes_are_audited(client, admin_headers, admin_user):
    response = await client.post("/api/users", headers=admin_headers, json={
        "email": "audyt@test.pl", "password": "Haslo123!"
    })
    user_id = response.json()["data"]["id"]
    await client.put(f"/api/users/{user_id}", headers=admin_headers, json={"password": "Inne123!"})
    await client.delete(f"/api/users/{user_id}", headers=admin_headers)

    response = await client.get("/api/audit-logs", headers=admin_headers, params={"target_id": user_id})
    assert response.status_code == 200
    logs = response.json()["data"]["logs"]
    assert [log["action"] for log in logs] == [
        AuditAction.USER_DELETED, AuditAction.USER_UPDATED, AuditAction.USER_CREATED
    ]
    assert all(log["actor_id"] == admin_user.id for log in logs)
