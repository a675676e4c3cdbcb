"""
Integration tests for tasks and work logs.
"""

from decimal import Decimal

import pytest
from sqlalchemy import select, func

from flowmanager.app.models.enums import TaskStatus
from flowmanager.app.models.work_log import WorkLog
from conftest import TestingSessionLocal


@pytest.fixture
async def project_id(client, admin_headers):
    response = await client.post("/api/projects", headers=admin_headers, json={"name": "Czas pracy"})
    return response.json()["data"]["id"]


async def create_task(client, headers, project_id, **fields) -> dict:
    response = await client.post(
        f"/api/projects/{project_id}/tasks", headers=headers, json={"title": "Migracja bazy", **fields}
    )
    assert response.status_code == 201
    return response.json()["data"]


@pytest.mark.asyncio
async def test_create_task_defaults(client, admin_headers, project_id, employee_user):
    task = await create_task(client, admin_headers, project_id, assigned_to_id=employee_user.id, estimated_hours="12.5")
    assert task["status"] == TaskStatus.TODO.value
    assert task["project_id"] == project_id
    assert Decimal(task["estimated_hours"]) == Decimal("12.5")

    response = await client.get("/api/tasks", headers=admin_headers, params={"user_id": employee_user.id})
    assert [t["id"] for t in response.json()["data"]] == [task["id"]]


@pytest.mark.asyncio
async def test_create_task_validation(client, admin_headers, project_id):
    response = await client.post(f"/api/projects/{project_id}/tasks", headers=admin_headers, json={"title": "  "})
    assert response.status_code == 400

    response = await client.post(f"/api/projects/{project_id}/tasks", headers=admin_headers, json={
        "title": "Zadanie", "assigned_to_id": 31337
    })
    assert response.status_code == 400

    response = await client.post("/api/projects/999/tasks", headers=admin_headers, json={"title": "Zadanie"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_task(client, admin_headers, project_id):
    task = await create_task(client, admin_headers, project_id)

    response = await client.put(f"/api/tasks/{task['id']}", headers=admin_headers, json={
        "status": TaskStatus.IN_PROGRESS.value
    })
    assert response.status_code == 200
    assert response.json()["data"]["status"] == TaskStatus.IN_PROGRESS.value
    assert response.json()["data"]["title"] == "Migracja bazy"

    assert (await client.put(f"/api/tasks/{task['id']}", headers=admin_headers, json={})).status_code == 400
    assert (await client.put(f"/api/tasks/{task['id']}", headers=admin_headers, json={"title": ""})).status_code == 400
    assert (await client.put("/api/tasks/4040", headers=admin_headers, json={"title": "x"})).status_code == 404


@pytest.mark.asyncio
async def test_delete_task_removes_its_work_logs(client, admin_headers, project_id, employee_user):
    task = await create_task(client, admin_headers, project_id)
    for day in ("2025-03-03", "2025-03-04"):
        response = await client.post("/api/work-logs", headers=admin_headers, json={
            "user_id": employee_user.id,
            "project_id": project_id,
            "task_id": task["id"],
            "date": day,
            "hours_worked": "4",
        })
        assert response.status_code == 201

    response = await client.delete(f"/api/tasks/{task['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"] == {
        "success": True, "deleted_task_id": task["id"], "deleted_work_logs_count": 2
    }

    async with TestingSessionLocal() as session:
        remaining = await session.scalar(select(func.count()).select_from(WorkLog))
    assert remaining == 0

    assert (await client.delete(f"/api/tasks/{task['id']}", headers=admin_headers)).status_code == 404


@pytest.mark.asyncio
async def test_work_log_crud(client, admin_headers, project_id, employee_user):
    response = await client.post("/api/work-logs", headers=admin_headers, json={
        "user_id": employee_user.id,
        "project_id": project_id,
        "date": "2025-03-05",
        "hours_worked": "7.5",
        "note": "Code review",
    })
    assert response.status_code == 201
    work_log = response.json()["data"]
    assert work_log["is_overtime"] is False

    response = await client.put(f"/api/work-logs/{work_log['id']}", headers=admin_headers, json={
        "hours_worked": "9", "is_overtime": True
    })
    assert response.status_code == 200
    assert Decimal(response.json()["data"]["hours_worked"]) == Decimal("9")
    assert response.json()["data"]["is_overtime"] is True

    response = await client.get(f"/api/projects/{project_id}/work-logs", headers=admin_headers)
    assert [w["id"] for w in response.json()["data"]] == [work_log["id"]]

    response = await client.delete(f"/api/work-logs/{work_log['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert (await client.get(f"/api/work-logs/{work_log['id']}", headers=admin_headers)).status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize("overrides", [
    {"user_id": None},
    {"date": None},
    {"hours_worked": "0"},
    {"hours_worked": "-2"},
    {"project_id": 9999},
])
async def test_work_log_validation(client, admin_headers, project_id, employee_user, overrides):
    payload = {
        "user_id": employee_user.id,
        "project_id": project_id,
        "date": "2025-03-05",
        "hours_worked": "8",
        **overrides,
    }
    response = await client.post("/api/work-logs", headers=admin_headers, json=payload)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_work_log_update_cannot_clear_required_field(client, admin_headers, project_id, employee_user):
    response = await client.post("/api/work-logs", headers=admin_headers, json={
        "user_id": employee_user.id, "project_id": project_id, "date": "2025-03-05", "hours_worked": "8"
    })
    work_log_id = response.json()["data"]["id"]

    response = await client.put(f"/api/work-logs/{work_log_id}", headers=admin_headers, json={"date": None})
    assert response.status_code == 400
