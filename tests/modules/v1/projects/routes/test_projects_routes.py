import pytest

from app.api.modules.v1.projects.models.project_model import ProjectStatus

BASE = "/api/v1/projects"


@pytest.mark.asyncio
async def test_create_project(client, auth_headers, manager):
    payload = {
        "name": "Website Redesign",
        "description": "New marketing site",
        "priority": "Critical",
        "start_date": "2030-01-01T00:00:00Z",
        "deadline": "2030-03-01T00:00:00Z",
    }

    response = await client.post(BASE, json=payload, headers=auth_headers(manager))

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "SUCCESS"
    assert body["message"] == "Project created successfully"
    assert body["data"]["name"] == "Website Redesign"
    assert body["data"]["priority"] == "Critical"
    assert body["data"]["status"] == "Active"
    assert body["data"]["created_by_id"] == manager.id


@pytest.mark.asyncio
async def test_create_project_deadline_before_start(client, auth_headers, manager):
    payload = {
        "name": "Backwards",
        "start_date": "2030-03-01T00:00:00Z",
        "deadline": "2030-01-01T00:00:00Z",
    }

    response = await client.post(BASE, json=payload, headers=auth_headers(manager))

    assert response.status_code == 422
    assert response.json()["error"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_create_project_unknown_priority(client, auth_headers, manager):
    response = await client.post(
        BASE, json={"name": "Odd", "priority": "Urgent"}, headers=auth_headers(manager)
    )

    assert response.status_code == 422
    assert "priority" in response.json()["errors"]


@pytest.mark.asyncio
async def test_employee_cannot_manage_projects(client, auth_headers, employee):
    response = await client.post(BASE, json={"name": "Nope"}, headers=auth_headers(employee))

    assert response.status_code == 403
    assert response.json()["error"] == "FORBIDDEN"


@pytest.mark.asyncio
async def test_list_projects_paginates(client, auth_headers, manager, project_factory):
    for index in range(3):
        await project_factory(manager, name=f"Project {index}")
    await project_factory(manager, name="Archived", status=ProjectStatus.CLOSED)

    response = await client.get(BASE, params={"limit": 2}, headers=auth_headers(manager))

    data = response.json()["data"]
    assert data["total"] == 4
    assert data["total_pages"] == 2
    assert len(data["projects"]) == 2

    active_only = await client.get(
        BASE, params={"include_closed": "false"}, headers=auth_headers(manager)
    )
    assert active_only.json()["data"]["total"] == 3


@pytest.mark.asyncio
async def test_get_missing_project(client, auth_headers, manager):
    response = await client.get(f"{BASE}/424242", headers=auth_headers(manager))
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_project(client, auth_headers, manager, project):
    response = await client.put(
        f"{BASE}/{project.id}",
        json={"description": "Moon landing", "priority": "Low"},
        headers=auth_headers(manager),
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["name"] == "Apollo"
    assert data["description"] == "Moon landing"
    assert data["priority"] == "Low"


@pytest.mark.asyncio
async def test_close_and_reopen_project(client, auth_headers, manager, project):
    url = f"{BASE}/{project.id}/status"

    closed = await client.patch(url, json={"status": "Closed"}, headers=auth_headers(manager))
    assert closed.status_code == 200
    assert closed.json()["data"]["status"] == "Closed"

    reopened = await client.patch(url, json={"status": "Active"}, headers=auth_headers(manager))
    assert reopened.json()["data"]["status"] == "Active"


@pytest.mark.asyncio
async def test_unknown_project_status(client, auth_headers, manager, project):
    response = await client.patch(
        f"{BASE}/{project.id}/status", json={"status": "Paused"}, headers=auth_headers(manager)
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_delete_project_with_work_items_is_refused(
    client, auth_headers, manager, employee, project, work_item_factory
):
    await work_item_factory(project, employee, manager)

    response = await client.delete(f"{BASE}/{project.id}", headers=auth_headers(manager))

    assert response.status_code == 422
    assert "close the project" in response.json()["message"]


@pytest.mark.asyncio
async def test_delete_empty_project(client, auth_headers, manager, project):
    response = await client.delete(f"{BASE}/{project.id}", headers=auth_headers(manager))
    assert response.status_code == 200

    missing = await client.get(f"{BASE}/{project.id}", headers=auth_headers(manager))
    assert missing.status_code == 404
