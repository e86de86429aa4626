from unittest.mock import AsyncMock, patch

import pytest

from app.api.core.exceptions import DataAccessError
from app.api.modules.v1.dashboard.service.dashboard_service import DashboardService
from app.api.modules.v1.work_items.models.work_item_model import WorkItemStatus


@pytest.mark.asyncio
async def test_manager_dashboard(client, auth_headers, manager, employee, project, work_item_factory):
    await work_item_factory(project, employee, manager, status=WorkItemStatus.IN_PROGRESS)

    response = await client.get("/api/v1/dashboard/manager", headers=auth_headers(manager))

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total_projects"] == 1
    assert data["total_work_items"] == 1
    assert data["work_items_by_status"]["InProgress"] == 1
    assert data["recent_work_items"][0]["project_name"] == "Apollo"
    assert data["recent_work_items"][0]["assignee_name"] == "Eve Employee"


@pytest.mark.asyncio
async def test_employee_cannot_open_manager_dashboard(client, auth_headers, employee):
    response = await client.get("/api/v1/dashboard/manager", headers=auth_headers(employee))
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_employee_dashboard(client, auth_headers, employee):
    response = await client.get("/api/v1/dashboard/employee", headers=auth_headers(employee))

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total_work_items"] == 0
    assert data["work_items_by_status"] == {
        "ToDo": 0,
        "InProgress": 0,
        "Review": 0,
        "Done": 0,
        "Rejected": 0,
    }
    assert len(data["performance_history"]) == 30


@pytest.mark.asyncio
async def test_store_failure_returns_503(client, auth_headers, manager):
    failing = AsyncMock(side_effect=DataAccessError("Could not load the dashboard"))

    with patch.object(DashboardService, "manager_dashboard", failing):
        response = await client.get("/api/v1/dashboard/manager", headers=auth_headers(manager))

    assert response.status_code == 503
    assert response.json()["error"] == "DATA_ACCESS_ERROR"
