import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.core.dependencies.auth import get_current_user, require_reviewer
from app.api.db.database import get_db
from app.api.modules.v1.dashboard.schemas.dashboard_schema import (
    EmployeeDashboardResponse,
    ManagerDashboardResponse,
)
from app.api.modules.v1.dashboard.service.dashboard_service import DashboardService
from app.api.modules.v1.users.models.users_model import User
from app.api.utils.response_payloads import success_response

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])
logger = logging.getLogger("app")


@router.get("/manager", response_model=ManagerDashboardResponse)
async def manager_dashboard(
    current_user: User = Depends(require_reviewer),
    db: AsyncSession = Depends(get_db),
):
    """Team-wide project, work item and employee summary."""
    summary = await DashboardService(db).manager_dashboard()

    return success_response(
        status_code=status.HTTP_200_OK,
        message="Manager dashboard retrieved successfully",
        data=ManagerDashboardResponse(**summary).model_dump(),
    )


@router.get("/employee", response_model=EmployeeDashboardResponse)
async def employee_dashboard(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Summary of the caller's own work items, scores and performance history."""
    summary = await DashboardService(db).employee_dashboard(current_user)

    return success_response(
        status_code=status.HTTP_200_OK,
        message="Employee dashboard retrieved successfully",
        data=EmployeeDashboardResponse(**summary).model_dump(),
    )
