"""
Profile Routes
Own-profile endpoints for every user and employee views for managers.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.core.dependencies.auth import get_current_user, require_reviewer
from app.api.db.database import get_db
from app.api.modules.v1.users.models.users_model import User
from app.api.modules.v1.users.schemas.user_profile_schema import (
    UpdateUserProfileRequest,
    UserProfileResponse,
)
from app.api.modules.v1.users.service.profile_service import ProfileService
from app.api.modules.v1.work_items.schemas.work_item_schema import WorkItemResponse
from app.api.utils.response_payloads import paginated_response, success_response

router = APIRouter(prefix="/profiles", tags=["Profiles"])
logger = logging.getLogger("app")


@router.get("/me", status_code=status.HTTP_200_OK)
async def get_my_profile(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    profile = await ProfileService(db).get_own_profile(current_user)

    return success_response(
        status_code=status.HTTP_200_OK,
        message="Profile retrieved successfully",
        data=UserProfileResponse.model_validate(profile).model_dump(),
    )


@router.put("/me", status_code=status.HTTP_200_OK)
async def update_my_profile(
    payload: UpdateUserProfileRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Update the caller's name, skills or experience.

    Performance, workload and the accepted item count are maintained by the
    system and cannot be set here.
    """
    profile = await ProfileService(db).update_own_profile(current_user, payload)

    return success_response(
        status_code=status.HTTP_200_OK,
        message="Profile updated successfully",
        data=UserProfileResponse.model_validate(profile).model_dump(),
    )


@router.get("/employees", status_code=status.HTTP_200_OK)
async def list_employees(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(20, ge=1, le=100, description="Items per page (max 100)"),
    current_user: User = Depends(require_reviewer),
    db: AsyncSession = Depends(get_db),
):
    employees, pagination = await ProfileService(db).list_employees(page=page, limit=limit)

    return paginated_response(
        message="Employees retrieved successfully",
        key="employees",
        items=employees,
        pagination=pagination,
    )


@router.get("/employees/{user_id}", status_code=status.HTTP_200_OK)
async def get_employee(
    user_id: str,
    current_user: User = Depends(require_reviewer),
    db: AsyncSession = Depends(get_db),
):
    employee = await ProfileService(db).get_employee(user_id)

    return success_response(
        status_code=status.HTTP_200_OK,
        message="Employee retrieved successfully",
        data=employee,
    )


@router.get("/employees/{user_id}/work-items", status_code=status.HTTP_200_OK)
async def list_employee_work_items(
    user_id: str,
    status_filter: Optional[str] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(require_reviewer),
    db: AsyncSession = Depends(get_db),
):
    result = await ProfileService(db).list_employee_work_items(
        user_id, current_user, status=status_filter, page=page, limit=limit
    )

    work_items = result.pop("data")

    return paginated_response(
        message="Employee work items retrieved successfully",
        key="work_items",
        items=(WorkItemResponse.model_validate(item).model_dump() for item in work_items),
        pagination=result,
    )
