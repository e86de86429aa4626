"""
Project Routes
API endpoints for project management operations.

This module provides RESTful endpoints for project CRUD operations,
including creation, retrieval, updates, status changes and deletion.
All endpoints are restricted to managers and admins.
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.core.dependencies.auth import require_reviewer
from app.api.db.database import get_db
from app.api.modules.v1.projects.schemas.project_schema import (
    ProjectCreate,
    ProjectListResponse,
    ProjectResponse,
    ProjectStatusUpdate,
    ProjectUpdate,
)
from app.api.modules.v1.projects.service.project_service import ProjectService
from app.api.modules.v1.users.models.users_model import User
from app.api.utils.response_payloads import paginated_response, success_response

router = APIRouter(prefix="/projects", tags=["Projects"])
logger = logging.getLogger("app")


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    payload: ProjectCreate,
    current_user: User = Depends(require_reviewer),
    db: AsyncSession = Depends(get_db),
):
    """
    Create a new project.

    Args:
        payload (ProjectCreate): Project data containing:
            - name (str): Project name (required, 1-200 characters)
            - description, requirements (Optional[str])
            - priority (Priority): defaults to Medium
            - start_date, deadline (Optional[datetime]): deadline must not precede start_date
        current_user (User): The manager or admin creating the project.
        db (AsyncSession): Database session for executing queries.

    Returns:
        JSONResponse: Standardized success response containing project details.
    """
    logger.info(f"Creating project for user_id={current_user.id}")

    project = await ProjectService(db).create_project(payload, current_user)

    return success_response(
        status_code=status.HTTP_201_CREATED,
        message="Project created successfully",
        data=ProjectResponse.model_validate(project).model_dump(),
    )


@router.get("", response_model=ProjectListResponse)
async def list_projects(
    include_closed: bool = Query(True, description="Include closed projects"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(20, ge=1, le=100, description="Items per page (max 100)"),
    current_user: User = Depends(require_reviewer),
    db: AsyncSession = Depends(get_db),
):
    """
    List projects, newest first.

    Args:
        include_closed (bool): When false only Active projects are listed.
        page (int): Page number for pagination (default: 1).
        limit (int): Number of items per page (default: 20, max: 100).

    Returns:
        JSONResponse: Paginated list of projects with metadata.
    """
    result = await ProjectService(db).list_projects(
        include_closed=include_closed, page=page, limit=limit
    )

    projects = result.pop("data")

    return paginated_response(
        message="Projects retrieved successfully",
        key="projects",
        items=(ProjectResponse.model_validate(project).model_dump() for project in projects),
        pagination=result,
    )


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: int,
    current_user: User = Depends(require_reviewer),
    db: AsyncSession = Depends(get_db),
):
    project = await ProjectService(db).get_project(project_id)

    return success_response(
        status_code=status.HTTP_200_OK,
        message="Project retrieved successfully",
        data=ProjectResponse.model_validate(project).model_dump(),
    )


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: int,
    payload: ProjectUpdate,
    current_user: User = Depends(require_reviewer),
    db: AsyncSession = Depends(get_db),
):
    """
    Update project fields. Only fields present in the body are changed.
    """
    project = await ProjectService(db).update_project(project_id, payload)

    return success_response(
        status_code=status.HTTP_200_OK,
        message="Project updated successfully",
        data=ProjectResponse.model_validate(project).model_dump(),
    )


@router.patch("/{project_id}/status", response_model=ProjectResponse)
async def change_project_status(
    project_id: int,
    payload: ProjectStatusUpdate,
    current_user: User = Depends(require_reviewer),
    db: AsyncSession = Depends(get_db),
):
    project = await ProjectService(db).change_status(project_id, payload.status)

    return success_response(
        status_code=status.HTTP_200_OK,
        message=f"Project status set to {project.status.value}",
        data=ProjectResponse.model_validate(project).model_dump(),
    )


@router.delete("/{project_id}", status_code=status.HTTP_200_OK)
async def delete_project(
    project_id: int,
    current_user: User = Depends(require_reviewer),
    db: AsyncSession = Depends(get_db),
):
    """
    Delete a project without work items. Projects with work items must be closed instead.
    """
    await ProjectService(db).delete_project(project_id)

    return success_response(
        status_code=status.HTTP_200_OK,
        message="Project deleted successfully",
    )
