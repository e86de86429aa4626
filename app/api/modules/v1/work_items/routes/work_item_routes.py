import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.core.dependencies.auth import get_current_user, require_reviewer
from app.api.db.database import get_db
from app.api.modules.v1.users.models.users_model import User
from app.api.modules.v1.work_items.schemas.work_item_schema import (
    WorkItemCreate,
    WorkItemListResponse,
    WorkItemResponse,
    WorkItemStatusUpdate,
    WorkItemUpdate,
)
from app.api.modules.v1.work_items.service.work_item_service import WorkItemService
from app.api.utils.response_payloads import paginated_response, success_response

router = APIRouter(prefix="/work-items", tags=["Work Items"])
logger = logging.getLogger("app")


def work_item_payload(work_item) -> dict:
    return WorkItemResponse.model_validate(work_item).model_dump()


@router.get("", response_model=WorkItemListResponse)
async def list_work_items(
    project_id: Optional[int] = Query(None, description="Only items of this project"),
    status_filter: Optional[str] = Query(None, alias="status", description="Only this status"),
    assigned_to_id: Optional[str] = Query(None, description="Only items of this assignee"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    List work items. Employees only ever see the items assigned to them.
    """
    result = await WorkItemService(db).list_work_items(
        current_user,
        project_id=project_id,
        status=status_filter,
        assigned_to_id=assigned_to_id,
        page=page,
        limit=limit,
    )

    work_items = result.pop("data")

    return paginated_response(
        message="Work items retrieved successfully",
        key="work_items",
        items=(work_item_payload(item) for item in work_items),
        pagination=result,
    )


@router.get("/{work_item_id}", response_model=WorkItemResponse)
async def get_work_item(
    work_item_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    work_item = await WorkItemService(db).get_work_item(work_item_id, current_user)

    return success_response(
        status_code=status.HTTP_200_OK,
        message="Work item retrieved successfully",
        data=work_item_payload(work_item),
    )


@router.post("", response_model=WorkItemResponse, status_code=status.HTTP_201_CREATED)
async def create_work_item(
    payload: WorkItemCreate,
    current_user: User = Depends(require_reviewer),
    db: AsyncSession = Depends(get_db),
):
    """
    Create a work item in ToDo and assign it to an employee.

    The project must be Active. The assignee must be an active employee below
    workload capacity with sufficient performance.
    """
    work_item = await WorkItemService(db).create_work_item(payload, current_user)

    return success_response(
        status_code=status.HTTP_201_CREATED,
        message="Work item created successfully",
        data=work_item_payload(work_item),
    )


@router.put("/{work_item_id}", response_model=WorkItemResponse)
async def update_work_item(
    work_item_id: int,
    payload: WorkItemUpdate,
    current_user: User = Depends(require_reviewer),
    db: AsyncSession = Depends(get_db),
):
    work_item = await WorkItemService(db).update_work_item(work_item_id, payload)

    return success_response(
        status_code=status.HTTP_200_OK,
        message="Work item updated successfully",
        data=work_item_payload(work_item),
    )


@router.patch("/{work_item_id}/status", response_model=WorkItemResponse)
async def update_work_item_status(
    work_item_id: int,
    payload: WorkItemStatusUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Move a work item through its lifecycle.

    Assignees start work and submit for review; managers and admins approve,
    reject or send back items in review. Send the ``version`` from the last
    read to have a concurrent change reported as 409 instead of retried.
    """
    work_item = await WorkItemService(db).update_status(
        work_item_id,
        payload.status,
        current_user,
        comments=payload.comments,
        version=payload.version,
    )

    return success_response(
        status_code=status.HTTP_200_OK,
        message=f"Work item status is {work_item.status.value}",
        data=work_item_payload(work_item),
    )


@router.delete("/{work_item_id}", status_code=status.HTTP_200_OK)
async def delete_work_item(
    work_item_id: int,
    current_user: User = Depends(require_reviewer),
    db: AsyncSession = Depends(get_db),
):
    await WorkItemService(db).delete_work_item(work_item_id)

    return success_response(
        status_code=status.HTTP_200_OK,
        message="Work item deleted successfully",
    )
