from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.api.modules.v1.projects.models.project_model import Priority
from app.api.modules.v1.work_items.models.work_item_model import WorkItemStatus


class WorkItemCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    comments: Optional[str] = None
    priority: Priority = Priority.MEDIUM
    project_id: int
    assigned_to_id: str
    deadline: Optional[datetime] = Field(
        None, description="Defaults to seven days after creation"
    )


class WorkItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    comments: Optional[str] = None
    priority: Optional[Priority] = None
    deadline: Optional[datetime] = None
    assigned_to_id: Optional[str] = None


class WorkItemStatusUpdate(BaseModel):
    """
    Status change request.

    ``status`` is checked by the lifecycle rather than here so unknown literals
    and illegal moves are reported the same way. ``version`` is the row version
    the client last saw; a stale value is rejected with 409.
    """

    status: str
    comments: Optional[str] = None
    version: Optional[int] = Field(None, ge=1)


class WorkItemResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    comments: Optional[str]
    priority: Priority
    status: WorkItemStatus
    version: int
    project_id: int
    assigned_to_id: str
    created_by_id: str
    deadline: datetime
    completed_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class WorkItemListResponse(BaseModel):
    work_items: List[WorkItemResponse]
    total: int
    page: int
    limit: int
    total_pages: Optional[int] = None
