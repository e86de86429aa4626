from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.api.modules.v1.projects.models.project_model import Priority, ProjectStatus
from app.api.utils.datetime_utils import as_utc


class ProjectBase(BaseModel):
    name: str = Field(..., min_length=1, description="Project name")
    description: Optional[str] = Field(None, description="Project description")
    requirements: Optional[str] = Field(None, description="Free-form requirements")
    priority: Priority = Priority.MEDIUM


class ProjectCreate(ProjectBase):
    start_date: Optional[datetime] = None
    deadline: Optional[datetime] = None

    @model_validator(mode="after")
    def deadline_after_start(self):
        if self.start_date and self.deadline and as_utc(self.deadline) < as_utc(self.start_date):
            raise ValueError("deadline must not be earlier than start_date")
        return self


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    requirements: Optional[str] = None
    priority: Optional[Priority] = None
    start_date: Optional[datetime] = None
    deadline: Optional[datetime] = None


class ProjectStatusUpdate(BaseModel):
    status: str = Field(..., description="Active or Closed")


class ProjectResponse(ProjectBase):
    id: int
    status: ProjectStatus
    start_date: datetime
    deadline: datetime
    created_by_id: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProjectListResponse(BaseModel):
    projects: List[ProjectResponse]
    total: int
    page: int
    limit: int
    total_pages: Optional[int] = None
