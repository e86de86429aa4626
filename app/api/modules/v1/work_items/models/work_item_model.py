from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Column, DateTime, Text
from sqlmodel import Field, Relationship, SQLModel

from app.api.core.config import settings
from app.api.db.types import enum_column
from app.api.modules.v1.projects.models.project_model import Priority

if TYPE_CHECKING:
    from app.api.modules.v1.projects.models.project_model import Project
    from app.api.modules.v1.users.models.users_model import User


class WorkItemStatus(str, Enum):
    """Lifecycle states of a work item. Done and Rejected are terminal."""

    TODO = "ToDo"
    IN_PROGRESS = "InProgress"
    REVIEW = "Review"
    DONE = "Done"
    REJECTED = "Rejected"


OPEN_STATUSES = (WorkItemStatus.TODO, WorkItemStatus.IN_PROGRESS, WorkItemStatus.REVIEW)
TERMINAL_STATUSES = (WorkItemStatus.DONE, WorkItemStatus.REJECTED)


def default_deadline() -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=settings.DEFAULT_WORK_ITEM_DAYS)


class WorkItem(SQLModel, table=True):
    __tablename__ = "work_items"

    id: Optional[int] = Field(default=None, primary_key=True)

    project_id: int = Field(foreign_key="projects.id", index=True, nullable=False)
    assigned_to_id: str = Field(foreign_key="users.id", index=True, nullable=False)
    created_by_id: str = Field(foreign_key="users.id", index=True, nullable=False)

    name: str = Field(max_length=200, nullable=False)
    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    comments: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    priority: Priority = Field(
        default=Priority.MEDIUM,
        sa_column=enum_column(Priority, "work_item_priority", nullable=False),
    )
    status: WorkItemStatus = Field(
        default=WorkItemStatus.TODO,
        sa_column=enum_column(WorkItemStatus, "work_item_status", nullable=False, index=True),
    )

    # Bumped on every write; status updates compare-and-swap on it.
    version: int = Field(default=1, nullable=False)

    deadline: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
        default_factory=default_deadline,
    )
    completed_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True),
    )
    created_at: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False),
        default_factory=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False),
        default_factory=lambda: datetime.now(timezone.utc),
    )

    project: Optional["Project"] = Relationship(
        back_populates="work_items",
        sa_relationship_kwargs={"lazy": "selectin"},
    )
    assigned_to: Optional["User"] = Relationship(
        sa_relationship_kwargs={
            "foreign_keys": "[WorkItem.assigned_to_id]",
            "lazy": "selectin",
        },
    )
    created_by: Optional["User"] = Relationship(
        sa_relationship_kwargs={
            "foreign_keys": "[WorkItem.created_by_id]",
            "lazy": "selectin",
        },
    )

    @property
    def is_open(self) -> bool:
        return self.status in OPEN_STATUSES
