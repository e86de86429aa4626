from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Column, DateTime, Text
from sqlmodel import Field, Relationship, SQLModel

from app.api.db.types import enum_column

if TYPE_CHECKING:
    from app.api.modules.v1.work_items.models.work_item_model import WorkItem


class Priority(str, Enum):
    """Priority shared by projects and work items."""

    CRITICAL = "Critical"
    MAJOR = "Major"
    MEDIUM = "Medium"
    MINOR = "Minor"
    LOW = "Low"


class ProjectStatus(str, Enum):
    ACTIVE = "Active"
    CLOSED = "Closed"


class Project(SQLModel, table=True):
    """
    A project owns its work items; a project that still has work items is
    closed rather than deleted.
    """

    __tablename__ = "projects"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=200, index=True, nullable=False)
    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    requirements: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    start_date: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False),
        default_factory=lambda: datetime.now(timezone.utc),
    )
    deadline: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False),
        default_factory=lambda: datetime.now(timezone.utc) + timedelta(days=30),
    )

    priority: Priority = Field(
        default=Priority.MEDIUM,
        sa_column=enum_column(Priority, "project_priority", nullable=False),
    )
    status: ProjectStatus = Field(
        default=ProjectStatus.ACTIVE,
        sa_column=enum_column(ProjectStatus, "project_status", nullable=False, index=True),
    )

    created_by_id: str = Field(foreign_key="users.id", index=True, nullable=False)

    created_at: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False),
        default_factory=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False),
        default_factory=lambda: datetime.now(timezone.utc),
    )

    work_items: List["WorkItem"] = Relationship(
        back_populates="project",
        sa_relationship_kwargs={"passive_deletes": True},
    )
