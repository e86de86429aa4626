"""
Import every table model so SQLModel.metadata is complete before create_all.
"""

from app.api.modules.v1.performance.models.performance_event_model import (
    PerformanceEvent,
    PerformanceEventKind,
)
from app.api.modules.v1.projects.models.project_model import Priority, Project, ProjectStatus
from app.api.modules.v1.users.models.user_profile_model import UserProfile
from app.api.modules.v1.users.models.users_model import User, UserRole
from app.api.modules.v1.work_items.models.work_item_model import WorkItem, WorkItemStatus

__all__ = [
    "PerformanceEvent",
    "PerformanceEventKind",
    "Priority",
    "Project",
    "ProjectStatus",
    "User",
    "UserProfile",
    "UserRole",
    "WorkItem",
    "WorkItemStatus",
]
