"""Schemas for user profile operations."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.api.modules.v1.users.models.users_model import UserRole


class UpdateUserProfileRequest(BaseModel):
    """Schema for updating the caller's own profile. Score fields are not editable."""

    full_name: Optional[str] = Field(None, min_length=1)
    skills: Optional[str] = Field(None, description="Comma-separated list of skills")
    experience: Optional[int] = Field(None, ge=0, le=100)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "full_name": "Alicia Smith",
                "skills": "python, sql, testing",
                "experience": 4,
            }
        }
    )


class UserProfileResponse(BaseModel):
    """Schema for user profile response."""

    id: int
    user_id: str
    full_name: str
    skills: Optional[str]
    skills_list: List[str] = []
    experience: int
    performance: float
    current_workload: float
    accepted_items_count: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class EmployeeProfileResponse(UserProfileResponse):
    """Profile as seen by a manager, with account details and open item count."""

    email: str
    role: UserRole
    is_active: bool
    open_work_items: int = 0
