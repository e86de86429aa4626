import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Column, DateTime
from sqlmodel import Field, Relationship, SQLModel

from app.api.db.types import enum_column

if TYPE_CHECKING:
    from app.api.modules.v1.users.models.user_profile_model import UserProfile


class UserRole(str, Enum):
    """Role carried in the token and checked by the role dependency."""

    EMPLOYEE = "Employee"
    MANAGER = "Manager"
    ADMIN = "Admin"


REVIEWER_ROLES = (UserRole.MANAGER, UserRole.ADMIN)


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        primary_key=True,
        index=True,
        max_length=36,
        nullable=False,
    )

    email: str = Field(max_length=255, nullable=False, unique=True, index=True)

    hashed_password: Optional[str] = Field(default=None, max_length=255, nullable=True)

    role: UserRole = Field(
        default=UserRole.EMPLOYEE,
        sa_column=enum_column(UserRole, "user_role", nullable=False, index=True),
    )

    is_active: bool = Field(default=True, nullable=False)

    created_at: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False),
        default_factory=lambda: datetime.now(timezone.utc),
    )

    profile: Optional["UserProfile"] = Relationship(
        back_populates="user",
        sa_relationship_kwargs={"uselist": False, "lazy": "selectin"},
    )

    @property
    def is_reviewer(self) -> bool:
        return self.role in REVIEWER_ROLES
