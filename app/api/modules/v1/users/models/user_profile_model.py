from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Column, DateTime, Text
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.api.modules.v1.users.models.users_model import User


class UserProfile(SQLModel, table=True):
    """
    One-to-one companion of a User holding the scoring fields.

    ``performance`` and ``current_workload`` are percentages kept in [0, 100]
    by the performance service; ``accepted_items_count`` only ever grows.
    """

    __tablename__ = "user_profiles"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(foreign_key="users.id", unique=True, index=True, nullable=False)

    full_name: str = Field(max_length=100, nullable=False)
    skills: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    experience: int = Field(default=0, nullable=False)

    performance: float = Field(default=100.0, nullable=False)
    current_workload: float = Field(default=0.0, nullable=False)
    accepted_items_count: int = Field(default=0, nullable=False)

    created_at: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False),
        default_factory=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False),
        default_factory=lambda: datetime.now(timezone.utc),
    )

    user: Optional["User"] = Relationship(back_populates="profile")

    @property
    def skills_list(self) -> List[str]:
        if not self.skills:
            return []
        return [skill.strip() for skill in self.skills.split(",") if skill.strip()]
