"""
Performance Event Model
Append-only trail of every change the scorer makes to a profile's performance.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlalchemy import Column, DateTime, ForeignKey, Integer
from sqlmodel import Field, SQLModel

from app.api.db.types import enum_column


class PerformanceEventKind(str, Enum):
    APPROVED = "Approved"
    APPROVED_LATE = "ApprovedLate"
    REJECTED = "Rejected"


class PerformanceEvent(SQLModel, table=True):
    __tablename__ = "performance_events"

    id: Optional[int] = Field(default=None, primary_key=True)

    user_id: str = Field(foreign_key="users.id", index=True, nullable=False)
    work_item_id: Optional[int] = Field(
        default=None,
        sa_column=Column(
            Integer, ForeignKey("work_items.id", ondelete="SET NULL"), nullable=True, index=True
        ),
    )

    kind: PerformanceEventKind = Field(
        sa_column=enum_column(PerformanceEventKind, "performance_event_kind", nullable=False),
    )
    delta: float = Field(nullable=False)
    performance_after: float = Field(nullable=False)

    created_at: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
        default_factory=lambda: datetime.now(timezone.utc),
    )
