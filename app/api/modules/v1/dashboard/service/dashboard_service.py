"""
Dashboard Service
Read-only manager and employee summaries, recomputed on every request.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import func, select

from app.api.core.config import settings
from app.api.core.exceptions import NotFoundError
from app.api.db.database import data_access
from app.api.modules.v1.performance.models.performance_event_model import PerformanceEvent
from app.api.modules.v1.projects.models.project_model import Project, ProjectStatus
from app.api.modules.v1.users.models.user_profile_model import UserProfile
from app.api.modules.v1.users.models.users_model import User, UserRole
from app.api.modules.v1.work_items.models.work_item_model import (
    OPEN_STATUSES,
    WorkItem,
    WorkItemStatus,
)
from app.api.utils.datetime_utils import as_utc, utcnow

logger = logging.getLogger("app")

# Upper bound (inclusive) of each workload bucket; lower bounds are exclusive
WORKLOAD_BUCKETS = (
    ("0-25", 25.0),
    ("26-50", 50.0),
    ("51-75", 75.0),
    ("76-100", 100.0),
)


def workload_bucket(workload: float) -> str:
    for label, upper in WORKLOAD_BUCKETS:
        if workload <= upper:
            return label
    return WORKLOAD_BUCKETS[-1][0]


def bucket_workloads(workloads: Iterable[float]) -> Dict[str, int]:
    buckets = {label: 0 for label, _ in WORKLOAD_BUCKETS}
    for workload in workloads:
        buckets[workload_bucket(workload)] += 1
    return buckets


def zero_filled_status_counts(rows) -> Dict[str, int]:
    counts = {status.value: 0 for status in WorkItemStatus}
    for status, count in rows:
        counts[WorkItemStatus(status).value] = count
    return counts


def days_remaining(deadline: datetime, now: datetime) -> int:
    return (as_utc(deadline) - now).days


def performance_history(
    events: List[PerformanceEvent],
    current: float,
    today: date,
    days: int,
    baseline: Optional[float] = None,
) -> List[dict]:
    """
    One performance point per day, oldest first, ending at ``today``.

    ``events`` are the events inside the window in chronological order.
    ``baseline`` is the score at the start of the window; when unknown it is
    reconstructed from the first event, or ``current`` if there are none.
    """
    if baseline is None:
        baseline = events[0].performance_after - events[0].delta if events else current

    value = baseline
    pending = list(events)
    points = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        while pending and as_utc(pending[0].created_at).date() <= day:
            value = pending.pop(0).performance_after
        points.append({"date": day, "performance": round(value, 2)})
    return points


class DashboardService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _status_counts(self, assigned_to_id: Optional[str] = None) -> Dict[str, int]:
        statement = select(WorkItem.status, func.count(WorkItem.id)).group_by(WorkItem.status)
        if assigned_to_id:
            statement = statement.where(WorkItem.assigned_to_id == assigned_to_id)
        rows = (await self.db.execute(statement)).all()
        return zero_filled_status_counts(rows)

    async def _deadline_counts(self, now: datetime, assigned_to_id: Optional[str] = None):
        soon = now + timedelta(days=settings.DUE_SOON_DAYS)
        open_items = select(func.count(WorkItem.id)).where(WorkItem.status.in_(OPEN_STATUSES))
        if assigned_to_id:
            open_items = open_items.where(WorkItem.assigned_to_id == assigned_to_id)

        overdue = (await self.db.execute(open_items.where(WorkItem.deadline < now))).scalar_one()
        due_soon = (
            await self.db.execute(
                open_items.where(WorkItem.deadline >= now, WorkItem.deadline <= soon)
            )
        ).scalar_one()
        return overdue, due_soon

    @staticmethod
    def _assignee_name(work_item: WorkItem) -> str:
        user = work_item.assigned_to
        if user is None:
            return ""
        return user.profile.full_name if user.profile else user.email

    async def _recent_items(self, assigned_to_id: Optional[str] = None) -> List[dict]:
        statement = select(WorkItem).order_by(WorkItem.updated_at.desc(), WorkItem.id.desc())
        if assigned_to_id:
            statement = statement.where(WorkItem.assigned_to_id == assigned_to_id)
        result = await self.db.execute(statement.limit(settings.DASHBOARD_RECENT_LIMIT))

        return [
            {
                "id": item.id,
                "name": item.name,
                "status": item.status,
                "priority": item.priority,
                "project_id": item.project_id,
                "project_name": item.project.name if item.project else "",
                "assigned_to_id": item.assigned_to_id,
                "assignee_name": self._assignee_name(item),
                "updated_at": item.updated_at,
            }
            for item in result.scalars().all()
        ]

    async def _upcoming_deadlines(
        self, now: datetime, assigned_to_id: Optional[str] = None
    ) -> List[dict]:
        statement = (
            select(WorkItem)
            .where(WorkItem.status.in_(OPEN_STATUSES), WorkItem.deadline >= now)
            .order_by(WorkItem.deadline.asc(), WorkItem.id.asc())
        )
        if assigned_to_id:
            statement = statement.where(WorkItem.assigned_to_id == assigned_to_id)
        result = await self.db.execute(statement.limit(settings.DASHBOARD_RECENT_LIMIT))

        return [
            {
                "id": item.id,
                "name": item.name,
                "status": item.status,
                "project_name": item.project.name if item.project else "",
                "assignee_name": self._assignee_name(item),
                "deadline": item.deadline,
                "days_remaining": days_remaining(item.deadline, now),
            }
            for item in result.scalars().all()
        ]

    async def manager_dashboard(self) -> dict:
        """
        Team-wide summary: project and work item counts, deadline pressure and
        employee performance/workload.

        Raises:
            DataAccessError: the store could not be read
        """
        async with data_access("load the manager dashboard"):
            now = utcnow()

            project_rows = (
                await self.db.execute(
                    select(Project.status, func.count(Project.id)).group_by(Project.status)
                )
            ).all()
            projects = {ProjectStatus(status): count for status, count in project_rows}

            by_status = await self._status_counts()
            overdue, due_soon = await self._deadline_counts(now)

            profile_rows = (
                await self.db.execute(
                    select(UserProfile.performance, UserProfile.current_workload)
                    .join(User, User.id == UserProfile.user_id)
                    .where(User.role == UserRole.EMPLOYEE)
                )
            ).all()
            performances = [row[0] for row in profile_rows]
            workloads = [row[1] for row in profile_rows]

            summary = {
                "total_projects": sum(projects.values()),
                "active_projects": projects.get(ProjectStatus.ACTIVE, 0),
                "closed_projects": projects.get(ProjectStatus.CLOSED, 0),
                "total_work_items": sum(by_status.values()),
                "work_items_by_status": by_status,
                "overdue_work_items": overdue,
                "due_soon_work_items": due_soon,
                "total_employees": len(profile_rows),
                "employees_by_workload": bucket_workloads(workloads),
                "average_performance": _average(performances),
                "average_workload": _average(workloads),
                "recent_work_items": await self._recent_items(),
                "upcoming_deadlines": await self._upcoming_deadlines(now),
            }

        logger.info(
            f"Manager dashboard: {summary['total_projects']} projects, "
            f"{summary['total_work_items']} work items"
        )
        return summary

    async def _performance_history(self, profile: UserProfile, now: datetime) -> List[dict]:
        days = settings.PERFORMANCE_HISTORY_DAYS
        today = now.date()
        window_start = datetime.combine(
            today - timedelta(days=days - 1), datetime.min.time(), tzinfo=now.tzinfo
        )

        before_window = await self.db.scalar(
            select(PerformanceEvent)
            .where(
                PerformanceEvent.user_id == profile.user_id,
                PerformanceEvent.created_at < window_start,
            )
            .order_by(PerformanceEvent.created_at.desc(), PerformanceEvent.id.desc())
            .limit(1)
        )
        result = await self.db.execute(
            select(PerformanceEvent)
            .where(
                PerformanceEvent.user_id == profile.user_id,
                PerformanceEvent.created_at >= window_start,
            )
            .order_by(PerformanceEvent.created_at.asc(), PerformanceEvent.id.asc())
        )

        return performance_history(
            list(result.scalars().all()),
            current=profile.performance,
            today=today,
            days=days,
            baseline=before_window.performance_after if before_window else None,
        )

    async def employee_dashboard(self, user: User) -> dict:
        """
        Summary scoped to the caller's own work items and profile.

        Raises:
            NotFoundError: the caller has no profile
            DataAccessError: the store could not be read
        """
        async with data_access("load the employee dashboard"):
            profile = await self.db.scalar(
                select(UserProfile).where(UserProfile.user_id == user.id)
            )
            if not profile:
                raise NotFoundError("Profile not found")

            now = utcnow()
            by_status = await self._status_counts(assigned_to_id=user.id)
            overdue, due_soon = await self._deadline_counts(now, assigned_to_id=user.id)

            summary = {
                "full_name": profile.full_name,
                "performance": profile.performance,
                "workload": profile.current_workload,
                "skills": profile.skills_list,
                "experience": profile.experience,
                "accepted_items_count": profile.accepted_items_count,
                "total_work_items": sum(by_status.values()),
                "work_items_by_status": by_status,
                "overdue_work_items": overdue,
                "due_soon_work_items": due_soon,
                "recent_work_items": await self._recent_items(assigned_to_id=user.id),
                "upcoming_deadlines": await self._upcoming_deadlines(now, assigned_to_id=user.id),
                "performance_history": await self._performance_history(profile, now),
            }

        logger.info(f"Employee dashboard for user_id={user.id}")
        return summary


def _average(values: List[float]) -> float:
    if not values:
        return 0.0
    return round(sum(values) / len(values), 2)
