"""
Performance Service
Keeps a profile's score fields in step with the work items assigned to it.

Every method works inside the caller's transaction: nothing here commits.
Write paths lock the profile row first, so concurrent requests rescoring the
same user are applied one after the other.
"""

import logging
from typing import Dict

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import func, select

from app.api.core.config import settings
from app.api.core.exceptions import NotFoundError, ValidationError
from app.api.modules.v1.performance.models.performance_event_model import (
    PerformanceEvent,
    PerformanceEventKind,
)
from app.api.modules.v1.performance.service.scoring import (
    clamp_percentage,
    compute_workload,
    counts_as_accepted,
    performance_delta,
)
from app.api.modules.v1.users.models.user_profile_model import UserProfile
from app.api.modules.v1.users.models.users_model import User, UserRole
from app.api.modules.v1.work_items.models.work_item_model import OPEN_STATUSES, WorkItem
from app.api.utils.datetime_utils import utcnow

logger = logging.getLogger("app")


def lock_profiles_statement(*user_ids: str):
    """SELECT ... FOR UPDATE on the given users' profiles, in a stable lock order."""
    return (
        select(UserProfile)
        .where(UserProfile.user_id.in_(sorted(set(user_ids))))
        .order_by(UserProfile.user_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )


class PerformanceService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_profile(self, user_id: str) -> UserProfile:
        profile = await self.db.scalar(select(UserProfile).where(UserProfile.user_id == user_id))
        if not profile:
            raise NotFoundError(f"Profile for user {user_id} not found")
        return profile

    async def lock_profiles(self, *user_ids: str) -> Dict[str, UserProfile]:
        """
        Lock and re-read the profiles of ``user_ids`` until the transaction ends.

        Pending changes are flushed first. The rows returned carry whatever a
        concurrent writer committed before releasing the lock.
        """
        await self.db.flush()
        result = await self.db.execute(lock_profiles_statement(*user_ids))
        locked = {profile.user_id: profile for profile in result.scalars().all()}

        for user_id in user_ids:
            if user_id not in locked:
                raise NotFoundError(f"Profile for user {user_id} not found")
        return locked

    async def lock_profile(self, user_id: str) -> UserProfile:
        return (await self.lock_profiles(user_id))[user_id]

    async def count_open_items(self, user_id: str) -> int:
        statement = select(func.count(WorkItem.id)).where(
            WorkItem.assigned_to_id == user_id,
            WorkItem.status.in_(OPEN_STATUSES),
        )
        return (await self.db.execute(statement)).scalar_one()

    async def refresh_workload(self, user_id: str) -> UserProfile:
        """
        Recompute ``current_workload`` from the user's open work items.

        Pending ORM changes must be flushed first; the count is read from the
        database.
        """
        profile = await self.lock_profile(user_id)
        open_items = await self.count_open_items(user_id)

        profile.current_workload = compute_workload(open_items)
        profile.updated_at = utcnow()
        self.db.add(profile)

        logger.info(
            f"Workload for user_id={user_id}: {open_items} open items, "
            f"{profile.current_workload:.1f}%"
        )
        return profile

    async def record_event(
        self, user_id: str, work_item_id: int, kind: PerformanceEventKind
    ) -> PerformanceEvent:
        """
        Apply one scoring event to the user's profile and append it to the trail.

        Performance is clamped to [0, 100]; approvals also bump
        ``accepted_items_count``.
        """
        profile = await self.lock_profile(user_id)

        before = profile.performance
        profile.performance = clamp_percentage(before + performance_delta(kind))
        if counts_as_accepted(kind):
            profile.accepted_items_count += 1
        profile.updated_at = utcnow()
        self.db.add(profile)

        event = PerformanceEvent(
            user_id=user_id,
            work_item_id=work_item_id,
            kind=kind,
            delta=profile.performance - before,
            performance_after=profile.performance,
        )
        self.db.add(event)

        logger.info(
            f"Performance for user_id={user_id}: {kind.value} on work_item_id={work_item_id}, "
            f"{before:.1f} -> {profile.performance:.1f}"
        )
        return event

    async def check_assignment_eligibility(self, user: User) -> UserProfile:
        """
        Ensure ``user`` can take on another work item.

        The assignee must be an active Employee below workload capacity whose
        performance meets the configured minimum. The profile stays locked
        until the caller's transaction ends, so call this inside the
        transaction that adds the work.

        Raises:
            ValidationError: keyed on ``assigned_to_id`` when any rule fails
        """
        if user.role != UserRole.EMPLOYEE or not user.is_active:
            self._reject_assignment("Work items can only be assigned to active employees")

        profile = await self.lock_profile(user.id)

        open_items = await self.count_open_items(user.id)
        if open_items >= settings.WORKLOAD_CAPACITY:
            self._reject_assignment(
                f"Employee already has {open_items} open work items "
                f"(capacity {settings.WORKLOAD_CAPACITY})"
            )

        if profile.performance < settings.MIN_PERFORMANCE_FOR_ASSIGNMENT:
            self._reject_assignment(
                f"Employee performance {profile.performance:.1f}% is below the "
                f"{settings.MIN_PERFORMANCE_FOR_ASSIGNMENT:.0f}% required for assignment"
            )

        return profile

    @staticmethod
    def _reject_assignment(message: str):
        logger.warning(f"Assignment rejected: {message}")
        raise ValidationError(message, errors={"assigned_to_id": [message]})
