"""
Profile Service
Own-profile reads and edits, and manager views over employee profiles.
"""

import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import func, select

from app.api.core.exceptions import NotFoundError
from app.api.db.database import transaction
from app.api.modules.v1.users.models.user_profile_model import UserProfile
from app.api.modules.v1.users.models.users_model import User, UserRole
from app.api.modules.v1.users.schemas.user_profile_schema import (
    EmployeeProfileResponse,
    UpdateUserProfileRequest,
    UserProfileResponse,
)
from app.api.modules.v1.users.utils.user_utils import get_user_by_id
from app.api.modules.v1.work_items.models.work_item_model import OPEN_STATUSES, WorkItem
from app.api.modules.v1.work_items.service.work_item_service import WorkItemService
from app.api.utils.datetime_utils import utcnow
from app.api.utils.pagination import calculate_pagination
from app.api.utils.validators import reject_null_required, validate_profile

logger = logging.getLogger("app")


def employee_payload(user: User, profile: UserProfile, open_work_items: int) -> dict:
    base = UserProfileResponse.model_validate(profile).model_dump()
    return EmployeeProfileResponse(
        **base,
        email=user.email,
        role=user.role,
        is_active=user.is_active,
        open_work_items=open_work_items,
    ).model_dump()


class ProfileService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_own_profile(self, user: User) -> UserProfile:
        profile = await self.db.scalar(select(UserProfile).where(UserProfile.user_id == user.id))
        if not profile:
            raise NotFoundError("Profile not found")
        return profile

    async def update_own_profile(self, user: User, data: UpdateUserProfileRequest) -> UserProfile:
        """
        Change name, skills or experience. Score fields are owned by the scorer.
        An explicit null clears ``skills``.
        """
        profile = await self.get_own_profile(user)
        changes = data.model_dump(exclude_unset=True)
        reject_null_required(changes, ("full_name", "experience"), "Profile")
        validate_profile(
            full_name=changes.get("full_name", profile.full_name),
            experience=changes.get("experience", profile.experience),
        )

        async with transaction(self.db, "update profile"):
            for key, value in changes.items():
                setattr(profile, key, value.strip() if isinstance(value, str) else value)
            profile.updated_at = utcnow()
            self.db.add(profile)
        await self.db.refresh(profile)

        logger.info(f"Profile updated for user_id={user.id}: {sorted(changes)}")
        return profile

    async def _open_counts(self, user_ids: List[str]) -> Dict[str, int]:
        if not user_ids:
            return {}
        statement = (
            select(WorkItem.assigned_to_id, func.count(WorkItem.id))
            .where(WorkItem.assigned_to_id.in_(user_ids), WorkItem.status.in_(OPEN_STATUSES))
            .group_by(WorkItem.assigned_to_id)
        )
        rows = (await self.db.execute(statement)).all()
        return {user_id: count for user_id, count in rows}

    async def list_employees(self, page: int = 1, limit: int = 20) -> Tuple[List[dict], dict]:
        """Employee profiles ordered by name, each with its open work item count."""
        base = (
            select(User, UserProfile)
            .join(UserProfile, UserProfile.user_id == User.id)
            .where(User.role == UserRole.EMPLOYEE)
        )
        total = (
            await self.db.execute(select(func.count()).select_from(base.subquery()))
        ).scalar_one()

        statement = base.order_by(UserProfile.full_name).offset((page - 1) * limit).limit(limit)
        rows = (await self.db.execute(statement)).all()
        counts = await self._open_counts([user.id for user, _ in rows])

        employees = [
            employee_payload(user, profile, counts.get(user.id, 0)) for user, profile in rows
        ]
        return employees, calculate_pagination(total, page, limit)

    async def _get_employee(self, user_id: str) -> Tuple[User, UserProfile]:
        user = await get_user_by_id(self.db, user_id)
        if not user or user.role != UserRole.EMPLOYEE or not user.profile:
            raise NotFoundError(f"Employee {user_id} not found")
        return user, user.profile

    async def get_employee(self, user_id: str) -> dict:
        user, profile = await self._get_employee(user_id)
        counts = await self._open_counts([user.id])
        return employee_payload(user, profile, counts.get(user.id, 0))

    async def list_employee_work_items(
        self,
        user_id: str,
        actor: User,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> dict:
        await self._get_employee(user_id)
        return await WorkItemService(self.db).list_work_items(
            actor, status=status, assigned_to_id=user_id, page=page, limit=limit
        )
