import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.api.modules.v1.users.models.user_profile_model import UserProfile
from app.api.modules.v1.users.models.users_model import User, UserRole

logger = logging.getLogger("app")


class UserCRUD:
    """CRUD operations for User model."""

    @staticmethod
    async def create_user(
        db: AsyncSession,
        email: str,
        hashed_password: str,
        full_name: str,
        role: UserRole = UserRole.EMPLOYEE,
        skills: Optional[str] = None,
        experience: int = 0,
    ) -> User:
        """
        Create a new user together with its profile.

        The caller owns the transaction; rows are flushed, not committed.

        Args:
            db: Async database session
            email: User email address, stored lowercased
            hashed_password: Hashed password
            full_name: Display name kept on the profile
            role: Role literal (default: Employee)
            skills: Optional comma-separated skills
            experience: Years of experience

        Returns:
            User: Created user with ``profile`` populated
        """
        user = User(
            email=email.strip().lower(),
            hashed_password=hashed_password,
            role=role,
        )
        profile = UserProfile(
            full_name=full_name.strip(),
            skills=skills,
            experience=experience,
        )
        user.profile = profile

        db.add(user)
        await db.flush()

        logger.info(f"Created {role.value} user_id={user.id} with profile_id={profile.id}")
        return user
