import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.api.core.config import settings
from app.api.modules.v1.users.models.users_model import User, UserRole
from app.api.modules.v1.users.service.user import UserCRUD
from app.api.modules.v1.users.utils.user_utils import get_user_by_email
from app.api.utils.password import hash_password

logger = logging.getLogger("app")


async def seed_default_manager(session: AsyncSession) -> Optional[User]:
    """
    Create the default manager account if it does not exist yet.

    Controlled by ``SEED_DEFAULT_MANAGER``; running it again is a no-op.

    Returns:
        The newly created manager, or None when nothing was created
    """
    if not settings.SEED_DEFAULT_MANAGER:
        return None

    if await get_user_by_email(session, settings.DEFAULT_MANAGER_EMAIL):
        logger.info(f"Default manager {settings.DEFAULT_MANAGER_EMAIL} already present")
        return None

    try:
        manager = await UserCRUD.create_user(
            session,
            email=settings.DEFAULT_MANAGER_EMAIL,
            hashed_password=hash_password(settings.DEFAULT_MANAGER_PASSWORD),
            full_name=settings.DEFAULT_MANAGER_NAME,
            role=UserRole.MANAGER,
        )
        await session.commit()
    except Exception:
        await session.rollback()
        logger.exception("Failed to seed default manager")
        raise

    logger.info(f"Seeded default manager {manager.email}")
    return manager
