from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.api.modules.v1.users.models.users_model import User


async def get_user_by_id(db: AsyncSession, user_id: str) -> Optional[User]:
    return await db.scalar(select(User).where(User.id == user_id))


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    """Look up a user by email, case-insensitively."""
    return await db.scalar(select(User).where(User.email == email.strip().lower()))
