import logging

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.core.exceptions import AuthorizationError, ValidationError
from app.api.db.database import transaction
from app.api.modules.v1.auth.schemas.register import RegisterRequest
from app.api.modules.v1.users.models.users_model import User, UserRole
from app.api.modules.v1.users.service.user import UserCRUD
from app.api.modules.v1.users.utils.user_utils import get_user_by_email
from app.api.utils.jwt import create_access_token
from app.api.utils.password import hash_password, verify_password
from app.api.utils.validators import validate_profile

logger = logging.getLogger("app")


class AuthService:
    """Registration and password login. Every self-registered account is an Employee."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def issue_token(user: User) -> str:
        return create_access_token(user_id=user.id, role=user.role.value)

    async def register(self, data: RegisterRequest) -> dict:
        """
        Create an Employee account and its profile, then sign it in.

        Raises:
            ValidationError: email already registered or invalid profile fields
        """
        validate_profile(full_name=data.full_name, experience=data.experience)

        if await get_user_by_email(self.db, data.email):
            message = "An account with this email already exists"
            logger.warning(f"Registration rejected for {data.email}: already registered")
            raise ValidationError(message, errors={"email": [message]})

        async with transaction(self.db, "register user"):
            user = await UserCRUD.create_user(
                self.db,
                email=data.email,
                hashed_password=hash_password(data.password),
                full_name=data.full_name,
                role=UserRole.EMPLOYEE,
                skills=data.skills,
                experience=data.experience,
            )

        logger.info(f"Registered user_id={user.id}")
        return {"user": user, "access_token": self.issue_token(user)}

    async def login(self, email: str, password: str) -> dict:
        """
        Authenticate with email and password.

        Raises:
            HTTPException: 401 for unknown email or wrong password
            AuthorizationError: the account is deactivated
        """
        user = await get_user_by_email(self.db, email)

        if not user or not user.hashed_password or not verify_password(
            password, user.hashed_password
        ):
            logger.warning(f"Failed login attempt for {email}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password",
            )

        if not user.is_active:
            raise AuthorizationError("This account has been deactivated")

        logger.info(f"User {user.email} logged in")
        return {"user": user, "access_token": self.issue_token(user)}
