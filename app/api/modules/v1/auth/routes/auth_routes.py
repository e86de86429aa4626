import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.core.dependencies.auth import get_current_user
from app.api.db.database import get_db
from app.api.modules.v1.auth.schemas.login import LoginRequest
from app.api.modules.v1.auth.schemas.register import RegisterRequest
from app.api.modules.v1.auth.service.auth_service import AuthService
from app.api.modules.v1.users.models.users_model import User
from app.api.modules.v1.users.schemas.user_profile_schema import UserProfileResponse
from app.api.modules.v1.users.schemas.user_schema import UserResponse
from app.api.utils.response_payloads import auth_response, success_response

router = APIRouter(prefix="/auth", tags=["Auth"])
logger = logging.getLogger("app")


def user_payload(user: User) -> dict:
    return {
        "user": UserResponse.model_validate(user).model_dump(),
        "profile": (
            UserProfileResponse.model_validate(user.profile).model_dump()
            if user.profile
            else None
        ),
    }


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """
    Register a new employee account.

    Creates the user and its profile, and returns an access token so the
    client is signed in straight away.

    Returns:
        JSONResponse: access_token, token_type, user and profile
    """
    result = await AuthService(db).register(payload)

    return auth_response(
        status_code=status.HTTP_201_CREATED,
        message="Registration successful",
        access_token=result["access_token"],
        data=user_payload(result["user"]),
    )


@router.post("/login", status_code=status.HTTP_200_OK)
async def login(payload: LoginRequest, db: AsyncSession = Depends(get_db)):
    """
    Authenticate with email and password and issue a bearer token.

    Returns:
        JSONResponse: access_token, token_type, user and profile
    """
    result = await AuthService(db).login(email=payload.email, password=payload.password)

    return auth_response(
        status_code=status.HTTP_200_OK,
        message="Login successful",
        access_token=result["access_token"],
        data=user_payload(result["user"]),
    )


@router.get("/me", status_code=status.HTTP_200_OK)
async def me(current_user: User = Depends(get_current_user)):
    return success_response(
        status_code=status.HTTP_200_OK,
        message="Current user retrieved successfully",
        data=user_payload(current_user),
    )
