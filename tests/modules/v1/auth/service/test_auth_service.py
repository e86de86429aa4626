import pytest
from fastapi import HTTPException

from app.api.core.exceptions import AuthorizationError, ValidationError
from app.api.modules.v1.auth.schemas.register import RegisterRequest
from app.api.modules.v1.auth.service.auth_service import AuthService
from app.api.modules.v1.users.models.users_model import UserRole
from app.api.utils.jwt import decode_token
DEFAULT_PASSWORD = "Password123!"


def make_request(**overrides):
    data = {
        "email": "New.Hire@Example.com",
        "password": "Str0ng!Pass",
        "confirm_password": "Str0ng!Pass",
        "full_name": "New Hire",
        "skills": "go, k8s",
        "experience": 3,
    }
    data.update(overrides)
    return RegisterRequest(**data)


@pytest.mark.asyncio
async def test_register_creates_employee_with_profile(test_session):
    result = await AuthService(test_session).register(make_request())

    user = result["user"]
    assert user.email == "new.hire@example.com"
    assert user.role == UserRole.EMPLOYEE
    assert user.hashed_password != "Str0ng!Pass"
    assert user.profile.full_name == "New Hire"
    assert user.profile.skills_list == ["go", "k8s"]
    assert user.profile.experience == 3
    assert user.profile.performance == 100.0
    assert user.profile.current_workload == 0.0

    payload = decode_token(result["access_token"])
    assert payload["sub"] == user.id
    assert payload["role"] == "Employee"


@pytest.mark.asyncio
async def test_register_duplicate_email(test_session, employee):
    with pytest.raises(ValidationError) as exc:
        await AuthService(test_session).register(make_request(email=employee.email.upper()))

    assert "email" in exc.value.errors


@pytest.mark.asyncio
async def test_login_returns_token(test_session, employee):
    result = await AuthService(test_session).login(employee.email, DEFAULT_PASSWORD)

    assert result["user"].id == employee.id
    assert decode_token(result["access_token"])["sub"] == employee.id


@pytest.mark.asyncio
async def test_login_is_case_insensitive_on_email(test_session, employee):
    result = await AuthService(test_session).login(employee.email.upper(), DEFAULT_PASSWORD)
    assert result["user"].id == employee.id


@pytest.mark.asyncio
async def test_login_wrong_password(test_session, employee):
    with pytest.raises(HTTPException) as exc:
        await AuthService(test_session).login(employee.email, "WrongPass1!")

    assert exc.value.status_code == 401


@pytest.mark.asyncio
async def test_login_unknown_email(test_session):
    with pytest.raises(HTTPException) as exc:
        await AuthService(test_session).login("nobody@example.com", DEFAULT_PASSWORD)

    assert exc.value.status_code == 401


@pytest.mark.asyncio
async def test_login_inactive_account(test_session, user_factory):
    former = await user_factory(is_active=False)

    with pytest.raises(AuthorizationError):
        await AuthService(test_session).login(former.email, DEFAULT_PASSWORD)
