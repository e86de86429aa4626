import pytest
from pydantic import ValidationError

from app.api.modules.v1.auth.schemas.register import RegisterRequest

VALID = {
    "email": "someone@example.com",
    "password": "Str0ng!Pass",
    "confirm_password": "Str0ng!Pass",
    "full_name": "Someone",
}


def test_valid_request_defaults():
    request = RegisterRequest(**VALID)

    assert request.experience == 0
    assert request.skills is None


def test_full_name_is_stripped():
    request = RegisterRequest(**{**VALID, "full_name": "  Someone  "})
    assert request.full_name == "Someone"


@pytest.mark.parametrize(
    "overrides",
    [
        {"email": "not-an-email"},
        {"password": "weakpass", "confirm_password": "weakpass"},
        {"confirm_password": "Different1!"},
        {"full_name": "   "},
        {"experience": -1},
        {"experience": 101},
    ],
)
def test_invalid_requests(overrides):
    with pytest.raises(ValidationError):
        RegisterRequest(**{**VALID, **overrides})
