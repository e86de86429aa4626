from pydantic import BaseModel, EmailStr, field_validator


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr
    password: str

    @field_validator("password", mode="before")
    @classmethod
    def validate_password(cls, v):
        if not v or not str(v).strip():
            raise ValueError("Password cannot be empty")
        return v
