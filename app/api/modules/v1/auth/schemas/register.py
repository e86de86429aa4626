from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.api.utils.validators import is_strong_password


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    confirm_password: str
    full_name: str
    skills: Optional[str] = Field(None, description="Comma-separated list of skills")
    experience: int = Field(0, ge=0, le=100, description="Years of experience")

    @field_validator("password")
    @classmethod
    def password_strength(cls, v):
        error = is_strong_password(v)
        if error:
            raise ValueError(error)
        return v

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, v, info):
        password = info.data.get("password")
        if password is not None and v != password:
            raise ValueError("Passwords do not match.")
        return v

    @field_validator("full_name")
    @classmethod
    def full_name_not_empty(cls, v):
        if not v.strip():
            raise ValueError("Full name cannot be empty")
        return v.strip()
