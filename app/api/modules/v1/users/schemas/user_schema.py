from datetime import datetime

from pydantic import BaseModel, ConfigDict

from app.api.modules.v1.users.models.users_model import UserRole


class UserResponse(BaseModel):
    id: str
    email: str
    role: UserRole
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
