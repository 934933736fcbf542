from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field

from ..core.security import UserRole

class UserRegister(BaseModel):
    # Emptiness is a domain rule (MISSING_FIELD), not a schema rule
    name: str = ""
    email: str = ""
    password: str = ""
    role: UserRole = UserRole.PATIENT

class UserLogin(BaseModel):
    email: str
    password: str

class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str
    role: UserRole
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

class UserInDB(UserResponse):
    """A user as held by the store, including the password hash."""

    password_hash: str = ""

    def public(self) -> UserResponse:
        return UserResponse.model_validate(self.model_dump(exclude={"password_hash"}))
