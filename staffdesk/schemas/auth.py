from pydantic import BaseModel, EmailStr, ConfigDict, Field, field_validator
from typing import Optional
from datetime import date

from staffdesk.models.profile import ProfileStatus, UserRole


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    name: Optional[str] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: int
    role: UserRole


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    name: str
    email: str
    role: UserRole
    department: Optional[str] = None
    status: str
    hire_date: Optional[date] = None


class ProfileSelfUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    department: Optional[str] = None


class ProfileAdminUpdate(ProfileSelfUpdate):
    role: Optional[UserRole] = None
    status: Optional[ProfileStatus] = None

    @field_validator("role", "status")
    @classmethod
    def not_null(cls, value):
        # Omit the field to leave it unchanged; null is not a role or status
        if value is None:
            raise ValueError("must not be null")
        return value
