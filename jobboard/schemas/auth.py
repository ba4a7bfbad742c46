"""Authentication-related Pydantic schemas."""
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from jobboard.models.user import UserRole
from jobboard.schemas.common import CamelModel
from jobboard.schemas.user import UserResponse

# Roles a user may pick at registration; ADMIN is granted, never chosen
SELF_SERVICE_ROLES = (UserRole.EMPLOYER, UserRole.CANDIDATE)


class RegisterRequest(CamelModel):
    """Request to create a password account."""
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    role: UserRole = UserRole.CANDIDATE

    # Optional profile fields
    phone: Optional[str] = Field(None, max_length=20)
    location: Optional[str] = None
    company: Optional[str] = None
    position: Optional[str] = None
    skills: list[str] = Field(default_factory=list)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("role")
    @classmethod
    def no_self_service_admin(cls, v: UserRole) -> UserRole:
        if v not in SELF_SERVICE_ROLES:
            raise ValueError("Role must be EMPLOYER or CANDIDATE")
        return v


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class RefreshRequest(CamelModel):
    refresh_token: Optional[str] = None


class TokenResponse(CamelModel):
    """Response after login or refresh."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class LoginData(CamelModel):
    user: UserResponse
    tokens: TokenResponse
