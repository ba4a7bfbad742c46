"""User/profile Pydantic schemas."""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import ConfigDict, Field

from jobboard.models.user import AuthProvider, UserRole
from jobboard.schemas.common import CamelModel


class UserSummary(CamelModel):
    """Embedded in job and application responses."""
    id: UUID
    name: str
    email: str
    company: Optional[str] = None
    image: Optional[str] = None


class CandidateSummary(UserSummary):
    phone: Optional[str] = None
    location: Optional[str] = None
    position: Optional[str] = None
    skills: list[str] = []


class UserResponse(CamelModel):
    """A user without password hash or session data."""
    id: UUID
    name: str
    email: str
    role: UserRole
    provider: AuthProvider
    blocked: bool = False
    block_reason: Optional[str] = None

    phone: Optional[str] = None
    location: Optional[str] = None
    company: Optional[str] = None
    position: Optional[str] = None
    skills: list[str] = []
    image: Optional[str] = None

    last_login_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class UserUpdate(CamelModel):
    """Profile fields a user may change on their own account. Nothing else."""
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=20)
    location: Optional[str] = None
    company: Optional[str] = None
    position: Optional[str] = None
    skills: Optional[list[str]] = None
    image: Optional[str] = Field(None, max_length=500)


class BlockUserRequest(CamelModel):
    blocked: bool = True
    reason: Optional[str] = None
