from datetime import datetime
from sqlalchemy import Column, String, DateTime, Boolean, Enum as SQLEnum
import uuid
import enum

from jobboard.database import Base
from jobboard.database_types import GUID, StringList


class UserRole(str, enum.Enum):
    """User role for role-based access control (RBAC)."""
    EMPLOYER = "EMPLOYER"  # Posts jobs, reviews applications to them
    CANDIDATE = "CANDIDATE"  # Applies to jobs
    ADMIN = "ADMIN"  # Passes every role check, manages users


class AuthProvider(str, enum.Enum):
    """How the account was created."""
    MANUAL = "manual"
    GOOGLE = "google"
    FACEBOOK = "facebook"
    APPLE = "apple"
    LINKEDIN = "linkedin"


class User(Base):
    __tablename__ = "users"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)

    # NULL for social-only accounts, which can never log in with a password
    password_hash = Column(String, nullable=True)

    role = Column(
        SQLEnum(UserRole, name="user_role", create_type=True),
        nullable=False,
        default=UserRole.CANDIDATE,
        index=True
    )
    provider = Column(
        SQLEnum(AuthProvider, name="auth_provider", create_type=True),
        nullable=False,
        default=AuthProvider.MANUAL
    )

    # Soft-disable: blocked users fail login, refresh and every protected route
    blocked = Column(Boolean, nullable=False, default=False)
    block_reason = Column(String, nullable=True)

    # Role-dependent profile fields (employers: company/position,
    # candidates: phone/location/skills). Not enforced per role.
    phone = Column(String(20), nullable=True)
    location = Column(String(255), nullable=True)
    company = Column(String(255), nullable=True)
    position = Column(String(255), nullable=True)
    skills = Column(StringList, nullable=True, default=list)
    image = Column(String(500), nullable=True)

    # Timestamps
    last_login_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def is_admin(self) -> bool:
        """Check if user has admin role."""
        return self.role == UserRole.ADMIN

    def can_login_with_password(self) -> bool:
        return not self.blocked and bool(self.password_hash)
