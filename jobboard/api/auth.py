"""
Authentication and authorization dependencies.

Security features:
- Bearer access tokens (JWT, short-lived) on every protected route
- Expired tokens are reported with code TOKEN_EXPIRED so clients know to refresh
- Refresh tokens are single-use: the stored hash must match the presented token
- Blocked users are rejected on every request, not just at login
- Role-based access control (employer, candidate, admin)
"""
import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.database import get_db
from jobboard.errors import (
    AppError,
    ForbiddenError,
    InternalError,
    UnauthorizedError,
    ValidationFailedError,
)
from jobboard.models.user import User, UserRole
from jobboard.schemas.auth import RefreshRequest
from jobboard.services import sessions
from jobboard.services.tokens import (
    InvalidTokenError,
    TokenExpiredError,
    verify_access_token,
    verify_refresh_token,
)
from jobboard.services.users import get_user

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Dependency to get the authenticated user from the Authorization header.

    Returns:
        User: The authenticated, non-blocked user

    Raises:
        UnauthorizedError 401: missing, expired or invalid token; unknown or blocked user
        InternalError 500: anything unexpected while authenticating
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Access token required")

    try:
        payload = verify_access_token(credentials.credentials)
    except TokenExpiredError:
        raise UnauthorizedError("Token expired", code="TOKEN_EXPIRED")
    except InvalidTokenError:
        raise UnauthorizedError("Invalid token")

    try:
        user = await get_user(db, payload.user_id)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Authentication error: {str(e)}")
        raise InternalError("Authentication error")

    if user is None or user.blocked:
        raise UnauthorizedError("User not found or blocked")

    return user


async def get_refresh_user(
    body: Optional[RefreshRequest] = None,
    db: AsyncSession = Depends(get_db)
) -> tuple[User, str]:
    """
    Dependency that validates the refresh token in the request body.

    Returns the user and the presented token; the route performs the
    rotation.
    """
    token = body.refresh_token if body else None
    if not token:
        raise ValidationFailedError("Refresh token required")

    try:
        payload = verify_refresh_token(token)
    except TokenExpiredError:
        raise UnauthorizedError("Refresh token expired")
    except InvalidTokenError:
        raise UnauthorizedError("Invalid refresh token")

    user = await get_user(db, payload.user_id)
    if user is None or user.blocked:
        raise UnauthorizedError("Invalid refresh token")

    if not await sessions.matches_current(db, user.id, token):
        logger.warning(f"Stale or revoked refresh token presented for {user.email}")
        raise UnauthorizedError("Invalid refresh token")

    return user, token


def require_roles(*roles: UserRole):
    """
    Build a dependency that only lets the given roles through.

    Usage:
        @router.post("/", dependencies=[Depends(require_roles(UserRole.EMPLOYER))])
    """
    allowed = frozenset(roles)

    async def check_role(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            logger.warning(
                f"Forbidden: {current_user.email} ({current_user.role.value}) needs one of "
                f"{sorted(role.value for role in allowed)}"
            )
            raise ForbiddenError("Insufficient permissions")
        return current_user

    return check_role


require_employer = require_roles(UserRole.EMPLOYER, UserRole.ADMIN)
require_candidate = require_roles(UserRole.CANDIDATE, UserRole.ADMIN)
require_admin = require_roles(UserRole.ADMIN)
