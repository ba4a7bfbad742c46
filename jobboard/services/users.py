"""
User store operations: registration, password login, token refresh,
logout, profile updates and admin moderation.

Every authentication failure collapses to the same outcome so callers
can never tell a wrong password from an unknown email.
"""
import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.errors import ConflictError, NotFoundError, UnauthorizedError
from jobboard.models.user import User, UserRole, AuthProvider
from jobboard.schemas.auth import RegisterRequest
from jobboard.schemas.user import UserUpdate
from jobboard.services import sessions
from jobboard.services.passwords import hash_password, verify_password
from jobboard.services.tokens import TokenPair, TokenPayload, issue_token_pair

logger = logging.getLogger(__name__)


def token_payload_for(user: User) -> TokenPayload:
    return TokenPayload(user_id=str(user.id), email=user.email, role=user.role.value)


async def get_user(db: AsyncSession, user_id) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email.strip().lower()))
    return result.scalar_one_or_none()


async def create_user(db: AsyncSession, data: RegisterRequest) -> User:
    """
    Create a password account.

    Raises:
        ConflictError: email already registered (pre-check or unique index race)
    """
    if await get_user_by_email(db, data.email):
        raise ConflictError("Email already registered")

    user = User(
        name=data.name,
        email=data.email,
        password_hash=hash_password(data.password),
        role=data.role,
        provider=AuthProvider.MANUAL,
        phone=data.phone,
        location=data.location,
        company=data.company,
        position=data.position,
        skills=data.skills,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Email already registered")
    await db.refresh(user)

    logger.info(f"Registered {user.role.value} account {user.email}")
    return user


async def authenticate_user(db: AsyncSession, email: str, password: str) -> Optional[tuple[User, TokenPair]]:
    """
    Check credentials and open a session.

    Returns None if the user is absent, blocked, has no password, or the
    password is wrong. On success the new refresh token replaces any
    previous one.
    """
    user = await get_user_by_email(db, email)
    if user is None or not user.can_login_with_password():
        return None
    if not verify_password(password, user.password_hash):
        return None

    tokens = issue_token_pair(token_payload_for(user))
    await sessions.store_refresh_token(db, user.id, tokens.refresh_token)
    user.last_login_at = datetime.utcnow()
    await db.commit()
    await db.refresh(user)

    logger.info(f"Successful login: {user.email}")
    return user, tokens


async def refresh_user_tokens(db: AsyncSession, user: User, presented: str) -> TokenPair:
    """
    Exchange the current refresh token for a new pair.

    The swap only succeeds if `presented` is still the stored token, so of
    two concurrent refreshes with the same token exactly one wins.

    Raises:
        UnauthorizedError: `presented` is no longer the active refresh token
    """
    tokens = issue_token_pair(token_payload_for(user))
    if not await sessions.rotate_refresh_token(db, user.id, presented, tokens.refresh_token):
        raise UnauthorizedError("Invalid refresh token")
    await db.commit()

    logger.info(f"Rotated refresh token for {user.email}")
    return tokens


async def logout_user(db: AsyncSession, user: User) -> None:
    await sessions.clear_session(db, user.id)
    await db.commit()
    logger.info(f"User logged out: {user.email}")


async def update_profile(db: AsyncSession, user: User, patch: UserUpdate) -> User:
    """Apply only the fields present in the allow-listed patch."""
    for field, value in patch.model_dump(exclude_unset=True).items():
        setattr(user, field, value)

    user.updated_at = datetime.utcnow()
    await db.commit()
    await db.refresh(user)
    return user


async def list_users(
    db: AsyncSession,
    page: int,
    limit: int,
    role: Optional[UserRole] = None
) -> tuple[list[User], int]:
    filters = []
    if role is not None:
        filters.append(User.role == role)

    result = await db.execute(
        select(User)
        .where(*filters)
        .order_by(User.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    total = await db.scalar(select(func.count()).select_from(User).where(*filters))
    return list(result.scalars().all()), total or 0


async def set_blocked(db: AsyncSession, user_id: UUID, blocked: bool, reason: Optional[str] = None) -> User:
    """Block or unblock a user. Blocking also ends their session."""
    user = await get_user(db, user_id)
    if user is None:
        raise NotFoundError("User not found")

    user.blocked = blocked
    user.block_reason = reason if blocked else None
    if blocked:
        await sessions.clear_session(db, user.id)
    await db.commit()
    await db.refresh(user)

    logger.warning(f"User {user.email} {'blocked' if blocked else 'unblocked'} (reason={reason})")
    return user


async def delete_user(db: AsyncSession, user_id: UUID) -> None:
    user = await get_user(db, user_id)
    if user is None:
        raise NotFoundError("User not found")

    await db.delete(user)
    await db.commit()
    logger.warning(f"Deleted user {user_id}")
