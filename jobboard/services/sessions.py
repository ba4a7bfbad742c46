"""
Single-active-refresh-token session store.

One UserSession row per user. Login overwrites it, refresh swaps it
conditionally, logout empties it.
"""
import hashlib
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.models.user_session import UserSession

logger = logging.getLogger(__name__)


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


async def get_session(db: AsyncSession, user_id) -> Optional[UserSession]:
    return await db.get(UserSession, user_id)


async def store_refresh_token(db: AsyncSession, user_id, refresh_token: str) -> UserSession:
    """
    Make `refresh_token` the user's only valid refresh token.

    Unconditional overwrite: any previously issued refresh token stops
    working. Does not commit.
    """
    session = await get_session(db, user_id)
    if session is None:
        session = UserSession(user_id=user_id)
        db.add(session)

    session.refresh_token_hash = hash_token(refresh_token)
    session.issued_at = datetime.utcnow()
    return session


async def matches_current(db: AsyncSession, user_id, refresh_token: str) -> bool:
    """True if `refresh_token` is the one currently stored for the user."""
    session = await get_session(db, user_id)
    if session is None or not session.refresh_token_hash:
        return False
    return session.refresh_token_hash == hash_token(refresh_token)


async def rotate_refresh_token(db: AsyncSession, user_id, presented: str, replacement: str) -> bool:
    """
    Compare-and-swap the stored token from `presented` to `replacement`.

    Returns False when the stored token is no longer `presented` (already
    rotated by a concurrent refresh, or logged out). Does not commit.
    """
    result = await db.execute(
        update(UserSession)
        .where(
            UserSession.user_id == user_id,
            UserSession.refresh_token_hash == hash_token(presented),
        )
        .values(
            refresh_token_hash=hash_token(replacement),
            issued_at=datetime.utcnow(),
            rotation_count=UserSession.rotation_count + 1,
        )
        .execution_options(synchronize_session=False)
    )
    swapped = result.rowcount == 1
    if not swapped:
        logger.warning(f"Refresh token rotation lost for user {user_id}")
        return False

    # The UPDATE bypassed the identity map; reload any cached row
    session = await get_session(db, user_id)
    await db.refresh(session)
    return True


async def clear_session(db: AsyncSession, user_id) -> None:
    """Invalidate the stored refresh token. Does not commit."""
    session = await get_session(db, user_id)
    if session is not None:
        session.refresh_token_hash = ""
