from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer, ForeignKey

from jobboard.database import Base
from jobboard.database_types import GUID


class UserSession(Base):
    """
    The single active refresh token of a user.

    Only a SHA-256 digest of the token is stored. An empty digest means
    logged out. Rotation swaps the digest with a conditional UPDATE
    (see services/sessions.py), so a rotated-out token can never match again.
    """
    __tablename__ = "user_sessions"

    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    refresh_token_hash = Column(String(64), nullable=False, default="")
    rotation_count = Column(Integer, nullable=False, default=0)

    issued_at = Column(DateTime, default=datetime.utcnow, nullable=False)
