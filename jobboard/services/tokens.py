"""
Access/refresh token issuing and verification.

Access and refresh tokens are signed with different secrets, so one can
never be replayed as the other. Pure functions: no I/O, no state.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import uuid4

import jwt
from pydantic import BaseModel

from jobboard.config import settings

ACCESS = "access"
REFRESH = "refresh"


class TokenPayload(BaseModel):
    """Identity carried by every token."""
    user_id: str
    email: str
    role: str


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str


class InvalidTokenError(Exception):
    """Raised when a token is malformed, tampered with, or of the wrong kind"""
    pass


class TokenExpiredError(InvalidTokenError):
    """Raised when a token is well-formed and correctly signed but expired"""
    pass


def _encode(payload: TokenPayload, secret: str, token_type: str, expires_delta: timedelta) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        "userId": payload.user_id,
        "email": payload.email,
        "role": payload.role,
        "type": token_type,
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "iat": now,
        "exp": now + expires_delta,
        # Unique per token: two pairs minted in the same second must differ
        # or rotation could hand back the token it just revoked.
        "jti": uuid4().hex,
    }
    return jwt.encode(claims, secret, algorithm=settings.jwt_algorithm)


def _decode(token: str, secret: str, token_type: str) -> TokenPayload:
    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
            options={"require": ["exp", "iat", "iss", "aud"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise TokenExpiredError(f"{token_type} token expired") from e
    except jwt.InvalidTokenError as e:
        raise InvalidTokenError(f"Invalid {token_type} token") from e

    if claims.get("type") != token_type:
        raise InvalidTokenError(f"Invalid {token_type} token")
    if not claims.get("userId") or not claims.get("email") or not claims.get("role"):
        raise InvalidTokenError(f"Invalid {token_type} token")

    return TokenPayload(user_id=claims["userId"], email=claims["email"], role=claims["role"])


def create_access_token(payload: TokenPayload, expires_delta: Optional[timedelta] = None) -> str:
    """Short-lived token sent as `Authorization: Bearer <token>`."""
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_ttl_minutes)
    return _encode(payload, settings.jwt_secret, ACCESS, expires_delta)


def create_refresh_token(payload: TokenPayload, expires_delta: Optional[timedelta] = None) -> str:
    """Long-lived token exchanged for a new pair at /users/refresh."""
    if expires_delta is None:
        expires_delta = timedelta(days=settings.refresh_token_ttl_days)
    return _encode(payload, settings.jwt_refresh_secret, REFRESH, expires_delta)


def issue_token_pair(payload: TokenPayload) -> TokenPair:
    return TokenPair(
        access_token=create_access_token(payload),
        refresh_token=create_refresh_token(payload),
    )


def verify_access_token(token: str) -> TokenPayload:
    """
    Decode and validate an access token.

    Raises:
        TokenExpiredError: signature is valid but `exp` has passed
        InvalidTokenError: anything else (bad signature, issuer, audience, type)
    """
    return _decode(token, settings.jwt_secret, ACCESS)


def verify_refresh_token(token: str) -> TokenPayload:
    """Same contract as verify_access_token, against the refresh secret."""
    return _decode(token, settings.jwt_refresh_secret, REFRESH)
