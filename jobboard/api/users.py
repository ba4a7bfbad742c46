"""
User endpoints: registration, login, token refresh, logout,
own profile, and admin moderation.
"""
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.api.auth import get_current_user, get_refresh_user, require_admin
from jobboard.database import get_db
from jobboard.errors import UnauthorizedError
from jobboard.models.user import User, UserRole
from jobboard.schemas.auth import RegisterRequest, LoginRequest, LoginData, TokenResponse
from jobboard.schemas.common import ApiResponse, MessageResponse, Pagination, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from jobboard.schemas.user import UserResponse, UserUpdate, BlockUserRequest
from jobboard.services import users as user_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=ApiResponse[UserResponse], status_code=201)
async def register(
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db)
):
    """Create a password account. ADMIN cannot be chosen here."""
    user = await user_service.create_user(db, data)
    return ApiResponse(message="User registered successfully", data=UserResponse.model_validate(user))


@router.post("/login", response_model=ApiResponse[LoginData])
async def login(
    data: LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Exchange email and password for an access/refresh token pair.

    Unknown email, wrong password, blocked account and passwordless
    (OAuth) accounts all get the same 401.
    """
    authenticated = await user_service.authenticate_user(db, data.email, data.password)
    if authenticated is None:
        logger.warning(f"Failed login attempt for {data.email}")
        raise UnauthorizedError("Invalid email or password")

    user, tokens = authenticated
    return ApiResponse(
        message="Login successful",
        data=LoginData(
            user=UserResponse.model_validate(user),
            tokens=TokenResponse(access_token=tokens.access_token, refresh_token=tokens.refresh_token),
        ),
    )


@router.post("/refresh", response_model=ApiResponse[TokenResponse])
async def refresh(
    refresh_user: tuple[User, str] = Depends(get_refresh_user),
    db: AsyncSession = Depends(get_db)
):
    """Rotate the refresh token. The presented token stops working."""
    user, presented = refresh_user
    tokens = await user_service.refresh_user_tokens(db, user, presented)
    return ApiResponse(
        message="Token refreshed successfully",
        data=TokenResponse(access_token=tokens.access_token, refresh_token=tokens.refresh_token),
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await user_service.logout_user(db, current_user)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=ApiResponse[UserResponse])
async def get_me(current_user: User = Depends(get_current_user)):
    return ApiResponse(message="Profile retrieved successfully", data=UserResponse.model_validate(current_user))


@router.put("/me", response_model=ApiResponse[UserResponse])
async def update_me(
    patch: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Update own profile. Role, email, password and block state are not patchable."""
    user = await user_service.update_profile(db, current_user, patch)
    return ApiResponse(message="Profile updated successfully", data=UserResponse.model_validate(user))


# ============================================================
# ADMIN
# ============================================================

@router.get("/", response_model=ApiResponse[list[UserResponse]])
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    role: Optional[UserRole] = Query(None),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    items, total = await user_service.list_users(db, page, limit, role)
    return ApiResponse(
        message="Users retrieved successfully",
        data=[UserResponse.model_validate(user) for user in items],
        pagination=Pagination.build(page, limit, total),
    )


@router.patch("/{user_id}/block", response_model=ApiResponse[UserResponse])
async def block_user(
    user_id: UUID,
    data: BlockUserRequest,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    user = await user_service.set_blocked(db, user_id, data.blocked, data.reason)
    message = "User blocked successfully" if user.blocked else "User unblocked successfully"
    return ApiResponse(message=message, data=UserResponse.model_validate(user))


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    await user_service.delete_user(db, user_id)
    return MessageResponse(message="User deleted successfully")
