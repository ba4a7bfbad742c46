"""
Applications API endpoints.
Candidates apply, list and withdraw; employers list, review and move
applications through the status state machine.
"""
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.api.auth import get_current_user, require_candidate, require_employer
from jobboard.database import get_db
from jobboard.models.application import ApplicationStatus
from jobboard.models.user import User
from jobboard.schemas.application import (
    ApplicationCreate,
    ApplicationStatusUpdate,
    ApplicationQuery,
    ApplicationResponse,
    ApplicationStats,
)
from jobboard.schemas.common import ApiResponse, MessageResponse, Pagination, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from jobboard.services import applications as application_service

logger = logging.getLogger(__name__)

router = APIRouter()


def _page(items, query: ApplicationQuery, total: int) -> ApiResponse[list[ApplicationResponse]]:
    return ApiResponse(
        message="Applications retrieved successfully",
        data=[ApplicationResponse.model_validate(application) for application in items],
        pagination=Pagination.build(query.page, query.limit, total),
    )


@router.post("/", response_model=ApiResponse[ApplicationResponse], status_code=201)
async def create_application(
    data: ApplicationCreate,
    candidate: User = Depends(require_candidate),
    db: AsyncSession = Depends(get_db)
):
    """
    Apply to an ACTIVE job.

    mobileNumber and location fall back to the candidate's profile.
    Applying twice to the same job is a 400.
    """
    application = await application_service.create_application(db, data, candidate)
    return ApiResponse(
        message="Application submitted successfully",
        data=ApplicationResponse.model_validate(application),
    )


@router.get("/candidate", response_model=ApiResponse[list[ApplicationResponse]])
async def list_candidate_applications(
    status: Optional[ApplicationStatus] = Query(None),
    job_id: Optional[UUID] = Query(None, alias="jobId"),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    candidate: User = Depends(require_candidate),
    db: AsyncSession = Depends(get_db)
):
    query = ApplicationQuery(status=status, job_id=job_id, page=page, limit=limit)
    items, total = await application_service.list_candidate_applications(db, candidate.id, query)
    return _page(items, query, total)


@router.get("/employer", response_model=ApiResponse[list[ApplicationResponse]])
async def list_employer_applications(
    status: Optional[ApplicationStatus] = Query(None),
    job_id: Optional[UUID] = Query(None, alias="jobId"),
    candidate_id: Optional[UUID] = Query(None, alias="candidateId"),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    employer: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db)
):
    query = ApplicationQuery(status=status, job_id=job_id, candidate_id=candidate_id, page=page, limit=limit)
    items, total = await application_service.list_employer_applications(db, employer.id, query)
    return _page(items, query, total)


@router.get("/employer/stats", response_model=ApiResponse[ApplicationStats])
async def get_employer_stats(
    employer: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db)
):
    stats = await application_service.get_application_stats(db, employer.id)
    return ApiResponse(message="Application statistics retrieved successfully", data=stats)


@router.patch("/{application_id}/status", response_model=ApiResponse[ApplicationResponse])
async def update_application_status(
    application_id: UUID,
    data: ApplicationStatusUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Move an application to a new status.

    Returns:
        200: transition applied
        400: transition not allowed from the current status
        404: application missing, on another employer's job, or caller is not an employer
    """
    application = await application_service.update_application_status(db, application_id, data, current_user)
    return ApiResponse(
        message="Application status updated successfully",
        data=ApplicationResponse.model_validate(application),
    )


@router.get("/{application_id}", response_model=ApiResponse[ApplicationResponse])
async def get_application(
    application_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    application = await application_service.get_application(db, application_id, current_user)
    return ApiResponse(
        message="Application retrieved successfully",
        data=ApplicationResponse.model_validate(application),
    )


@router.delete("/{application_id}/withdraw", response_model=MessageResponse)
async def withdraw_application(
    application_id: UUID,
    candidate: User = Depends(require_candidate),
    db: AsyncSession = Depends(get_db)
):
    """Withdraw a PENDING application. Anything past PENDING is a 404."""
    await application_service.withdraw_application(db, application_id, candidate)
    return MessageResponse(message="Application withdrawn successfully")
