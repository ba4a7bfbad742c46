"""
Jobs API endpoints.
Public search and detail; employer-owned CRUD, close/reopen and stats.
"""
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.api.auth import require_employer
from jobboard.database import get_db
from jobboard.models.job import JobType, ExperienceLevel, JobStatus
from jobboard.models.user import User
from jobboard.schemas.common import ApiResponse, MessageResponse, Pagination, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from jobboard.schemas.job import JobCreate, JobUpdate, JobResponse, JobSearchQuery, JobStats
from jobboard.services import jobs as job_service

# Configure logger
logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================
# PUBLIC
# ============================================================

@router.get("/search", response_model=ApiResponse[list[JobResponse]])
async def search_jobs(
    search: Optional[str] = Query(None, description="Space-separated terms; any term may match"),
    location: Optional[str] = Query(None, description="Case-insensitive substring"),
    type: Optional[JobType] = Query(None),
    experience: Optional[ExperienceLevel] = Query(None),
    remote: Optional[bool] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db)
):
    """Search ACTIVE jobs, newest first."""
    query = JobSearchQuery(
        search=search,
        location=location,
        type=type,
        experience=experience,
        remote=remote,
        page=page,
        limit=limit,
    )
    items, total = await job_service.search_jobs(db, query)
    return ApiResponse(
        message="Jobs retrieved successfully",
        data=[JobResponse.model_validate(job) for job in items],
        pagination=Pagination.build(page, limit, total),
    )


# ============================================================
# EMPLOYER
# Declared before /{job_id} so the static paths win.
# ============================================================

@router.get("/employer/jobs", response_model=ApiResponse[list[JobResponse]])
async def list_employer_jobs(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    status: Optional[JobStatus] = Query(None),
    employer: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db)
):
    items, total = await job_service.list_employer_jobs(db, employer.id, page, limit, status)
    return ApiResponse(
        message="Jobs retrieved successfully",
        data=[JobResponse.model_validate(job) for job in items],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/employer/stats", response_model=ApiResponse[JobStats])
async def get_employer_stats(
    employer: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db)
):
    stats = await job_service.get_job_stats(db, employer.id)
    return ApiResponse(message="Job statistics retrieved successfully", data=stats)


@router.post("/", response_model=ApiResponse[JobResponse], status_code=201)
async def create_job(
    data: JobCreate,
    employer: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db)
):
    job = await job_service.create_job(db, data, employer)
    return ApiResponse(message="Job created successfully", data=JobResponse.model_validate(job))


@router.get("/{job_id}", response_model=ApiResponse[JobResponse])
async def get_job(
    job_id: UUID,
    db: AsyncSession = Depends(get_db)
):
    job = await job_service.get_job(db, job_id)
    return ApiResponse(message="Job retrieved successfully", data=JobResponse.model_validate(job))


@router.put("/{job_id}", response_model=ApiResponse[JobResponse])
async def update_job(
    job_id: UUID,
    patch: JobUpdate,
    employer: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db)
):
    """
    Partially update a job the caller owns.
    Unknown fields are rejected with 400; a job owned by someone else is a 404.
    """
    job = await job_service.update_job(db, job_id, patch, employer)
    return ApiResponse(message="Job updated successfully", data=JobResponse.model_validate(job))


@router.delete("/{job_id}", response_model=MessageResponse)
async def delete_job(
    job_id: UUID,
    employer: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db)
):
    await job_service.delete_job(db, job_id, employer)
    return MessageResponse(message="Job deleted successfully")


@router.patch("/{job_id}/close", response_model=ApiResponse[JobResponse])
async def close_job(
    job_id: UUID,
    employer: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db)
):
    job = await job_service.close_job(db, job_id, employer)
    return ApiResponse(message="Job closed successfully", data=JobResponse.model_validate(job))


@router.patch("/{job_id}/reopen", response_model=ApiResponse[JobResponse])
async def reopen_job(
    job_id: UUID,
    employer: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db)
):
    job = await job_service.reopen_job(db, job_id, employer)
    return ApiResponse(message="Job reopened successfully", data=JobResponse.model_validate(job))
