"""
Job posting operations.

Write operations filter on (id, employer_id) so a job that exists but
belongs to someone else is indistinguishable from one that doesn't.
"""
import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import select, func, or_, cast, String
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.errors import NotFoundError, ValidationFailedError
from jobboard.models.application import Application
from jobboard.models.job import Job, JobStatus
from jobboard.models.user import User
from jobboard.schemas.job import JobCreate, JobUpdate, JobSearchQuery, JobStats, check_salary_range

logger = logging.getLogger(__name__)

JOB_NOT_FOUND = "Job not found"


async def _get_owned_job(db: AsyncSession, job_id: UUID, employer: User) -> Job:
    filters = [Job.id == job_id]
    if not employer.is_admin():
        filters.append(Job.employer_id == employer.id)

    result = await db.execute(select(Job).where(*filters))
    job = result.scalar_one_or_none()
    if job is None:
        raise NotFoundError(JOB_NOT_FOUND)
    return job


async def create_job(db: AsyncSession, data: JobCreate, employer: User) -> Job:
    job = Job(
        employer_id=employer.id,
        title=data.title,
        description=data.description,
        requirements=data.requirements,
        responsibilities=data.responsibilities,
        company=data.company,
        location=data.location,
        type=data.type.value,
        experience=data.experience.value,
        salary_min=data.salary_min,
        salary_max=data.salary_max,
        salary_currency=data.salary_currency,
        skills=data.skills,
        benefits=data.benefits,
        remote=data.remote,
        deadline=data.deadline,
        status=JobStatus.ACTIVE.value,
    )
    db.add(job)
    await db.commit()
    await db.refresh(job)

    logger.info(f"Created job {job.id}: {job.title} at {job.company}")
    return job


async def get_job(db: AsyncSession, job_id: UUID) -> Job:
    """Public lookup, any status."""
    result = await db.execute(select(Job).where(Job.id == job_id))
    job = result.scalar_one_or_none()
    if job is None:
        raise NotFoundError(JOB_NOT_FOUND)
    return job


async def update_job(db: AsyncSession, job_id: UUID, patch: JobUpdate, employer: User) -> Job:
    """
    Apply an allow-listed partial update.

    Salary bounds are merged with the stored values before the range
    check, so sending only salaryMax is validated against the current min.
    """
    job = await _get_owned_job(db, job_id, employer)
    changes = patch.model_dump(exclude_unset=True)

    try:
        check_salary_range(
            changes.get("salary_min", job.salary_min),
            changes.get("salary_max", job.salary_max),
        )
    except ValueError as e:
        raise ValidationFailedError.for_field("salaryMax", str(e))

    for field, value in changes.items():
        if value is None and field != "deadline":
            continue  # required columns can't be nulled through a patch
        if hasattr(value, "value"):
            value = value.value
        setattr(job, field, value)

    job.updated_at = datetime.utcnow()
    await db.commit()
    await db.refresh(job)

    logger.info(f"Updated job {job.id}: {sorted(changes)}")
    return job


async def delete_job(db: AsyncSession, job_id: UUID, employer: User) -> None:
    """Delete a job and, through the relationship cascade, its applications."""
    job = await _get_owned_job(db, job_id, employer)
    await db.delete(job)
    await db.commit()
    logger.info(f"Deleted job {job_id}")


async def _set_status(db: AsyncSession, job_id: UUID, employer: User, status: JobStatus) -> Job:
    job = await _get_owned_job(db, job_id, employer)
    previous = job.status
    job.status = status.value
    job.updated_at = datetime.utcnow()
    await db.commit()
    await db.refresh(job)

    logger.info(f"Job {job.id} status: {previous} → {status.value}")
    return job


async def close_job(db: AsyncSession, job_id: UUID, employer: User) -> Job:
    return await _set_status(db, job_id, employer, JobStatus.CLOSED)


async def reopen_job(db: AsyncSession, job_id: UUID, employer: User) -> Job:
    return await _set_status(db, job_id, employer, JobStatus.ACTIVE)


def _search_filters(query: JobSearchQuery) -> list:
    filters = [Job.status == JobStatus.ACTIVE.value]

    if query.search:
        terms = [term for term in query.search.split() if term]
        if terms:
            filters.append(or_(*[
                or_(
                    Job.title.ilike(f"%{term}%"),
                    Job.description.ilike(f"%{term}%"),
                    cast(Job.skills, String).ilike(f"%{term}%"),
                )
                for term in terms
            ]))
    if query.location:
        filters.append(Job.location.ilike(f"%{query.location.strip()}%"))
    if query.type:
        filters.append(Job.type == query.type.value)
    if query.experience:
        filters.append(Job.experience == query.experience.value)
    if query.remote is not None:
        filters.append(Job.remote == query.remote)

    return filters


async def search_jobs(db: AsyncSession, query: JobSearchQuery) -> tuple[list[Job], int]:
    """Public search over ACTIVE jobs, newest first."""
    filters = _search_filters(query)

    result = await db.execute(
        select(Job)
        .where(*filters)
        .order_by(Job.created_at.desc())
        .offset(query.offset)
        .limit(query.limit)
    )
    total = await db.scalar(select(func.count()).select_from(Job).where(*filters))
    return list(result.scalars().all()), total or 0


async def list_employer_jobs(
    db: AsyncSession,
    employer_id: UUID,
    page: int,
    limit: int,
    status: Optional[JobStatus] = None
) -> tuple[list[Job], int]:
    filters = [Job.employer_id == employer_id]
    if status is not None:
        filters.append(Job.status == status.value)

    result = await db.execute(
        select(Job)
        .where(*filters)
        .order_by(Job.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    total = await db.scalar(select(func.count()).select_from(Job).where(*filters))
    return list(result.scalars().all()), total or 0


async def get_job_stats(db: AsyncSession, employer_id: UUID) -> JobStats:
    result = await db.execute(
        select(Job.status, func.count())
        .where(Job.employer_id == employer_id)
        .group_by(Job.status)
    )
    by_status = {status: count for status, count in result.all()}

    applications = await db.scalar(
        select(func.count()).select_from(Application).where(Application.employer_id == employer_id)
    )

    return JobStats(
        total=sum(by_status.values()),
        active=by_status.get(JobStatus.ACTIVE.value, 0),
        closed=by_status.get(JobStatus.CLOSED.value, 0),
        draft=by_status.get(JobStatus.DRAFT.value, 0),
        applications=applications or 0,
    )
