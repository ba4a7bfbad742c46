"""
Job application operations.

Every lookup is scoped to the caller: candidates see their own
applications, employers see applications to their jobs, admins see all.
A miss and a "not yours" produce the same NotFoundError.
"""
import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.errors import ConflictError, NotFoundError, ValidationFailedError
from jobboard.models.application import Application, ApplicationStatus
from jobboard.models.job import Job, JobStatus
from jobboard.models.user import User, UserRole
from jobboard.schemas.application import (
    ApplicationCreate,
    ApplicationStatusUpdate,
    ApplicationQuery,
    ApplicationStats,
)
from jobboard.services.email import email_service, NOTIFY_STATUSES
from jobboard.services.state_machine import transition_application

logger = logging.getLogger(__name__)


async def _find_one(db: AsyncSession, *filters) -> Optional[Application]:
    result = await db.execute(select(Application).where(*filters))
    return result.scalar_one_or_none()


async def create_application(db: AsyncSession, data: ApplicationCreate, candidate: User) -> Application:
    """
    Submit an application to an ACTIVE job.

    Raises:
        ConflictError: job missing or not ACTIVE, or already applied
        ValidationFailedError: no mobile number in the request or the profile
    """
    result = await db.execute(
        select(Job).where(Job.id == data.job_id, Job.status == JobStatus.ACTIVE.value)
    )
    job = result.scalar_one_or_none()
    if job is None:
        raise ConflictError("Job not found or not active")

    if await _find_one(db, Application.job_id == job.id, Application.candidate_id == candidate.id):
        raise ConflictError("You have already applied for this job")

    mobile_number = data.mobile_number or candidate.phone
    if not mobile_number:
        raise ValidationFailedError.for_field("mobileNumber", "Mobile number is required")

    application = Application(
        candidate=candidate,
        employer=job.employer,
        candidate_id=candidate.id,
        employer_id=job.employer_id,
        status=ApplicationStatus.PENDING.value,
        cover_letter=data.cover_letter,
        resume=data.resume,
        mobile_number=mobile_number,
        location=data.location or candidate.location,
        expected_salary_amount=data.expected_salary,
        expected_salary_currency=data.expected_salary_currency if data.expected_salary is not None else None,
        availability=data.availability.value,
        notes=data.notes,
        applied_at=datetime.utcnow(),
    )
    # Appending sets application.job; both rows are written by the same commit
    job.applications.append(application)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("You have already applied for this job")

    logger.info(f"Candidate {candidate.email} applied to job {job.id} (application {application.id})")
    return application


async def get_application(db: AsyncSession, application_id: UUID, user: User) -> Application:
    filters = [Application.id == application_id]
    if user.role == UserRole.CANDIDATE:
        filters.append(Application.candidate_id == user.id)
    elif user.role == UserRole.EMPLOYER:
        filters.append(Application.employer_id == user.id)

    application = await _find_one(db, *filters)
    if application is None:
        raise NotFoundError("Application not found or access denied")
    return application


async def update_application_status(
    db: AsyncSession,
    application_id: UUID,
    data: ApplicationStatusUpdate,
    current_user: User
) -> Application:
    """
    Move an application through the state machine on behalf of the job's owner.

    The candidate is emailed for ACCEPTED, REJECTED and SHORTLISTED. A failed
    email is logged and does not undo the status change. Candidates get the
    same 404 as a miss.
    """
    filters = [Application.id == application_id]
    if current_user.role == UserRole.EMPLOYER:
        filters.append(Application.employer_id == current_user.id)

    application = None
    if current_user.role in (UserRole.EMPLOYER, UserRole.ADMIN):
        application = await _find_one(db, *filters)
    if application is None:
        raise NotFoundError("Application not found or access denied")

    application = await transition_application(db, application, data.status, data.employer_notes)

    if data.status in NOTIFY_STATUSES:
        try:
            sent = await email_service.send_application_status_email(
                email=application.candidate.email,
                candidate_name=application.candidate.name,
                job_title=application.job.title,
                company=application.job.company,
                employer_name=application.employer.name,
                status=data.status,
                reply_to=application.employer.email,
            )
            if not sent:
                logger.warning(f"Status email for application {application.id} was not sent")
        except Exception as e:
            logger.error(f"Status email for application {application.id} failed: {str(e)}")

    return application


async def _list(db: AsyncSession, filters: list, query: ApplicationQuery) -> tuple[list[Application], int]:
    if query.status:
        filters.append(Application.status == query.status.value)
    if query.job_id:
        filters.append(Application.job_id == query.job_id)

    result = await db.execute(
        select(Application)
        .where(*filters)
        .order_by(Application.applied_at.desc())
        .offset(query.offset)
        .limit(query.limit)
    )
    total = await db.scalar(select(func.count()).select_from(Application).where(*filters))
    return list(result.scalars().all()), total or 0


async def list_candidate_applications(
    db: AsyncSession,
    candidate_id: UUID,
    query: ApplicationQuery
) -> tuple[list[Application], int]:
    return await _list(db, [Application.candidate_id == candidate_id], query)


async def list_employer_applications(
    db: AsyncSession,
    employer_id: UUID,
    query: ApplicationQuery
) -> tuple[list[Application], int]:
    filters = [Application.employer_id == employer_id]
    if query.candidate_id:
        filters.append(Application.candidate_id == query.candidate_id)
    return await _list(db, filters, query)


async def get_application_stats(db: AsyncSession, employer_id: UUID) -> ApplicationStats:
    result = await db.execute(
        select(Application.status, func.count())
        .where(Application.employer_id == employer_id)
        .group_by(Application.status)
    )
    by_status = {status: count for status, count in result.all()}

    return ApplicationStats(
        total=sum(by_status.values()),
        **{status.value.lower(): by_status.get(status.value, 0) for status in ApplicationStatus},
    )


async def withdraw_application(db: AsyncSession, application_id: UUID, candidate: User) -> None:
    """
    Delete a PENDING application owned by `candidate`.

    Removing it from the job's collection and deleting the row commit
    together; the candidate may apply to the same job again afterwards.
    """
    application = await _find_one(
        db,
        Application.id == application_id,
        Application.candidate_id == candidate.id,
        Application.status == ApplicationStatus.PENDING.value,
    )
    if application is None:
        raise NotFoundError("Application not found or cannot be withdrawn")

    try:
        application.job.applications.remove(application)
        await db.delete(application)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(f"Candidate {candidate.email} withdrew application {application_id}")
