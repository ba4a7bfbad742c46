"""
State machine for job applications.
ALL status changes must go through this module.
"""
import logging
from datetime import datetime
from typing import Optional, Dict, FrozenSet
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.errors import ConflictError
from jobboard.models.application import Application, ApplicationStatus

# Configure logger
logger = logging.getLogger(__name__)


# Define allowed status transitions (forward-only)
ALLOWED_TRANSITIONS: Dict[ApplicationStatus, FrozenSet[ApplicationStatus]] = {
    ApplicationStatus.PENDING: frozenset({
        ApplicationStatus.REVIEWING,
        ApplicationStatus.SHORTLISTED,
        ApplicationStatus.ACCEPTED,
        ApplicationStatus.REJECTED,  # Screened out without review
    }),
    ApplicationStatus.REVIEWING: frozenset({
        ApplicationStatus.SHORTLISTED,
        ApplicationStatus.ACCEPTED,
        ApplicationStatus.REJECTED,
    }),
    ApplicationStatus.SHORTLISTED: frozenset({
        ApplicationStatus.ACCEPTED,
        ApplicationStatus.REJECTED,
    }),
    ApplicationStatus.ACCEPTED: frozenset(),  # Terminal state
    ApplicationStatus.REJECTED: frozenset(),  # Terminal state
}

TERMINAL_STATES = frozenset(
    status for status, targets in ALLOWED_TRANSITIONS.items() if not targets
)


class InvalidTransitionError(ConflictError):
    """Raised when an invalid status transition is attempted"""
    pass


def allowed_next(current: ApplicationStatus) -> FrozenSet[ApplicationStatus]:
    """Statuses reachable in one step from `current`."""
    return ALLOWED_TRANSITIONS.get(ApplicationStatus(current), frozenset())


def can_transition(from_status: ApplicationStatus, to_status: ApplicationStatus) -> bool:
    """Check if a transition is allowed without modifying the database"""
    return ApplicationStatus(to_status) in allowed_next(from_status)


async def transition_application(
    db: AsyncSession,
    application: Application,
    to_status: ApplicationStatus,
    employer_notes: Optional[str] = None
) -> Application:
    """
    Move an application to a new status with validation.

    Caller is responsible for authorization (ownership filter).

    Args:
        db: Database session
        application: Application already loaded by the caller
        to_status: Target status
        employer_notes: Optional notes stored with the same update

    Returns:
        Updated Application

    Raises:
        InvalidTransitionError: If transition is not allowed
    """
    current = ApplicationStatus(application.status)
    to_status = ApplicationStatus(to_status)

    if not can_transition(current, to_status):
        raise InvalidTransitionError(
            f"Invalid status transition from {current.value} to {to_status.value}"
        )

    application.status = to_status.value

    # reviewed_at records the first time the application left PENDING
    if to_status != ApplicationStatus.PENDING and application.reviewed_at is None:
        application.reviewed_at = datetime.utcnow()

    if employer_notes:
        application.employer_notes = employer_notes

    await db.commit()

    log_data = {
        "application_id": str(application.id),
        "from_status": current.value,
        "to_status": to_status.value,
    }
    logger.info(f"Application status transition: {current.value} → {to_status.value}", extra=log_data)

    return application
