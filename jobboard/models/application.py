from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Text, Index, UniqueConstraint
from sqlalchemy.orm import relationship
import uuid

from jobboard.database import Base
from jobboard.database_types import GUID


class ApplicationStatus(str, Enum):
    """Valid states for job applications"""
    PENDING = "PENDING"
    REVIEWING = "REVIEWING"
    SHORTLISTED = "SHORTLISTED"
    REJECTED = "REJECTED"
    ACCEPTED = "ACCEPTED"


class Availability(str, Enum):
    IMMEDIATE = "IMMEDIATE"
    TWO_WEEKS = "2_WEEKS"
    ONE_MONTH = "1_MONTH"
    THREE_MONTHS = "3_MONTHS"
    NEGOTIABLE = "NEGOTIABLE"


class Application(Base):
    __tablename__ = "applications"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    job_id = Column(GUID, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False)
    candidate_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    # Copied from the job's owner at creation time so employer-side queries
    # filter on a column instead of joining jobs. Never re-synced.
    employer_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    # State machine
    status = Column(String, nullable=False, default=ApplicationStatus.PENDING.value)

    # Submission
    cover_letter = Column(Text, nullable=False)
    resume = Column(String(500), nullable=False)  # opaque reference (URL or file id)
    mobile_number = Column(String(20), nullable=False)
    location = Column(String(255), nullable=True)
    expected_salary_amount = Column(Integer, nullable=True)
    expected_salary_currency = Column(String(10), nullable=True)
    availability = Column(String, nullable=False, default=Availability.NEGOTIABLE.value)

    notes = Column(Text, nullable=True)  # candidate
    employer_notes = Column(Text, nullable=True)  # employer

    # Timestamps
    applied_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    reviewed_at = Column(DateTime, nullable=True)  # first time status left PENDING
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    job = relationship("Job", back_populates="applications", lazy="selectin")
    candidate = relationship("User", foreign_keys=[candidate_id], lazy="selectin")
    employer = relationship("User", foreign_keys=[employer_id], lazy="selectin")

    __table_args__ = (
        # A candidate may apply to a given job at most once
        UniqueConstraint('job_id', 'candidate_id', name='uq_application_job_candidate'),

        Index('idx_applications_candidate_status', 'candidate_id', 'status'),
        Index('idx_applications_employer_status', 'employer_id', 'status'),
        Index('idx_applications_applied_at', 'applied_at'),
    )

    @property
    def expected_salary(self):
        if self.expected_salary_amount is None:
            return None
        return {
            "amount": self.expected_salary_amount,
            "currency": self.expected_salary_currency or "USD",
        }
