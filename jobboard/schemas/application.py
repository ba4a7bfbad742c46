"""Application-related Pydantic schemas."""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import ConfigDict, Field

from jobboard.models.application import ApplicationStatus, Availability
from jobboard.models.job import JobType, ExperienceLevel, JobStatus
from jobboard.schemas.common import CamelModel, PageQuery
from jobboard.schemas.user import UserSummary, CandidateSummary


class ApplicationCreate(CamelModel):
    """Schema for submitting an application."""
    job_id: UUID
    cover_letter: str = Field(..., min_length=1)
    resume: str = Field(..., min_length=1, max_length=500)
    mobile_number: Optional[str] = Field(None, min_length=1, max_length=20)  # falls back to profile phone
    location: Optional[str] = None  # falls back to profile location
    expected_salary: Optional[int] = Field(None, ge=0)
    expected_salary_currency: str = Field("USD", min_length=1, max_length=10)
    availability: Availability = Availability.NEGOTIABLE
    notes: Optional[str] = None


class ApplicationStatusUpdate(CamelModel):
    """Employer action on an application."""
    model_config = ConfigDict(extra="forbid")

    status: ApplicationStatus
    employer_notes: Optional[str] = None


class ApplicationQuery(PageQuery):
    status: Optional[ApplicationStatus] = None
    job_id: Optional[UUID] = None
    candidate_id: Optional[UUID] = None  # employer listing only


class ExpectedSalary(CamelModel):
    amount: int
    currency: str = "USD"


class JobSummary(CamelModel):
    id: UUID
    title: str
    company: str
    location: str
    type: JobType
    experience: ExperienceLevel
    status: JobStatus


class ApplicationResponse(CamelModel):
    """Schema for application response."""
    id: UUID
    job_id: UUID
    candidate_id: UUID
    employer_id: UUID
    job: Optional[JobSummary] = None
    candidate: Optional[CandidateSummary] = None
    employer: Optional[UserSummary] = None

    status: ApplicationStatus
    cover_letter: str
    resume: str
    mobile_number: str
    location: Optional[str] = None
    expected_salary: Optional[ExpectedSalary] = None
    availability: Availability
    notes: Optional[str] = None
    employer_notes: Optional[str] = None

    applied_at: datetime
    reviewed_at: Optional[datetime] = None
    updated_at: datetime


class ApplicationStats(CamelModel):
    total: int
    pending: int
    reviewing: int
    shortlisted: int
    rejected: int
    accepted: int
