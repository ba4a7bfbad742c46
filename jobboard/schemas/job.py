"""Job-related Pydantic schemas."""
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from pydantic import ConfigDict, Field, field_validator, model_validator

from jobboard.models.job import JobType, ExperienceLevel, JobStatus
from jobboard.schemas.common import CamelModel, PageQuery
from jobboard.schemas.user import UserSummary


def check_salary_range(salary_min: Optional[int], salary_max: Optional[int]) -> None:
    if salary_min is not None and salary_max is not None and salary_max < salary_min:
        raise ValueError("salaryMax must be greater than or equal to salaryMin")


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Columns store naive UTC, like datetime.utcnow()
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class SalaryRange(CamelModel):
    min: int
    max: int
    currency: str = "USD"


class JobCreate(CamelModel):
    """Schema for creating a new job posting."""
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    requirements: list[str] = Field(default_factory=list)
    responsibilities: list[str] = Field(default_factory=list)
    company: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    type: JobType
    experience: ExperienceLevel
    salary_min: int = Field(..., ge=0)
    salary_max: int = Field(..., ge=0)
    salary_currency: str = Field("USD", min_length=1, max_length=10)
    skills: list[str] = Field(default_factory=list)
    benefits: list[str] = Field(default_factory=list)
    remote: bool = False
    deadline: Optional[datetime] = None

    @field_validator("title", "company", "location")
    @classmethod
    def strip(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("deadline")
    @classmethod
    def deadline_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)

    @model_validator(mode="after")
    def salary_range(self):
        check_salary_range(self.salary_min, self.salary_max)
        return self


class JobUpdate(CamelModel):
    """
    Partial update. Only the fields declared here can be changed;
    unknown keys are rejected rather than ignored.
    """
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    requirements: Optional[list[str]] = None
    responsibilities: Optional[list[str]] = None
    company: Optional[str] = Field(None, min_length=1, max_length=255)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[JobType] = None
    experience: Optional[ExperienceLevel] = None
    salary_min: Optional[int] = Field(None, ge=0)
    salary_max: Optional[int] = Field(None, ge=0)
    salary_currency: Optional[str] = Field(None, min_length=1, max_length=10)
    skills: Optional[list[str]] = None
    benefits: Optional[list[str]] = None
    remote: Optional[bool] = None
    deadline: Optional[datetime] = None
    status: Optional[JobStatus] = None

    @field_validator("deadline")
    @classmethod
    def deadline_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)


class JobResponse(CamelModel):
    """Schema for job posting response."""
    id: UUID
    title: str
    description: str
    requirements: list[str] = []
    responsibilities: list[str] = []
    company: str
    location: str
    type: JobType
    experience: ExperienceLevel
    salary: SalaryRange
    skills: list[str] = []
    benefits: list[str] = []
    remote: bool
    deadline: Optional[datetime] = None
    status: JobStatus
    employer_id: UUID
    employer: Optional[UserSummary] = None
    applications: list[UUID] = []
    created_at: datetime
    updated_at: datetime

    @field_validator("applications", mode="before")
    @classmethod
    def application_ids(cls, v):
        # ORM relationship yields Application objects; expose ids only
        return [getattr(item, "id", item) for item in (v or [])]


class JobSearchQuery(PageQuery):
    search: Optional[str] = None
    location: Optional[str] = None
    type: Optional[JobType] = None
    experience: Optional[ExperienceLevel] = None
    remote: Optional[bool] = None


class JobStats(CamelModel):
    total: int
    active: int
    closed: int
    draft: int
    applications: int
