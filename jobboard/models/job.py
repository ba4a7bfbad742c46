from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, Integer, Text, Boolean, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
import uuid

from jobboard.database import Base
from jobboard.database_types import GUID, StringList


class JobType(str, Enum):
    FULL_TIME = "FULL_TIME"
    PART_TIME = "PART_TIME"
    CONTRACT = "CONTRACT"
    INTERNSHIP = "INTERNSHIP"


class ExperienceLevel(str, Enum):
    ENTRY = "ENTRY"
    JUNIOR = "JUNIOR"
    MID = "MID"
    SENIOR = "SENIOR"
    LEAD = "LEAD"


class JobStatus(str, Enum):
    """Only ACTIVE jobs show up in public search and accept applications"""
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    CLOSED = "CLOSED"


class Job(Base):
    __tablename__ = "jobs"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    employer_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Posting
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    requirements = Column(StringList, nullable=False, default=list)
    responsibilities = Column(StringList, nullable=False, default=list)
    company = Column(String(255), nullable=False)
    location = Column(String(255), nullable=False)
    type = Column(String, nullable=False)  # JobType value
    experience = Column(String, nullable=False)  # ExperienceLevel value

    # Salary range
    salary_min = Column(Integer, nullable=False)
    salary_max = Column(Integer, nullable=False)
    salary_currency = Column(String(10), nullable=False, default="USD")

    skills = Column(StringList, nullable=False, default=list)
    benefits = Column(StringList, nullable=False, default=list)
    remote = Column(Boolean, nullable=False, default=False)
    deadline = Column(DateTime, nullable=True)

    status = Column(String, nullable=False, default=JobStatus.ACTIVE.value, index=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    employer = relationship("User", lazy="selectin")
    applications = relationship(
        "Application",
        back_populates="job",
        cascade="all, delete-orphan",
        order_by="Application.applied_at",
        lazy="selectin",
    )

    __table_args__ = (
        # Public search: ACTIVE jobs, newest first
        Index('idx_jobs_status_created', 'status', 'created_at'),
    )

    @property
    def salary(self) -> dict:
        return {
            "min": self.salary_min,
            "max": self.salary_max,
            "currency": self.salary_currency,
        }
