"""Database models"""
from jobboard.models.user import User, UserRole, AuthProvider
from jobboard.models.user_session import UserSession
from jobboard.models.job import Job, JobType, ExperienceLevel, JobStatus
from jobboard.models.application import Application, ApplicationStatus, Availability

__all__ = [
    "User",
    "UserRole",
    "AuthProvider",
    "UserSession",
    "Job",
    "JobType",
    "ExperienceLevel",
    "JobStatus",
    "Application",
    "ApplicationStatus",
    "Availability",
]
