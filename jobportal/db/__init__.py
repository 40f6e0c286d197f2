"""Database package."""

from jobportal.db.base import Base, get_db, get_session_factory, init_db
from jobportal.db.tables import (
    Application,
    ApplicationStatus,
    Education,
    Experience,
    Job,
    JobCategory,
    JobType,
    Profile,
    Role,
    SavedJob,
    User,
)

__all__ = [
    "Base",
    "get_db",
    "get_session_factory",
    "init_db",
    "User",
    "Profile",
    "Experience",
    "Education",
    "Job",
    "Application",
    "SavedJob",
    "Role",
    "JobCategory",
    "JobType",
    "ApplicationStatus",
]
