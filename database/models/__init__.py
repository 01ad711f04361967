from database.models.users import User, UserRole
from database.models.companies import Company
from database.models.jobs import Job
from database.models.applications import Application, ApplicationStatus

__all__ = [
    "User",
    "UserRole",
    "Company",
    "Job",
    "Application",
    "ApplicationStatus",
]
