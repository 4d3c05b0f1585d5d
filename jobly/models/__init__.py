# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import company, job, user, application

# Explicit class exports for cleaner imports
from .company import Company
from .job import Job
from .user import User
from .application import Application

__all__ = [
    "Company",
    "Job",
    "User",
    "Application",
]
