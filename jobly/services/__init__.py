from .companies import CompanyService
from .jobs import JobService
from .users import UserService

__all__ = [
    "CompanyService",
    "JobService",
    "UserService",
]
