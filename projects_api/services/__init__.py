"""
Service layer: credential lifecycle and project ownership rules.
Persistence is delegated to repositories; HTTP mapping lives in api.py.
"""
from .account_service import AccountService
from .errors import DuplicateEmailError, ForbiddenError, InvalidCredentialsError, MissingFieldsError
from .project_service import ProjectService

__all__ = [
    "AccountService",
    "ProjectService",
    "MissingFieldsError",
    "InvalidCredentialsError",
    "DuplicateEmailError",
    "ForbiddenError",
]
