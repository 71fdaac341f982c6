"""
Persistence layer for users and projects.
No business logic. Only read/write interfaces.
"""
from .db import connection, get_connection, init_db
from .errors import ConflictError, NotFoundError, StoreError, StoreUnavailableError
from .repositories import ProjectRepository, UserRepository

__all__ = [
    "connection",
    "get_connection",
    "init_db",
    "StoreError",
    "NotFoundError",
    "ConflictError",
    "StoreUnavailableError",
    "UserRepository",
    "ProjectRepository",
]
