"""
Service-level failures. api.py maps each class to one HTTP status.
"""
from __future__ import annotations

from projects_api.persistence.errors import ConflictError


class MissingFieldsError(ValueError):
    """Required request fields are absent or blank (400)."""


class InvalidCredentialsError(ValueError):
    """Unknown email or wrong password (400). Deliberately does not say which."""


class DuplicateEmailError(ConflictError):
    """Registration with an email that is already taken (409)."""


class ForbiddenError(Exception):
    """The record exists but does not belong to the caller (403)."""
