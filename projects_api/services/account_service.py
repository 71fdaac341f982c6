"""
Credential lifecycle: registration and login.
Register: validate -> uniqueness check -> hash -> persist.
Login: lookup -> verify hash -> issue token.
"""
from __future__ import annotations

import logging
import sqlite3
from datetime import timedelta

from projects_api.auth import ACCESS_TOKEN_EXPIRE, create_access_token, hash_password, verify_password
from projects_api.models import TokenClaims, User
from projects_api.persistence.errors import ConflictError
from projects_api.persistence.repositories import UserRepository
from projects_api.services.errors import DuplicateEmailError, InvalidCredentialsError, MissingFieldsError

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password."


def _clean(value: str | None) -> str:
    return (value or "").strip()


class AccountService:
    """
    Registration and login. Token signing secret is injected, not read from globals.
    Persistence is delegated to UserRepository.
    """

    def __init__(self, secret: str, token_ttl: timedelta = ACCESS_TOKEN_EXPIRE) -> None:
        self._secret = secret
        self._token_ttl = token_ttl
        self._user_repo = UserRepository()

    def register(
        self,
        conn: sqlite3.Connection,
        name: str | None,
        email: str | None,
        password: str | None,
    ) -> User:
        """Create a user. Raises MissingFieldsError or DuplicateEmailError."""
        name, email = _clean(name), _clean(email)
        if not name or not email or not password:
            raise MissingFieldsError("Name, email, and password are required")

        if self._user_repo.get_by_email(conn, email) is not None:
            raise DuplicateEmailError("User with this email already exists")

        try:
            user = self._user_repo.create(conn, name, email, hash_password(password))
        except ConflictError as e:
            # Lost a race with a concurrent registration; the unique index caught it.
            raise DuplicateEmailError("User with this email already exists") from e
        logger.info("Registered user id=%s email=%s", user.id, user.email)
        return user

    def authenticate(self, conn: sqlite3.Connection, email: str | None, password: str | None) -> User:
        """Return the user if the credentials match, else raise InvalidCredentialsError."""
        email = _clean(email)
        if not email or not password:
            raise InvalidCredentialsError(INVALID_CREDENTIALS_MESSAGE)
        user = self._user_repo.get_by_email(conn, email)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Login rejected for email=%s", email)
            raise InvalidCredentialsError(INVALID_CREDENTIALS_MESSAGE)
        return user

    def login(self, conn: sqlite3.Connection, email: str | None, password: str | None) -> str:
        """Return a signed access token carrying userId, email and name."""
        user = self.authenticate(conn, email, password)
        token = create_access_token(
            TokenClaims(user_id=user.id, email=user.email, name=user.name),
            self._secret,
            expires_delta=self._token_ttl,
        )
        logger.info("Login succeeded for user id=%s", user.id)
        return token
