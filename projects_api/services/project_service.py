"""
Project operations. Update and delete are conditional on the ownership lookup:
missing project -> NotFoundError, someone else's project -> ForbiddenError.
"""
from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from typing import Any

from projects_api.models import Project
from projects_api.persistence.errors import NotFoundError
from projects_api.persistence.repositories import ProjectRepository, UserRepository
from projects_api.services.errors import ForbiddenError, MissingFieldsError

logger = logging.getLogger(__name__)


class ProjectService:
    """Thin domain layer over ProjectRepository. No HTTP concerns."""

    def __init__(self) -> None:
        self._project_repo = ProjectRepository()
        self._user_repo = UserRepository()

    def _require_user(self, conn: sqlite3.Connection, user_id: str) -> None:
        if self._user_repo.get(conn, user_id) is None:
            raise NotFoundError(f"Owner not found: {user_id}")

    def _require_owned(self, conn: sqlite3.Connection, project_id: str, user_id: str) -> Project:
        project = self._project_repo.get(conn, project_id)
        if project is None:
            raise NotFoundError(f"Project not found: {project_id}")
        if project.owner_id != user_id:
            raise ForbiddenError("Project does not belong to this user")
        return project

    def create(
        self,
        conn: sqlite3.Connection,
        owner_id: str | None,
        group_name: str | None = None,
        project_name: str | None = None,
        description: str | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        status: str | None = None,
    ) -> Project:
        if not owner_id:
            raise MissingFieldsError("ownerId is required")
        self._require_user(conn, owner_id)
        project = self._project_repo.create(
            conn,
            owner_id,
            group_name=group_name,
            project_name=project_name,
            description=description,
            start_date=start_date,
            end_date=end_date,
            status=status,
        )
        logger.info("Created project id=%s owner=%s", project.id, owner_id)
        return project

    def list_by_owner(self, conn: sqlite3.Connection, owner_id: str) -> list[Project]:
        return self._project_repo.list_by_owner(conn, owner_id)

    def list_by_id(self, conn: sqlite3.Connection, project_id: str) -> list[Project]:
        return self._project_repo.list_by_id(conn, project_id)

    def update(
        self,
        conn: sqlite3.Connection,
        project_id: str,
        user_id: str,
        **changes: Any,
    ) -> Project:
        """Apply the given field changes. owner_id in changes reassigns the project."""
        self._require_owned(conn, project_id, user_id)
        new_owner = changes.get("owner_id")
        if "owner_id" in changes:
            if not new_owner:
                raise MissingFieldsError("ownerId cannot be blank")
            if new_owner != user_id:
                self._require_user(conn, new_owner)
        project = self._project_repo.update(conn, project_id, **changes)
        logger.info("Updated project id=%s fields=%s", project_id, ",".join(sorted(changes)) or "-")
        return project

    def delete(self, conn: sqlite3.Connection, project_id: str, user_id: str) -> None:
        self._require_owned(conn, project_id, user_id)
        if not self._project_repo.delete(conn, project_id):
            raise NotFoundError(f"Project not found: {project_id}")
        logger.info("Deleted project id=%s owner=%s", project_id, user_id)
