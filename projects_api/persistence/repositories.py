"""
Repository interfaces for users and projects.
No business logic. Only read/write operations.

Every method translates sqlite3 failures into the store errors in .errors:
UNIQUE violations -> ConflictError, FOREIGN KEY violations -> NotFoundError,
anything else -> StoreUnavailableError.
"""
from __future__ import annotations

import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Iterator

from projects_api.models import Project, User

from .errors import ConflictError, NotFoundError, StoreUnavailableError


def _parse_datetime(s: str | None) -> datetime:
    if s is None:
        raise ValueError("expected datetime string")
    return datetime.fromisoformat(s.replace("Z", "+00:00"))


def _parse_optional_datetime(s: str | None) -> datetime | None:
    return _parse_datetime(s) if s else None


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@contextmanager
def _store_errors(conn: sqlite3.Connection) -> Iterator[None]:
    try:
        yield
    except sqlite3.IntegrityError as e:
        conn.rollback()
        msg = str(e)
        if "UNIQUE" in msg:
            raise ConflictError(msg) from e
        if "FOREIGN KEY" in msg:
            raise NotFoundError(msg) from e
        raise StoreUnavailableError(msg) from e
    except sqlite3.Error as e:
        conn.rollback()
        raise StoreUnavailableError(str(e)) from e


# ---------- UserRepository ----------

_USER_COLS = "id, name, email, password_hash, created_at"


def _row_to_user(row: sqlite3.Row) -> User:
    return User(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        created_at=_parse_datetime(row["created_at"]),
        password_hash=row["password_hash"],
    )


class UserRepository:
    """CRUD for users. email is unique; password_hash is stored, never plain text."""

    def create(self, conn: sqlite3.Connection, name: str, email: str, password_hash: str) -> User:
        uid = str(uuid.uuid4())
        now = _now_iso()
        with _store_errors(conn):
            conn.execute(
                "INSERT INTO users (id, name, email, password_hash, created_at) VALUES (?, ?, ?, ?, ?)",
                (uid, name, email, password_hash, now),
            )
            conn.commit()
        return User(
            id=uid, name=name, email=email,
            created_at=datetime.fromisoformat(now), password_hash=password_hash,
        )

    def get(self, conn: sqlite3.Connection, user_id: str) -> User | None:
        with _store_errors(conn):
            row = conn.execute(f"SELECT {_USER_COLS} FROM users WHERE id = ?", (user_id,)).fetchone()
        return _row_to_user(row) if row is not None else None

    def get_by_email(self, conn: sqlite3.Connection, email: str) -> User | None:
        with _store_errors(conn):
            row = conn.execute(f"SELECT {_USER_COLS} FROM users WHERE email = ?", (email,)).fetchone()
        return _row_to_user(row) if row is not None else None

    def list_all(self, conn: sqlite3.Connection) -> list[User]:
        with _store_errors(conn):
            rows = conn.execute(f"SELECT {_USER_COLS} FROM users ORDER BY created_at").fetchall()
        return [_row_to_user(r) for r in rows]


# ---------- ProjectRepository ----------

_PROJECT_COLS = (
    "id, owner_id, group_name, project_name, description, "
    "start_date, end_date, status, created_at, updated_at"
)

# Columns that update() may touch, keyed by keyword name.
PROJECT_UPDATABLE_FIELDS = (
    "owner_id",
    "group_name",
    "project_name",
    "description",
    "start_date",
    "end_date",
    "status",
)


def _row_to_project(row: sqlite3.Row) -> Project:
    return Project(
        id=row["id"],
        owner_id=row["owner_id"],
        group_name=row["group_name"],
        project_name=row["project_name"],
        description=row["description"],
        start_date=_parse_optional_datetime(row["start_date"]),
        end_date=_parse_optional_datetime(row["end_date"]),
        status=row["status"],
        created_at=_parse_datetime(row["created_at"]),
        updated_at=_parse_datetime(row["updated_at"]),
    )


def _to_db_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


class ProjectRepository:
    """CRUD for projects. owner_id must reference an existing user (FK enforced)."""

    def create(
        self,
        conn: sqlite3.Connection,
        owner_id: str,
        group_name: str | None = None,
        project_name: str | None = None,
        description: str | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        status: str | None = None,
    ) -> Project:
        pid = str(uuid.uuid4())
        now = _now_iso()
        with _store_errors(conn):
            conn.execute(
                f"INSERT INTO projects ({_PROJECT_COLS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    pid, owner_id, group_name, project_name, description,
                    _to_db_value(start_date), _to_db_value(end_date), status, now, now,
                ),
            )
            conn.commit()
        created = self.get(conn, pid)
        if created is None:
            raise StoreUnavailableError(f"Project not readable after insert: {pid}")
        return created

    def get(self, conn: sqlite3.Connection, project_id: str) -> Project | None:
        with _store_errors(conn):
            row = conn.execute(
                f"SELECT {_PROJECT_COLS} FROM projects WHERE id = ?", (project_id,)
            ).fetchone()
        return _row_to_project(row) if row is not None else None

    def list_by_id(self, conn: sqlite3.Connection, project_id: str) -> list[Project]:
        """Zero or one project, as a list."""
        project = self.get(conn, project_id)
        return [project] if project is not None else []

    def list_by_owner(self, conn: sqlite3.Connection, owner_id: str) -> list[Project]:
        with _store_errors(conn):
            rows = conn.execute(
                f"SELECT {_PROJECT_COLS} FROM projects WHERE owner_id = ? ORDER BY created_at",
                (owner_id,),
            ).fetchall()
        return [_row_to_project(r) for r in rows]

    def update(self, conn: sqlite3.Connection, project_id: str, **changes: Any) -> Project:
        """
        Update only the provided fields (see PROJECT_UPDATABLE_FIELDS).
        Raises NotFoundError if the project or a reassigned owner does not exist.
        """
        unknown = set(changes) - set(PROJECT_UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown project fields: {', '.join(sorted(unknown))}")
        # Build dynamic SQL so we only touch provided fields.
        fields: list[tuple[str, Any]] = [(k, _to_db_value(v)) for k, v in changes.items()]
        fields.append(("updated_at", _now_iso()))
        sets = ", ".join(f"{k} = ?" for k, _ in fields)
        params = [v for _, v in fields] + [project_id]
        with _store_errors(conn):
            cur = conn.execute(f"UPDATE projects SET {sets} WHERE id = ?", params)
            if cur.rowcount == 0:
                conn.rollback()
                raise NotFoundError(f"Project not found: {project_id}")
            conn.commit()
        updated = self.get(conn, project_id)
        if updated is None:
            raise NotFoundError(f"Project not found: {project_id}")
        return updated

    def delete(self, conn: sqlite3.Connection, project_id: str) -> bool:
        """Return True if a row was removed."""
        with _store_errors(conn):
            cur = conn.execute("DELETE FROM projects WHERE id = ?", (project_id,))
            conn.commit()
        return cur.rowcount > 0
