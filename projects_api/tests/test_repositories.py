"""
Tests for the store adapter: users, projects and the error kinds it raises.
"""
from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from projects_api.persistence import (
    ConflictError,
    NotFoundError,
    ProjectRepository,
    StoreUnavailableError,
    UserRepository,
    get_connection,
    init_db,
)


@pytest.fixture
def db_conn(tmp_path):
    """Temporary DB with schema."""
    db_path = tmp_path / "repo_test.db"
    init_db(db_path)
    conn = get_connection(db_path)
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture
def owner(db_conn):
    return UserRepository().create(db_conn, "Owner", "owner@x.com", "hash")


def test_user_create_and_get(db_conn):
    repo = UserRepository()
    user = repo.create(db_conn, "A", "a@x.com", "hashed")
    assert user.id
    fetched = repo.get(db_conn, user.id)
    assert fetched is not None
    assert fetched.email == "a@x.com"
    assert fetched.password_hash == "hashed"
    assert repo.get_by_email(db_conn, "a@x.com").id == user.id


def test_user_get_missing_returns_none(db_conn):
    repo = UserRepository()
    assert repo.get(db_conn, "nope") is None
    assert repo.get_by_email(db_conn, "nope@x.com") is None


def test_user_email_unique_raises_conflict(db_conn):
    repo = UserRepository()
    repo.create(db_conn, "A", "a@x.com", "h1")
    with pytest.raises(ConflictError):
        repo.create(db_conn, "B", "a@x.com", "h2")
    assert len(repo.list_all(db_conn)) == 1


def test_user_to_dict_omits_password(db_conn):
    user = UserRepository().create(db_conn, "A", "a@x.com", "hashed")
    d = user.to_dict()
    assert "password" not in d
    assert "password_hash" not in d


def test_list_all_users(db_conn):
    repo = UserRepository()
    repo.create(db_conn, "A", "a@x.com", "h")
    repo.create(db_conn, "B", "b@x.com", "h")
    assert {u.email for u in repo.list_all(db_conn)} == {"a@x.com", "b@x.com"}


def test_project_create_and_list_by_owner(db_conn, owner):
    repo = ProjectRepository()
    start = datetime(2025, 1, 1, tzinfo=timezone.utc)
    project = repo.create(
        db_conn, owner.id, group_name="G", project_name="P",
        description="D", start_date=start, status="planned",
    )
    assert project.start_date == start
    assert project.end_date is None
    listed = repo.list_by_owner(db_conn, owner.id)
    assert [p.id for p in listed] == [project.id]
    assert repo.list_by_owner(db_conn, "someone-else") == []


def test_project_unknown_owner_raises_not_found(db_conn):
    with pytest.raises(NotFoundError):
        ProjectRepository().create(db_conn, "missing-user", project_name="P")


def test_project_list_by_id(db_conn, owner):
    repo = ProjectRepository()
    project = repo.create(db_conn, owner.id, project_name="P")
    assert [p.id for p in repo.list_by_id(db_conn, project.id)] == [project.id]
    assert repo.list_by_id(db_conn, "missing") == []


def test_project_update_only_touches_given_fields(db_conn, owner):
    repo = ProjectRepository()
    project = repo.create(db_conn, owner.id, project_name="P", status="planned", description="keep")
    updated = repo.update(db_conn, project.id, status="done")
    assert updated.status == "done"
    assert updated.description == "keep"
    assert updated.project_name == "P"
    assert updated.updated_at >= project.updated_at


def test_project_update_missing_raises_not_found(db_conn):
    with pytest.raises(NotFoundError):
        ProjectRepository().update(db_conn, "missing", status="x")


def test_project_update_rejects_unknown_field(db_conn, owner):
    repo = ProjectRepository()
    project = repo.create(db_conn, owner.id)
    with pytest.raises(ValueError):
        repo.update(db_conn, project.id, id="hijack")


def test_project_reassign_to_unknown_owner_raises_not_found(db_conn, owner):
    repo = ProjectRepository()
    project = repo.create(db_conn, owner.id)
    with pytest.raises(NotFoundError):
        repo.update(db_conn, project.id, owner_id="ghost")
    assert repo.get(db_conn, project.id).owner_id == owner.id


def test_project_delete(db_conn, owner):
    repo = ProjectRepository()
    project = repo.create(db_conn, owner.id)
    assert repo.delete(db_conn, project.id) is True
    assert repo.get(db_conn, project.id) is None
    assert repo.delete(db_conn, project.id) is False


def test_sqlite_failure_becomes_store_unavailable(db_conn):
    db_conn.execute("DROP TABLE projects")
    with pytest.raises(StoreUnavailableError):
        ProjectRepository().list_by_owner(db_conn, "anyone")


def test_project_create_unreadable_row_raises_store_unavailable(db_conn, owner, monkeypatch):
    repo = ProjectRepository()
    monkeypatch.setattr(repo, "get", lambda conn, project_id: None)
    with pytest.raises(StoreUnavailableError):
        repo.create(db_conn, owner.id, project_name="P")
