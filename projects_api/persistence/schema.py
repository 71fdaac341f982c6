"""
SQLite schema for users and projects.
Migration-friendly: each table created with IF NOT EXISTS.
"""
from __future__ import annotations


def users_schema() -> str:
    return """
    CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        email TEXT NOT NULL,
        password_hash TEXT NOT NULL,
        created_at TEXT NOT NULL
    );
    CREATE UNIQUE INDEX IF NOT EXISTS ix_users_email ON users(email);
    """


def projects_schema() -> str:
    """Dates stored as ISO strings. status is a free-form label."""
    return """
    CREATE TABLE IF NOT EXISTS projects (
        id TEXT PRIMARY KEY,
        owner_id TEXT NOT NULL,
        group_name TEXT,
        project_name TEXT,
        description TEXT,
        start_date TEXT,
        end_date TEXT,
        status TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        FOREIGN KEY (owner_id) REFERENCES users(id)
    );
    CREATE INDEX IF NOT EXISTS ix_projects_owner ON projects(owner_id);
    """


def all_schema_sql() -> str:
    """Combine all schema DDL for a single execution. Order: users, projects."""
    return "\n".join([
        users_schema(),
        projects_schema(),
    ])
