"""
Data models for the projects API.
Domain objects only. No persistence or API logic.

Serialized keys are camelCase to match the JSON contract (groupName, ownerId, ...).
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


# ---------- User ----------
@dataclass
class User:
    """
    An account. email is the unique login identifier.
    password_hash is never plain text and never serialized.
    """
    id: str
    name: str
    email: str
    created_at: datetime
    password_hash: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "created_at": self.created_at.isoformat(),
        }


# ---------- Project ----------
@dataclass
class Project:
    """A project owned by exactly one user. Dates and status are free-form."""
    id: str
    owner_id: str
    group_name: str | None
    project_name: str | None
    description: str | None
    start_date: datetime | None
    end_date: datetime | None
    status: str | None
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "groupName": self.group_name,
            "projectName": self.project_name,
            "description": self.description,
            "startDate": _iso(self.start_date),
            "endDate": _iso(self.end_date),
            "status": self.status,
            "ownerId": self.owner_id,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


# ---------- Token claims ----------
@dataclass(frozen=True)
class TokenClaims:
    """Identity carried in a signed access token. Not persisted."""
    user_id: str
    email: str
    name: str
    issued_at: int | None = None
    expires_at: int | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "userId": self.user_id,
            "email": self.email,
            "name": self.name,
        }
        if self.issued_at is not None:
            d["iat"] = self.issued_at
        if self.expires_at is not None:
            d["exp"] = self.expires_at
        return d
