#!/usr/bin/env python3
"""
Vertical slice: Register → Login → Protected route → Project create/update/delete.
Runs in-process against a scratch DB with FastAPI's TestClient.
Run from project root: python3 scripts/vertical_slice.py
"""
from __future__ import annotations

import sys
import uuid
from pathlib import Path

# Ensure project root on path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from fastapi.testclient import TestClient

from projects_api.api import create_app
from projects_api.config import Settings


def main() -> None:
    # Use data/vertical_slice.db for demo (distinct from app.db)
    db_path = PROJECT_ROOT / "data" / "vertical_slice.db"
    settings = Settings(database_path=db_path, jwt_secret="vertical-slice-secret")
    email = f"slice-{uuid.uuid4().hex[:8]}@example.com"

    with TestClient(create_app(settings)) as client:
        # 1. Register
        resp = client.post("/register", json={"name": "Slice Demo", "email": email, "password": "secret"})
        resp.raise_for_status()
        user = resp.json()
        print(f"Registered user: {user['id']} ({user['email']})")

        # 2. Login
        resp = client.post("/login", json={"email": email, "password": "secret"})
        resp.raise_for_status()
        token = resp.json()
        print(f"Token: {token[:24]}...")

        # 3. Protected route
        resp = client.get("/protected", headers={"Authorization": f"Bearer {token}"})
        resp.raise_for_status()
        print(f"Protected route says hello to {resp.json()['user']['email']}")

        # 4. Project lifecycle
        resp = client.post("/projects", json={
            "groupName": "Demo Group",
            "projectName": "Vertical Slice",
            "description": "End-to-end walkthrough",
            "startDate": "2025-01-01T00:00:00Z",
            "endDate": "2025-06-30T00:00:00Z",
            "status": "planned",
            "ownerId": user["id"],
        })
        resp.raise_for_status()
        project = resp.json()
        print(f"Created project: {project['id']} status={project['status']}")

        resp = client.put(f"/projects/{project['id']}/{user['id']}", json={"status": "active"})
        resp.raise_for_status()
        print(f"Updated project status -> {resp.json()['status']}")

        owned = client.get(f"/projects/{user['id']}").json()
        print(f"Projects owned: {len(owned)}")

        resp = client.delete(f"/projects/{project['id']}/{user['id']}")
        resp.raise_for_status()
        remaining = client.get(f"/projectsById/{project['id']}").json()
        assert remaining == []
        print("Deleted project; lookup by id now empty")

    print("\nVertical slice complete.")


if __name__ == "__main__":
    main()
