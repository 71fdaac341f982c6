#!/usr/bin/env python3
"""
Serve the API with uvicorn.
Run from project root: python3 scripts/run_api.py
"""
from __future__ import annotations

import sys
from pathlib import Path

# Ensure project root on path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import uvicorn

from projects_api.config import Settings


def main() -> None:
    settings = Settings.from_env()
    uvicorn.run("projects_api.api:app", host=settings.host, port=settings.port, reload=False)


if __name__ == "__main__":
    main()
