"""
Runtime settings read from the environment.
A local .env file is loaded first if present.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DEFAULT_CORS_ORIGINS = (
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
)


def _env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean env var. Truthy: 1, true, yes, y, on."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in ("1", "true", "yes", "y", "on"):
        return True
    if v in ("0", "false", "no", "n", "off"):
        return False
    return default


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def _default_db_path() -> Path:
    return Path(__file__).resolve().parent.parent / "data" / "app.db"


@dataclass(frozen=True)
class Settings:
    """
    Process-wide configuration. Built once at startup and stored on app.state.
    Do not hardcode secrets; set JWT_SECRET in the environment.
    """

    jwt_secret: str = "dev-secret-change-in-production"
    jwt_expire_hours: int = 10
    database_path: Path = field(default_factory=_default_db_path)
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: tuple[str, ...] = DEFAULT_CORS_ORIGINS
    log_level: str = "INFO"
    log_json: bool = False

    @classmethod
    def from_env(cls) -> Settings:
        db_path = os.environ.get("DATABASE_PATH")
        return cls(
            jwt_secret=os.environ.get("JWT_SECRET", cls.jwt_secret),
            jwt_expire_hours=int(os.environ.get("JWT_EXPIRE_HOURS", str(cls.jwt_expire_hours))),
            database_path=Path(db_path) if db_path else _default_db_path(),
            host=os.environ.get("HOST", cls.host),
            port=int(os.environ.get("PORT", str(cls.port))),
            cors_origins=_env_list("CORS_ORIGINS", DEFAULT_CORS_ORIGINS),
            log_level=os.environ.get("LOG_LEVEL", cls.log_level).upper(),
            log_json=_env_bool("LOG_JSON", False),
        )
