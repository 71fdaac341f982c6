"""
REST API for users and projects.
Thin wrappers around services and persistence.
"""
from __future__ import annotations

import logging
import sqlite3
from contextlib import asynccontextmanager
from datetime import datetime, timedelta
from typing import Any, AsyncGenerator, Generator

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field

from projects_api.auth import decode_token
from projects_api.config import Settings
from projects_api.logging_setup import setup_logging
from projects_api.models import TokenClaims
from projects_api.persistence import (
    ConflictError,
    NotFoundError,
    StoreError,
    UserRepository,
    get_connection,
    init_db,
)
from projects_api.services import (
    AccountService,
    ForbiddenError,
    InvalidCredentialsError,
    MissingFieldsError,
    ProjectService,
)

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred"


# ---------- Request models ----------


class RegisterRequest(BaseModel):
    # Optional here so missing fields surface as 400 from AccountService, not 422.
    name: str | None = None
    email: str | None = None
    password: str | None = None


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class ProjectRequest(BaseModel):
    """Create and update body. On update only the fields sent are changed."""
    model_config = ConfigDict(populate_by_name=True)

    group_name: str | None = Field(None, alias="groupName")
    project_name: str | None = Field(None, alias="projectName")
    description: str | None = None
    start_date: datetime | None = Field(None, alias="startDate")
    end_date: datetime | None = Field(None, alias="endDate")
    status: str | None = None
    owner_id: str | None = Field(None, alias="ownerId")


# ---------- Dependencies ----------


def get_settings(request: Request) -> Settings:
    settings = getattr(request.app.state, "settings", None)
    if settings is None:
        raise HTTPException(status_code=500, detail="server_config_missing")
    return settings


def get_conn(settings: Settings = Depends(get_settings)) -> Generator[sqlite3.Connection, None, None]:
    """Yield a per-request DB connection, ensure close on exit."""
    conn = get_connection(settings.database_path)
    try:
        yield conn
    finally:
        conn.close()


def get_account_service(settings: Settings = Depends(get_settings)) -> AccountService:
    return AccountService(settings.jwt_secret, token_ttl=timedelta(hours=settings.jwt_expire_hours))


def get_project_service() -> ProjectService:
    return ProjectService()


def require_identity(request: Request, settings: Settings = Depends(get_settings)) -> TokenClaims:
    """
    Resolve the caller from `Authorization: <scheme> <token>`.
    The token is the second whitespace-separated segment; the scheme is not checked.
    No token segment -> 401. Bad signature, malformed or expired -> 403 (cause not disclosed).
    """
    parts = (request.headers.get("Authorization") or "").split()
    if len(parts) < 2:
        raise HTTPException(status_code=401, detail="Authorization token is required")
    claims = decode_token(parts[1], settings.jwt_secret)
    if claims is None:
        raise HTTPException(status_code=403, detail="Invalid or expired token")
    return claims


# ---------- Error mapping ----------


def _error_response(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": str(exc) or GENERIC_ERROR_MESSAGE})


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(MissingFieldsError)
    async def _missing_fields(request: Request, exc: MissingFieldsError) -> JSONResponse:
        return _error_response(400, exc)

    @app.exception_handler(InvalidCredentialsError)
    async def _invalid_credentials(request: Request, exc: InvalidCredentialsError) -> JSONResponse:
        return _error_response(400, exc)

    @app.exception_handler(ForbiddenError)
    async def _forbidden(request: Request, exc: ForbiddenError) -> JSONResponse:
        logger.warning("Forbidden %s %s: %s", request.method, request.url.path, exc)
        return _error_response(403, exc)

    @app.exception_handler(NotFoundError)
    async def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return _error_response(404, exc)

    @app.exception_handler(ConflictError)
    async def _conflict(request: Request, exc: ConflictError) -> JSONResponse:
        return _error_response(409, exc)

    @app.exception_handler(StoreError)
    async def _store_failure(request: Request, exc: StoreError) -> JSONResponse:
        logger.error("Store failure on %s %s", request.method, request.url.path, exc_info=exc)
        return _error_response(500, exc)

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return _error_response(500, exc)


# ---------- Routes ----------


def register_routes(app: FastAPI) -> None:
    @app.get("/", response_class=PlainTextResponse)
    def root() -> str:
        return "API is working!"

    @app.get("/protected")
    def protected(claims: TokenClaims = Depends(require_identity)) -> dict[str, Any]:
        """Echo the decoded identity of the caller."""
        return {"message": "This is a protected route", "user": claims.to_dict()}

    @app.get("/users")
    def list_users(conn: sqlite3.Connection = Depends(get_conn)) -> list[dict[str, Any]]:
        return [u.to_dict() for u in UserRepository().list_all(conn)]

    @app.get("/users/{user_id}")
    def get_user(user_id: str, conn: sqlite3.Connection = Depends(get_conn)) -> dict[str, Any] | None:
        """Single user, or null when the id is unknown."""
        user = UserRepository().get(conn, user_id)
        return user.to_dict() if user else None

    @app.post("/register", status_code=201)
    def register(
        req: RegisterRequest,
        conn: sqlite3.Connection = Depends(get_conn),
        svc: AccountService = Depends(get_account_service),
    ) -> dict[str, Any]:
        """Create account. Passwords hashed, never stored plain, never returned."""
        user = svc.register(conn, req.name, req.email, req.password)
        return user.to_dict()

    @app.post("/login")
    def login(
        req: LoginRequest,
        conn: sqlite3.Connection = Depends(get_conn),
        svc: AccountService = Depends(get_account_service),
    ) -> str:
        """Returns the signed JWT as a JSON string."""
        return svc.login(conn, req.email, req.password)

    @app.post("/projects", status_code=201)
    def create_project(
        req: ProjectRequest,
        conn: sqlite3.Connection = Depends(get_conn),
        svc: ProjectService = Depends(get_project_service),
    ) -> dict[str, Any]:
        project = svc.create(
            conn,
            req.owner_id,
            group_name=req.group_name,
            project_name=req.project_name,
            description=req.description,
            start_date=req.start_date,
            end_date=req.end_date,
            status=req.status,
        )
        return project.to_dict()

    @app.get("/projects/{user_id}")
    def list_projects_by_owner(
        user_id: str,
        conn: sqlite3.Connection = Depends(get_conn),
        svc: ProjectService = Depends(get_project_service),
    ) -> list[dict[str, Any]]:
        return [p.to_dict() for p in svc.list_by_owner(conn, user_id)]

    @app.get("/projectsById/{project_id}")
    def list_projects_by_id(
        project_id: str,
        conn: sqlite3.Connection = Depends(get_conn),
        svc: ProjectService = Depends(get_project_service),
    ) -> list[dict[str, Any]]:
        return [p.to_dict() for p in svc.list_by_id(conn, project_id)]

    @app.put("/projects/{project_id}/{user_id}")
    def update_project(
        project_id: str,
        user_id: str,
        req: ProjectRequest,
        conn: sqlite3.Connection = Depends(get_conn),
        svc: ProjectService = Depends(get_project_service),
    ) -> dict[str, Any]:
        """Update the fields present in the body. ownerId reassigns the project."""
        changes = req.model_dump(exclude_unset=True)
        project = svc.update(conn, project_id, user_id, **changes)
        return project.to_dict()

    @app.delete("/projects/{project_id}/{user_id}")
    def delete_project(
        project_id: str,
        user_id: str,
        conn: sqlite3.Connection = Depends(get_conn),
        svc: ProjectService = Depends(get_project_service),
    ) -> dict[str, Any]:
        svc.delete(conn, project_id, user_id)
        return {"message": "Project deleted successfully"}


# ---------- App factory ----------


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        setup_logging(settings.log_level, settings.log_json)
        init_db(settings.database_path)
        yield

    app = FastAPI(
        title="Projects API",
        description="Authentication plus CRUD over users and projects",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    register_routes(app)
    return app


app = create_app()
