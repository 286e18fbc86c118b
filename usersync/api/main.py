"""
User sync REST API.
Serves mirrored user records and reconciles batches pushed by clients or
pulled from the external trading-platform API.
"""

import sqlite3
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any

from fastapi import FastAPI, HTTPException, Body, Query
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .schemas import (
    SyncResponse,
    UserListResponse,
    UserDetailResponse,
    HealthResponse,
    StatsResponse,
    UserStats,
    SeedDataResponse,
    ErrorResponse,
)
from ..core import dao
from ..core.db import init_db, health_check
from ..core.reconcile import reconcile_users, extract_batch, InvalidBatchError, ReconciliationSummary
from ..core.external import fetch_external_users, ExternalAPIError
from ..core.sample_data import SEED_USERS
from ..core.config import (
    VERSION,
    ENVIRONMENT,
    CORS_ORIGINS,
    DEFAULT_USERS_LIMIT,
    MAX_USERS_LIMIT,
    debug_enabled,
    validate_config,
)
from util.logging import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    for issue in validate_config():
        logger.warning(f"Configuration: {issue}")
    logger.info(f"User sync API {VERSION} ready ({ENVIRONMENT})")
    yield
    logger.info("User sync API shutting down")


# Initialize the FastAPI application
app = FastAPI(
    title="User Sync API",
    version=VERSION,
    description="Mirrors external trading-platform users into a local SQLite store",
    docs_url="/docs" if debug_enabled() else None,
    redoc_url="/redoc" if debug_enabled() else None,
    lifespan=lifespan,
)

# Allow the dashboard origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


def _sync_response(summary: ReconciliationSummary, message: str) -> SyncResponse:
    return SyncResponse(status="success", message=message, summary=summary.as_api())


@app.get("/api/health", response_model=HealthResponse)
def health_endpoint():
    """Check database reachability and report the stored user count."""
    try:
        if not health_check():
            raise sqlite3.OperationalError("users table missing")
        total = dao.get_user_count()
    except sqlite3.Error as e:
        raise HTTPException(
            status_code=500,
            detail={"message": "Database connection failed", "error": str(e)}
        )

    return HealthResponse(
        status="healthy",
        totalUsers=total,
        timestamp=datetime.now(),
        environment=ENVIRONMENT,
        version=VERSION,
    )


@app.post("/api/fetch-external-data", response_model=SyncResponse)
def fetch_external_data_endpoint():
    """Pull users from the external API and reconcile them into the store."""
    try:
        records = fetch_external_users()
    except ExternalAPIError as e:
        raise HTTPException(
            status_code=500,
            detail={"message": "Failed to fetch data from external API", "error": str(e)}
        )

    summary = reconcile_users(records, source="external")
    return _sync_response(summary, "Data fetched and saved successfully")


@app.post("/api/saveUsers", response_model=SyncResponse)
def save_users_endpoint(body: Any = Body(None)):
    """Reconcile a pushed batch: {"data": [users]} or [users]."""
    try:
        records = extract_batch(body)
    except InvalidBatchError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not records:
        return _sync_response(ReconciliationSummary(), "No users to save")

    summary = reconcile_users(records, source="saveUsers")
    return _sync_response(summary, f"Processed {len(records)} users successfully")


@app.get("/api/users", response_model=UserListResponse)
def list_users_endpoint(limit: int = Query(DEFAULT_USERS_LIMIT, ge=1, le=MAX_USERS_LIMIT)):
    """List users ordered by open date, newest first."""
    try:
        users = dao.list_users(limit)
        total = dao.get_user_count()
    except sqlite3.Error as e:
        logger.error(f"Error fetching users: {e}")
        raise HTTPException(status_code=500, detail={"message": "Error fetching users", "error": str(e)})

    return UserListResponse(
        status="success",
        total=total,
        showing=len(users),
        users=[user.to_list_item() for user in users],
    )


@app.get("/api/users/{user_id}", response_model=UserDetailResponse)
def get_user_endpoint(user_id: int):
    """Get one user with every stored column and the decoded payload."""
    try:
        user = dao.get_user(user_id)
    except sqlite3.Error as e:
        logger.error(f"Error fetching user {user_id}: {e}")
        raise HTTPException(status_code=500, detail={"message": "Error fetching user", "error": str(e)})

    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    return UserDetailResponse(status="success", user=user.to_detail())


@app.get("/api/stats", response_model=StatsResponse)
def stats_endpoint():
    """Totals for the dashboard header."""
    try:
        stats = dao.get_stats()
    except sqlite3.Error as e:
        logger.error(f"Error fetching stats: {e}")
        raise HTTPException(status_code=500, detail={"message": "Error fetching statistics", "error": str(e)})

    return StatsResponse(status="success", stats=UserStats(**stats))


@app.post("/api/test-data", response_model=SeedDataResponse)
def seed_test_data_endpoint():
    """Insert the demo users that are not stored yet."""
    created = 0
    for raw in SEED_USERS:
        if not dao.user_exists(raw["userID"]):
            summary = reconcile_users([raw], source="test-data")
            created += summary.inserted

    return SeedDataResponse(
        status="success",
        message=f"Created {created} test users",
        data=SEED_USERS,
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request, exc):
    """Render HTTP errors as {status: "error", message, ...}."""
    content = {"status": "error"}
    if isinstance(exc.detail, dict):
        content.update(exc.detail)
    else:
        content["message"] = str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc):
    """Render bad query/path/body input as {status: "error", message, error}."""
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()))
        problems.append(f"{location}: {err.get('msg', 'invalid')}")
    error = ErrorResponse(message="Invalid request", error="; ".join(problems))
    return JSONResponse(status_code=422, content=error.model_dump())


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Handle all unhandled exceptions."""
    logger.error(f"Unhandled exception: {exc}")
    error = ErrorResponse(message="Internal server error", error=str(exc) if debug_enabled() else None)
    return JSONResponse(status_code=500, content=error.model_dump(exclude_none=True))
