"""
User sync service - environment configuration.
All settings come from environment variables (optionally loaded from .env).
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Database path configuration (read through get_db_path() so it can be redirected at runtime)
DEFAULT_DB_PATH = "./data/users.db"
DB_PATH = os.getenv("DB_PATH", DEFAULT_DB_PATH)

DEBUG = os.getenv("DEBUG", "false").lower() == "true"
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")

# External trading-platform API
EXTERNAL_API_BASE_URL = os.getenv("EXTERNAL_API_BASE_URL", "")
API_KEY = os.getenv("API_KEY", "")
EXTERNAL_API_TIMEOUT_SEC = int(os.getenv("EXTERNAL_API_TIMEOUT_SEC", "30"))

# REST API
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "3000"))
DEFAULT_USERS_LIMIT = int(os.getenv("DEFAULT_USERS_LIMIT", "100"))
MAX_USERS_LIMIT = int(os.getenv("MAX_USERS_LIMIT", "10000"))
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
    if origin.strip()
]

# Dashboard client
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:3000/api")
DASHBOARD_REFRESH_INTERVAL_SEC = int(os.getenv("DASHBOARD_REFRESH_INTERVAL_SEC", "900"))  # 15 minutes
DASHBOARD_PAGE_SIZE = int(os.getenv("DASHBOARD_PAGE_SIZE", "10"))
DASHBOARD_LOAD_LIMIT = int(os.getenv("DASHBOARD_LOAD_LIMIT", "1000"))
DASHBOARD_REQUEST_TIMEOUT_SEC = int(os.getenv("DASHBOARD_REQUEST_TIMEOUT_SEC", "30"))
EXPORT_DIR = os.getenv("EXPORT_DIR", ".")
EXPORT_FILENAME_PREFIX = os.getenv("EXPORT_FILENAME_PREFIX", "users")

# Version string
VERSION = "1.0.0"


def get_db_path() -> str:
    """Current database path; honours DB_PATH changes made after import."""
    return os.getenv("DB_PATH", DB_PATH)


def debug_enabled():
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "false").lower() == "true"


def ensure_db_directory():
    """Ensure the database directory exists."""
    Path(get_db_path()).parent.mkdir(parents=True, exist_ok=True)


def get_external_api_url() -> str:
    return os.getenv("EXTERNAL_API_BASE_URL", EXTERNAL_API_BASE_URL).strip()


def get_api_key() -> str:
    return os.getenv("API_KEY", API_KEY)


def is_external_api_configured():
    """Check if an external endpoint has been configured."""
    return bool(get_external_api_url())


def validate_config():
    """Validate configuration and return any issues."""
    issues = []

    if not is_external_api_configured():
        issues.append("EXTERNAL_API_BASE_URL is not set; /api/fetch-external-data will fail")

    if DEFAULT_USERS_LIMIT < 1:
        issues.append("DEFAULT_USERS_LIMIT must be >= 1")

    if DEFAULT_USERS_LIMIT > MAX_USERS_LIMIT:
        issues.append("DEFAULT_USERS_LIMIT must not exceed MAX_USERS_LIMIT")

    if DASHBOARD_PAGE_SIZE < 1:
        issues.append("DASHBOARD_PAGE_SIZE must be >= 1")

    if DASHBOARD_REFRESH_INTERVAL_SEC < 1:
        issues.append("DASHBOARD_REFRESH_INTERVAL_SEC must be >= 1")

    return issues
