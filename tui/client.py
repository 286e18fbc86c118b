"""
HTTP client the dashboard uses to talk to the user sync API.
"""

from typing import Any, Dict, List, Optional

import requests

from usersync.core.config import API_BASE_URL, DASHBOARD_LOAD_LIMIT, DASHBOARD_REQUEST_TIMEOUT_SEC
from util.logging import logger


class DashboardClientError(Exception):
    """Raised when the API cannot be reached or returns an unusable answer."""


class DashboardClient:
    """Thin wrapper over the REST endpoints the dashboard needs."""

    def __init__(self, base_url: str = API_BASE_URL, timeout: int = DASHBOARD_REQUEST_TIMEOUT_SEC,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            data = response.json()
        except requests.RequestException as e:
            raise DashboardClientError(f"Request to {url} failed: {e}") from e
        except ValueError as e:
            raise DashboardClientError(f"Invalid JSON from {url}") from e

        if not isinstance(data, dict) or data.get("status") not in ("success", "healthy"):
            message = data.get("message") if isinstance(data, dict) else None
            raise DashboardClientError(message or f"Unexpected response from {url} (HTTP {response.status_code})")
        return data

    def load_users(self, limit: int = DASHBOARD_LOAD_LIMIT) -> List[Dict[str, Any]]:
        """Fetch the users list served by GET /api/users."""
        data = self._request("GET", "/users", params={"limit": limit})
        users = data.get("users")
        if not isinstance(users, list):
            raise DashboardClientError("Response is missing the users list")
        logger.log_dashboard_event("load", details={"users": len(users)})
        return users

    def fetch_external_data(self) -> Dict[str, Any]:
        """Ask the server to pull from the external API; returns the sync summary."""
        data = self._request("POST", "/fetch-external-data")
        summary = data.get("summary", {})
        logger.log_dashboard_event("fetch_external", details=summary)
        return summary

    def close(self) -> None:
        self.session.close()
