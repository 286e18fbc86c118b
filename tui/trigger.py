"""
Dashboard refresh triggers - reload from the API, optionally after an external pull.

Neither trigger raises: failures become notices and a failed reload falls back
to placeholder users so the dashboard always has data to show.
"""

from typing import Any, Callable, Dict, List

from usersync.core.sample_data import generate_placeholder_users
from util.logging import logger
from .client import DashboardClient, DashboardClientError


def reload_users(client: DashboardClient,
                 placeholder_factory: Callable[[], List[Dict[str, Any]]] = generate_placeholder_users) -> Dict[str, Any]:
    """
    Load the authoritative sequence from the API.

    Returns:
        Dict with users, whether they are placeholders, and (message, severity) notices
    """
    try:
        users = client.load_users()
        return {
            "success": True,
            "users": users,
            "placeholder": False,
            "notices": [],
        }
    except DashboardClientError as e:
        logger.log_dashboard_event("load", status="fallback", details={"error": str(e)[:100]})
        return {
            "success": False,
            "users": placeholder_factory(),
            "placeholder": True,
            "notices": [
                (f"Error loading users: {e}", "error"),
                ("Loaded sample data for demonstration", "information"),
            ],
        }


def refresh_from_external(client: DashboardClient,
                          placeholder_factory: Callable[[], List[Dict[str, Any]]] = generate_placeholder_users) -> Dict[str, Any]:
    """Ask the server to pull from the external API, then reload."""
    notices = []
    try:
        summary = client.fetch_external_data()
        notices.append((
            f"Synced {summary.get('newUsers', 0)} new and {summary.get('updatedUsers', 0)} updated users",
            "information",
        ))
    except DashboardClientError as e:
        logger.log_dashboard_event("fetch_external", status="failed", details={"error": str(e)[:100]})
        notices.append((f"Error fetching data: {e}", "error"))

    result = reload_users(client, placeholder_factory)
    result["notices"] = notices + result["notices"]
    return result
