"""
Client for the upstream trading-platform user report API.
"""

from typing import Any, Dict, List

import requests

from .config import get_external_api_url, get_api_key, EXTERNAL_API_TIMEOUT_SEC
from .reconcile import extract_batch, InvalidBatchError
from util.logging import logger


class ExternalAPIError(Exception):
    """Raised when the external user API cannot be reached or answers badly."""


def _headers() -> Dict[str, str]:
    return {
        "Authorization": f"Bearer {get_api_key()}",
        "Content-Type": "application/json",
    }


def fetch_external_users(timeout: int = EXTERNAL_API_TIMEOUT_SEC) -> List[Any]:
    """
    Pull the current user list from the external API.

    Returns:
        List of raw user records (dicts) exactly as the upstream sent them.

    Raises:
        ExternalAPIError: endpoint missing, unreachable, non-2xx, or not a user list.
    """
    url = get_external_api_url()
    if not url:
        raise ExternalAPIError("EXTERNAL_API_BASE_URL is not configured")

    logger.log_external_fetch(url, status="started")

    try:
        response = requests.get(url, headers=_headers(), timeout=timeout)
        response.raise_for_status()
        body = response.json()
    except requests.RequestException as e:
        logger.log_external_fetch(url, status="failed", details={"error": str(e)[:100]})
        raise ExternalAPIError(f"External API request failed: {e}") from e
    except ValueError as e:
        logger.log_external_fetch(url, status="failed", details={"error": "invalid JSON"})
        raise ExternalAPIError("External API returned invalid JSON") from e

    try:
        records = extract_batch(body)
    except InvalidBatchError as e:
        logger.log_external_fetch(url, status="failed", details={"error": str(e)})
        raise ExternalAPIError(f"External API returned an unexpected shape: {e}") from e

    logger.log_external_fetch(url, details={"records": len(records)})
    return records
