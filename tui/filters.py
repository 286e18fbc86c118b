"""
Dashboard filter predicates over user dicts as served by GET /api/users.
"""

from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Dict, Optional

# Fields matched by the free-text search box
SEARCH_TEXT_FIELDS = ("firstName", "lastName", "username", "country")
SEARCH_ID_FIELDS = ("userID", "accountID")


class DateBucket(str, Enum):
    """Open-date windows offered by the date filter."""
    ANY = "any"
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"


def parse_open_date(value: Any) -> Optional[datetime]:
    """Parse an openDate value into a naive local datetime, or None."""
    if not value:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def _one_month_before(day: date) -> date:
    year, month = (day.year, day.month - 1) if day.month > 1 else (day.year - 1, 12)
    # days past the end of the shorter month roll forward, e.g. March 31 -> March 2 in 2024
    return date(year, month, 1) + timedelta(days=day.day - 1)


def matches_search(user: Dict[str, Any], query: str) -> bool:
    """Case-insensitive substring match against names, country and ids."""
    term = (query or "").strip().lower()
    if not term:
        return True

    for field in SEARCH_TEXT_FIELDS:
        value = user.get(field)
        if value and term in str(value).lower():
            return True

    for field in SEARCH_ID_FIELDS:
        value = user.get(field)
        if value is not None and term in str(value).lower():
            return True

    return False


def matches_country(user: Dict[str, Any], country: Optional[str]) -> bool:
    """Exact country match; no constraint when country is empty."""
    if not country:
        return True
    return user.get("country") == country


def matches_date(user: Dict[str, Any], bucket: DateBucket, today: Optional[date] = None) -> bool:
    """Compare the calendar date of openDate with today's date.

    With an active bucket, users without a readable openDate never match.
    """
    bucket = DateBucket(bucket or DateBucket.ANY)
    if bucket is DateBucket.ANY:
        return True

    opened = parse_open_date(user.get("openDate"))
    if opened is None:
        return False

    today = today or date.today()
    opened_day = opened.date()

    if bucket is DateBucket.TODAY:
        return opened_day == today
    if bucket is DateBucket.WEEK:
        return opened_day >= today - timedelta(days=6)
    if bucket is DateBucket.MONTH:
        return opened_day >= _one_month_before(today)
    return True


def matches_all(user: Dict[str, Any], query: str, country: Optional[str],
                bucket: DateBucket, today: Optional[date] = None) -> bool:
    return (
        matches_search(user, query)
        and matches_country(user, country)
        and matches_date(user, bucket, today)
    )
