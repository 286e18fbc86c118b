"""
CSV export of the filtered user sequence.
"""

import csv
import io
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from usersync.core.config import EXPORT_DIR, EXPORT_FILENAME_PREFIX
from util.logging import logger
from .render import format_date

CSV_HEADER = ["User ID", "First Name", "Last Name", "Username", "Country", "Account ID", "Join Date", "User Type"]


class NothingToExportError(Exception):
    """Raised when the filtered sequence is empty."""


def _blank(value: Any) -> Any:
    return "" if value is None else value


def csv_row(user: Dict[str, Any]) -> List[Any]:
    return [
        _blank(user.get("userID")),
        _blank(user.get("firstName")),
        _blank(user.get("lastName")),
        _blank(user.get("username")),
        _blank(user.get("country")),
        _blank(user.get("accountID")),
        format_date(user["openDate"]) if user.get("openDate") else "",
        _blank(user.get("userType")),
    ]


def render_csv(users: List[Dict[str, Any]]) -> str:
    """Header plus one fully quoted row per user."""
    if not users:
        raise NothingToExportError("No data to export")

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for user in users:
        writer.writerow(csv_row(user))
    return buffer.getvalue()


def export_filename(export_date: Optional[date] = None) -> str:
    export_date = export_date or date.today()
    return f"{EXPORT_FILENAME_PREFIX}_{export_date.isoformat()}.csv"


def export_users_csv(users: List[Dict[str, Any]], directory: Union[str, Path] = EXPORT_DIR,
                     export_date: Optional[date] = None) -> Path:
    """Write the users to a date-stamped CSV file and return its path."""
    content = render_csv(users)

    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / export_filename(export_date)
    path.write_text(content, encoding="utf-8")

    logger.log_dashboard_event("export", details={"path": str(path), "rows": len(users)})
    return path
