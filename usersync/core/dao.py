"""
Data access for the users table.
Write helpers return False on store failure so a batch can carry on.
"""

import json
import sqlite3
from typing import Any, Dict, List, Optional

from .db import get_db
from .schema import StoredUser
from ..api.schemas import ExternalUserRecord
from util.logging import logger

_UPDATE_SQL = """
    UPDATE users SET
        firstName = ?, lastName = ?, username = ?, country = ?,
        openDate = ?, accountID = ?, userType = ?, parentId = ?,
        emailVerified = ?, full_data = ?, updated_at = CURRENT_TIMESTAMP
    WHERE userID = ?
"""

_INSERT_SQL = """
    INSERT INTO users
        (userID, firstName, lastName, username, country, openDate,
         accountID, userType, parentId, emailVerified, full_data)
    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
"""


def _column_tuple(record: ExternalUserRecord) -> tuple:
    values = record.column_values()
    return (
        values["firstName"],
        values["lastName"],
        values["username"],
        values["country"],
        values["openDate"],
        values["accountID"],
        values["userType"],
        values["parentId"],
        values["emailVerified"],
    )


def _serialize_payload(payload: Dict[str, Any]) -> str:
    return json.dumps(payload, default=str)


def user_exists(user_id: int) -> bool:
    """Check whether a userID is already stored."""
    try:
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT 1 FROM users WHERE userID = ?", (user_id,))
            return cursor.fetchone() is not None
    except sqlite3.Error as e:
        logger.error(f"Failed to check existence of user {user_id}: {e}")
        return False


def insert_user(record: ExternalUserRecord, payload: Dict[str, Any]) -> bool:
    """Insert a new user row; payload is stored verbatim as full_data."""
    try:
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute(
                _INSERT_SQL,
                (record.userID,) + _column_tuple(record) + (_serialize_payload(payload),)
            )
            conn.commit()
            return cursor.rowcount > 0
    except sqlite3.Error as e:
        logger.error(f"Error inserting user {record.userID}: {e}")
        return False


def update_user(record: ExternalUserRecord, payload: Dict[str, Any]) -> bool:
    """Overwrite every typed column and full_data of an existing user."""
    try:
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute(
                _UPDATE_SQL,
                _column_tuple(record) + (_serialize_payload(payload), record.userID)
            )
            conn.commit()
            return cursor.rowcount > 0
    except sqlite3.Error as e:
        logger.error(f"Error updating user {record.userID}: {e}")
        return False


def get_user(user_id: int) -> Optional[StoredUser]:
    """Get one user by external userID."""
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM users WHERE userID = ?", (user_id,))
        row = cursor.fetchone()
        return StoredUser.from_row(row) if row else None


def list_users(limit: int = 100) -> List[StoredUser]:
    """List users, most recently opened first (rows without openDate last)."""
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute(
            """SELECT userID, firstName, lastName, username, country, openDate,
                      accountID, userType, parentId, emailVerified, created_at
               FROM users
               ORDER BY openDate IS NULL, openDate DESC
               LIMIT ?""",
            (limit,)
        )
        return [StoredUser.from_row(row) for row in cursor.fetchall()]


def get_user_count() -> int:
    """Total number of stored users."""
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT COUNT(*) FROM users")
        return cursor.fetchone()[0]


def get_stats() -> Dict[str, int]:
    """Aggregate counts for the stats endpoint."""
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT COUNT(*) FROM users")
        total = cursor.fetchone()[0]

        cursor.execute(
            "SELECT COUNT(*) FROM users WHERE DATE(openDate) = DATE('now', 'localtime')"
        )
        today = cursor.fetchone()[0]

        cursor.execute(
            "SELECT COUNT(DISTINCT country) FROM users WHERE country IS NOT NULL AND country != ''"
        )
        countries = cursor.fetchone()[0]

        cursor.execute(
            "SELECT COUNT(*) FROM users WHERE DATE(openDate) >= DATE('now', 'localtime', '-6 days')"
        )
        recent = cursor.fetchone()[0]

    return {
        "totalUsers": total,
        "todayUsers": today,
        "countries": countries,
        "recentUsers": recent,
    }
