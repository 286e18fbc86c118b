"""
SQLite storage for mirrored user records.
Connection management and schema initialization.
"""

import sqlite3
from contextlib import contextmanager
from typing import Generator

from .config import get_db_path, ensure_db_directory


@contextmanager
def get_db() -> Generator[sqlite3.Connection, None, None]:
    """Get a SQLite database connection."""
    ensure_db_directory()
    conn = sqlite3.connect(get_db_path())
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()


def init_db():
    """Initialize the database with required tables."""
    with get_db() as conn:
        cursor = conn.cursor()

        # One row per external userID; full_data keeps the original payload
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS users (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                userID INTEGER NOT NULL UNIQUE,
                firstName TEXT DEFAULT '',
                lastName TEXT DEFAULT '',
                username TEXT DEFAULT '',
                country TEXT DEFAULT '',
                openDate TEXT,
                accountID INTEGER,
                userType INTEGER DEFAULT 1,
                parentId INTEGER,
                emailVerified BOOLEAN DEFAULT FALSE,
                full_data TEXT,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        ''')

        cursor.execute('CREATE INDEX IF NOT EXISTS idx_users_country ON users(country)')
        cursor.execute('CREATE INDEX IF NOT EXISTS idx_users_open_date ON users(openDate DESC)')

        conn.commit()


def health_check():
    """Check database health."""
    try:
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT name FROM sqlite_master WHERE type='table';")
            table_names = [row[0] for row in cursor.fetchall()]
            return 'users' in table_names
    except sqlite3.Error:
        return False
