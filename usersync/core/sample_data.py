"""
Demo and placeholder user records.
"""

import random
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

SEED_USERS: List[Dict[str, Any]] = [
    {
        "userID": 1001,
        "firstName": "John",
        "lastName": "Doe",
        "username": "johndoe",
        "country": "United States",
        "openDate": "2024-01-15T10:30:00Z",
        "accountID": 5001,
        "userType": 1,
        "emailVerified": True,
    },
    {
        "userID": 1002,
        "firstName": "Jane",
        "lastName": "Smith",
        "username": "janesmith",
        "country": "Canada",
        "openDate": "2024-01-16T14:20:00Z",
        "accountID": 5002,
        "userType": 1,
        "emailVerified": True,
    },
    {
        "userID": 1003,
        "firstName": "Bob",
        "lastName": "Johnson",
        "username": "bobjohnson",
        "country": "United Kingdom",
        "openDate": "2024-01-17T09:15:00Z",
        "accountID": 5003,
        "userType": 2,
        "emailVerified": False,
    },
]

_FIRST_NAMES = ["John", "Jane", "Mike", "Sarah", "David", "Emma", "Chris", "Lisa"]
_LAST_NAMES = ["Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis"]
_COUNTRIES = ["USA", "UK", "Canada", "Australia", "Germany", "France", "Japan", "Brazil"]


def generate_placeholder_users(count: int = 50, now: Optional[datetime] = None,
                               rng: Optional[random.Random] = None) -> List[Dict[str, Any]]:
    """Build locally generated users for when the API cannot be reached.

    Open dates are spread randomly over the year before `now`.
    """
    now = now or datetime.now()
    rng = rng or random.Random()

    users = []
    for i in range(count):
        opened = now - timedelta(seconds=rng.random() * 365 * 24 * 60 * 60)
        users.append({
            "userID": 1000 + i,
            "firstName": _FIRST_NAMES[i % len(_FIRST_NAMES)],
            "lastName": _LAST_NAMES[i % len(_LAST_NAMES)],
            "username": f"user{1000 + i}",
            "country": _COUNTRIES[i % len(_COUNTRIES)],
            "accountID": 2000 + i,
            "openDate": opened.isoformat(timespec="seconds"),
            "userType": 1,
            "parentId": None,
            "emailVerified": rng.random() > 0.3,
        })
    return users
