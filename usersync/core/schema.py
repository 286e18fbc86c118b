"""
Typed rows returned by the user store.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional


# Columns returned by the list endpoint, in response order
LIST_COLUMNS = (
    "userID", "firstName", "lastName", "username", "country", "openDate",
    "accountID", "userType", "parentId", "emailVerified", "created_at",
)


@dataclass
class StoredUser:
    userID: int
    firstName: str
    lastName: str
    username: str
    country: str
    openDate: Optional[str]
    accountID: Optional[int]
    userType: int
    parentId: Optional[int]
    emailVerified: bool
    full_data: Optional[str]
    created_at: Optional[str]
    updated_at: Optional[str]

    @classmethod
    def from_row(cls, row) -> "StoredUser":
        keys = row.keys()
        return cls(
            userID=row["userID"],
            firstName=row["firstName"] or "",
            lastName=row["lastName"] or "",
            username=row["username"] or "",
            country=row["country"] or "",
            openDate=row["openDate"],
            accountID=row["accountID"],
            userType=row["userType"],
            parentId=row["parentId"],
            emailVerified=bool(row["emailVerified"]),
            full_data=row["full_data"] if "full_data" in keys else None,
            created_at=row["created_at"],
            updated_at=row["updated_at"] if "updated_at" in keys else None,
        )

    @property
    def payload(self) -> Dict[str, Any]:
        """The decoded full_data blob ({} when absent or unreadable)."""
        if not self.full_data:
            return {}
        try:
            decoded = json.loads(self.full_data)
        except ValueError:
            return {}
        return decoded if isinstance(decoded, dict) else {}

    def to_list_item(self) -> Dict[str, Any]:
        return {column: getattr(self, column) for column in LIST_COLUMNS}

    def to_detail(self) -> Dict[str, Any]:
        detail = self.to_list_item()
        detail["updated_at"] = self.updated_at
        detail["fullData"] = self.payload
        return detail
