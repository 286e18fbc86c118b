"""
Request/response models for the user sync API.
ExternalUserRecord validates payloads from the upstream trading platform.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class ExternalUserRecord(BaseModel):
    """A user payload from the external API.

    Only userID is required. Attributes the store has no column for are kept
    in model_extra and travel to the full_data blob with the rest of the payload.
    """

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    userID: int
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    username: Optional[str] = None
    country: Optional[str] = None
    accountID: Optional[int] = None
    userType: Optional[int] = None
    parentId: Optional[int] = None
    emailVerified: Optional[bool] = None
    openDate: Optional[datetime] = None

    @field_validator('openDate', mode='before')
    @classmethod
    def blank_open_date_is_missing(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return v

    @field_validator('openDate')
    @classmethod
    def open_date_local_time(cls, v):
        # stored as naive local time, the same clock SQLite uses for localtime
        if v is not None and v.tzinfo is not None:
            return v.astimezone().replace(tzinfo=None)
        return v

    @property
    def passthrough(self) -> Dict[str, Any]:
        """Attributes outside the typed columns."""
        return dict(self.model_extra or {})

    def column_values(self) -> Dict[str, Any]:
        """Typed column values with store defaults applied."""
        return {
            "firstName": self.firstName or "",
            "lastName": self.lastName or "",
            "username": self.username or "",
            "country": self.country or "",
            "openDate": self.openDate.isoformat() if self.openDate else None,
            "accountID": self.accountID or None,
            "userType": self.userType or 1,
            "parentId": self.parentId or None,
            "emailVerified": bool(self.emailVerified),
        }


class SyncSummary(BaseModel):
    totalReceived: int
    newUsers: int
    updatedUsers: int
    skipped: int
    errors: int


class SyncResponse(BaseModel):
    status: str
    message: str
    summary: SyncSummary


class UserListResponse(BaseModel):
    status: str
    total: int
    showing: int
    users: List[Dict[str, Any]]


class UserDetailResponse(BaseModel):
    status: str
    user: Dict[str, Any]


class HealthResponse(BaseModel):
    status: str
    totalUsers: int
    timestamp: datetime
    environment: str
    version: str


class UserStats(BaseModel):
    totalUsers: int
    todayUsers: int
    countries: int
    recentUsers: int


class StatsResponse(BaseModel):
    status: str
    stats: UserStats


class SeedDataResponse(BaseModel):
    status: str
    message: str
    data: List[Dict[str, Any]]


class ErrorResponse(BaseModel):
    status: str = "error"
    message: str
    error: Optional[str] = None
