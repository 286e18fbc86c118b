"""
State container for the users dashboard.

Holds the authoritative sequence (last successful load), the filtered
sequence derived from it, the active filters, the current page and the view
mode. The dashboard screen owns one instance and passes it to the renderers.
"""

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

from usersync.core.config import DASHBOARD_PAGE_SIZE
from .filters import DateBucket, matches_all, matches_date

VIEW_TABLE = "table"
VIEW_GRID = "grid"


@dataclass
class DashboardStats:
    total_users: int
    today_users: int
    countries: int
    recent_users: int


@dataclass
class UserViewState:
    page_size: int = DASHBOARD_PAGE_SIZE
    all_users: List[Dict[str, Any]] = field(default_factory=list)
    filtered_users: List[Dict[str, Any]] = field(default_factory=list)
    search_query: str = ""
    country: Optional[str] = None
    date_bucket: DateBucket = DateBucket.ANY
    current_page: int = 1
    view_mode: str = VIEW_TABLE

    def load(self, users: List[Dict[str, Any]], today: Optional[date] = None) -> None:
        """Replace the authoritative sequence and reapply the current filters."""
        self.all_users = list(users)
        self.apply_filters(today)

    def set_filters(self, search_query: Optional[str] = None, country: Optional[str] = None,
                    date_bucket: Optional[DateBucket] = None, today: Optional[date] = None) -> None:
        """Update whichever filters are given and recompute."""
        if search_query is not None:
            self.search_query = search_query
        if country is not None:
            self.country = country or None
        if date_bucket is not None:
            self.date_bucket = DateBucket(date_bucket)
        self.apply_filters(today)

    def apply_filters(self, today: Optional[date] = None) -> None:
        """Recompute the filtered sequence and go back to the first page."""
        self.filtered_users = [
            user for user in self.all_users
            if matches_all(user, self.search_query, self.country, self.date_bucket, today)
        ]
        self.current_page = 1

    @property
    def filtered_count(self) -> int:
        return len(self.filtered_users)

    @property
    def page_count(self) -> int:
        return math.ceil(self.filtered_count / self.page_size)

    def go_to_page(self, page: int) -> None:
        """Move to a page, clamped to [1, page_count]; no-op on an empty result."""
        if self.page_count == 0:
            return
        self.current_page = max(1, min(page, self.page_count))

    def change_page(self, direction: int) -> None:
        self.go_to_page(self.current_page + direction)

    @property
    def has_previous(self) -> bool:
        return self.page_count > 0 and self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.page_count > 0 and self.current_page < self.page_count

    def page_slice(self) -> List[Dict[str, Any]]:
        start = (self.current_page - 1) * self.page_size
        return self.filtered_users[start:start + self.page_size]

    def page_info(self) -> str:
        return f"Page {self.current_page} of {self.page_count}"

    def showing_text(self) -> str:
        total = self.filtered_count
        if total == 0:
            return "No users found"
        start = (self.current_page - 1) * self.page_size + 1
        end = min(self.current_page * self.page_size, total)
        return f"Showing {start}-{end} of {total} users"

    def switch_view(self, view_mode: str) -> None:
        if view_mode not in (VIEW_TABLE, VIEW_GRID):
            raise ValueError(f"Unknown view mode: {view_mode}")
        self.view_mode = view_mode

    def toggle_view(self) -> str:
        self.switch_view(VIEW_GRID if self.view_mode == VIEW_TABLE else VIEW_TABLE)
        return self.view_mode

    def countries(self) -> List[str]:
        """Sorted distinct non-empty countries of the authoritative sequence."""
        return sorted({user["country"] for user in self.all_users if user.get("country")})

    def find_user(self, user_id: Any) -> Optional[Dict[str, Any]]:
        for user in self.all_users:
            if user.get("userID") == user_id:
                return user
        return None

    def stats(self, today: Optional[date] = None) -> DashboardStats:
        """Header totals computed from the authoritative sequence.

        "Recent" uses the same window as the week date filter.
        """
        today = today or date.today()
        today_count = sum(1 for user in self.all_users if matches_date(user, DateBucket.TODAY, today))
        recent_count = sum(1 for user in self.all_users if matches_date(user, DateBucket.WEEK, today))

        return DashboardStats(
            total_users=len(self.all_users),
            today_users=today_count,
            countries=len(self.countries()),
            recent_users=recent_count,
        )
