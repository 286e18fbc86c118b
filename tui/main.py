"""
Users dashboard - terminal client for the user sync API.
Search, filter, paginate, switch table/grid views, export CSV and refresh.
"""

import sys
from datetime import datetime
from typing import Any, Dict, List, Optional

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, VerticalScroll
from textual.screen import ModalScreen
from textual.logging import TextualHandler
from textual.widgets import Header, Footer, Static, Button, Input, Select, DataTable

from usersync.core.config import DASHBOARD_REFRESH_INTERVAL_SEC, API_BASE_URL
from util.logging import logger
from .client import DashboardClient
from .export import export_users_csv, NothingToExportError
from .filters import DateBucket
from .render import TABLE_COLUMNS, table_row, grid_card, detail_lines, empty_message
from .trigger import reload_users, refresh_from_external
from .view_state import UserViewState, VIEW_TABLE, VIEW_GRID

SEARCH_DEBOUNCE_SEC = 0.3

DATE_OPTIONS = [
    ("Today", DateBucket.TODAY.value),
    ("Last 7 days", DateBucket.WEEK.value),
    ("Last month", DateBucket.MONTH.value),
]


def _selected(value: Any) -> Optional[str]:
    """Select values are strings; anything else is the blank sentinel."""
    return value if isinstance(value, str) else None


class UserDetailsScreen(ModalScreen):
    """Modal with one user's profile fields."""

    BINDINGS = [Binding("escape", "close", "Close")]

    def __init__(self, user: Dict[str, Any]):
        super().__init__()
        self.user = user

    def compose(self) -> ComposeResult:
        yield Container(
            Static("\n".join(detail_lines(self.user)), markup=False, id="user-details"),
            Button("Close", id="close-details", variant="primary"),
            id="details-container",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "close-details":
            self.action_close()

    def action_close(self) -> None:
        self.dismiss()


class UserCard(Static):
    """Grid view card; clicking it opens the details modal."""

    def __init__(self, user: Dict[str, Any]):
        super().__init__(grid_card(user), markup=False, classes="user-card")
        self.user_id = user.get("userID")

    def on_click(self) -> None:
        self.app.show_user_details(self.user_id)


class UsersDashboardApp(App):
    """Users dashboard TUI application."""

    CSS = """
    #stats {
        padding: 0 1;
        color: cyan;
        text-style: bold;
    }

    #filters {
        height: auto;
    }

    #search-input {
        width: 2fr;
    }

    #country-filter, #date-filter {
        width: 1fr;
    }

    #grid-view {
        layout: grid;
        grid-size: 3;
        grid-gutter: 1;
    }

    .user-card {
        border: solid cyan;
        padding: 0 1;
        height: auto;
    }

    #empty-message {
        text-align: center;
        color: gray;
        padding: 2;
    }

    #pagination {
        height: auto;
    }

    #showing-count, #page-info {
        padding: 1;
    }

    #details-container {
        width: 70;
        height: auto;
        border: solid white;
        background: $panel;
        padding: 1;
    }

    UserDetailsScreen {
        align: center middle;
    }
    """

    TITLE = "Users Dashboard"

    BINDINGS = [
        Binding("ctrl+r", "refresh", "Refresh", priority=True),
        Binding("ctrl+e", "export", "Export CSV", priority=True),
        Binding("ctrl+slash,ctrl+underscore", "focus_search", "Search", priority=True),
        Binding("ctrl+t", "toggle_view", "Table/Grid", priority=True),
    ]

    def __init__(self, client: Optional[DashboardClient] = None, state: Optional[UserViewState] = None):
        super().__init__()
        self.client = client or DashboardClient(API_BASE_URL)
        self.state = state or UserViewState()
        self._search_timer = None
        self.last_update: Optional[datetime] = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static("Loading users...", id="stats")
        yield Horizontal(
            Input(placeholder="Search name, username, country, user or account ID...", id="search-input"),
            Select([], prompt="All Countries", allow_blank=True, id="country-filter"),
            Select(DATE_OPTIONS, prompt="All Dates", allow_blank=True, id="date-filter"),
            Button("Table", id="view-table", variant="primary"),
            Button("Grid", id="view-grid"),
            id="filters",
        )
        yield DataTable(id="table-view", cursor_type="row", zebra_stripes=True)
        yield VerticalScroll(id="grid-view")
        yield Static("", id="empty-message")
        yield Horizontal(
            Button("Prev", id="prev-page"),
            Static("", id="page-info"),
            Button("Next", id="next-page"),
            Static("", id="showing-count"),
            id="pagination",
        )
        yield Footer()

    def on_mount(self) -> None:
        logger.log_dashboard_event("start", details={"api": self.client.base_url})
        self.query_one("#table-view", DataTable).add_columns(*TABLE_COLUMNS)
        self.render_content()
        self.run_refresh(pull_external=False)
        self.set_interval(DASHBOARD_REFRESH_INTERVAL_SEC, self.action_refresh)
        minutes = DASHBOARD_REFRESH_INTERVAL_SEC // 60
        self.notify(f"Auto-refresh enabled: data will update every {minutes} minutes", title="Auto-refresh")
        self.set_timer(3, self._show_tip)

    def _show_tip(self) -> None:
        if not self.state.all_users:
            self.notify("Tip: Ctrl+R to refresh, Ctrl+E to export, Ctrl+/ to search", title="Shortcuts")

    # Refresh cycle

    def action_refresh(self) -> None:
        self.notify("Fetching latest data from external API...", title="Refresh")
        self.run_refresh(pull_external=True)

    @work(thread=True, exclusive=True, group="refresh")
    def run_refresh(self, pull_external: bool) -> None:
        if pull_external:
            result = refresh_from_external(self.client)
        else:
            result = reload_users(self.client)
        self.call_from_thread(self.apply_refresh_result, result)

    def apply_refresh_result(self, result: Dict[str, Any]) -> None:
        self.state.load(result["users"])
        self.last_update = datetime.now()
        self._populate_country_filter()
        self.render_content()
        for message, severity in result["notices"]:
            self.notify(message, severity=severity, timeout=5 if severity == "error" else 3)
        logger.log_dashboard_event(
            "reload",
            status="fallback" if result["placeholder"] else "success",
            details={"users": len(self.state.all_users)},
        )

    def _populate_country_filter(self) -> None:
        select = self.query_one("#country-filter", Select)
        select.set_options([(country, country) for country in self.state.countries()])

    # Filters

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id != "search-input":
            return
        if self._search_timer is not None:
            self._search_timer.stop()
        query = event.value
        self._search_timer = self.set_timer(SEARCH_DEBOUNCE_SEC, lambda: self._apply_search(query))

    def _apply_search(self, query: str) -> None:
        self.state.set_filters(search_query=query)
        self.render_content()

    def on_select_changed(self, event: Select.Changed) -> None:
        value = _selected(event.value)
        if event.select.id == "country-filter":
            self.state.set_filters(country=value or "")
        elif event.select.id == "date-filter":
            self.state.set_filters(date_bucket=value or DateBucket.ANY)
        else:
            return
        self.render_content()

    # Navigation and views

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id

        if button_id == "prev-page":
            self.state.change_page(-1)
            self.render_content()
        elif button_id == "next-page":
            self.state.change_page(1)
            self.render_content()
        elif button_id == "view-table":
            self.switch_view(VIEW_TABLE)
        elif button_id == "view-grid":
            self.switch_view(VIEW_GRID)

    def action_toggle_view(self) -> None:
        self.switch_view(self.state.toggle_view())

    def switch_view(self, view_mode: str) -> None:
        self.state.switch_view(view_mode)
        self.query_one("#view-table", Button).variant = "primary" if view_mode == VIEW_TABLE else "default"
        self.query_one("#view-grid", Button).variant = "primary" if view_mode == VIEW_GRID else "default"
        self.render_content()

    def action_focus_search(self) -> None:
        self.query_one("#search-input", Input).focus()

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        self.show_user_details(int(event.row_key.value))

    def show_user_details(self, user_id: Any) -> None:
        user = self.state.find_user(user_id)
        if user:
            self.push_screen(UserDetailsScreen(user))
        else:
            self.notify("Error loading user details", severity="error")

    # Export

    def action_export(self) -> None:
        try:
            path = export_users_csv(self.state.filtered_users)
        except NothingToExportError:
            self.notify("No data to export", severity="error", timeout=5)
            return
        except OSError as e:
            logger.log_dashboard_event("export", status="failed", details={"error": str(e)})
            self.notify(f"Export failed: {e}", severity="error", timeout=5)
            return
        self.notify(f"Exported {self.state.filtered_count} users to {path}", title="Export")

    # Rendering

    def render_content(self) -> None:
        page_users = self.state.page_slice()
        table = self.query_one("#table-view", DataTable)
        grid = self.query_one("#grid-view", VerticalScroll)
        empty = self.query_one("#empty-message", Static)

        table.display = self.state.view_mode == VIEW_TABLE and bool(page_users)
        grid.display = self.state.view_mode == VIEW_GRID and bool(page_users)
        empty.display = not page_users
        empty.update(empty_message(self.state.search_query))

        if self.state.view_mode == VIEW_TABLE:
            self._render_table(table, page_users)
        else:
            self._render_grid(grid, page_users)

        self._update_pagination()
        self._update_stats()

    def _render_table(self, table: DataTable, users: List[Dict[str, Any]]) -> None:
        table.clear()
        for user in users:
            table.add_row(*table_row(user), key=str(user.get("userID")))

    def _render_grid(self, grid: VerticalScroll, users: List[Dict[str, Any]]) -> None:
        grid.remove_children()
        if users:
            grid.mount(*[UserCard(user) for user in users])

    def _update_pagination(self) -> None:
        self.query_one("#prev-page", Button).disabled = not self.state.has_previous
        self.query_one("#next-page", Button).disabled = not self.state.has_next
        self.query_one("#page-info", Static).update(self.state.page_info())
        self.query_one("#showing-count", Static).update(self.state.showing_text())

    def _update_stats(self) -> None:
        stats = self.state.stats()
        last_update = self.last_update.strftime("%H:%M:%S") if self.last_update else "never"
        self.query_one("#stats", Static).update(
            f"Total: {stats.total_users:,}  |  Today: {stats.today_users:,}  |  "
            f"Countries: {stats.countries:,}  |  Last 7 days: {stats.recent_users:,}  |  "
            f"Last update: {last_update}"
        )

    def on_unmount(self) -> None:
        self.client.close()


def main():
    """Dashboard entry point."""
    logger.use_handler(TextualHandler())
    try:
        app = UsersDashboardApp()
        app.run()
    except KeyboardInterrupt:
        print("\nDashboard interrupted by user")
        logger.info("Dashboard exited via keyboard interrupt")
    except Exception as e:
        error_msg = f"Dashboard startup failed: {e}"
        print(error_msg)
        logger.error(error_msg)
        sys.exit(1)


if __name__ == "__main__":
    main()
