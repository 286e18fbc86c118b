"""
Structured logging for the user sync service and dashboard.
"""

import logging
from typing import Any, Dict


class StructuredLogger:
    """Structured logger for sync, API and dashboard operations."""

    def __init__(self, name: str = "usersync"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.INFO)

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        if status in ("failed", "error"):
            self.logger.error(message)
        elif status in ("skipped", "fallback"):
            self.logger.warning(message)
        else:
            self.logger.info(message)

    def log_sync_record(self, action: str, user_id: Any, status: str = "success", error: str = None):
        """Log the outcome of reconciling a single record."""
        details = {"userID": user_id}
        if error is not None:
            details["error"] = error[:100]

        self.log_operation(f"sync.{action}", status, details)

    def log_sync_summary(self, source: str, summary: Dict[str, Any]):
        """Log the totals of a reconciled batch."""
        details = {"source": source}
        details.update(summary)
        self.log_operation("sync.batch", "completed", details)

    def log_external_fetch(self, url: str, status: str = "success", details: Dict[str, Any] = None):
        """Log a call to the external user API."""
        log_details = {"url": url}
        if details:
            log_details.update(details)

        self.log_operation("external.fetch", status, log_details)

    def log_dashboard_event(self, event: str, status: str = "success", details: Dict[str, Any] = None):
        """Log a dashboard action (reload, export, refresh)."""
        self.log_operation(f"dashboard.{event}", status, details)

    def use_handler(self, handler: logging.Handler) -> None:
        """Route all records to a single handler (the TUI swaps out stderr)."""
        for existing in list(self.logger.handlers):
            self.logger.removeHandler(existing)
        self.logger.addHandler(handler)

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)


# Global logger instance
logger = StructuredLogger()
