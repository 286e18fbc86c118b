"""
Sync reconciliation - insert-or-update of external user records keyed by userID.

Each record is its own unit of work: a record without a userID is skipped, a
record that fails validation or whose write is rejected is counted as an error,
and the batch always runs to the end. An existing row is replaced wholesale by
the latest payload (last write wins, no merge).
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, List

from pydantic import ValidationError

from . import dao
from ..api.schemas import ExternalUserRecord, SyncSummary
from util.logging import logger


class InvalidBatchError(ValueError):
    """Raised when a request body is neither a list nor {"data": [...]}."""


@dataclass
class ReconciliationSummary:
    """Summary of reconciliation results."""
    total_received: int = 0
    inserted: int = 0
    updated: int = 0
    skipped: int = 0
    errors: int = 0

    def as_api(self) -> SyncSummary:
        return SyncSummary(
            totalReceived=self.total_received,
            newUsers=self.inserted,
            updatedUsers=self.updated,
            skipped=self.skipped,
            errors=self.errors,
        )


def extract_batch(body: Any) -> List[Any]:
    """Return the record list from {"data": [...]} or a bare list."""
    if isinstance(body, dict) and isinstance(body.get("data"), list):
        return body["data"]
    if isinstance(body, list):
        return body
    raise InvalidBatchError("Expected { data: [users] } or [users] format")


def reconcile_record(raw: Dict[str, Any], summary: ReconciliationSummary) -> None:
    """Insert or update a single raw record, updating summary counts in place."""
    if not isinstance(raw, dict) or not raw.get("userID"):
        summary.skipped += 1
        logger.log_sync_record("skip", None, status="skipped", error="missing userID")
        return

    try:
        record = ExternalUserRecord.model_validate(raw)
    except ValidationError as e:
        summary.errors += 1
        logger.log_sync_record("validate", raw.get("userID"), status="failed", error=str(e))
        return

    if dao.user_exists(record.userID):
        if dao.update_user(record, raw):
            summary.updated += 1
            logger.log_sync_record("update", record.userID)
        else:
            summary.errors += 1
            logger.log_sync_record("update", record.userID, status="failed")
    else:
        if dao.insert_user(record, raw):
            summary.inserted += 1
            logger.log_sync_record("insert", record.userID)
        else:
            summary.errors += 1
            logger.log_sync_record("insert", record.userID, status="failed")


def reconcile_users(records: Iterable[Any], source: str = "api") -> ReconciliationSummary:
    """Reconcile a batch of raw external records against the user store."""
    summary = ReconciliationSummary()

    for raw in records:
        summary.total_received += 1
        try:
            reconcile_record(raw, summary)
        except Exception as e:
            # Anything unexpected is charged to this record only
            summary.errors += 1
            user_id = raw.get("userID") if isinstance(raw, dict) else None
            logger.log_sync_record("process", user_id, status="failed", error=str(e))

    logger.log_sync_summary(source, asdict(summary))
    return summary
