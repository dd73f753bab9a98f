"""
Repository for ledger persistence.

Reads and writes the subscription ledger, the feedback record and the
vote flag under their fixed keys. Missing, corrupt or unreadable data
degrades to an empty default; nothing here raises to the caller.
"""

import json
from typing import List, Optional, Sequence

from dev_expense_tracker.utils.logging import get_logger

from .db import DEFAULT_DB_PATH
from .kv_store import KeyValueStore, SQLiteKeyValueStore, StorageError
from .models import FeedbackRecord, Subscription

logger = get_logger(__name__)

LEDGER_KEY = "dev-expense-tracker-data"
FEEDBACK_KEY = "feedback_dev-expense-tracker"
FEEDBACK_VOTED_KEY = "feedback_dev-expense-tracker_voted"
VOTED_SENTINEL = "true"


class LedgerRepository:
    """Persistence adapter over an injected key-value store.

    Only LEDGER_KEY, FEEDBACK_KEY and FEEDBACK_VOTED_KEY are ever read or
    written.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    def _read(self, key: str) -> Optional[str]:
        try:
            return self.store.get(key)
        except StorageError as e:
            logger.warning("storage_read_failed", key=key, error=str(e))
            return None

    def _write(self, key: str, value: str) -> None:
        try:
            self.store.set(key, value)
        except StorageError as e:
            logger.error("storage_write_failed", key=key, error=str(e))

    def load(self) -> List[Subscription]:
        """Load the ledger.

        Returns:
            Subscriptions in insertion order; an empty list if nothing is
            stored or the stored data does not parse as a ledger
        """
        raw = self._read(LEDGER_KEY)
        if not raw:
            return []
        try:
            records = json.loads(raw)
            if not isinstance(records, list):
                raise ValueError("ledger must be a list")
            return [Subscription.from_dict(record) for record in records]
        except (ValueError, TypeError, ArithmeticError, RecursionError) as e:
            logger.warning("ledger_data_corrupt", key=LEDGER_KEY, error=str(e))
            return []

    def save(self, subscriptions: Sequence[Subscription]) -> None:
        """Overwrite the stored ledger with subscriptions."""
        payload = json.dumps([s.to_dict() for s in subscriptions])
        self._write(LEDGER_KEY, payload)

    def load_feedback(self) -> FeedbackRecord:
        """Load the feedback record, defaulting to zero votes."""
        raw = self._read(FEEDBACK_KEY)
        if not raw:
            return FeedbackRecord()
        try:
            return FeedbackRecord.from_dict(json.loads(raw))
        except (ValueError, TypeError, ArithmeticError, RecursionError) as e:
            logger.warning("feedback_data_corrupt", key=FEEDBACK_KEY, error=str(e))
            return FeedbackRecord()

    def save_feedback(self, feedback: FeedbackRecord) -> None:
        """Overwrite the stored feedback record."""
        self._write(FEEDBACK_KEY, json.dumps(feedback.to_dict()))

    def has_voted(self) -> bool:
        """True only if the vote flag holds the voted sentinel."""
        return self._read(FEEDBACK_VOTED_KEY) == VOTED_SENTINEL

    def mark_voted(self) -> None:
        """Record that this client has voted."""
        self._write(FEEDBACK_VOTED_KEY, VOTED_SENTINEL)


def get_repository(db_path: str = DEFAULT_DB_PATH) -> LedgerRepository:
    """Get a repository backed by the SQLite file at db_path.

    Args:
        db_path: Path to SQLite database file

    Returns:
        A LedgerRepository instance
    """
    return LedgerRepository(SQLiteKeyValueStore(db_path))
