"""In-memory workbook store.

Uploaded workbooks are kept by file id until they expire. Nothing is
persisted; a restart forgets every upload.
"""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from sheetdiff.exceptions import WorkbookNotFoundError
from sheetdiff.models import Workbook

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(hours=1)


@dataclass(frozen=True)
class StoredWorkbook:
    """A workbook with the time it was stored."""

    file_id: str
    workbook: Workbook
    stored_at: datetime


class WorkbookStore:
    """Thread-safe mapping of file id to workbook with time-based expiry.

    Example:
        >>> store = WorkbookStore(ttl=timedelta(minutes=30))
        >>> file_id = store.put(workbook)
        >>> store.get(file_id).file_name
    """

    def __init__(self, ttl: timedelta = DEFAULT_TTL) -> None:
        self._ttl = ttl
        self._items: dict[str, StoredWorkbook] = {}
        self._lock = threading.Lock()

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __contains__(self, file_id: object) -> bool:
        with self._lock:
            return file_id in self._items

    def put(self, workbook: Workbook, *, now: datetime | None = None) -> str:
        """Store a workbook and return its new file id."""
        file_id = uuid.uuid4().hex
        entry = StoredWorkbook(
            file_id=file_id,
            workbook=workbook,
            stored_at=now or datetime.now(UTC),
        )
        with self._lock:
            self._items[file_id] = entry
        logger.debug("Stored %r as %s", workbook.file_name, file_id)
        return file_id

    def get(self, file_id: str, *, now: datetime | None = None) -> Workbook:
        """Return a stored workbook.

        Raises:
            WorkbookNotFoundError: If the id is unknown or the entry expired
        """
        now = now or datetime.now(UTC)
        with self._lock:
            entry = self._items.get(file_id)
            if entry is not None and self._is_expired(entry, now):
                del self._items[file_id]
                entry = None
        if entry is None:
            raise WorkbookNotFoundError(file_id)
        return entry.workbook

    def delete(self, file_id: str) -> bool:
        """Remove an entry. Returns False if it was not present."""
        with self._lock:
            return self._items.pop(file_id, None) is not None

    def cleanup_expired(self, *, now: datetime | None = None) -> int:
        """Evict every expired entry and return how many were removed."""
        now = now or datetime.now(UTC)
        with self._lock:
            expired = [
                file_id
                for file_id, entry in self._items.items()
                if self._is_expired(entry, now)
            ]
            for file_id in expired:
                del self._items[file_id]
        for file_id in expired:
            logger.info("Cleaned up expired file: %s", file_id)
        return len(expired)

    def _is_expired(self, entry: StoredWorkbook, now: datetime) -> bool:
        return entry.stored_at + self._ttl < now
