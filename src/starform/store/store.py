"""
Record Store

Owns the authoritative records collection and the actions that change it.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional

from ..api.base import RecordsApi
from ..core.records import Record
from .bus import EventBus, InProcessBus
from .reducer import AppendRecord, Mutation, Records, ReplaceRecords, reduce

logger = logging.getLogger(__name__)


class RecordStore:
    """
    Single owner of the records collection.

    Readers get tuple snapshots from ``records``; ``commit`` is the only
    mutation entry point. The actions return awaitables that settle with the
    outcome of the API call, and they never retry or wrap API errors.
    """

    def __init__(self, api: RecordsApi, bus: Optional[EventBus] = None, records: Iterable[Record] = ()):
        self.api = api
        self.bus = bus or InProcessBus()
        self._records: Records = tuple(records)
        self.loaded = False

    @property
    def records(self) -> Records:
        return self._records

    def __len__(self) -> int:
        return len(self._records)

    def commit(self, mutation: Mutation) -> Records:
        """Apply ``mutation`` through the reducer and return the new snapshot."""
        self._records = reduce(self._records, mutation)
        return self._records

    async def create(self, name: str) -> Record:
        """
        Persist ``name`` through the API and append the server's record.

        Args:
            name: The exact draft the caller validated; passed on untouched

        Returns:
            The record the server assigned

        Raises:
            Whatever the API raised, unchanged. The collection is not touched.
        """
        record = await self.api.create_record(name)
        self.commit(AppendRecord(record))
        logger.info(f"Created record {record.id}: {record.name!r}")
        await self.bus.publish(self._event("record_created", record=record.model_dump()))
        return record

    async def load(self) -> Records:
        """Replace the collection with what the API currently lists."""
        records = await self.api.list_records()
        snapshot = self.commit(ReplaceRecords(records))
        self.loaded = True
        logger.info(f"Loaded {len(snapshot)} records")
        await self.bus.publish(self._event("records_loaded", count=len(snapshot)))
        return snapshot

    def _event(self, name: str, **data: Any) -> Dict[str, Any]:
        return {
            "event": name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            **data,
        }
