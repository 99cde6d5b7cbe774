"""
StarForm Records API - Memory Backend

In-memory records API for development and testing.
Data is lost when the application restarts.
"""

import asyncio
import logging
from typing import Iterable, List, Optional

from ..core.records import Record
from ..errors import RecordApiError
from .base import RecordsApi

logger = logging.getLogger(__name__)


class MemoryRecordsApi(RecordsApi):
    """
    Records API that keeps everything in a list and assigns sequential ids.

    ``fail_next`` makes the following calls raise, which is how the demo and
    the tests exercise the failure path without a network.
    """

    def __init__(self, records: Iterable[Record] = (), latency: float = 0.0):
        self._records: List[Record] = list(records)
        self._next_id = max((r.id for r in self._records if isinstance(r.id, int)), default=0) + 1
        self._failures: List[Exception] = []
        self.latency = latency
        self.calls: List[str] = []

    def fail_next(self, count: int = 1, error: Optional[Exception] = None) -> None:
        """Make the next ``count`` calls raise ``error`` (a RecordApiError by default)."""
        for _ in range(count):
            self._failures.append(error or RecordApiError("Simulated server failure", status_code=500))

    async def create_record(self, name: str) -> Record:
        self.calls.append(name)
        await self._simulate()
        record = Record(id=self._next_id, name=name)
        self._next_id += 1
        self._records.append(record)
        logger.debug(f"Stored record {record.id}: {name!r}")
        return record

    async def list_records(self) -> List[Record]:
        await self._simulate()
        return list(self._records)

    async def _simulate(self) -> None:
        if self.latency:
            await asyncio.sleep(self.latency)
        if self._failures:
            raise self._failures.pop(0)
