"""
Records Reducer

The only way the records collection changes. Collections are tuples, so a
reducer never touches the snapshot it was given.
"""

from dataclasses import dataclass
from typing import Tuple, Union

from ..core.records import Record

Records = Tuple[Record, ...]


@dataclass(frozen=True)
class AppendRecord:
    """Append a server-confirmed record at the tail."""
    record: Record


@dataclass(frozen=True)
class ReplaceRecords:
    """Replace the whole collection, used when loading from the server."""
    records: Records

    def __post_init__(self):
        object.__setattr__(self, "records", tuple(self.records))


Mutation = Union[AppendRecord, ReplaceRecords]


def reduce(records: Records, mutation: Mutation) -> Records:
    if isinstance(mutation, AppendRecord):
        return (*records, mutation.record)
    if isinstance(mutation, ReplaceRecords):
        return mutation.records
    raise TypeError(f"Unknown records mutation: {mutation!r}")
