"""
StarForm Store

The records collection, its reducer and the actions that persist through the
records API.
"""

from .bus import EventBus, InProcessBus
from .reducer import AppendRecord, ReplaceRecords, Mutation, Records, reduce
from .store import RecordStore

__all__ = [
    "EventBus",
    "InProcessBus",
    "AppendRecord",
    "ReplaceRecords",
    "Mutation",
    "Records",
    "reduce",
    "RecordStore",
]
