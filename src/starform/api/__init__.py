"""
StarForm Records API

Adapters for the backend the store persists records through.
"""

from .base import RecordsApi
from .http import HttpRecordsApi, build_async_client
from .memory import MemoryRecordsApi

__all__ = [
    "RecordsApi",
    "HttpRecordsApi",
    "build_async_client",
    "MemoryRecordsApi",
]
