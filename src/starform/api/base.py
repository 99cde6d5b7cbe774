"""
StarForm Records API - Base Classes

This module provides the abstract interface the store persists through.
"""

from abc import ABC, abstractmethod
from typing import List

from ..core.records import Record


class RecordsApi(ABC):
    """
    Abstract base class for records API backends.

    Implementations signal failure by raising; the store passes the exception
    through unchanged.
    """

    @abstractmethod
    async def create_record(self, name: str) -> Record:
        """
        Persist a new record.

        Args:
            name: The exact name to store

        Returns:
            The record as the server stored it, carrying its assigned id
        """
        pass

    @abstractmethod
    async def list_records(self) -> List[Record]:
        """
        Load every stored record in server order.

        Returns:
            List of records
        """
        pass

    async def aclose(self) -> None:
        """Release any resources held by the backend."""
        pass
