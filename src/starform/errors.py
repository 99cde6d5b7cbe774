"""
StarForm Errors

Exception hierarchy shared by the API boundary, the store and the web adapter.
"""

from typing import Optional


class StarFormError(Exception):
    """Base exception for starform errors"""
    pass


class ConfigurationError(StarFormError):
    """Raised when a configuration value cannot be used"""
    pass


class RecordApiError(StarFormError):
    """Raised by the records API when a call does not produce a record."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class InvalidRecordResponse(RecordApiError):
    """Raised when a successful reply cannot be read as a record"""
    pass
