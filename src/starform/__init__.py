"""
StarForm - Record creation forms for FastHTML

A creation form whose submission lifecycle is a pure state machine, a record
store that appends only what the server confirmed, and a Datastar binding that
keeps the browser in sync.
"""

from .core import (
    Record,
    FormState,
    Phase,
    DraftChanged,
    Submitted,
    SaveSucceeded,
    SaveFailed,
    transition,
)
from .api import RecordsApi, HttpRecordsApi, MemoryRecordsApi
from .store import RecordStore, InProcessBus, AppendRecord, ReplaceRecords
from .app import SubmissionController, FormSessions, RecordFeed
from .config import ApplicationConfig, ApiConfig, FormConfig, WebConfig, LoggingConfig, Environment, configure_logging
from .errors import StarFormError, RecordApiError, InvalidRecordResponse, ConfigurationError

__all__ = [
    # Core
    'Record',
    'FormState',
    'Phase',
    'DraftChanged',
    'Submitted',
    'SaveSucceeded',
    'SaveFailed',
    'transition',

    # API boundary
    'RecordsApi',
    'HttpRecordsApi',
    'MemoryRecordsApi',

    # Store
    'RecordStore',
    'InProcessBus',
    'AppendRecord',
    'ReplaceRecords',

    # Application service layer
    'SubmissionController',
    'FormSessions',
    'RecordFeed',

    # Configuration
    'ApplicationConfig',
    'ApiConfig',
    'FormConfig',
    'WebConfig',
    'LoggingConfig',
    'Environment',
    'configure_logging',

    # Errors
    'StarFormError',
    'RecordApiError',
    'InvalidRecordResponse',
    'ConfigurationError',
]
