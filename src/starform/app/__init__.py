"""
Application Service Layer

Bridges the presentation layer (FastHTML routes) and the domain (form state,
record store).

Key components:
- controller: the submission controller driving one creation form
- datastar: Datastar request helpers
- feed: store events fanned out to connected pages
- sessions: per-browser-session controller registry
"""

from .controller import SubmissionController
from .feed import RecordFeed
from .sessions import FormSessions

__all__ = [
    'SubmissionController',
    'RecordFeed',
    'FormSessions',
]
