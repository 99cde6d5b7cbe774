"""
StarForm Core Module

Domain layer - framework-agnostic state.
Contains the record model, the form state machine and the signal helpers.
"""

from .records import Record, RecordId
from .form import (
    FormState,
    Phase,
    FormEvent,
    DraftChanged,
    Submitted,
    SaveSucceeded,
    SaveFailed,
    transition,
    starts_request,
)
from .signals import SignalDescriptor

__all__ = [
    "Record",
    "RecordId",
    "FormState",
    "Phase",
    "FormEvent",
    "DraftChanged",
    "Submitted",
    "SaveSucceeded",
    "SaveFailed",
    "transition",
    "starts_request",
    "SignalDescriptor",
]
