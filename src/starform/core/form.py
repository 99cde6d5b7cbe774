"""
Creation Form State Machine

Pure ``(FormState, FormEvent) -> FormState`` transitions for a single-field
creation form. Nothing here performs I/O or knows about a web framework; the
async side lives in ``starform.app.controller``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

from .records import Record


class Phase(str, Enum):
    """Configurations the form can be observed in (the draft is orthogonal)."""
    IDLE = "idle"
    INVALID = "invalid"
    PENDING = "pending"
    FAILED = "failed"


class FormState(BaseModel):
    """Snapshot of the form: the draft, the two status flags and the in-flight name."""
    model_config = ConfigDict(frozen=True)

    draft: str = ""
    validation_error: bool = False
    save_error: bool = False
    pending_name: Optional[str] = None

    @property
    def pending(self) -> bool:
        return self.pending_name is not None

    @property
    def phase(self) -> Phase:
        if self.pending:
            return Phase.PENDING
        if self.save_error:
            return Phase.FAILED
        if self.validation_error:
            return Phase.INVALID
        return Phase.IDLE

    @property
    def signals(self) -> dict:
        """Client-visible values, as mirrored into Datastar signals."""
        return {
            "draft": self.draft,
            "validation_error": self.validation_error,
            "save_error": self.save_error,
            "pending": self.pending,
        }


@dataclass(frozen=True)
class DraftChanged:
    value: str


@dataclass(frozen=True)
class Submitted:
    pass


@dataclass(frozen=True)
class SaveSucceeded:
    record: Record


@dataclass(frozen=True)
class SaveFailed:
    reason: str = ""


FormEvent = Union[DraftChanged, Submitted, SaveSucceeded, SaveFailed]


def transition(state: FormState, event: FormEvent) -> FormState:
    """Return the state that follows ``state`` once ``event`` happened.

    Submissions are serialized: a ``Submitted`` event that arrives while a
    request is in flight leaves the state untouched, and settlement events
    that arrive when nothing is in flight are treated as stale.
    """
    if isinstance(event, DraftChanged):
        return state.model_copy(update={"draft": event.value})

    if isinstance(event, Submitted):
        if state.pending:
            return state
        if state.draft == "":
            return state.model_copy(update={"validation_error": True})
        return state.model_copy(update={
            "validation_error": False,
            "save_error": False,
            "pending_name": state.draft,
        })

    if isinstance(event, SaveSucceeded):
        if not state.pending:
            return state
        # a draft edited while the save was in flight is a new entry; keep it
        draft = "" if state.draft == state.pending_name else state.draft
        return state.model_copy(update={"draft": draft, "pending_name": None})

    if isinstance(event, SaveFailed):
        if not state.pending:
            return state
        return state.model_copy(update={"save_error": True, "pending_name": None})

    raise TypeError(f"Unknown form event: {event!r}")


def starts_request(before: FormState, after: FormState) -> bool:
    """True when the transition from ``before`` to ``after`` launched a save."""
    return not before.pending and after.pending
