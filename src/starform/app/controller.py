"""
Submission Controller

Binds the pure form state machine to the record store. The store action is
the only asynchronous boundary: everything before it (validation) runs
synchronously, everything after it runs once that submission's awaitable has
settled.
"""

import asyncio
import logging
from typing import Callable, List, Optional

from ..core.form import (
    DraftChanged,
    FormEvent,
    FormState,
    SaveFailed,
    SaveSucceeded,
    Submitted,
    starts_request,
    transition,
)
from ..store.store import RecordStore

logger = logging.getLogger(__name__)

StateListener = Callable[[FormState], None]


class SubmissionController:
    """
    Owns one creation form: its draft, its status flags and its in-flight save.

    The draft survives every failure and is cleared only after the store
    confirmed the save. Submissions are serialized; submitting while a save is
    pending does nothing.
    """

    def __init__(self, store: RecordStore, state: Optional[FormState] = None):
        self.store = store
        self._state = state or FormState()
        self._listeners: List[StateListener] = []

    @property
    def state(self) -> FormState:
        return self._state

    @property
    def draft(self) -> str:
        return self._state.draft

    @property
    def validation_error(self) -> bool:
        return self._state.validation_error

    @property
    def save_error(self) -> bool:
        return self._state.save_error

    @property
    def pending(self) -> bool:
        return self._state.pending

    def subscribe(self, listener: StateListener) -> None:
        """Call ``listener`` with the new state after every change.

        A listener that raises is logged; the transition it observed stands.
        """
        self._listeners.append(listener)

    def unsubscribe(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def dispatch(self, event: FormEvent) -> FormState:
        new_state = transition(self._state, event)
        if new_state != self._state:
            self._state = new_state
            for listener in list(self._listeners):
                try:
                    listener(new_state)
                except Exception:
                    logger.exception(
                        f"State listener {getattr(listener, '__name__', listener)!r} failed "
                        f"in phase {new_state.phase.value}"
                    )
        return new_state

    def set_draft(self, value: str) -> None:
        self.dispatch(DraftChanged(value))

    async def submit(self) -> bool:
        """
        Validate the draft and, when it is not empty, save it.

        Returns:
            True when a record was created, False when validation failed, the
            save failed, or another save was still pending.
        """
        before = self._state
        after = self.dispatch(Submitted())
        if not starts_request(before, after):
            if before.pending:
                logger.debug(f"Submission ignored: {before.pending_name!r} is still saving")
            else:
                logger.debug("Submission rejected: empty draft")
            return False

        name = after.pending_name
        try:
            record = await self.store.create(name)
        except asyncio.CancelledError:
            self.dispatch(SaveFailed("cancelled"))
            raise
        except Exception as e:
            logger.warning(f"Saving {name!r} failed: {e.__class__.__name__}: {e}")
            self.dispatch(SaveFailed(str(e)))
            return False

        self.dispatch(SaveSucceeded(record))
        return True
