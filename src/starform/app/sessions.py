"""
Form Sessions

Keeps one submission controller per browser session. All controllers share
the same record store.
"""

import logging
import uuid
from collections import OrderedDict
from typing import MutableMapping, Optional

from ..store.store import RecordStore
from .controller import SubmissionController

logger = logging.getLogger(__name__)

SESSION_KEY = "starform_id"


class FormSessions:
    """
    Registry of submission controllers keyed by session id.

    Holds at most ``max_sessions`` controllers. When a new session pushes the
    registry over that bound, the least recently used controllers without a
    pending save are dropped; their sessions start over with an empty form.
    """

    def __init__(self, store: RecordStore, max_sessions: int = 1000):
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self.store = store
        self.max_sessions = max_sessions
        self._controllers: "OrderedDict[str, SubmissionController]" = OrderedDict()

    @staticmethod
    def session_id(session: Optional[MutableMapping]) -> str:
        """Return the form session id stored in ``session``, creating one if needed."""
        if session is None:
            return "default"
        sid = session.get(SESSION_KEY)
        if not sid:
            sid = uuid.uuid4().hex
            session[SESSION_KEY] = sid
        return sid

    def get(self, session_id: str) -> SubmissionController:
        controller = self._controllers.get(session_id)
        if controller is None:
            controller = SubmissionController(self.store)
            self._controllers[session_id] = controller
            self._evict(keep=session_id)
        else:
            self._controllers.move_to_end(session_id)
        return controller

    def for_session(self, session: Optional[MutableMapping]) -> SubmissionController:
        return self.get(self.session_id(session))

    def discard(self, session_id: str) -> bool:
        return self._controllers.pop(session_id, None) is not None

    def _evict(self, keep: str) -> None:
        for sid in list(self._controllers):
            if len(self._controllers) <= self.max_sessions:
                return
            if sid == keep or self._controllers[sid].pending:
                continue
            del self._controllers[sid]
            logger.debug(f"Evicted idle form session {sid}")

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._controllers

    def __len__(self) -> int:
        return len(self._controllers)
