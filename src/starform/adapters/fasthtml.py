"""
FastHTML Web Adapter

Renders the creation form with Datastar signals and registers the submit
route that runs the submission controller.

```python
from fasthtml.common import fast_app
from starform import RecordStore, MemoryRecordsApi
from starform.adapters.fasthtml import configure_app, datastar_script

app, rt = fast_app(hdrs=(datastar_script,))
dispatcher = configure_app(app, rt, RecordStore(MemoryRecordsApi()))
```
"""

import json
import logging
from contextlib import aclosing
from typing import Any, AsyncGenerator, Callable, Dict, MutableMapping, Optional

from fasthtml.common import *
from fastcore.xml import to_xml
from starlette.requests import Request
from starlette.responses import JSONResponse
from datastar_py import ServerSentEventGenerator as SSE
from datastar_py.fastapi import DatastarResponse

from ..app.controller import SubmissionController
from ..app.datastar import is_datastar_request, read_form_signals
from ..app.feed import RecordFeed
from ..app.sessions import FormSessions
from ..config import FormConfig
from ..core.form import FormState
from ..core.signals import SignalDescriptor
from ..store.store import RecordStore

logger = logging.getLogger(__name__)

datastar_script = Script(src="https://cdn.jsdelivr.net/gh/starfederation/datastar@v1.0.0-beta.11/bundles/datastar.js", type="module")


def _hidden_unless(visible: bool) -> Dict[str, str]:
    return {} if visible else {"style": "display: none"}


def _malformed_body_response() -> JSONResponse:
    return JSONResponse({"success": False, "error": "Malformed request body"}, status_code=400)


async def malformed_body_handler(request: Request, exc: Exception) -> JSONResponse:
    """Exception handler for bodies that fail to decode before a route runs."""
    logger.warning(f"Unreadable body on {request.url.path}: {exc}")
    return _malformed_body_response()


class RecordFormView:
    """Single-input creation form bound to a submission controller."""

    default_namespace = FormConfig.namespace

    Sdraft = SignalDescriptor("draft")
    Svalidation_error = SignalDescriptor("validation_error")
    Ssave_error = SignalDescriptor("save_error")
    Spending = SignalDescriptor("pending")
    # data-bind takes a signal path, not an expression
    Bdraft = SignalDescriptor("draft", expression=False)

    def __init__(self, controller: SubmissionController, config: Optional[FormConfig] = None, submit_path: Optional[str] = None):
        self.controller = controller
        self.config = config or FormConfig()
        self.submit_path = submit_path or f"/{self.namespace.lower()}/submit"

    @property
    def namespace(self) -> str:
        return self.config.namespace

    @property
    def state(self) -> FormState:
        return self.controller.state

    @property
    def signals(self) -> Dict[str, Any]:
        return {self.namespace: self.state.signals}

    def render(self):
        state = self.state
        return Div(
            {"data-signals": json.dumps(self.signals)},
            Form(
                # pending goes true on the client before the request leaves
                {"data-on-submit": f"{self.Spending} = true; @post('{self.submit_path}')"},
                Input(
                    {"data-bind": self.Bdraft},
                    name="name",
                    value=state.draft,
                    placeholder=self.config.placeholder,
                    id=f"{self.namespace.lower()}-draft",
                ),
                Button(
                    self.config.submit_label,
                    {"data-attr-disabled": self.Spending},
                    type="submit",
                    disabled=state.pending,
                ),
            ),
            Div(
                self.config.validation_message,
                {"data-show": self.Svalidation_error},
                role="alert",
                cls="validation-error",
                **_hidden_unless(state.validation_error),
            ),
            Div(
                self.config.save_error_message,
                {"data-show": self.Ssave_error},
                role="alert",
                cls="save-error",
                **_hidden_unless(state.save_error),
            ),
            id=self.namespace,
        )

    def __ft__(self):
        return self.render()


class RecordListView:
    """Read-only rendering of the store's current snapshot."""

    def __init__(self, store: RecordStore, list_id: str = "records"):
        self.store = store
        self.list_id = list_id

    def render(self):
        return Ul(*[Li(record.name, id=f"record-{record.id}") for record in self.store.records], id=self.list_id)

    def __ft__(self):
        return self.render()


class FormDispatcher:
    """
    Registers the submit route and converts controller results to responses.

    - Datastar requests get an SSE stream: the new form signals, then the
      record list fragment when a record was created.
    - Other requests get a JSON envelope with the form state and records.

    With a feed, it also serves an SSE stream that re-renders the record list
    whenever the store changes, so pages of other sessions stay current.
    """

    def __init__(
        self,
        sessions: FormSessions,
        config: Optional[FormConfig] = None,
        list_id: str = "records",
        feed: Optional[RecordFeed] = None,
    ):
        self.sessions = sessions
        self.config = config or FormConfig()
        self.list_id = list_id
        self.feed = feed
        self.submit_path = f"/{self.config.namespace.lower()}/submit"
        self.updates_path = f"/{self.list_id}/updates"

    @property
    def store(self) -> RecordStore:
        return self.sessions.store

    def form_view(self, session: Optional[MutableMapping] = None) -> RecordFormView:
        return RecordFormView(self.sessions.for_session(session), self.config, self.submit_path)

    def list_view(self) -> RecordListView:
        return RecordListView(self.store, self.list_id)

    def feed_view(self):
        """Element that opens the list update stream once the page loads."""
        return Div({"data-on-load": f"@get('{self.updates_path}')"}, id=f"{self.list_id}-updates")

    def include_form(self, router, base_path: str = "") -> str:
        """Register the submit route with the router and return its path."""
        path = f"/{base_path.strip('/')}{self.submit_path}" if base_path else self.submit_path
        self.submit_path = path
        self._register_route(router, path, self._create_route_handler(), "POST")
        return path

    def include_feed(self, router, base_path: str = "") -> str:
        """Register the list update stream with the router and return its path."""
        if self.feed is None:
            raise ValueError("FormDispatcher has no record feed to serve")
        path = f"/{base_path.strip('/')}{self.updates_path}" if base_path else self.updates_path
        self.updates_path = path
        self._register_route(router, path, self._create_feed_handler(), "GET")
        return path

    def _register_route(self, router, path: str, handler: Callable, method: str):
        router(path, methods=[method])(handler)

    def _create_route_handler(self) -> Callable:
        async def handler(request: Request, session):
            controller = self.sessions.for_session(session)
            try:
                values = await read_form_signals(request, self.config.namespace)
            except ValueError as e:
                logger.warning(f"Unreadable submission on {request.url.path}: {e}")
                return _malformed_body_response()

            if "draft" in values:
                draft = values["draft"]
                controller.set_draft("" if draft is None else str(draft))
            saved = await controller.submit()
            return await self.result_to_response(controller, saved, request)

        return handler

    async def result_to_response(self, controller: SubmissionController, saved: bool, request: Request) -> Any:
        if await is_datastar_request(request):
            return DatastarResponse(self._create_sse_stream(controller, saved))

        state = controller.state
        if saved:
            status_code = 201
        elif state.pending:
            status_code = 409
        elif state.validation_error:
            status_code = 422
        else:
            status_code = 502
        return JSONResponse(
            {
                "success": saved,
                "form": {**state.signals, "phase": state.phase.value},
                "records": [record.model_dump() for record in self.store.records],
            },
            status_code=status_code,
        )

    async def _create_sse_stream(self, controller: SubmissionController, saved: bool) -> AsyncGenerator[str, None]:
        yield SSE.merge_signals({self.config.namespace: controller.state.signals})
        if saved:
            yield self._list_fragment()

    def _create_feed_handler(self) -> Callable:
        async def handler(request: Request):
            logger.debug(f"List update stream opened from {request.client.host if request.client else 'unknown'}")
            return DatastarResponse(self._create_feed_stream())

        return handler

    async def _create_feed_stream(self) -> AsyncGenerator[str, None]:
        async with aclosing(self.feed.listen()) as events:
            async for event in events:
                logger.debug(f"Pushing list update after {event.get('event')}")
                yield self._list_fragment()

    def _list_fragment(self) -> str:
        return SSE.merge_fragments(to_xml(self.list_view().render()), merge_mode="morph")


def configure_app(app, rt, store: RecordStore, config: Optional[FormConfig] = None, base_path: str = "") -> FormDispatcher:
    """
    Configure a FastHTML app with a record creation form.

    Args:
        app: FastHTML app instance
        rt: FastHTML router instance
        store: The record store every session's controller saves through
        config: Form configuration (namespace, messages, session bound)
        base_path: Optional prefix for the submit and update routes

    Returns:
        The dispatcher, which also builds form, list and feed views for pages
    """
    config = config or FormConfig()
    dispatcher = FormDispatcher(
        FormSessions(store, max_sessions=config.max_sessions),
        config,
        feed=RecordFeed(store.bus),
    )
    path = dispatcher.include_form(rt, base_path)
    updates_path = dispatcher.include_feed(rt, base_path)
    app.add_exception_handler(json.JSONDecodeError, malformed_body_handler)
    logger.info(f"Registered record form {config.namespace} at {path}, list updates at {updates_path}")
    return dispatcher
