"""
Restaurants demo

A FastHTML page with the creation form and the list it appends to. Uses the
in-memory records API unless ``STARFORM_API_URL`` points at a real service.
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fasthtml.common import *

from .adapters.fasthtml import configure_app, datastar_script
from .api import HttpRecordsApi, MemoryRecordsApi, RecordsApi
from .config import ApplicationConfig, configure_logging
from .core.records import Record
from .errors import RecordApiError
from .store import RecordStore

logger = logging.getLogger(__name__)


async def load_records(store: RecordStore) -> bool:
    """Fill ``store`` from its API; a failure leaves the current list in place."""
    try:
        await store.load()
    except RecordApiError as e:
        logger.warning(f"Could not load restaurants, keeping {len(store)} cached: {e}")
        return False
    return True


def create_app(config: Optional[ApplicationConfig] = None, api: Optional[RecordsApi] = None):
    """Build the demo app; returns ``(app, dispatcher)``."""
    config = config or ApplicationConfig.from_env()
    if api is None:
        if "STARFORM_API_URL" in os.environ:
            api = HttpRecordsApi(config.api)
        else:
            api = MemoryRecordsApi([Record(id=1, name="Pizza Place")])

    store = RecordStore(api)

    @asynccontextmanager
    async def lifespan(app):
        # Startup
        await load_records(store)
        yield
        # Shutdown
        await api.aclose()

    app, rt = fast_app(pico=False, debug=config.debug, hdrs=(datastar_script,), lifespan=lifespan)
    dispatcher = configure_app(app, rt, store, config.form)

    @rt("/")
    async def index(session):
        # retry only when the startup load failed
        if not store.loaded:
            await load_records(store)
        return Titled(
            "Restaurants",
            dispatcher.form_view(session),
            dispatcher.list_view(),
            dispatcher.feed_view(),
        )

    return app, dispatcher


def asgi_app():
    """Application factory for uvicorn, also used by reload workers."""
    config = ApplicationConfig.from_env()
    configure_logging(config.logging)
    app, _ = create_app(config)
    return app


def main() -> None:
    config = ApplicationConfig.from_env()
    configure_logging(config.logging)
    logger.info(f"Starting restaurants demo on http://{config.web.host}:{config.web.port}")
    uvicorn.run(
        "starform.demo:asgi_app",
        factory=True,
        host=config.web.host,
        port=config.web.port,
        reload=config.web.auto_reload,
    )


if __name__ == "__main__":
    main()
