import asyncio
import logging
from typing import List, Union

import pytest

from starform import Record, RecordStore, SubmissionController
from starform.api.base import RecordsApi


class ScriptedRecordsApi(RecordsApi):
    """Records API whose replies are queued by the test.

    Each queued outcome is a Record (returned), an exception (raised) or an
    asyncio.Future (awaited, so the test decides when the call settles).
    """

    def __init__(self, listing: List[Record] = None):
        self.calls: List[str] = []
        self.outcomes: List[Union[Record, BaseException, asyncio.Future]] = []
        self.listing = list(listing or [])

    def script(self, *outcomes) -> 'ScriptedRecordsApi':
        self.outcomes.extend(outcomes)
        return self

    async def create_record(self, name: str) -> Record:
        self.calls.append(name)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, asyncio.Future):
            return await outcome
        return outcome

    async def list_records(self) -> List[Record]:
        return list(self.listing)


@pytest.fixture
def pizza():
    return Record(id=1, name="Pizza Place")


@pytest.fixture
def sushi():
    return Record(id=2, name="Sushi Place")


@pytest.fixture
def api():
    return ScriptedRecordsApi()


@pytest.fixture
def store(api, pizza):
    return RecordStore(api, records=[pizza])


@pytest.fixture
def controller(store):
    return SubmissionController(store)


@pytest.fixture
def reset_starform_logger():
    logger = logging.getLogger("starform")
    level = logger.level
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(level)
