"""
StarForm Records API - HTTP Backend

JSON over HTTP through an ``httpx.AsyncClient``. ``POST /{resource}`` with the
body ``{"name": name}`` creates a record; ``GET /{resource}`` lists them.
"""

import logging
from typing import Any, List, Optional

import httpx
from pydantic import ValidationError

from ..config import ApiConfig
from ..core.records import Record
from ..errors import InvalidRecordResponse, RecordApiError
from .base import RecordsApi

logger = logging.getLogger(__name__)


def build_async_client(config: Optional[ApiConfig] = None, **kwargs) -> httpx.AsyncClient:
    """Create an ``httpx.AsyncClient`` with the configured timeout and headers."""
    config = config or ApiConfig()
    headers = {"Accept": "application/json", **config.headers}
    return httpx.AsyncClient(
        timeout=httpx.Timeout(config.timeout),
        headers=headers,
        **kwargs,
    )


class HttpRecordsApi(RecordsApi):
    """Records API backed by a JSON HTTP service."""

    def __init__(self, config: Optional[ApiConfig] = None, client: Optional[httpx.AsyncClient] = None):
        self.config = config or ApiConfig()
        self._owns_client = client is None
        self._client = client or build_async_client(self.config)

    async def create_record(self, name: str) -> Record:
        url = self.config.collection_url
        logger.debug(f"POST {url} name={name!r}")
        response = await self._send("POST", url, json={"name": name})
        return self._parse_record(self._json(response))

    async def list_records(self) -> List[Record]:
        url = self.config.collection_url
        logger.debug(f"GET {url}")
        response = await self._send("GET", url)
        payload = self._json(response)
        if not isinstance(payload, list):
            raise InvalidRecordResponse(f"Expected a list of records from {url}, got {type(payload).__name__}")
        return [self._parse_record(item) for item in payload]

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise RecordApiError(
                f"{method} {url} failed with status {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise RecordApiError(f"{method} {url} failed: {e.__class__.__name__}") from e
        return response

    def _json(self, response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise InvalidRecordResponse(f"Reply from {response.request.url} is not JSON") from e

    def _parse_record(self, payload: Any) -> Record:
        try:
            return Record.model_validate(payload)
        except ValidationError as e:
            raise InvalidRecordResponse(f"Reply is not a record: {payload!r}") from e

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> 'HttpRecordsApi':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
