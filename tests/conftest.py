"""
Pytest configuration and shared fixtures for apilink tests.
"""

import json
import tempfile
from pathlib import Path
from typing import Any, Callable, Generator, List

import httpx
import pytest

from apilink.client import ApiClient
from apilink.transports.simple import SimpleBodyTransport
from apilink.transports.streaming import StreamingUploadTransport


class RecordingHandler:
    """``httpx.MockTransport`` handler returning queued responses.

    Each queued item is an ``httpx.Response`` or an exception to raise.
    Requests are recorded after their body has been read.
    """

    def __init__(self) -> None:
        self.responses: List[Any] = []
        self.requests: List[httpx.Request] = []
        self.on_request: List[Callable[[httpx.Request], None]] = []

    def queue(self, response: Any) -> "RecordingHandler":
        self.responses.append(response)
        return self

    def queue_json(self, data: Any, status_code: int = 200) -> "RecordingHandler":
        return self.queue(httpx.Response(status_code, content=json.dumps(data).encode()))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for hook in self.on_request:
            hook(request)
        if not self.responses:
            return httpx.Response(404, json={"detail": "no response queued"})
        result = self.responses.pop(0)
        if isinstance(result, BaseException):
            raise result
        return result

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def http_client(handler: RecordingHandler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def simple_transport(http_client: httpx.AsyncClient) -> SimpleBodyTransport:
    return SimpleBodyTransport(client=http_client)


@pytest.fixture
def streaming_transport(http_client: httpx.AsyncClient) -> StreamingUploadTransport:
    return StreamingUploadTransport(client=http_client, chunk_size=16)


@pytest.fixture
def api_client(
    simple_transport: SimpleBodyTransport,
    streaming_transport: StreamingUploadTransport,
) -> ApiClient:
    """Client for ``http://example.com`` with a ``key: val`` header."""
    return ApiClient(
        base_url="http://example.com",
        headers={"key": "val"},
        simple_transport=simple_transport,
        streaming_transport=streaming_transport,
    )
