"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
apilink, a product of Garudex Labs

Streaming-upload transport for multipart payloads.

The simple-body transport hands the whole body to httpx at once and so has
no point at which upload progress can be observed. This transport feeds the
encoded form to httpx as an async byte stream and reports progress as each
chunk is consumed by the sender.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, AsyncIterator, Callable, Optional

import httpx

from apilink.exceptions import normalize_error
from apilink.logging_config import get_logger
from apilink.transports.base import (
    BaseTransport,
    BodyKind,
    ProgressCallback,
    TransportRequest,
)

logger = get_logger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class UploadProgress:
    """Upload progress event.

    Attributes:
        loaded: Bytes handed to the sender so far.
        total: Total payload size, or ``None`` when unknown.
    """
    loaded: int
    total: Optional[int] = None

    @property
    def length_computable(self) -> bool:
        return self.total is not None and self.total > 0

    @property
    def percent(self) -> float:
        return self.loaded / self.total * 100


class UploadStream:
    """Async byte iterator emitting an :class:`UploadProgress` per chunk.

    The event for a chunk fires once the sender asks for the next one, so
    ``loaded`` never counts bytes that have not been handed over.
    """

    def __init__(
        self,
        content: bytes,
        listener: Callable[[UploadProgress], None],
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be at least 1, got {chunk_size}")
        self._content = content
        self._listener = listener
        self._chunk_size = chunk_size

    def __len__(self) -> int:
        return len(self._content)

    async def __aiter__(self) -> AsyncIterator[bytes]:
        total = len(self._content)
        loaded = 0
        for offset in range(0, total, self._chunk_size):
            chunk = self._content[offset:offset + self._chunk_size]
            yield chunk
            loaded += len(chunk)
            self._listener(UploadProgress(loaded=loaded, total=total))


class StreamingUploadTransport(BaseTransport):
    """Multipart upload transport with progress reporting.

    Credentials (the client's cookies and ``auth``) are always sent.

    Args:
        client: Optional pre-built client. Created lazily otherwise.
        auth: Credentials applied to every upload.
        timeout: Request timeout in seconds for a lazily created client.
        chunk_size: Bytes per streamed chunk; one progress event per chunk.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        auth: Optional[httpx.Auth] = None,
        timeout: float = 30.0,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self._client = client
        self._owns_client = client is None
        self._auth = auth
        self._timeout = timeout
        self._chunk_size = chunk_size

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
            self._owns_client = True
        return self._client

    async def send(
        self,
        request: TransportRequest,
        progress: Optional[ProgressCallback] = None,
    ) -> Any:
        if request.body is None or request.body.kind is not BodyKind.MULTIPART:
            raise TypeError(f"{type(self).__name__} requires a multipart body")

        client = self._ensure_client()
        payload, content_type = request.body.encode()

        def on_upload_progress(event: UploadProgress) -> None:
            if event.length_computable and progress is not None:
                progress(event.percent)

        stream = UploadStream(payload, on_upload_progress, chunk_size=self._chunk_size)

        headers = httpx.Headers()
        for name, value in request.headers.items():
            headers[name] = value
        headers["Content-Type"] = content_type
        headers["Content-Length"] = str(len(stream))

        http_request = client.build_request(
            request.method,
            request.url,
            headers=headers,
            content=stream,
        )

        try:
            if self._auth is not None:
                response = await client.send(http_request, auth=self._auth)
            else:
                response = await client.send(http_request)
        except httpx.RequestError as exc:
            logger.warning(
                f"Upload {request.method} {request.url} failed before a response: {exc}"
            )
            raise normalize_error(None, None) from exc

        return self._complete(response)

    @staticmethod
    def _complete(response: httpx.Response) -> Any:
        try:
            data = response.json()
        except ValueError as exc:
            raise normalize_error(None, response.status_code) from exc

        if response.status_code < 200 or response.status_code >= 300:
            raise normalize_error(data, response.status_code)

        return data

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
