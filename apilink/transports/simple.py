"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
apilink, a product of Garudex Labs

Simple-body transport (default).
"""

from __future__ import annotations

from typing import Any, Optional

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


class SimpleBodyTransport(BaseTransport):
    """Request/response transport using ``httpx.AsyncClient``.

    Sends an optional JSON body and parses the JSON response. Upload
    progress is not reported.

    Args:
        client: Optional pre-built client (e.g. one wrapping
            ``httpx.MockTransport`` in tests). Created lazily otherwise.
        include_credentials: Send the client's cookies and ``auth`` with
            each request.
        auth: Credentials applied when ``include_credentials`` is set.
        timeout: Request timeout in seconds for a lazily created client.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        include_credentials: bool = False,
        auth: Optional[httpx.Auth] = None,
        timeout: float = 30.0,
    ) -> None:
        self._client = client
        self._owns_client = client is None
        self._include_credentials = include_credentials
        self._auth = auth
        self._timeout = timeout

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
        client = self._ensure_client()

        headers = httpx.Headers()
        for name, value in request.headers.items():
            headers[name] = value
        content = None
        if request.body is not None:
            if request.body.kind is not BodyKind.JSON:
                raise TypeError(
                    f"{type(self).__name__} cannot send a {request.body.kind.value} body"
                )
            headers["Content-Type"] = "application/json"
            content = request.body.encode()

        http_request = client.build_request(
            request.method,
            request.url,
            headers=headers,
            content=content,
        )
        if not self._include_credentials:
            http_request.headers.pop("Cookie", None)

        try:
            response = await client.send(
                http_request,
                auth=self._auth if self._include_credentials else None,
            )
        except httpx.RequestError as exc:
            logger.warning(
                f"Request {request.method} {request.url} failed before a response: {exc}"
            )
            raise normalize_error(None, None) from exc

        return self._parse(response)

    @staticmethod
    def _parse(response: httpx.Response) -> Any:
        if response.status_code == 204:
            return None

        try:
            data = response.json()
        except ValueError as exc:
            raise normalize_error(None, response.status_code) from exc

        if not (response.is_success or response.status_code == 304):
            raise normalize_error(data, response.status_code)

        return data

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
