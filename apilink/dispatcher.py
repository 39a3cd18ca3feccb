"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
apilink, a product of Garudex Labs

Request Dispatcher.

Routes each request to the transport matching its payload kind, then
applies optional schema validation to the parsed result:

    caller -> dispatch() -> transport.send() -> SchemaValidator -> caller

JSON bodies (or no body) go to the simple-body transport; multipart bodies
go to the streaming-upload transport. The verb plays no part in the choice.
"""

from __future__ import annotations

import time
from typing import Any, Dict, Optional

from apilink.config.settings import ApiConfig
from apilink.exceptions import RequestError, TransportError
from apilink.hooks import HookRegistry
from apilink.logging_config import (
    get_correlation_id,
    get_logger,
    log_request_completed,
    log_request_failed,
    set_correlation_id,
)
from apilink.progress import ProgressCallback, ProgressRelay
from apilink.transports.base import (
    BaseTransport,
    BodyKind,
    HttpMethod,
    TransportRequest,
    as_request_body,
)
from apilink.validation import SchemaValidator

logger = get_logger(__name__)


class RequestDispatcher:
    """Selects a transport per request and validates the result.

    Args:
        simple: Transport for JSON bodies and body-less requests.
        streaming: Transport for multipart bodies.
        hooks: Lifecycle hook registry (a private one if omitted).
    """

    def __init__(
        self,
        simple: BaseTransport,
        streaming: BaseTransport,
        hooks: Optional[HookRegistry] = None,
    ) -> None:
        self._transports: Dict[BodyKind, BaseTransport] = {
            BodyKind.JSON: simple,
            BodyKind.MULTIPART: streaming,
        }
        self._hooks = hooks or HookRegistry()

    @property
    def hooks(self) -> HookRegistry:
        return self._hooks

    def transport_for(self, kind: BodyKind) -> BaseTransport:
        return self._transports[kind]

    def dispatch(
        self,
        config: ApiConfig,
        schema: Any,
        method: str,
        path: str,
        body: Any = None,
        progress: Optional[ProgressCallback] = None,
    ) -> ProgressRelay:
        """Start a request and return its handle.

        Must be called from a running event loop.

        Args:
            config: Configuration snapshot (base URL and headers) for this call.
            schema: Response schema, or ``None`` to return the raw value.
            method: HTTP verb.
            path: Path appended to ``config.base_url``.
            body: Plain JSON-compatible value, ``JsonBody``, ``MultipartBody``
                or ``None``.
            progress: Optional upload progress observer.

        Raises:
            ValueError: If ``method`` is not a supported verb.
        """
        verb = HttpMethod(method.upper())
        request = TransportRequest(
            method=verb.value,
            url=config.resolve_url(path),
            headers=dict(config.headers),
            body=as_request_body(body),
        )

        relay: ProgressRelay = ProgressRelay(
            lambda notify: self._execute(request, schema, notify)
        )
        if progress is not None:
            relay.progress(progress)
        return relay

    async def _execute(
        self,
        request: TransportRequest,
        schema: Any,
        notify: ProgressCallback,
    ) -> Any:
        # Each task runs in a copy of the caller's context
        if get_correlation_id() is None:
            set_correlation_id()

        request = self._hooks.fire_before_request(request)
        kind = request.kind
        transport = self._transports[kind]
        start = time.monotonic()

        logger.debug(
            "request_dispatched",
            method=request.method,
            url=request.url,
            transport=kind.value,
        )

        try:
            value = await transport.send(request, notify)
            self._hooks.fire_after_response(request, value)
            if schema is not None:
                value = SchemaValidator(schema).validate(value)
        except RequestError as exc:
            log_request_failed(
                logger,
                method=request.method,
                url=request.url,
                transport=kind.value,
                error_type=type(exc).__name__,
                status=exc.status if isinstance(exc, TransportError) else None,
            )
            self._hooks.fire_error(exc)
            raise

        log_request_completed(
            logger,
            method=request.method,
            url=request.url,
            transport=kind.value,
            duration_ms=round((time.monotonic() - start) * 1000, 2),
        )
        return value
