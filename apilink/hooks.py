"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
apilink, a product of Garudex Labs

Request Lifecycle Hook Registry.

Lets callers observe and amend requests without wrapping the client.

Available hooks:
- on_before_request: Fired before every outbound request
- on_after_response: Fired after every successful transport call
- on_error: Fired on any request error
"""

from __future__ import annotations

from typing import Any, Callable, List

from apilink.logging_config import get_logger
from apilink.transports.base import TransportRequest

logger = get_logger(__name__)


BeforeRequestCallback = Callable[[TransportRequest], TransportRequest]
AfterResponseCallback = Callable[[TransportRequest, Any], None]
ErrorCallback = Callable[[Exception], None]


class HookRegistry:
    """
    Manages request lifecycle hooks.

    Multiple callbacks per hook are supported and executed in registration
    order. A failing callback is logged and reported to the error hooks; it
    never fails the request itself.
    """

    def __init__(self) -> None:
        self._before_request_callbacks: List[BeforeRequestCallback] = []
        self._after_response_callbacks: List[AfterResponseCallback] = []
        self._error_callbacks: List[ErrorCallback] = []

    # -- Registration methods ------------------------------------------------

    def on_before_request(self, callback: BeforeRequestCallback) -> None:
        """Register a callback fired before every outbound request.

        The callback receives the request and **must** return a
        ``TransportRequest`` (possibly modified). Returning ``None`` keeps
        the previous request.
        """
        self._before_request_callbacks.append(callback)
        logger.debug("Registered on_before_request hook")

    def on_after_response(self, callback: AfterResponseCallback) -> None:
        """Register a callback fired with ``(request, value)`` on success."""
        self._after_response_callbacks.append(callback)
        logger.debug("Registered on_after_response hook")

    def on_error(self, callback: ErrorCallback) -> None:
        """Register a callback fired on any request error."""
        self._error_callbacks.append(callback)
        logger.debug("Registered on_error hook")

    # -- Firing methods (called by the dispatcher) ---------------------------

    def fire_before_request(self, request: TransportRequest) -> TransportRequest:
        """Fire all on_before_request callbacks in order.

        Each callback receives the (possibly mutated) request from the
        previous callback, forming a pipeline.
        """
        current = request
        for cb in self._before_request_callbacks:
            try:
                result = cb(current)
            except Exception as exc:
                logger.error(f"on_before_request hook error: {exc}", exc_info=True)
                self.fire_error(exc)
                continue
            if result is None:
                logger.warning("on_before_request hook returned None; keeping previous request")
                continue
            current = result
        return current

    def fire_after_response(self, request: TransportRequest, value: Any) -> None:
        """Fire all on_after_response callbacks."""
        for cb in self._after_response_callbacks:
            try:
                cb(request, value)
            except Exception as exc:
                logger.error(f"on_after_response hook error: {exc}", exc_info=True)
                self.fire_error(exc)

    def fire_error(self, error: Exception) -> None:
        """Fire all on_error callbacks. Errors inside error hooks are logged only."""
        for cb in self._error_callbacks:
            try:
                cb(error)
            except Exception as exc:
                logger.error(f"on_error hook raised: {exc}", exc_info=True)
