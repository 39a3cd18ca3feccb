"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
apilink, a product of Garudex Labs

Mock transport for local testing.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from apilink.exceptions import normalize_error
from apilink.transports.base import BaseTransport, ProgressCallback, TransportRequest


class MockTransport(BaseTransport):
    """In-memory transport for unit tests.

    Args:
        responses: Mapping from ``(method, url)`` tuples to the value the
            request resolves with. An exception instance is raised instead.
        progress_steps: Percentages reported to the progress callback
            before each request settles.

    Example::

        transport = MockTransport({
            ("GET", "http://api.test/items"): [{"id": 1}],
        })
    """

    def __init__(
        self,
        responses: Optional[Dict[Tuple[str, str], Any]] = None,
        progress_steps: Sequence[float] = (),
    ) -> None:
        self._responses: Dict[Tuple[str, str], Any] = responses or {}
        self._progress_steps = list(progress_steps)
        self._sent: List[TransportRequest] = []

    async def send(
        self,
        request: TransportRequest,
        progress: Optional[ProgressCallback] = None,
    ) -> Any:
        self._sent.append(request)
        if progress is not None:
            for step in self._progress_steps:
                progress(step)

        key = (request.method.upper(), request.url)
        if key not in self._responses:
            raise normalize_error({"detail": "not mocked"}, 404)

        result = self._responses[key]
        if isinstance(result, BaseException):
            raise result
        return result

    async def close(self) -> None:
        self._responses.clear()
        self._sent.clear()

    @property
    def sent_requests(self) -> List[TransportRequest]:
        """All requests that have been sent through this transport."""
        return list(self._sent)
