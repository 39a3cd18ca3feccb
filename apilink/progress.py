"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
apilink, a product of Garudex Labs

Awaitable request handle that can report upload progress.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Generator, Generic, List, TypeVar

from apilink.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

ProgressCallback = Callable[[float], None]


class ProgressObservers:
    """Registration list for progress callbacks.

    Notifications go to the observers registered at the time they fire.
    Once closed, further notifications are dropped; nothing is buffered for
    late observers.
    """

    def __init__(self) -> None:
        self._callbacks: List[ProgressCallback] = []
        self._closed = False

    def add(self, callback: ProgressCallback) -> None:
        self._callbacks.append(callback)

    def emit(self, value: float) -> None:
        if self._closed:
            return
        for callback in list(self._callbacks):
            callback(value)

    def close(self) -> None:
        self._closed = True
        self._callbacks.clear()

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        return len(self._callbacks)


class ProgressRelay(Generic[T]):
    """Result of a dispatched request.

    Await it for the value; call :meth:`progress` to observe upload
    progress. The request runs as an asyncio task scheduled on creation, so
    observers attached before the caller's next ``await`` see every
    notification::

        relay = client.post(Upload, "/files", form)
        relay.progress(lambda pct: print(f"{pct:.0f}%"))
        upload = await relay

    Args:
        run: Coroutine factory receiving the notify function to call with
            each progress percentage.
    """

    def __init__(self, run: Callable[[ProgressCallback], Awaitable[T]]) -> None:
        self._observers = ProgressObservers()
        loop = asyncio.get_running_loop()
        self._task: asyncio.Task = loop.create_task(run(self._observers.emit))
        self._task.add_done_callback(self._on_done)

    def _on_done(self, task: asyncio.Task) -> None:
        self._observers.close()
        # Marks the error retrieved so an unawaited relay is not reported by asyncio
        if not task.cancelled() and task.exception() is not None:
            logger.debug(f"Request settled with {type(task.exception()).__name__}")

    def progress(self, callback: ProgressCallback) -> ProgressRelay[T]:
        """Register a progress observer and return ``self`` for chaining."""
        if self._task.done():
            logger.debug("Progress observer registered after completion; ignoring")
            return self
        self._observers.add(callback)
        return self

    def done(self) -> bool:
        return self._task.done()

    def result(self) -> T:
        """Return the value of a completed request (or raise its error)."""
        return self._task.result()

    def __await__(self) -> Generator[Any, None, T]:
        return self._task.__await__()
