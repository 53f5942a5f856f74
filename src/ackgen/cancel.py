"""Cooperative cancellation tokens with deadlines."""

from __future__ import annotations

import logging
import signal
import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager
from types import FrameType

logger = logging.getLogger(__name__)


class CancelToken:
    """Cancellation signal shared by a chain of blocking operations.

    A child token derived with ``with_timeout`` is cancelled when its parent
    is cancelled or when its own deadline passes. Cancelling a child never
    affects the parent.
    """

    def __init__(self, parent: CancelToken | None = None, deadline: float | None = None) -> None:
        self._parent = parent
        self._deadline = deadline
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    def with_timeout(self, seconds: float) -> CancelToken:
        deadline = time.monotonic() + seconds
        if self._deadline is not None:
            deadline = min(deadline, self._deadline)
        return CancelToken(parent=self, deadline=deadline)

    @property
    def deadline(self) -> float | None:
        return self._deadline

    def deadline_exceeded(self) -> bool:
        if self._deadline is not None and time.monotonic() >= self._deadline:
            return True
        return self._parent.deadline_exceeded() if self._parent is not None else False

    def cancelled(self) -> bool:
        """True once cancelled explicitly, by an ancestor, or by a deadline."""
        if self._event.is_set() or self.deadline_exceeded():
            return True
        return self._parent.cancelled() if self._parent is not None else False

    def remaining(self) -> float | None:
        """Seconds until the nearest deadline in the chain, or None if unbounded."""
        candidates: list[float] = []
        token: CancelToken | None = self
        while token is not None:
            if token._deadline is not None:
                candidates.append(token._deadline)
            token = token._parent
        if not candidates:
            return None
        return max(0.0, min(candidates) - time.monotonic())


def background() -> CancelToken:
    """Root token that is never cancelled unless asked to."""
    return CancelToken()


@contextmanager
def cancel_on_signals(token: CancelToken | None = None) -> Iterator[CancelToken]:
    """Cancel *token* on SIGINT or SIGTERM for the duration of the block.

    Previous handlers are restored on exit. Outside the main thread signal
    handlers cannot be installed, so the token is yielded unchanged.
    """
    root = token or background()
    if threading.current_thread() is not threading.main_thread():
        yield root
        return

    def _handler(signum: int, _frame: FrameType | None) -> None:
        logger.warning("Received %s, cancelling", signal.Signals(signum).name)
        root.cancel()

    previous = {
        signum: signal.signal(signum, _handler) for signum in (signal.SIGINT, signal.SIGTERM)
    }
    try:
        yield root
    finally:
        for signum, handler in previous.items():
            signal.signal(signum, handler)
