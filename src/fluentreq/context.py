# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Cancellable request contexts.

A RequestContext carries an optional deadline and a cancel flag. Contexts form
a tree: a child inherits its parent's deadline and is cancelled whenever the
parent is. A ContextVar holds the ambient context that new builders start
from, so callers can scope a timeout or a cancel switch over a block of code
without threading it through every call.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime

from .errors import DeadlineExceeded, RequestCancelled


class RequestContext:
    """Deadline + cancellation scope for one or more requests."""

    def __init__(self, parent: RequestContext | None = None, deadline: float | None = None):
        self._parent = parent
        self._deadline = deadline
        self._cancelled = threading.Event()

    @property
    def parent(self) -> RequestContext | None:
        return self._parent

    @property
    def deadline(self) -> float | None:
        """Effective deadline on the ``time.monotonic()`` clock, or None."""
        parent_deadline = self._parent.deadline if self._parent is not None else None
        if self._deadline is None:
            return parent_deadline
        if parent_deadline is None:
            return self._deadline
        return min(self._deadline, parent_deadline)

    @property
    def cancelled(self) -> bool:
        if self._cancelled.is_set():
            return True
        return self._parent is not None and self._parent.cancelled

    def cancel(self) -> None:
        self._cancelled.set()

    def remaining(self) -> float | None:
        """Seconds left before the deadline (may be negative), or None without one."""
        deadline = self.deadline
        if deadline is None:
            return None
        return deadline - time.monotonic()

    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def check(self) -> None:
        """Raise if the context can no longer be used for I/O."""
        if self.expired():
            raise DeadlineExceeded("request deadline exceeded")
        if self.cancelled:
            raise RequestCancelled("request context cancelled")

    def child(self) -> RequestContext:
        return RequestContext(self)

    def with_timeout(self, seconds: float) -> RequestContext:
        return RequestContext(self, time.monotonic() + seconds)

    def with_deadline(self, when: datetime) -> RequestContext:
        now = datetime.now(when.tzinfo) if when.tzinfo is not None else datetime.now()
        return RequestContext(self, time.monotonic() + (when - now).total_seconds())

    def __repr__(self) -> str:
        return f"<RequestContext cancelled={self.cancelled} remaining={self.remaining()}>"


class _BackgroundContext(RequestContext):
    """Shared root of every builder. cancel() is a no-op."""

    def cancel(self) -> None:
        return None


_BACKGROUND = _BackgroundContext()

_current_context: ContextVar[RequestContext | None] = ContextVar("fluentreq_request_context", default=None)


def background() -> RequestContext:
    """Root context: no deadline, and cancelling it has no effect."""
    return _BACKGROUND


def get_request_context() -> RequestContext:
    """Return the ambient context new builders start from."""
    return _current_context.get() or _BACKGROUND


@contextmanager
def request_context(
    *,
    timeout: float | None = None,
    deadline: datetime | None = None,
    parent: RequestContext | None = None,
) -> Iterator[RequestContext]:
    """
    Layer a new ambient context over the current one for the duration of the block.

    The context is cancelled when the block exits, so requests still streaming
    a body at that point stop reading.
    """
    base = parent or get_request_context()
    if timeout is not None and timeout > 0:
        ctx = base.with_timeout(timeout)
    elif deadline is not None:
        ctx = base.with_deadline(deadline)
    else:
        ctx = base.child()
    token = _current_context.set(ctx)
    try:
        yield ctx
    finally:
        _current_context.reset(token)
        ctx.cancel()


__all__ = [
    "RequestContext",
    "background",
    "get_request_context",
    "request_context",
]
