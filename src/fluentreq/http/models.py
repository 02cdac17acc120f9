# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response data models shared by clients and the resolver."""

from __future__ import annotations

import io
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from ..context import RequestContext, background
from .headers import MultiValues, header_value, merge_headers


@dataclass(frozen=True)
class PreparedRequest:
    """Executable snapshot of a request configuration, consumed by HttpClient implementations."""

    method: str
    url: str
    headers: tuple[tuple[str, str], ...] = ()
    body: bytes | None = None
    context: RequestContext = field(default_factory=background)

    def header(self, name: str, default: str = "") -> str:
        lower = name.lower()
        for key, value in self.headers:
            if key.lower() == lower:
                return value
        return default

    def header_values(self, name: str) -> list[str]:
        lower = name.lower()
        return [value for key, value in self.headers if key.lower() == lower]


class ResponseStream(io.RawIOBase):
    """
    Readable, closeable view over a chunk iterator.

    The bound context is checked before each chunk is pulled so a cancel or an
    expired deadline stops the read mid-body.
    """

    def __init__(
        self,
        chunks: Iterable[bytes],
        *,
        on_close: Callable[[], None] | None = None,
        context: RequestContext | None = None,
    ):
        super().__init__()
        self._chunks: Iterator[bytes] = iter(chunks)
        self._pending = b""
        self._close_callbacks: list[Callable[[], None]] = [on_close] if on_close is not None else []
        self.context = context or background()

    def add_close_callback(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` once when the stream is closed (immediately if it already is)."""
        if self.closed:
            callback()
            return
        self._close_callbacks.append(callback)

    def readable(self) -> bool:
        return True

    def readinto(self, buffer: Any) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed response stream")
        while not self._pending:
            self.context.check()
            try:
                self._pending = next(self._chunks)
            except StopIteration:
                return 0
        size = min(len(buffer), len(self._pending))
        buffer[:size] = self._pending[:size]
        self._pending = self._pending[size:]
        return size

    def close(self) -> None:
        if self.closed:
            return
        callbacks, self._close_callbacks = self._close_callbacks, []
        try:
            # Later registrations release outer resources (e.g. the request context).
            for callback in callbacks:
                callback()
        finally:
            super().close()


@dataclass
class HttpResponse:
    """HTTP response with an open body stream. Close it (or use ``with``) when done."""

    status_code: int
    headers: MultiValues = field(default_factory=dict)
    body: ResponseStream = field(default_factory=lambda: ResponseStream(()))
    url: str | None = None
    request: PreparedRequest | None = None

    @classmethod
    def from_bytes(
        cls,
        status_code: int,
        content: bytes | str = b"",
        *,
        headers: Mapping[str, Any] | None = None,
        url: str | None = None,
    ) -> HttpResponse:
        """Build a response over an in-memory body (used by stub clients)."""
        raw = content.encode("utf-8") if isinstance(content, str) else bytes(content)
        return cls(
            status_code=status_code,
            headers=merge_headers({}, headers, overwrite=False),
            body=ResponseStream([raw] if raw else []),
            url=url,
        )

    @property
    def closed(self) -> bool:
        return self.body.closed

    def header(self, name: str, default: str = "") -> str:
        return header_value(self.headers, name, default)

    def bind(self, request: PreparedRequest) -> None:
        """Attach the originating request and let its context govern body reads."""
        self.request = request
        if self.url is None:
            self.url = request.url
        self.body.context = request.context

    def on_close(self, callback: Callable[[], None]) -> None:
        """Register a callback to run once when the response (or its body) is closed."""
        self.body.add_close_callback(callback)

    def read(self) -> bytes:
        return self.body.read()

    def close(self) -> None:
        self.body.close()

    def __enter__(self) -> HttpResponse:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()


__all__ = ["HttpResponse", "PreparedRequest", "ResponseStream"]
