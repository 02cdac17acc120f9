# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client abstraction, factory and the shared default instance."""

from __future__ import annotations

import threading
from typing import Protocol

from ..config import Settings, load_settings
from .models import HttpResponse, PreparedRequest


class HttpClient(Protocol):
    """Minimal protocol for dispatching prepared requests."""

    def send(self, request: PreparedRequest) -> HttpResponse: ...

    def close(self) -> None:  # pragma: no cover - optional for adapters
        ...


_default_client: HttpClient | None = None
_default_lock = threading.Lock()


def create_default_http_client(settings: Settings | None = None) -> HttpClient:
    """Factory for the default httpx-backed client."""
    from .httpx_client import HttpxClient

    return HttpxClient(settings or load_settings())


def get_default_client() -> HttpClient:
    """Return the process-wide client builders use when none is given, creating it on first use."""
    global _default_client
    if _default_client is None:
        with _default_lock:
            if _default_client is None:
                _default_client = create_default_http_client()
    return _default_client


def set_default_client(client: HttpClient | None) -> HttpClient | None:
    """
    Replace the shared client and return the previous one.

    The previous client is not closed; passing None makes the next
    ``get_default_client()`` build a fresh one from the environment.
    """
    global _default_client
    with _default_lock:
        previous, _default_client = _default_client, client
    return previous


__all__ = [
    "HttpClient",
    "create_default_http_client",
    "get_default_client",
    "set_default_client",
]
