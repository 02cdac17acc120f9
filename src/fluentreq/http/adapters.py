# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""In-memory HttpClient implementations."""

from __future__ import annotations

from collections.abc import Callable
from typing import Union

from .client import HttpClient
from .models import HttpResponse, PreparedRequest

StubResult = Union[HttpResponse, BaseException, Callable[[PreparedRequest], HttpResponse], None]


class StubHttpClient(HttpClient):
    """
    Deterministic, programmable HttpClient for tests.

    Responses are keyed by URL (query string included). A stubbed entry may be
    an HttpResponse, an exception to raise, or a callable producing either.
    A URL with no stub (and no default) yields None.
    """

    def __init__(self, responses: dict[str, StubResult] | None = None, *, default: StubResult = None):
        self._responses = dict(responses or {})
        self._default = default
        self.requests: list[PreparedRequest] = []
        self.responses: list[HttpResponse] = []
        self.closed = False

    def add(self, url: str, response: StubResult) -> None:
        self._responses[url] = response

    def send(self, request: PreparedRequest) -> HttpResponse:
        self.requests.append(request)
        request.context.check()

        result = self._responses.get(request.url, self._default)
        if callable(result) and not isinstance(result, HttpResponse):
            result = result(request)
        if isinstance(result, BaseException):
            raise result
        if result is None:
            return None  # type: ignore[return-value]

        result.bind(request)
        self.responses.append(result)
        return result

    @property
    def last_request(self) -> PreparedRequest | None:
        return self.requests[-1] if self.requests else None

    def close(self) -> None:
        self.closed = True
