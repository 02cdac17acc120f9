# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Fluent request builder.

A Request accumulates the configuration of one HTTP call through chained
setters, each returning the builder itself:

    text = url("https://api.example.com").path("widgets").param("page", "2").get()

Terminal methods (``get()``, ``response_json()``, ...) build a PreparedRequest,
dispatch it through the configured HttpClient and release every resource the
call acquired. A builder is meant for a single call.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import IO, Any, Union

import httpx

from .codec import JSON_CONTENT_TYPE, XML_CONTENT_TYPE, encode_json, encode_multipart, encode_xml
from .config import is_strict
from .context import RequestContext, get_request_context
from .errors import BodyEncodeError, BuilderError
from .http.client import HttpClient
from .http.headers import MultiValues, add_header, add_value, flatten, merge_headers, merge_params
from .http.models import HttpResponse, PreparedRequest
from .http.url import build_url, validate_method
from .log import get_logger
from .response import ResponseResolver

ErrorHandler = Callable[[Union[HttpResponse, None], BaseException], Any]
StatusHandler = Callable[[HttpResponse], Any]
BodySource = Union[bytes, bytearray, memoryview, str, IO[bytes], None]


@dataclass
class RequestConfig:
    """Everything a builder has accumulated so far."""

    base_url: str
    path: str = ""
    method: str = "GET"
    params: MultiValues = field(default_factory=dict)
    headers: MultiValues = field(default_factory=dict)
    body: bytes | None = None
    context: RequestContext = field(default_factory=get_request_context)
    timeout: float | None = None
    deadline: datetime | None = None
    client: HttpClient | None = None
    username: str = ""
    password: str = ""
    error_handler: ErrorHandler | None = None
    status_code_handlers: dict[int, StatusHandler] = field(default_factory=dict)
    expected_status: int | None = None
    mismatch_handler: StatusHandler | None = None

    def derive_context(self) -> RequestContext:
        """Child of the caller's context carrying the timeout or deadline, if any."""
        if self.timeout:
            return self.context.with_timeout(self.timeout)
        if self.deadline is not None:
            return self.context.with_deadline(self.deadline)
        return self.context.child()


def _should_set(value: Any, name: str) -> bool:
    if value is not None:
        return True
    if is_strict():
        raise BuilderError(f"{name} cannot be None")
    get_logger().warning("ignoring None %s", name)
    return False


def _read_body(body: BodySource) -> bytes | None:
    if body is None:
        return None
    if isinstance(body, str):
        return body.encode("utf-8")
    if isinstance(body, (bytes, bytearray, memoryview)):
        return bytes(body)
    read = getattr(body, "read", None)
    if not callable(read):
        raise TypeError(f"unsupported body type: {type(body).__name__}")
    data = read()
    return data.encode("utf-8") if isinstance(data, str) else bytes(data)


class Request:
    """Chainable configuration for a single HTTP call."""

    def __init__(self, base_url: str):
        self.config = RequestConfig(base_url=base_url)
        # Content-Type the builder chose itself, replaced when the body kind changes.
        self._auto_content_type: str | None = None

    # Configuration

    def method(self, method: str) -> Request:
        """HTTP method, defaults to GET."""
        self.config.method = str(method).upper()
        return self

    def path(self, path: str) -> Request:
        """Path under the base URL; a separating slash is added when missing."""
        self.config.path = path or ""
        return self

    def param(self, name: str, value: Any) -> Request:
        add_value(self.config.params, name, value)
        return self

    def params(self, params: Mapping[str, Any] | None) -> Request:
        """Merge query parameters; repeated names accumulate values."""
        merge_params(self.config.params, params)
        return self

    def header(self, name: str, value: Any) -> Request:
        add_header(self.config.headers, name, value)
        return self

    def headers(self, headers: Mapping[str, Any] | None, *, overwrite: bool = True) -> Request:
        """
        Merge headers into the request.

        With ``overwrite`` (the default) a name given here replaces the values
        already set for it; otherwise the new values are appended.
        """
        merge_headers(self.config.headers, headers, overwrite=overwrite)
        return self

    def context(self, ctx: RequestContext | None) -> Request:
        if _should_set(ctx, "context"):
            self.config.context = ctx
        return self

    def client(self, client: HttpClient | None) -> Request:
        """HTTP client to use, defaults to the shared client."""
        if _should_set(client, "client"):
            self.config.client = client
        return self

    def timeout(self, timeout: float | timedelta | None) -> Request:
        """
        Relative timeout for the whole call.

        A positive timeout replaces any deadline; zero or None only clears the
        timeout.
        """
        if isinstance(timeout, timedelta):
            timeout = timeout.total_seconds()
        if timeout and timeout > 0:
            self.config.timeout = float(timeout)
            self.config.deadline = None
        else:
            self.config.timeout = None
        return self

    def deadline(self, deadline: datetime | None) -> Request:
        """Absolute deadline for the call; replaces any timeout. None clears it."""
        self.config.deadline = deadline
        if deadline is not None:
            self.config.timeout = None
        return self

    def basic_auth(self, username: str, password: str) -> Request:
        self.config.username = username or ""
        self.config.password = password or ""
        return self

    # Body

    def body(self, body: BodySource) -> Request:
        """Raw body: bytes, text, or a binary stream (read when set). None clears it."""
        self.config.body = _read_body(body)
        return self

    def body_bytes(self, body: bytes) -> Request:
        return self.body(body)

    def body_string(self, body: str) -> Request:
        return self.body(body)

    def _set_content_type(self, content_type: str, *, replace: bool = False) -> None:
        current = self.config.headers.get("Content-Type")
        if replace or current is None or current == [self._auto_content_type]:
            self.config.headers["Content-Type"] = [content_type]
            self._auto_content_type = content_type

    def _encoded_body(self, encode: Callable[[Any], bytes], value: Any, kind: str) -> bytes | None:
        try:
            return encode(value)
        except (TypeError, ValueError, RecursionError) as exc:
            if is_strict():
                raise BodyEncodeError(f"couldn't encode into {kind}: {exc}") from exc
            get_logger().warning("leaving body empty: couldn't encode into %s: %s", kind, exc)
            return None

    def body_json(self, value: Any) -> Request:
        """Encode ``value`` as JSON and use it as the body. None is a no-op."""
        if value is None:
            return self
        self.config.body = self._encoded_body(encode_json, value, "json")
        if self.config.body is not None:
            self._set_content_type(JSON_CONTENT_TYPE)
        return self

    def body_xml(self, value: Any) -> Request:
        """Encode ``value`` as XML (see ``fluentreq.codec``) and use it as the body. None is a no-op."""
        if value is None:
            return self
        self.config.body = self._encoded_body(encode_xml, value, "xml")
        if self.config.body is not None:
            self._set_content_type(XML_CONTENT_TYPE)
        return self

    def body_form(self, values: Mapping[str, Any] | None) -> Request:
        """Send ``values`` as multipart/form-data. None is a no-op."""
        if values is None:
            return self
        body, content_type = encode_multipart(values)
        self.config.body = body
        self._set_content_type(content_type, replace=True)
        return self

    # Handlers

    def error_handler(self, handler: ErrorHandler | None) -> Request:
        """
        Called as ``handler(None, exc)`` when the request cannot be built or sent.

        Its return value becomes the result of the terminal call; raising from it
        replaces the original error.
        """
        if _should_set(handler, "error handler"):
            self.config.error_handler = handler
        return self

    def status_code_handler(self, status_code: int, handler: StatusHandler | None) -> Request:
        """Called with the response when it has ``status_code``; its return value is the result."""
        if _should_set(handler, "status code handler"):
            self.config.status_code_handlers[int(status_code)] = handler
        return self

    def if_not_expected_status_code(self, status_code: int, handler: StatusHandler | None) -> Request:
        """Called with the response when its status differs from ``status_code``."""
        if _should_set(handler, "status expectation handler"):
            self.config.expected_status = int(status_code)
            self.config.mismatch_handler = handler
        return self

    # Build

    def build(self) -> PreparedRequest:
        """
        Snapshot the configuration into an executable request.

        The request carries a fresh child context; cancel it to release the call.
        Raises RequestBuildError for a malformed URL or method.
        """
        cfg = self.config
        method = validate_method(cfg.method)
        full_url = build_url(cfg.base_url, cfg.path, cfg.params)

        headers = merge_headers({}, cfg.headers, overwrite=True)
        if cfg.username or cfg.password:
            # Same header httpx.BasicAuth adds.
            staged = next(httpx.BasicAuth(cfg.username, cfg.password).auth_flow(httpx.Request(method, full_url)))
            headers["Authorization"] = [staged.headers["Authorization"]]

        return PreparedRequest(
            method=method,
            url=full_url,
            headers=flatten(headers),
            body=cfg.body,
            context=cfg.derive_context(),
        )

    # Terminal calls

    def get(self) -> Any:
        """Blocking GET, returning the body as text."""
        self.config.method = "GET"
        return self.response_string()

    def post(self) -> Any:
        """Blocking POST, returning the body as text."""
        self.config.method = "POST"
        return self.response_string()

    def put(self) -> Any:
        """Blocking PUT, returning the body as text."""
        self.config.method = "PUT"
        return self.response_string()

    def delete(self) -> Any:
        """Blocking DELETE, returning the body as text."""
        self.config.method = "DELETE"
        return self.response_string()

    def response(self) -> Any:
        """Open HttpResponse (close it when done) or a handler's result."""
        return ResponseResolver(self).response()

    def response_body(self) -> Any:
        """Open body stream (close it when done) or a handler's result."""
        return ResponseResolver(self).body()

    def response_buffer(self) -> Any:
        return ResponseResolver(self).buffer()

    def response_bytes(self) -> Any:
        return ResponseResolver(self).bytes()

    def response_string(self) -> Any:
        return ResponseResolver(self).string()

    def response_json(self, into: Callable[..., Any] | None = None) -> Any:
        return ResponseResolver(self).json(into)

    def response_xml(self, into: Callable[..., Any] | None = None) -> Any:
        return ResponseResolver(self).xml(into)

    def __repr__(self) -> str:
        return f"<Request {self.config.method} {self.config.base_url!r} path={self.config.path!r}>"


def url(base_url: str) -> Request:
    """Start building a request against ``base_url`` (scheme + host, optionally a base path)."""
    return Request(base_url)


__all__ = ["Request", "RequestConfig", "url"]
