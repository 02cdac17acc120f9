# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Exception hierarchy and transport error taxonomy."""

from __future__ import annotations

import socket
import ssl as ssl_module
from enum import Enum

import httpx


class FluentreqError(Exception):
    """Base class for errors raised by fluentreq itself."""


class BuilderError(FluentreqError, ValueError):
    """A builder setter received a value it cannot use (strict mode only)."""


class RequestBuildError(FluentreqError):
    """The configuration could not be turned into an executable request."""


class EmptyResponseError(FluentreqError):
    """The client returned neither a response nor an error."""


class DecodeError(FluentreqError, ValueError):
    """The response body could not be decoded into the requested shape."""


class BodyEncodeError(FluentreqError):
    """A structured request body could not be serialized (strict mode only)."""


class RequestCancelled(FluentreqError):
    """The request context was cancelled before or during the call."""


class DeadlineExceeded(RequestCancelled):
    """The request context ran out of time."""


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    CANCELLED = "CANCELLED"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    NONE = "NONE"


def categorize_exception(exc: BaseException | None) -> ErrorCategory:
    """
    Map Python/httpx exceptions to ErrorCategory.
    """
    if exc is None:
        return ErrorCategory.NONE

    if isinstance(exc, (DeadlineExceeded, httpx.TimeoutException)):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, RequestCancelled):
        return ErrorCategory.CANCELLED

    # httpx wraps the ssl/socket error; look at the cause as well.
    causes = [exc]
    if exc.__cause__ is not None:
        causes.append(exc.__cause__)
    if exc.__context__ is not None:
        causes.append(exc.__context__)

    for cause in causes:
        if isinstance(cause, (ssl_module.SSLError, ssl_module.CertificateError)):
            return ErrorCategory.SSL_ERROR
        if isinstance(cause, (socket.gaierror, socket.herror)):
            return ErrorCategory.DNS_ERROR

    if isinstance(exc, (httpx.ConnectError, httpx.RemoteProtocolError, httpx.NetworkError, httpx.ProxyError)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (ConnectionError, ConnectionRefusedError, ConnectionResetError)):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def error_category_to_reason(category: ErrorCategory | None) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.TIMEOUT: "request timed out",
        ErrorCategory.CANCELLED: "request was cancelled",
        ErrorCategory.SSL_ERROR: "TLS/certificate issue",
        ErrorCategory.CONNECTION_ERROR: "network connectivity issue",
        ErrorCategory.DNS_ERROR: "DNS resolution failure",
        ErrorCategory.UNKNOWN_ERROR: "request failed",
        ErrorCategory.NONE: "",
        None: "",
    }
    return mapping.get(category, "request failed")


__all__ = [
    "BodyEncodeError",
    "BuilderError",
    "DeadlineExceeded",
    "DecodeError",
    "EmptyResponseError",
    "ErrorCategory",
    "FluentreqError",
    "RequestBuildError",
    "RequestCancelled",
    "categorize_exception",
    "error_category_to_reason",
]
