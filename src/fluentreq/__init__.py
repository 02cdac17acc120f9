# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
fluentreq package entrypoint.

A fluent builder over an httpx-backed client: chain configuration calls on a
Request and finish with a terminal call that dispatches, decodes and cleans up.
HTTP behavior is abstracted behind an injectable client interface so tests can
swap in StubHttpClient.
"""

from .config import Settings, disable_strict_mode, enable_strict_mode, is_strict, load_settings
from .context import RequestContext, background, get_request_context, request_context
from .errors import (
    BodyEncodeError,
    BuilderError,
    DeadlineExceeded,
    DecodeError,
    EmptyResponseError,
    FluentreqError,
    RequestBuildError,
    RequestCancelled,
)
from .http import (
    HttpClient,
    HttpResponse,
    HttpxClient,
    PreparedRequest,
    StubHttpClient,
    create_default_http_client,
    get_default_client,
    set_default_client,
)
from .log import get_logger, set_logger, setup_logging
from .request import Request, RequestConfig, url
from .response import ResponseResolver
from .version import __version__

__all__ = [
    "BodyEncodeError",
    "BuilderError",
    "DeadlineExceeded",
    "DecodeError",
    "EmptyResponseError",
    "FluentreqError",
    "HttpClient",
    "HttpResponse",
    "HttpxClient",
    "PreparedRequest",
    "Request",
    "RequestBuildError",
    "RequestCancelled",
    "RequestConfig",
    "RequestContext",
    "ResponseResolver",
    "Settings",
    "StubHttpClient",
    "background",
    "create_default_http_client",
    "disable_strict_mode",
    "enable_strict_mode",
    "get_default_client",
    "get_logger",
    "get_request_context",
    "is_strict",
    "load_settings",
    "request_context",
    "set_default_client",
    "set_logger",
    "setup_logging",
    "url",
    "__version__",
]
