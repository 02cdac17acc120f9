# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client exports."""

from .adapters import StubHttpClient
from .client import HttpClient, create_default_http_client, get_default_client, set_default_client
from .headers import canonical_header_name, header_value, merge_headers, merge_params
from .httpx_client import HttpxClient
from .models import HttpResponse, PreparedRequest, ResponseStream
from .url import build_url, join_path

__all__ = [
    "HttpClient",
    "HttpResponse",
    "HttpxClient",
    "PreparedRequest",
    "ResponseStream",
    "StubHttpClient",
    "build_url",
    "canonical_header_name",
    "create_default_http_client",
    "get_default_client",
    "header_value",
    "join_path",
    "merge_headers",
    "merge_params",
    "set_default_client",
]
