# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""URL helpers used when a request configuration is turned into a prepared request."""

from __future__ import annotations

import re
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from ..errors import RequestBuildError
from .headers import MultiValues, add_value

# RFC 9110 token characters.
_METHOD_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


def join_path(base_url: str, path: str | None) -> str:
    """
    Append ``path`` to ``base_url`` with exactly one ``/`` between them.

    Example:
      https://api.example.com + widgets   -> https://api.example.com/widgets
      https://api.example.com/ + /widgets -> https://api.example.com/widgets
    """
    if not path:
        return base_url
    return base_url.rstrip("/") + "/" + str(path).lstrip("/")


def validate_method(method: str) -> str:
    if not method or not _METHOD_RE.match(method):
        raise RequestBuildError(f"invalid HTTP method: {method!r}")
    return method


def build_url(base_url: str, path: str | None, params: MultiValues | None) -> str:
    """
    Join the base URL's path with ``path`` and merge ``params`` into any query the base already has.

    A query string inside ``path`` (``search?q=a``) is merged the same way.

    Raises RequestBuildError when the result lacks a scheme or a host.
    """
    raw = str(base_url or "").strip()
    try:
        parts = urlsplit(raw)
    except ValueError as exc:
        raise RequestBuildError(f"invalid URL {raw!r}: {exc}") from exc
    if not parts.scheme or not parts.netloc:
        raise RequestBuildError(f"invalid URL {raw!r}: scheme and host are required")

    path_only, _, path_query = str(path or "").split("#", 1)[0].partition("?")

    query: MultiValues = {}
    for source in (parts.query, path_query):
        for key, value in parse_qsl(source, keep_blank_values=True):
            add_value(query, key, value)
    for key, values in (params or {}).items():
        for value in values:
            add_value(query, key, value)

    # Sorted by key, values kept in insertion order.
    encoded = urlencode(sorted(query.items()), doseq=True)
    return urlunsplit((parts.scheme, parts.netloc, join_path(parts.path, path_only), encoded, parts.fragment))


__all__ = ["build_url", "join_path", "validate_method"]
