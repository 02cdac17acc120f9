# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import httpx
import pytest

from fluentreq.errors import RequestBuildError
from fluentreq.http.headers import (
    canonical_header_name,
    flatten,
    header_value,
    merge_headers,
    merge_params,
)
from fluentreq.http.url import build_url, join_path, validate_method


def test_canonical_header_name():
    assert canonical_header_name("content-type") == "Content-Type"
    assert canonical_header_name("X-API-KEY") == "X-Api-Key"
    assert canonical_header_name(" accept ") == "Accept"


def test_merge_headers_with_overwrite_replaces_prior_values():
    headers = {"Accept": ["text/html"], "X-Trace": ["1"]}
    merge_headers(headers, {"accept": ["application/json", "text/plain"]}, overwrite=True)
    assert headers["Accept"] == ["application/json", "text/plain"]
    assert headers["X-Trace"] == ["1"]


def test_merge_headers_without_overwrite_accumulates():
    headers = {"Accept": ["text/html"]}
    merge_headers(headers, {"Accept": "application/json"}, overwrite=False)
    assert headers["Accept"] == ["text/html", "application/json"]


def test_merge_headers_overwrite_keeps_repeats_from_source():
    headers = {"X-Tag": ["old"]}
    merge_headers(headers, [("X-Tag", "a"), ("x-tag", "b")], overwrite=True)
    assert headers == {"X-Tag": ["a", "b"]}


def test_merge_headers_reads_httpx_headers():
    source = httpx.Headers([("Set-Cookie", "a=1"), ("Set-Cookie", "b=2")])
    merged = merge_headers({}, source, overwrite=False)
    assert merged["Set-Cookie"] == ["a=1", "b=2"]


def test_merge_params_always_accumulates():
    params = {"tag": ["a"]}
    merge_params(params, {"tag": ["b", "c"], "page": 2})
    merge_params(params, {"tag": "a"})
    assert params == {"tag": ["a", "b", "c", "a"], "page": ["2"]}


def test_header_value_is_case_insensitive():
    headers = {"Content-Type": ["application/json"], "X-Empty": []}
    assert header_value(headers, "content-type") == "application/json"
    assert header_value(headers, "x-empty", "fallback") == "fallback"
    assert header_value(headers, "missing", "fallback") == "fallback"
    assert header_value(None, "anything") == ""


def test_flatten_keeps_value_order():
    assert flatten({"A": ["1", "2"], "B": ["3"]}) == (("A", "1"), ("A", "2"), ("B", "3"))


@pytest.mark.parametrize(
    "base, path",
    [
        ("https://api.example.com", "widgets"),
        ("https://api.example.com/", "widgets"),
        ("https://api.example.com", "/widgets"),
        ("https://api.example.com/", "/widgets"),
    ],
)
def test_join_path_uses_single_separator(base, path):
    assert join_path(base, path) == "https://api.example.com/widgets"


def test_join_path_without_path_keeps_base():
    assert join_path("https://api.example.com", "") == "https://api.example.com"


def test_build_url_merges_existing_query_and_params():
    url = build_url("https://api.example.com/v1?z=9", "widgets", {"a": ["1", "2"]})
    assert url == "https://api.example.com/v1/widgets?a=1&a=2&z=9"


def test_build_url_without_params_or_path():
    assert build_url("https://api.example.com", None, {}) == "https://api.example.com"


def test_build_url_encodes_values():
    url = build_url("https://api.example.com", "search", {"q": ["a b&c"]})
    assert url == "https://api.example.com/search?q=a+b%26c"


@pytest.mark.parametrize("base", ["", "api.example.com/widgets", "/relative", "http://[::1"])
def test_build_url_rejects_malformed_base(base):
    with pytest.raises(RequestBuildError):
        build_url(base, "widgets", {})


def test_validate_method():
    assert validate_method("PATCH") == "PATCH"
    with pytest.raises(RequestBuildError):
        validate_method("GET /")
    with pytest.raises(RequestBuildError):
        validate_method("")


def test_build_url_merges_query_carried_by_path():
    url = build_url("https://api.example.com?v=1", "search?q=a#ignored", {"page": ["2"]})
    assert url == "https://api.example.com/search?page=2&q=a&v=1"
