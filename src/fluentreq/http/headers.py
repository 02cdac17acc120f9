# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Multi-valued header and query parameter helpers.

Header field names are case-insensitive (RFC 9110). Builders store them under a
canonical spelling (``content-type`` -> ``Content-Type``) so that merging
``X-Token`` into ``x-token`` touches one entry instead of two.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Union

MultiValues = dict[str, list[str]]
MultiValuesInput = Union[Mapping[str, Any], Iterable[tuple[str, Any]], None]


def canonical_header_name(name: str) -> str:
    """Return ``name`` with each dash-separated segment capitalised."""
    return "-".join(part[:1].upper() + part[1:].lower() for part in str(name).strip().split("-"))


def _iter_pairs(values: MultiValuesInput) -> Iterable[tuple[str, Any]]:
    """
    Yield (key, value) pairs from either a mapping or an iterable of pairs.

    Mapping values may be a scalar or a list/tuple of values; ``multi_items()``
    containers (httpx.Headers, httpx.QueryParams) are read item by item.
    """
    if not values:
        return
    multi_items = getattr(values, "multi_items", None)
    if callable(multi_items):
        yield from multi_items()
        return
    if isinstance(values, Mapping):
        for key, value in values.items():
            if isinstance(value, (list, tuple)):
                for item in value:
                    yield key, item
            else:
                yield key, value
        return
    yield from values


def _as_text(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("latin-1")
    return "" if value is None else str(value)


def add_value(dst: MultiValues, key: str, value: Any) -> None:
    dst.setdefault(key, []).append(_as_text(value))


def add_header(dst: MultiValues, name: str, value: Any) -> None:
    add_value(dst, canonical_header_name(name), value)


def merge_params(dst: MultiValues, src: MultiValuesInput) -> MultiValues:
    """Append every value in ``src`` to ``dst``; parameters never overwrite."""
    for key, value in _iter_pairs(src):
        if key is None:
            continue
        add_value(dst, str(key), value)
    return dst


def merge_headers(dst: MultiValues, src: MultiValuesInput, *, overwrite: bool) -> MultiValues:
    """
    Merge ``src`` into ``dst``.

    With ``overwrite`` the values already stored for a name that appears in
    ``src`` are dropped before the new ones are added; repeated names within
    ``src`` itself still accumulate.
    """
    replaced: set[str] = set()
    for key, value in _iter_pairs(src):
        if key is None:
            continue
        name = canonical_header_name(str(key))
        if not name:
            continue
        if overwrite and name not in replaced:
            dst.pop(name, None)
            replaced.add(name)
        add_value(dst, name, value)
    return dst


def header_value(headers: Mapping[str, Any] | None, name: str, default: str = "") -> str:
    """
    Return the first value for ``name`` using case-insensitive key matching.
    """
    if not headers or not name:
        return default

    lower = str(name).lower()
    for key, value in headers.items():
        if key is None or str(key).lower() != lower:
            continue
        if isinstance(value, (list, tuple)):
            return str(value[0]).strip() if value else default
        return default if value is None else str(value).strip()

    return default


def flatten(values: MultiValues) -> tuple[tuple[str, str], ...]:
    """Return ``values`` as an ordered tuple of (key, value) pairs."""
    return tuple((key, item) for key, items in values.items() for item in items)


__all__ = [
    "MultiValues",
    "add_header",
    "add_value",
    "canonical_header_name",
    "flatten",
    "header_value",
    "merge_headers",
    "merge_params",
]
