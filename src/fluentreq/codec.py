# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Body encoders and response decoders.

XML values use a plain-dict shape:

    {"widget": {"@id": "7", "name": "gear", "tags": ["a", "b"]}}

encodes to ``<widget id="7"><name>gear</name><tags>a</tags><tags>b</tags></widget>``.
Keys starting with ``@`` are attributes, ``#text`` holds text next to child
elements, lists repeat the element and None is an empty element. Decoding
produces the same shape with string leaves; a repeated element decodes to a
list, a single one to a scalar. Decoding into a dataclass (see ``coerce``)
restores the annotated field types, so encoded dataclasses round-trip.
"""

from __future__ import annotations

import dataclasses
import json
import types
import typing
from collections.abc import Callable, Mapping
from typing import Any, Union
from xml.etree import ElementTree

import httpx

from .errors import DecodeError

JSON_CONTENT_TYPE = "application/json"
XML_CONTENT_TYPE = "application/xml"


def _json_default(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def encode_json(value: Any) -> bytes:
    """Serialize ``value`` to UTF-8 JSON. Raises TypeError/ValueError on failure."""
    return json.dumps(value, default=_json_default).encode("utf-8")


def _xml_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _fill_element(element: ElementTree.Element, value: Any) -> None:
    if value is None:
        return
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        value = dataclasses.asdict(value)
    if not isinstance(value, Mapping):
        element.text = _xml_text(value)
        return
    for key, item in value.items():
        key = str(key)
        if key.startswith("@"):
            element.set(key[1:], _xml_text(item))
        elif key == "#text":
            element.text = _xml_text(item)
        elif isinstance(item, (list, tuple)):
            for entry in item:
                _fill_element(ElementTree.SubElement(element, key), entry)
        else:
            _fill_element(ElementTree.SubElement(element, key), item)


def encode_xml(value: Any) -> bytes:
    """
    Serialize ``value`` to an XML document.

    Accepts an Element, a single-key mapping ``{root_tag: content}``, or a
    dataclass instance (root tag is the class name). Raises TypeError/ValueError
    on anything else.
    """
    if isinstance(value, ElementTree.Element):
        root = value
    elif dataclasses.is_dataclass(value) and not isinstance(value, type):
        root = ElementTree.Element(type(value).__name__)
        _fill_element(root, value)
    elif isinstance(value, Mapping):
        if len(value) != 1:
            raise ValueError(f"XML body needs exactly one root element, got {len(value)}")
        (tag, content), = value.items()
        root = ElementTree.Element(str(tag))
        _fill_element(root, content)
    else:
        raise TypeError(f"Object of type {type(value).__name__} is not XML serializable")
    return ElementTree.tostring(root, encoding="utf-8", xml_declaration=True)


def encode_multipart(fields: Mapping[str, Any]) -> tuple[bytes, str]:
    """
    Encode ``fields`` as multipart/form-data and return ``(body, content_type)``.

    Multiple values for one field are concatenated into a single part.
    """
    parts = []
    for key, values in fields.items():
        if isinstance(values, (list, tuple)):
            text = "".join(str(v) for v in values)
        else:
            text = "" if values is None else str(values)
        # A None filename makes httpx render a plain form field.
        parts.append((str(key), (None, text.encode("utf-8"))))
    staged = httpx.Request("POST", "http://localhost/", files=parts)
    return staged.read(), staged.headers["Content-Type"]


def decode_json(data: bytes) -> Any:
    try:
        return json.loads(data)
    except (ValueError, UnicodeDecodeError) as exc:
        raise DecodeError(f"invalid JSON response body: {exc}") from exc


def _element_value(element: ElementTree.Element) -> Any:
    children = list(element)
    text = (element.text or "").strip()
    if not children and not element.attrib:
        return text or None

    out: dict[str, Any] = {f"@{key}": value for key, value in element.attrib.items()}
    for child in children:
        value = _element_value(child)
        if child.tag in out:
            existing = out[child.tag]
            if not isinstance(existing, list):
                out[child.tag] = existing = [existing]
            existing.append(value)
        else:
            out[child.tag] = value
    if text:
        out["#text"] = text
    return out


def decode_xml(data: bytes) -> dict[str, Any]:
    try:
        root = ElementTree.fromstring(data)
    except ElementTree.ParseError as exc:
        raise DecodeError(f"invalid XML response body: {exc}") from exc
    return {root.tag: _element_value(root)}


def _is_collection(hint: Any) -> bool:
    return typing.get_origin(hint) in (list, tuple, set, frozenset) or hint in (list, tuple, set, frozenset)


def _convert(value: Any, hint: Any) -> Any:
    """Convert a decoded leaf or subtree to ``hint``. XML leaves arrive as strings."""
    if hint is Any or hint is None:
        return value
    origin = typing.get_origin(hint)
    args = typing.get_args(hint)

    if origin is Union or origin is types.UnionType:
        if value is None and type(None) in args:
            return None
        members = [arg for arg in args if arg is not type(None)]
        return _convert(value, members[0]) if len(members) == 1 else value

    if _is_collection(hint):
        collection = origin or hint
        if value is None:
            items = []
        elif isinstance(value, list):
            items = value
        else:
            # A single repeated element decodes to a scalar.
            items = [value]
        item_hint = args[0] if args else Any
        converted = [_convert(item, item_hint) for item in items]
        return converted if collection is list else collection(converted)

    if origin is not None:
        return value
    if dataclasses.is_dataclass(hint):
        return _build_dataclass(hint, value)
    if hint is bool:
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in ("true", "1"):
                return True
            if lowered in ("false", "0"):
                return False
            raise ValueError(f"not a boolean: {value!r}")
        return bool(value)
    if hint is str:
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)
    if hint in (int, float) and value is not None and type(value) is not hint:
        return hint(value)
    return value


def _build_dataclass(cls: type, value: Any) -> Any:
    if isinstance(value, cls):
        return value
    if not isinstance(value, Mapping):
        raise TypeError(f"expected a mapping for {cls.__name__}, got {type(value).__name__}")
    try:
        hints = typing.get_type_hints(cls)
    except NameError:
        hints = {}
    kwargs: dict[str, Any] = {}
    for spec in dataclasses.fields(cls):
        if not spec.init:
            continue
        hint = hints.get(spec.name, Any)
        if spec.name in value:
            kwargs[spec.name] = _convert(value[spec.name], hint)
        elif (
            spec.default is dataclasses.MISSING
            and spec.default_factory is dataclasses.MISSING
            and _is_collection(hint)
        ):
            # Empty collections leave no element behind in XML.
            kwargs[spec.name] = _convert(None, hint)
    return cls(**kwargs)


def coerce(value: Any, into: Callable[..., Any] | None) -> Any:
    """
    Apply ``into`` to a decoded value.

    Dataclasses are built from mapping keys, converting each field to its
    annotated type, so a value encoded by ``encode_json``/``encode_xml`` decodes
    back to an equal instance. A single root key named after the dataclass
    (how ``encode_xml`` wraps one) is unwrapped first. Generic aliases such as
    ``list[int]`` are converted the same way; any other callable is applied as is.
    """
    if into is None:
        return value
    try:
        if dataclasses.is_dataclass(into):
            names = {spec.name for spec in dataclasses.fields(into)}
            if isinstance(value, Mapping) and len(value) == 1:
                (root, content), = value.items()
                if root == into.__name__ and root not in names:
                    value = content
            return _build_dataclass(into, value)
        if typing.get_origin(into) is not None:
            return _convert(value, into)
        return into(value)
    except (TypeError, ValueError) as exc:
        raise DecodeError(f"cannot convert response into {getattr(into, '__name__', into)!r}: {exc}") from exc


__all__ = [
    "JSON_CONTENT_TYPE",
    "XML_CONTENT_TYPE",
    "coerce",
    "decode_json",
    "decode_xml",
    "encode_json",
    "encode_multipart",
    "encode_xml",
]
