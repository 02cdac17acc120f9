# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dispatch a configured request and decode what comes back."""

from __future__ import annotations

import io
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .codec import coerce, decode_json, decode_xml
from .errors import EmptyResponseError, categorize_exception, error_category_to_reason
from .http.client import get_default_client
from .http.models import HttpResponse, PreparedRequest
from .log import get_logger

if TYPE_CHECKING:
    from .request import Request


@dataclass
class Resolution:
    """Outcome of a dispatch: either an open response or a handler's return value."""

    response: HttpResponse | None = None
    value: Any = None
    handled: bool = False


def _charset(content_type: str) -> str | None:
    for part in content_type.split(";")[1:]:
        key, _, value = part.strip().partition("=")
        if key.strip().lower() == "charset" and value:
            return value.strip().strip('"')
    return None


def decode_text(content: bytes, content_type: str = "") -> str:
    encoding = _charset(content_type) or "utf-8"
    try:
        return content.decode(encoding, errors="replace")
    except LookupError:
        return content.decode("utf-8", errors="replace")


class ResponseResolver:
    """
    Executes one Request and applies its error and status-code policy.

    Every decoding method closes the response body and releases the request
    context before returning, whatever the outcome.
    """

    def __init__(self, request: Request):
        self._request = request
        self._config = request.config

    def resolve(self) -> Resolution:
        cfg = self._config
        logger = get_logger()
        prepared: PreparedRequest | None = None
        try:
            prepared = self._request.build()
            client = cfg.client or get_default_client()
            response = client.send(prepared)
        except Exception as exc:  # noqa: BLE001
            if prepared is not None:
                prepared.context.cancel()
            category = categorize_exception(exc)
            logger.debug(
                "%s %s failed (%s): %s",
                cfg.method,
                prepared.url if prepared is not None else cfg.base_url,
                error_category_to_reason(category),
                exc,
            )
            if cfg.error_handler is None:
                raise
            return Resolution(value=cfg.error_handler(None, exc), handled=True)

        if response is None:
            prepared.context.cancel()
            raise EmptyResponseError(f"no response from HTTP client for {prepared.method} {prepared.url}")

        response.bind(prepared)
        response.on_close(prepared.context.cancel)

        handler = cfg.status_code_handlers.get(response.status_code)
        if handler is None and cfg.expected_status is not None and response.status_code != cfg.expected_status:
            logger.debug("%s %s: expected status %s, got %s", prepared.method, prepared.url, cfg.expected_status, response.status_code)
            handler = cfg.mismatch_handler
        if handler is None:
            return Resolution(response=response)

        result: Any = None
        try:
            result = handler(response)
        finally:
            if result is not response:
                response.close()
        return Resolution(value=result, handled=True)

    def _decode(self, decode: Callable[[HttpResponse], Any]) -> Any:
        resolution = self.resolve()
        if resolution.handled:
            return resolution.value
        with resolution.response as response:
            return decode(response)

    def response(self) -> Any:
        resolution = self.resolve()
        return resolution.value if resolution.handled else resolution.response

    def body(self) -> Any:
        resolution = self.resolve()
        return resolution.value if resolution.handled else resolution.response.body

    def buffer(self) -> Any:
        return self._decode(lambda response: io.BytesIO(response.read()))

    def bytes(self) -> Any:
        return self._decode(lambda response: response.read())

    def string(self) -> Any:
        return self._decode(lambda response: decode_text(response.read(), response.header("Content-Type")))

    def json(self, into: Callable[..., Any] | None = None) -> Any:
        return self._decode(lambda response: coerce(decode_json(response.read()), into))

    def xml(self, into: Callable[..., Any] | None = None) -> Any:
        return self._decode(lambda response: coerce(decode_xml(response.read()), into))


__all__ = ["Resolution", "ResponseResolver", "decode_text"]
