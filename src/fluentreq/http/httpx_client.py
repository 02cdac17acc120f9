# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed HttpClient implementation."""

from __future__ import annotations

import httpx

from ..config import Settings, load_settings
from .client import HttpClient
from .headers import merge_headers
from .models import HttpResponse, PreparedRequest, ResponseStream


class HttpxClient(HttpClient):
    """Synchronous httpx client wrapper that streams response bodies."""

    def __init__(self, settings: Settings | None = None, client: httpx.Client | None = None):
        self.settings = settings or load_settings()
        self._client = client or httpx.Client(
            follow_redirects=self.settings.allow_redirects,
            timeout=self.settings.timeout,
            verify=self.settings.verify_ssl,
            headers={"User-Agent": self.settings.user_agent},
        )

    def send(self, request: PreparedRequest) -> HttpResponse:
        request.context.check()

        # The context deadline caps the whole call; otherwise the client default applies.
        remaining = request.context.remaining()
        timeout = remaining if remaining is not None else httpx.USE_CLIENT_DEFAULT

        outgoing = self._client.build_request(
            request.method,
            request.url,
            headers=list(request.headers),
            content=request.body,
            timeout=timeout,
        )
        resp = self._client.send(outgoing, stream=True)

        return HttpResponse(
            status_code=resp.status_code,
            headers=merge_headers({}, resp.headers, overwrite=False),
            body=ResponseStream(resp.iter_bytes(), on_close=resp.close, context=request.context),
            url=str(resp.url),
            request=request,
        )

    def close(self) -> None:
        self._client.close()
