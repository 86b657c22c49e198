# SPDX-FileCopyrightText: 2025 apiprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Programmable HttpClient implementations."""

from __future__ import annotations

import asyncio

from ..errors import ErrorCategory
from .client import HttpClient
from .models import HttpRequest, HttpResponse


class StubHttpClient(HttpClient):
    """
    Deterministic, programmable HttpClient for tests.

    Responses are keyed by `(method, url)` or by `url` alone. A configured
    exception is raised instead of returned, which lets callers exercise clients
    that do not follow the no-raise convention. Per-URL delays make completion
    order controllable, and the peak number of concurrent requests is tracked.
    """

    def __init__(
        self,
        responses: dict[str | tuple[str, str], HttpResponse | BaseException] | None = None,
        *,
        delays: dict[str, float] | None = None,
    ):
        self._responses = dict(responses or {})
        self._delays = dict(delays or {})
        self.requests: list[HttpRequest] = []
        self.completed: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    def add(self, url: str, response: HttpResponse | BaseException, *, method: str | None = None) -> None:
        key: str | tuple[str, str] = (method.upper(), url) if method else url
        self._responses[key] = response

    def _lookup(self, request: HttpRequest) -> HttpResponse | BaseException:
        for key in ((request.method.upper(), request.url), request.url):
            if key in self._responses:
                return self._responses[key]
        return HttpResponse(
            ok=False,
            url=request.url,
            error_category=ErrorCategory.CONNECTION_ERROR.value,
            error_message="No stubbed response configured",
        )

    async def request(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            delay = self._delays.get(request.url)
            if delay:
                await asyncio.sleep(delay)
            else:
                await asyncio.sleep(0)
            response = self._lookup(request)
        finally:
            self.in_flight -= 1
        self.completed.append(request.url)
        if isinstance(response, BaseException):
            raise response
        return response

    async def aclose(self) -> None:
        self.closed = True
