# SPDX-FileCopyrightText: 2025 apiprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed HttpClient implementation."""

from __future__ import annotations

import asyncio
import time

import httpx

from ..config import ProbeSettings, load_probe_settings
from ..errors import ErrorCategory, categorize_exception
from .client import HttpClient
from .models import HttpRequest, HttpResponse


def build_limits(settings: ProbeSettings) -> httpx.Limits:
    """Size the connection pool like the dispatch semaphore so requests never queue in the pool."""
    return httpx.Limits(
        max_connections=settings.max_concurrency,
        max_keepalive_connections=settings.max_concurrency,
    )


class HttpxClient(HttpClient):
    """
    Asynchronous httpx client wrapper shared by every request of a run.

    The request timeout bounds the whole exchange (connect, send, headers) as one
    wall-clock limit; httpx's own per-phase timeout stays in place underneath it.
    """

    def __init__(self, settings: ProbeSettings | None = None, client: httpx.AsyncClient | None = None):
        self.settings = settings or load_probe_settings()
        self._client = client or httpx.AsyncClient(
            follow_redirects=self.settings.allow_redirects,
            timeout=self.settings.timeout,
            verify=self.settings.verify_ssl,
            limits=build_limits(self.settings),
        )

    async def _exchange(self, request: HttpRequest, headers: dict[str, str], timeout: float) -> HttpResponse:
        # Streaming keeps the body unread; leaving the block closes the response.
        async with self._client.stream(
            request.method,
            request.url,
            headers=headers,
            content=request.body,
            timeout=timeout,
            follow_redirects=request.allow_redirects,
        ) as resp:
            return HttpResponse(
                ok=True,
                status_code=resp.status_code,
                headers=dict(resp.headers),
                url=str(resp.url),
            )

    async def request(self, request: HttpRequest) -> HttpResponse:
        headers = dict(request.headers or {})
        headers.setdefault("User-Agent", self.settings.user_agent)
        timeout = request.timeout if request.timeout is not None else self.settings.timeout

        started = time.perf_counter()
        try:
            response = await asyncio.wait_for(self._exchange(request, headers, timeout), timeout=timeout)
        except asyncio.TimeoutError:
            return HttpResponse(
                ok=False,
                url=request.url,
                elapsed_ms=(time.perf_counter() - started) * 1000,
                error_category=ErrorCategory.TIMEOUT.value,
                error_message=f"request exceeded the {timeout:g}s timeout",
                error_type="TimeoutError",
            )
        except Exception as exc:  # noqa: BLE001
            category = categorize_exception(exc)
            return HttpResponse(
                ok=False,
                url=request.url,
                elapsed_ms=(time.perf_counter() - started) * 1000,
                error_category=category.value,
                error_message=str(exc),
                error_type=type(exc).__name__,
            )

        response.elapsed_ms = (time.perf_counter() - started) * 1000
        return response

    async def aclose(self) -> None:
        await self._client.aclose()
