# SPDX-FileCopyrightText: 2025 apiprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level apiprobe facade wiring client, dispatcher and result storage."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from contextlib import suppress
from typing import Any

from .config import ProbeSettings, load_probe_settings
from .dispatch.engine import ProbeDispatcher
from .http.client import HttpClient, create_default_http_client
from .models import RunResult, TargetDefinition
from .ping import PingReport, ping_url
from .storage import ResultRecorder, ResultStore

logger = logging.getLogger(__name__)


class ApiProbe:
    """
    Convenience wrapper that shares one HTTP client across runs and pings.

    When a result store is supplied, results of runs made on behalf of a user are
    handed to a background recorder; storage never delays or fails a run.
    """

    def __init__(
        self,
        http_client: HttpClient | None = None,
        *,
        settings: ProbeSettings | None = None,
        store: ResultStore | None = None,
    ):
        self.settings = settings or load_probe_settings()
        self.http_client = http_client or create_default_http_client(self.settings)
        self.dispatcher = ProbeDispatcher(self.http_client, self.settings)
        self.recorder = ResultRecorder(store) if store is not None else None

    async def run(self, target: TargetDefinition | Mapping[str, Any], *, user_id: str | None = None) -> RunResult:
        if not isinstance(target, TargetDefinition):
            target = TargetDefinition.from_mapping(target)
        result = await self.dispatcher.dispatch(target)
        if self.recorder is not None and user_id:
            self.recorder.record(user_id, result)
        return result

    async def ping(self, url: str, *, count: int = 1, timeout: float | None = None) -> PingReport:
        return await ping_url(
            self.http_client,
            url,
            count=count,
            timeout=timeout if timeout is not None else self.settings.timeout,
        )

    async def aclose(self) -> None:
        if self.recorder is not None:
            await self.recorder.drain()
        with suppress(Exception):
            if hasattr(self.http_client, "aclose"):
                await self.http_client.aclose()

    async def __aenter__(self) -> ApiProbe:
        return self

    async def __aexit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        await self.aclose()
