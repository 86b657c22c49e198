# SPDX-FileCopyrightText: 2025 apiprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Concurrent probe dispatcher: fan out one request per endpoint, fan in one verdict."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import uuid
from typing import Optional

from ..config import ProbeSettings, load_probe_settings
from ..errors import DispatchError, ErrorCategory, ProbeFailure, categorize_exception
from ..http.client import HttpClient, create_default_http_client
from ..http.models import HttpRequest
from ..http.url import join_url
from ..models.result import ProbeOutcome, RunResult, overall_verdict
from ..models.target import EndpointSpec, TargetDefinition

logger = logging.getLogger(__name__)

REQUEST_ID_PREFIX = "apiprobe-v0"


def new_request_id() -> str:
    return f"{REQUEST_ID_PREFIX}-{uuid.uuid4()}"


class ProbeDispatcher:
    """
    Run every endpoint of a TargetDefinition concurrently against a shared client.

    Each probe owns one index of the pre-sized outcome and failure slot lists, so
    completion order never affects result order and no slot is written twice.
    Any transport failure voids the run: `dispatch()` raises DispatchError listing
    every failed path instead of returning a partial RunResult. Status mismatches
    are measured FAIL outcomes and never abort the run.
    """

    def __init__(self, http_client: HttpClient | None = None, settings: ProbeSettings | None = None):
        self.settings = settings or load_probe_settings()
        self.http_client = http_client or create_default_http_client(self.settings)

    def resolve_timeout(self, target: TargetDefinition) -> float:
        if target.max_timeout_seconds is not None:
            return float(target.max_timeout_seconds)
        return self.settings.timeout

    async def dispatch(self, target: TargetDefinition) -> RunResult:
        target.validate()

        request_id = new_request_id()
        timeout = self.resolve_timeout(target)
        count = len(target.endpoints)
        logger.debug("Running %d probes [ID %s]: %s (timeout %.1fs)", count, request_id, target.base_url, timeout)

        outcomes: list[Optional[ProbeOutcome]] = [None] * count
        failures: list[Optional[ProbeFailure]] = [None] * count
        limit = self.settings.max_concurrency
        semaphore = asyncio.Semaphore(limit) if limit else None

        await asyncio.gather(
            *(
                self._probe(index, target.base_url, endpoint, timeout, outcomes, failures, semaphore)
                for index, endpoint in enumerate(target.endpoints)
            )
        )

        failed = [failure for failure in failures if failure is not None]
        if failed:
            logger.debug("Run %s voided by %d transport failures", request_id, len(failed))
            raise DispatchError(failed, request_id=request_id)

        results = [outcome for outcome in outcomes if outcome is not None]
        verdict = overall_verdict(results)
        logger.debug("Run %s finished: %s (%d probes)", request_id, verdict.value, len(results))
        return RunResult(request_id=request_id, base_url=target.base_url, overall_verdict=verdict, outcomes=results)

    async def _probe(
        self,
        index: int,
        base_url: str,
        endpoint: EndpointSpec,
        timeout: float,
        outcomes: list[Optional[ProbeOutcome]],
        failures: list[Optional[ProbeFailure]],
        semaphore: asyncio.Semaphore | None,
    ) -> None:
        url = join_url(base_url, endpoint.path)
        request = HttpRequest(
            url=url,
            method=endpoint.method,
            timeout=timeout,
            allow_redirects=self.settings.allow_redirects,
        )

        async with semaphore if semaphore is not None else contextlib.nullcontext():
            try:
                response = await self.http_client.request(request)
            except Exception as exc:  # noqa: BLE001
                failures[index] = ProbeFailure(
                    path=endpoint.path,
                    method=endpoint.method,
                    url=url,
                    category=categorize_exception(exc).value,
                    message=str(exc),
                    error_type=type(exc).__name__,
                )
                return

        if not response.ok or response.status_code is None:
            failures[index] = ProbeFailure(
                path=endpoint.path,
                method=endpoint.method,
                url=url,
                category=response.error_category or ErrorCategory.UNKNOWN_ERROR.value,
                message=response.error_message or "",
                error_type=response.error_type,
            )
            return

        outcome = ProbeOutcome.measure(endpoint.path, endpoint.expected_status, response.status_code)
        logger.debug("%s %s -> %d (%s)", endpoint.method, url, response.status_code, outcome.verdict.value)
        outcomes[index] = outcome


async def dispatch(
    target: TargetDefinition,
    *,
    http_client: HttpClient | None = None,
    settings: ProbeSettings | None = None,
) -> RunResult:
    """One-shot dispatch; closes the HTTP client only when it created it."""
    owns_client = http_client is None
    dispatcher = ProbeDispatcher(http_client, settings)
    try:
        return await dispatcher.dispatch(target)
    finally:
        if owns_client:
            await dispatcher.http_client.aclose()


__all__ = ["ProbeDispatcher", "REQUEST_ID_PREFIX", "dispatch", "new_request_id"]
