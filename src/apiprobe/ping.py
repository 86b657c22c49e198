# SPDX-FileCopyrightText: 2025 apiprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Liveness ping: repeated HEAD requests against a single URL."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from .config import DEFAULT_TIMEOUT_SECONDS
from .errors import ErrorCategory, ProbeFailure, ProbeTransportError
from .http.client import HttpClient
from .http.models import HttpRequest

logger = logging.getLogger(__name__)

DEFAULT_PING_INTERVAL = 0.5


def is_live_status(status_code: int) -> bool:
    return 200 <= status_code < 400


@dataclass
class PingAttempt:
    sequence: int
    status_code: int
    elapsed_ms: float
    live: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "sequence": self.sequence,
            "status_code": self.status_code,
            "elapsed_ms": round(self.elapsed_ms, 3),
            "live": self.live,
        }


@dataclass
class PingReport:
    url: str
    attempts: list[PingAttempt] = field(default_factory=list)

    @property
    def successful(self) -> int:
        return sum(1 for attempt in self.attempts if attempt.live)

    @property
    def average_ms(self) -> float:
        if not self.attempts:
            return 0.0
        return sum(attempt.elapsed_ms for attempt in self.attempts) / len(self.attempts)

    @property
    def all_live(self) -> bool:
        return bool(self.attempts) and self.successful == len(self.attempts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "attempts": [attempt.to_dict() for attempt in self.attempts],
            "successful": self.successful,
            "count": len(self.attempts),
            "average_ms": round(self.average_ms, 3),
        }


async def ping_url(
    client: HttpClient,
    url: str,
    *,
    count: int = 1,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    interval: float = DEFAULT_PING_INTERVAL,
) -> PingReport:
    """
    Send `count` sequential HEAD requests to `url`.

    A 2xx/3xx answer counts as live. The first transport failure aborts the ping
    with ProbeTransportError.
    """
    if count <= 0:
        raise ValueError(f"count must be positive, got {count}")

    logger.debug("Checking URL %s for liveness (%d pings)", url, count)
    report = PingReport(url=url)
    for sequence in range(1, count + 1):
        response = await client.request(HttpRequest(url=url, method="HEAD", timeout=timeout))
        if not response.ok or response.status_code is None:
            raise ProbeTransportError(
                ProbeFailure(
                    path=url,
                    method="HEAD",
                    url=url,
                    category=response.error_category or ErrorCategory.UNKNOWN_ERROR.value,
                    message=response.error_message or "",
                    error_type=response.error_type,
                )
            )
        report.attempts.append(
            PingAttempt(
                sequence=sequence,
                status_code=response.status_code,
                elapsed_ms=response.elapsed_ms or 0.0,
                live=is_live_status(response.status_code),
            )
        )
        if sequence < count and interval > 0:
            await asyncio.sleep(interval)

    logger.info(
        "Got %d of %d pings successful, average duration of %.0fms",
        report.successful,
        count,
        report.average_ms,
    )
    return report


__all__ = ["PingAttempt", "PingReport", "is_live_status", "ping_url"]
