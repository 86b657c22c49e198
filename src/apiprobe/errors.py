# SPDX-FileCopyrightText: 2025 apiprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import asyncio
import socket
import ssl as ssl_module
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable

import httpx


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    INVALID_URL = "INVALID_URL"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    NONE = "NONE"


def _exception_chain(exc: BaseException) -> Iterable[BaseException]:
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def categorize_exception(exc: Exception) -> ErrorCategory:
    """
    Map Python/httpx exceptions to ErrorCategory.

    httpx wraps the low-level socket/ssl errors, so the cause chain is inspected
    before falling back to the httpx class itself.
    """
    if isinstance(exc, httpx.TimeoutException):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, (httpx.InvalidURL, httpx.UnsupportedProtocol)):
        return ErrorCategory.INVALID_URL

    for link in _exception_chain(exc):
        if isinstance(link, (socket.gaierror, socket.herror)):
            return ErrorCategory.DNS_ERROR
        if isinstance(link, (ssl_module.SSLError, ssl_module.CertificateError)):
            return ErrorCategory.SSL_ERROR

    if isinstance(
        exc, (httpx.ConnectError, httpx.RemoteProtocolError, httpx.NetworkError, httpx.ProxyError)
    ):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (ConnectionError, ConnectionRefusedError, ConnectionResetError)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (TimeoutError, asyncio.TimeoutError)):
        return ErrorCategory.TIMEOUT

    return ErrorCategory.UNKNOWN_ERROR


def error_category_to_reason(category: ErrorCategory | str | None) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.TIMEOUT: "Network timeout during probe",
        ErrorCategory.SSL_ERROR: "TLS/certificate issue",
        ErrorCategory.CONNECTION_ERROR: "Network connectivity issue",
        ErrorCategory.DNS_ERROR: "DNS resolution failure",
        ErrorCategory.INVALID_URL: "Invalid or unsupported URL",
        ErrorCategory.UNKNOWN_ERROR: "Network error during probe",
        ErrorCategory.NONE: "",
        None: "",
    }
    if isinstance(category, str) and not isinstance(category, ErrorCategory):
        try:
            category = ErrorCategory(category)
        except ValueError:
            return "Probe failed due to network error"
    return mapping.get(category, "Probe failed due to network error")


class ApiProbeError(Exception):
    """Base class for errors raised by apiprobe."""


class TargetValidationError(ApiProbeError, ValueError):
    """A target definition cannot be dispatched as submitted."""


@dataclass
class ProbeFailure:
    """A probe that could not complete its HTTP exchange."""

    path: str
    method: str
    url: str
    category: str = ErrorCategory.UNKNOWN_ERROR.value
    message: str = ""
    error_type: str | None = None

    @property
    def reason(self) -> str:
        return error_category_to_reason(self.category)

    def describe(self) -> str:
        cause = self.message or self.error_type or "no details"
        return f"{self.path} ({self.method} {self.url}): {self.reason}: {cause}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "method": self.method,
            "url": self.url,
            "category": self.category,
            "message": self.message,
            "error_type": self.error_type,
        }


class DispatchError(ApiProbeError):
    """One or more probes of a run failed at the transport level; the run is void."""

    def __init__(self, failures: list[ProbeFailure], *, request_id: str | None = None):
        self.failures = list(failures)
        self.request_id = request_id
        details = "; ".join(failure.describe() for failure in self.failures)
        super().__init__(f"Failed to make {len(self.failures)} requests: {details}")

    @property
    def failed_paths(self) -> list[str]:
        return [failure.path for failure in self.failures]


class ProbeTransportError(ApiProbeError):
    """A single probe could not reach its target."""

    def __init__(self, failure: ProbeFailure):
        self.failure = failure
        super().__init__(f"Failed to reach target {failure.url}: {failure.reason}: {failure.message}")


__all__ = [
    "ApiProbeError",
    "DispatchError",
    "ErrorCategory",
    "ProbeFailure",
    "ProbeTransportError",
    "TargetValidationError",
    "categorize_exception",
    "error_category_to_reason",
]
