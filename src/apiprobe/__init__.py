# SPDX-FileCopyrightText: 2025 apiprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
apiprobe package entrypoint.

apiprobe checks a set of API endpoints against their expected HTTP status codes.
A run fans out one probe per endpoint concurrently and reduces the outcomes to a
single PASS/FAIL verdict; a probe that cannot complete its HTTP exchange voids
the whole run. HTTP behavior is abstracted behind an injectable client
interface, and domain objects are modeled with typed dataclasses.
"""

from .config import ProbeSettings, load_probe_settings
from .dispatch import ProbeDispatcher
from .errors import (
    ApiProbeError,
    DispatchError,
    ErrorCategory,
    ProbeFailure,
    ProbeTransportError,
    TargetValidationError,
)
from .http import (
    HttpClient,
    HttpRequest,
    HttpResponse,
    HttpxClient,
    StubHttpClient,
    create_default_http_client,
)
from .log import setup_logging
from .models import EndpointSpec, ProbeOutcome, RunResult, Status, TargetDefinition
from .ping import PingReport, ping_url
from .runtime import ApiProbe
from .storage import InMemoryResultStore, ResultRecorder, ResultStore, StoredResult
from .version import __version__

__all__ = [
    "ApiProbe",
    "ApiProbeError",
    "DispatchError",
    "EndpointSpec",
    "ErrorCategory",
    "HttpClient",
    "HttpRequest",
    "HttpResponse",
    "HttpxClient",
    "InMemoryResultStore",
    "PingReport",
    "ProbeDispatcher",
    "ProbeFailure",
    "ProbeOutcome",
    "ProbeSettings",
    "ProbeTransportError",
    "ResultRecorder",
    "ResultStore",
    "RunResult",
    "Status",
    "StoredResult",
    "StubHttpClient",
    "TargetDefinition",
    "TargetValidationError",
    "create_default_http_client",
    "load_probe_settings",
    "ping_url",
    "setup_logging",
    "__version__",
]
