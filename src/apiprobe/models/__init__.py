# SPDX-FileCopyrightText: 2025 apiprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclass exports for apiprobe."""

from ..http.models import Headers, HttpRequest, HttpResponse
from .result import ProbeOutcome, RunResult, Status, overall_verdict
from .target import SUPPORTED_METHODS, EndpointSpec, TargetDefinition

__all__ = [
    "EndpointSpec",
    "Headers",
    "HttpRequest",
    "HttpResponse",
    "ProbeOutcome",
    "RunResult",
    "SUPPORTED_METHODS",
    "Status",
    "TargetDefinition",
    "overall_verdict",
]
