# SPDX-FileCopyrightText: 2025 apiprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response data models used across apiprobe."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

Headers = Dict[str, str]


@dataclass
class HttpRequest:
    """Normalized request representation consumed by HttpClient implementations."""

    url: str
    method: str = "GET"
    headers: Optional[Headers] = None
    body: Optional[bytes | str] = None
    timeout: Optional[float] = None
    allow_redirects: bool = True


@dataclass
class HttpResponse:
    """
    Normalized HTTP response.

    Probes only need the status line, so the body is never read. When the
    exchange could not complete, `ok` is False and the error fields are set.
    """

    ok: bool
    status_code: Optional[int] = None
    headers: Headers = field(default_factory=dict)
    url: Optional[str] = None
    elapsed_ms: Optional[float] = None
    error_category: Optional[str] = None
    error_message: Optional[str] = None
    error_type: Optional[str] = None
    meta: Dict[str, Any] = field(default_factory=dict)
