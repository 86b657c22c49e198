# SPDX-FileCopyrightText: 2025 apiprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for apiprobe."""

import os
from dataclasses import dataclass

from .version import __version__

DEFAULT_USER_AGENT = f"apiprobe/{__version__} (endpoint monitor)"
DEFAULT_TIMEOUT_SECONDS = 5.0
DEFAULT_MAX_CONCURRENCY = 32


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _optional_int_env(name: str, default: int | None) -> int | None:
    try:
        value = os.getenv(name)
        if value is None:
            return default
        parsed = int(value)
        return parsed if parsed > 0 else None
    except ValueError:
        return default


@dataclass
class ProbeSettings:
    """
    HTTP and dispatch defaults.

    `timeout` is the per-probe timeout used when a target does not carry its own
    `max_timeout_seconds`. `max_concurrency` caps in-flight probes per run; `None`
    leaves fan-out bounded only by the endpoint count.
    """

    timeout: float = DEFAULT_TIMEOUT_SECONDS
    max_concurrency: int | None = DEFAULT_MAX_CONCURRENCY
    user_agent: str = DEFAULT_USER_AGENT
    allow_redirects: bool = True
    verify_ssl: bool = True

    @classmethod
    def from_env(cls) -> "ProbeSettings":
        """Create settings from environment variables (evaluated at call time)."""
        timeout = _float_env("APIPROBE_HTTP_TIMEOUT", cls.timeout)
        if timeout <= 0:
            timeout = cls.timeout
        return cls(
            timeout=timeout,
            max_concurrency=_optional_int_env("APIPROBE_MAX_CONCURRENCY", cls.max_concurrency),
            user_agent=os.getenv("APIPROBE_USER_AGENT", cls.user_agent),
            allow_redirects=_bool_env("APIPROBE_HTTP_REDIRECTS", cls.allow_redirects),
            verify_ssl=_bool_env("APIPROBE_HTTP_VERIFY_SSL", cls.verify_ssl),
        )


def load_probe_settings() -> ProbeSettings:
    """Load probe settings from environment with sensible defaults."""
    return ProbeSettings.from_env()
