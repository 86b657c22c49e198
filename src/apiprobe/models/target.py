# SPDX-FileCopyrightText: 2025 apiprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Target definition models: what a run probes."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from ..errors import TargetValidationError

SUPPORTED_METHODS = frozenset({"GET", "POST", "PUT", "DELETE", "PATCH"})


def _require_int(value: Any, field_name: str) -> int:
    # bool is an int subclass but never a meaningful status or timeout
    if isinstance(value, bool) or not isinstance(value, int):
        raise TargetValidationError(f"{field_name} must be an integer, got {value!r}")
    return value


@dataclass(frozen=True)
class EndpointSpec:
    """One endpoint to probe and the HTTP status it is expected to answer with."""

    path: str
    method: str
    expected_status: int

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> EndpointSpec:
        if not isinstance(data, Mapping):
            raise TargetValidationError(f"endpoint must be an object, got {type(data).__name__}")
        if "path" not in data:
            raise TargetValidationError("endpoint is missing 'path'")
        if "expected_status" not in data:
            raise TargetValidationError(f"endpoint {data.get('path')!r} is missing 'expected_status'")
        path = data["path"]
        if not isinstance(path, str):
            raise TargetValidationError(f"endpoint path must be a string, got {path!r}")
        method = data.get("method") or "GET"
        if not isinstance(method, str):
            raise TargetValidationError(f"endpoint {path!r} method must be a string, got {method!r}")
        return cls(
            path=path,
            method=method.strip().upper(),
            expected_status=_require_int(data["expected_status"], f"endpoint {path!r} expected_status"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "method": self.method, "expected_status": self.expected_status}


@dataclass(frozen=True)
class TargetDefinition:
    """
    Input of a single run: a base URL plus the ordered endpoints to probe under it.

    `max_timeout_seconds` applies to every probe of the run individually; when it
    is omitted the dispatcher falls back to the configured default.
    """

    base_url: str
    endpoints: tuple[EndpointSpec, ...]
    max_timeout_seconds: int | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.endpoints, tuple):
            object.__setattr__(self, "endpoints", tuple(self.endpoints))

    def validate(self) -> None:
        """Raise TargetValidationError when the definition cannot be dispatched."""
        if not isinstance(self.base_url, str) or not self.base_url.strip():
            raise TargetValidationError("base_url must be a non-empty string")
        if not self.endpoints:
            raise TargetValidationError("endpoints must contain at least one endpoint")
        for endpoint in self.endpoints:
            if endpoint.method not in SUPPORTED_METHODS:
                supported = ", ".join(sorted(SUPPORTED_METHODS))
                raise TargetValidationError(
                    f"endpoint {endpoint.path!r} uses unsupported method {endpoint.method!r} (expected one of {supported})"
                )
        if self.max_timeout_seconds is not None:
            timeout = _require_int(self.max_timeout_seconds, "max_timeout_seconds")
            if timeout <= 0:
                raise TargetValidationError(f"max_timeout_seconds must be positive, got {timeout}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> TargetDefinition:
        """Decode the JSON submission shape into a validated TargetDefinition."""
        if not isinstance(data, Mapping):
            raise TargetValidationError(f"target definition must be an object, got {type(data).__name__}")
        if "base_url" not in data:
            raise TargetValidationError("target definition is missing 'base_url'")
        raw_endpoints = data.get("endpoints")
        if raw_endpoints is None:
            raise TargetValidationError("target definition is missing 'endpoints'")
        if isinstance(raw_endpoints, (str, bytes)) or not isinstance(raw_endpoints, Sequence):
            raise TargetValidationError("endpoints must be a list")

        timeout = data.get("max_timeout_seconds")
        target = cls(
            base_url=data["base_url"],
            endpoints=tuple(EndpointSpec.from_mapping(item) for item in raw_endpoints),
            max_timeout_seconds=timeout,
        )
        target.validate()
        return target

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "base_url": self.base_url,
            "endpoints": [endpoint.to_dict() for endpoint in self.endpoints],
        }
        if self.max_timeout_seconds is not None:
            data["max_timeout_seconds"] = self.max_timeout_seconds
        return data


__all__ = ["EndpointSpec", "SUPPORTED_METHODS", "TargetDefinition"]
