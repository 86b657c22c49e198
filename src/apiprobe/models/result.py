# SPDX-FileCopyrightText: 2025 apiprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclasses for probe outcomes and run results."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Status(str, Enum):
    """Verdict values. The dispatcher only emits PASS and FAIL."""

    PENDING = "PENDING"
    PASS = "PASS"
    FAIL = "FAIL"
    ERROR = "ERROR"
    UNSPECIFIED = "UNSPECIFIED"


def _parse_status(value: Any) -> Status:
    try:
        return Status(value) if value is not None else Status.UNSPECIFIED
    except ValueError:
        return Status.UNSPECIFIED


@dataclass
class ProbeOutcome:
    """Measured result of one endpoint probe."""

    path: str
    expected_status: int
    actual_status: int
    verdict: Status

    @classmethod
    def measure(cls, path: str, expected_status: int, actual_status: int) -> ProbeOutcome:
        verdict = Status.PASS if actual_status == expected_status else Status.FAIL
        return cls(path=path, expected_status=expected_status, actual_status=actual_status, verdict=verdict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "expected_status": self.expected_status,
            "actual_status": self.actual_status,
            "status": self.verdict.value,
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ProbeOutcome:
        return cls(
            path=str(data.get("path") or ""),
            expected_status=int(data.get("expected_status") or 0),
            actual_status=int(data.get("actual_status") or 0),
            verdict=_parse_status(data.get("status")),
        )


def overall_verdict(outcomes: Iterable[ProbeOutcome]) -> Status:
    """FAIL if any outcome failed, PASS otherwise."""
    if any(outcome.verdict == Status.FAIL for outcome in outcomes):
        return Status.FAIL
    return Status.PASS


@dataclass
class RunResult:
    """Aggregate result of one run, outcomes in input endpoint order."""

    request_id: str
    base_url: str
    overall_verdict: Status
    outcomes: list[ProbeOutcome] = field(default_factory=list)

    @property
    def passed_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.verdict == Status.PASS)

    @property
    def failed_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.verdict == Status.FAIL)

    def to_dict(self) -> dict[str, Any]:
        return {
            "request_id": self.request_id,
            "base_url": self.base_url,
            "status": self.overall_verdict.value,
            "results": [outcome.to_dict() for outcome in self.outcomes],
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> RunResult:
        return cls(
            request_id=str(data.get("request_id") or ""),
            base_url=str(data.get("base_url") or ""),
            overall_verdict=_parse_status(data.get("status")),
            outcomes=[ProbeOutcome.from_mapping(item) for item in data.get("results") or []],
        )


__all__ = ["ProbeOutcome", "RunResult", "Status", "overall_verdict"]
