# SPDX-FileCopyrightText: 2025 apiprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Stored run record shape."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from ..models.result import ProbeOutcome, RunResult, Status


@dataclass
class StoredResult:
    """A RunResult as persisted for one user, with summary counts in `metadata`."""

    id: str
    user_id: str
    request_id: str
    base_url: str
    status: Status
    results: list[ProbeOutcome]
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_run(cls, user_id: str, result: RunResult) -> StoredResult:
        return cls(
            id=result.request_id,
            user_id=user_id,
            request_id=result.request_id,
            base_url=result.base_url,
            status=result.overall_verdict,
            results=list(result.outcomes),
            metadata={
                "endpoint_count": len(result.outcomes),
                "passed_count": result.passed_count,
                "failed_count": result.failed_count,
            },
        )

    def to_run_result(self) -> RunResult:
        return RunResult(
            request_id=self.request_id,
            base_url=self.base_url,
            overall_verdict=self.status,
            outcomes=list(self.results),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "request_id": self.request_id,
            "base_url": self.base_url,
            "status": self.status.value,
            "results": [outcome.to_dict() for outcome in self.results],
            "created_at": self.created_at.isoformat(),
            "metadata": dict(self.metadata),
        }
