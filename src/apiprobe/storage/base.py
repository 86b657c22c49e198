# SPDX-FileCopyrightText: 2025 apiprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Result store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..models.result import RunResult
from .records import StoredResult


class ResultStore(ABC):
    """Persistence boundary for run results, keyed by user."""

    @abstractmethod
    async def store_result(self, user_id: str, result: RunResult) -> StoredResult:
        """Persist a run result for `user_id` and return the stored record."""

    @abstractmethod
    async def get_result(self, user_id: str, request_id: str) -> StoredResult | None:
        """Return the user's record for `request_id`, or None."""

    @abstractmethod
    async def list_results(self, user_id: str, limit: int = 0) -> list[StoredResult]:
        """Return the user's records, newest first; `limit <= 0` returns all."""

    async def aclose(self) -> None:  # noqa: B027 - optional hook
        return None
