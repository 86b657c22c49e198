# SPDX-FileCopyrightText: 2025 apiprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""In-process ResultStore."""

from __future__ import annotations

import asyncio
import logging

from ..models.result import RunResult
from .base import ResultStore
from .records import StoredResult

logger = logging.getLogger(__name__)


class InMemoryResultStore(ResultStore):
    def __init__(self) -> None:
        self._records: dict[str, list[StoredResult]] = {}
        self._lock = asyncio.Lock()

    async def store_result(self, user_id: str, result: RunResult) -> StoredResult:
        record = StoredResult.from_run(user_id, result)
        async with self._lock:
            self._records.setdefault(user_id, []).append(record)
        logger.info("Stored run result %s for user %s", record.id, user_id)
        return record

    async def get_result(self, user_id: str, request_id: str) -> StoredResult | None:
        async with self._lock:
            for record in self._records.get(user_id, []):
                if record.request_id == request_id:
                    return record
        return None

    async def list_results(self, user_id: str, limit: int = 0) -> list[StoredResult]:
        async with self._lock:
            records = list(reversed(self._records.get(user_id, [])))
        if limit > 0:
            return records[:limit]
        return records
