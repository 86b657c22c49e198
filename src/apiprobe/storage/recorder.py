# SPDX-FileCopyrightText: 2025 apiprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Best-effort, fire-and-forget persistence of run results."""

from __future__ import annotations

import asyncio
import logging

from ..models.result import RunResult
from .base import ResultStore

logger = logging.getLogger(__name__)


class ResultRecorder:
    """
    Schedule store writes in the background so callers never wait on storage.

    A failed write is logged and dropped; it never reaches the caller that
    produced the result. `drain()` waits for outstanding writes.
    """

    def __init__(self, store: ResultStore):
        self.store = store
        self._pending: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def record(self, user_id: str, result: RunResult) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(self._write(user_id, result))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _write(self, user_id: str, result: RunResult) -> None:
        try:
            await self.store.store_result(user_id, result)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Failed to store run result %s for user %s: %s", result.request_id, user_id, exc)

    async def drain(self) -> None:
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
