# SPDX-FileCopyrightText: 2025 apiprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Run result persistence boundary."""

from .base import ResultStore
from .memory import InMemoryResultStore
from .recorder import ResultRecorder
from .records import StoredResult

__all__ = ["InMemoryResultStore", "ResultRecorder", "ResultStore", "StoredResult"]
