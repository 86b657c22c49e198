# SPDX-FileCopyrightText: 2025 apiprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Concurrent endpoint probing."""

from .engine import ProbeDispatcher, dispatch

__all__ = ["ProbeDispatcher", "dispatch"]
