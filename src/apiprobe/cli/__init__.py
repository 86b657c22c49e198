# SPDX-FileCopyrightText: 2025 apiprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Command-line entrypoints."""
