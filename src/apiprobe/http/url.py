# SPDX-FileCopyrightText: 2025 apiprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""URL helpers shared across probes."""

from __future__ import annotations

from urllib.parse import urlsplit, urlunsplit


def join_url(base_url: str, path: str) -> str:
    """
    Join an endpoint path onto a base URL with path-join semantics.

    Unlike `urljoin()`, the base path is always kept, so a base of
    `http://host/api` and a path of `/users` yields `http://host/api/users`.
    Exactly one slash separates the two parts; query and fragment of the base
    are preserved.

      join_url("http://host", "/home")       -> http://host/home
      join_url("http://host/v1/", "healthz") -> http://host/v1/healthz
    """
    raw_path = str(path or "")
    parts = urlsplit(str(base_url or ""))
    if not raw_path:
        return urlunsplit(parts)
    joined = parts.path.rstrip("/") + "/" + raw_path.lstrip("/")
    return urlunsplit(parts._replace(path=joined))


__all__ = ["join_url"]
