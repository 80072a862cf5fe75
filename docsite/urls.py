"""URL path helpers shared by the registry, composer and link checker."""

from __future__ import annotations

import posixpath
import re
from typing import Sequence, Tuple

_SEGMENT_PATTERN = re.compile(r"^[A-Za-z0-9._~-]+$")


def split_segments(path: str) -> Tuple[str, ...]:
    return tuple(part for part in path.split("/") if part)


def normalize_route_prefix(value: str) -> str:
    """Return ``/a/b`` for ``a/b``, ``/a/b/`` and friends; ``/`` for the site root.

    Raises ValueError when a segment is empty-relative or has characters that
    cannot appear in a route.
    """
    segments = split_segments(value.strip())
    for segment in segments:
        if segment in (".", ".."):
            raise ValueError(f"relative segment '{segment}' in route prefix {value!r}")
        if not _SEGMENT_PATTERN.match(segment):
            raise ValueError(f"invalid segment '{segment}' in route prefix {value!r}")
    return join_segments(segments)


def join_segments(segments: Sequence[str]) -> str:
    return "/" + "/".join(segments) if segments else "/"


def join_url(base: str, *parts: str) -> str:
    segments = list(split_segments(base))
    for part in parts:
        segments.extend(split_segments(part))
    return join_segments(segments)


def is_segment_prefix(prefix: str, path: str) -> bool:
    """True when every segment of ``prefix`` leads ``path`` (``/foo`` vs ``/foobar`` is False)."""
    prefix_segments = split_segments(prefix)
    path_segments = split_segments(path)
    if len(prefix_segments) > len(path_segments):
        return False
    return path_segments[: len(prefix_segments)] == prefix_segments


def normalize_url(path: str) -> str:
    """Collapse ``.``/``..``, duplicate slashes and trailing slashes of an absolute URL path."""
    if not path.startswith("/"):
        path = "/" + path
    cleaned = posixpath.normpath(path)
    # normpath keeps a leading double slash
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return "/" if cleaned in ("/", ".") else cleaned.rstrip("/")


__all__ = [
    "is_segment_prefix",
    "join_segments",
    "join_url",
    "normalize_route_prefix",
    "normalize_url",
    "split_segments",
]
