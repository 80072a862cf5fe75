"""Heading discovery and anchor slugs."""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Set, Tuple

from ..models import Heading

_HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.*?)\s*#*\s*$")
_EXPLICIT_ID = re.compile(r"\s*\{#([^}\s]+)\}\s*$")
_HTML_ANCHOR = re.compile(r"<a\s+[^>]*(?:id|name)\s*=\s*[\"']([^\"']+)[\"']", re.IGNORECASE)
_INLINE_MARKUP = re.compile(r"`([^`]*)`|\*\*([^*]*)\*\*|__([^_]*)__|\[([^\]]*)\]\([^)]*\)")
_STRIP_PATTERN = re.compile(r"[^\w\- ]", re.UNICODE)


class Slugger:
    """Produces GitHub-style heading slugs, suffixing repeats with ``-1``, ``-2``."""

    def __init__(self) -> None:
        self._seen: Dict[str, int] = {}

    def slug(self, title: str) -> str:
        base = slugify(title)
        count = self._seen.get(base)
        if count is None:
            self._seen[base] = 0
            return base
        count += 1
        self._seen[base] = count
        candidate = f"{base}-{count}"
        self._seen.setdefault(candidate, 0)
        return candidate


def slugify(title: str) -> str:
    slug = title.strip().lower()
    slug = _STRIP_PATTERN.sub("", slug)
    return slug.replace(" ", "-")


def _plain_text(title: str) -> str:
    def _replace(match: re.Match[str]) -> str:
        return next(group for group in match.groups() if group is not None)

    return _INLINE_MARKUP.sub(_replace, title)


def iter_content_lines(lines: Iterable[str]) -> Iterable[Tuple[int, str]]:
    """Yield ``(index, line)`` for lines outside fenced code blocks."""
    fence: str | None = None
    for index, line in enumerate(lines):
        stripped = line.strip()
        if stripped.startswith(("```", "~~~")):
            marker = stripped[:3]
            if fence is None:
                fence = marker
                continue
            if fence == marker:
                fence = None
                continue
        if fence is None:
            yield index, line


def extract_headings(body: str) -> Tuple[List[Heading], Set[str]]:
    """Return headings plus every anchor id the page defines."""
    headings: List[Heading] = []
    anchors: Set[str] = set()
    slugger = Slugger()
    for _, line in iter_content_lines(body.splitlines()):
        for match in _HTML_ANCHOR.finditer(line):
            anchors.add(match.group(1))
        match = _HEADING_PATTERN.match(line.strip())
        if not match:
            continue
        level = len(match.group(1))
        title = match.group(2)
        explicit = _EXPLICIT_ID.search(title)
        if explicit:
            anchor = explicit.group(1)
            title = title[: explicit.start()].rstrip()
        else:
            anchor = slugger.slug(_plain_text(title))
        headings.append(Heading(level=level, title=_plain_text(title), anchor=anchor))
        anchors.add(anchor)
    return headings, anchors


__all__ = ["Slugger", "extract_headings", "iter_content_lines", "slugify"]
