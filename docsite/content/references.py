"""Cross reference extraction from markdown bodies."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional, Tuple

from .headings import iter_content_lines
from ..models import CrossReference

_INLINE_LINK = re.compile(r"(!?)\[([^\]]*)\]\(([^)]*)\)")
_REFERENCE_DEF = re.compile(r"^\s{0,3}\[([^\]^][^\]]*)\]:\s*(\S+)")
_CODE_SPAN = re.compile(r"`[^`]*`")
_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")


def is_external(target: str) -> bool:
    return target.startswith("//") or bool(_SCHEME.match(target))


def split_target(target: str) -> Tuple[str, Optional[str]]:
    """Split ``path?query#anchor`` into path and anchor (query is dropped)."""
    path, _, anchor = target.partition("#")
    path = path.split("?", 1)[0]
    return path, anchor or None


def _clean_target(raw: str) -> str:
    target = raw.strip()
    if target.startswith("<") and ">" in target:
        return target[1: target.index(">")].strip()
    # Drop an optional link title: [text](path "title")
    return target.split()[0] if target else ""


def extract_references(
    body: str,
    *,
    source: str,
    file: Path | None = None,
    line_offset: int = 1,
) -> List[CrossReference]:
    """Return internal links found outside fenced code and inline code spans."""
    references: List[CrossReference] = []
    for index, line in iter_content_lines(body.splitlines()):
        visible = _CODE_SPAN.sub("", line)
        targets: List[str] = []
        for match in _INLINE_LINK.finditer(visible):
            if match.group(1):
                continue
            targets.append(match.group(3))
        definition = _REFERENCE_DEF.match(visible)
        if definition:
            targets.append(definition.group(2))

        for raw in targets:
            target = _clean_target(raw)
            if not target or is_external(target):
                continue
            path, anchor = split_target(target)
            references.append(
                CrossReference(
                    source=source,
                    target=target,
                    path=path,
                    anchor=anchor,
                    line=index + line_offset,
                    file=file,
                )
            )
    return references


__all__ = ["extract_references", "is_external", "split_target"]
