"""Discovery of markdown pages under a composed route."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Iterator, List, Optional, Tuple

from ..errors import ConfigError
from ..logging import get_logger
from ..models import DocSource, Page, Route
from ..urls import join_url, normalize_url
from .frontmatter import split_front_matter
from .headings import extract_headings
from .references import extract_references

PAGE_SUFFIXES = (".md", ".mdx")
_INDEX_NAMES = {"index", "readme"}
_NUMBER_PREFIX = re.compile(r"^(\d+)\s*[-_.]+\s*(?=[^\d\-_.\s])")

logger = get_logger("content")


def strip_number_prefix(name: str) -> str:
    """``01-intro`` -> ``intro``; names that are only a number are kept."""
    return _NUMBER_PREFIX.sub("", name, count=1)


def number_prefix(name: str) -> Optional[int]:
    match = _NUMBER_PREFIX.match(name)
    return int(match.group(1)) if match else None


def is_index_file(relative: Path) -> bool:
    """True for ``index``/``README`` pages and for ``<dir>/<dir>.md`` category pages."""
    stem = strip_number_prefix(relative.stem).lower()
    if stem in _INDEX_NAMES:
        return True
    parent = relative.parent.name
    return bool(parent) and stem == strip_number_prefix(parent).lower()


def iter_page_files(root: Path) -> Iterator[Path]:
    """Yield page files in a stable order, skipping ``_partials`` and dot entries."""
    for path in sorted(root.rglob("*")):
        if not path.is_file() or path.suffix.lower() not in PAGE_SUFFIXES:
            continue
        relative = path.relative_to(root)
        if any(part.startswith(("_", ".")) for part in relative.parts):
            continue
        yield path


def scan_route(
    route: Route,
    *,
    source: Optional[DocSource] = None,
    branch: str = "main",
) -> Tuple[Page, ...]:
    """Read every page below ``route.root`` and return it with its composed URL."""
    pages: List[Page] = []
    for path in iter_page_files(route.root):
        pages.append(_read_page(route, path, source=source, branch=branch))
    logger.debug("Scanned %d pages for %s", len(pages), route.prefix)
    return tuple(pages)


def _read_page(route: Route, path: Path, *, source: Optional[DocSource], branch: str) -> Page:
    relative = path.relative_to(route.root)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read {path}: {exc}") from exc
    meta, body, offset = split_front_matter(text, path=path)

    dirs = [strip_number_prefix(part) for part in relative.parts[:-1]]
    stem = strip_number_prefix(path.stem)
    is_index = is_index_file(relative)

    explicit_id = _meta_str(meta, "id")
    doc_id = "/".join(dirs + [explicit_id or stem])

    slug = _meta_str(meta, "slug")
    directory_url = False
    if slug is not None:
        if slug.startswith("/"):
            url = join_url(route.prefix, slug)
        else:
            url = join_url(route.prefix, *dirs, slug)
    elif is_index and explicit_id is None:
        url = join_url(route.prefix, *dirs)
        directory_url = True
    else:
        url = join_url(route.prefix, *dirs, explicit_id or stem)
    url = normalize_url(url)

    headings, anchors = extract_headings(body)
    title = _meta_str(meta, "title")
    if title is None:
        title = next((heading.title for heading in headings if heading.level == 1), None)

    references = extract_references(body, source=url, file=path, line_offset=offset)
    edit_url = None
    if source is not None:
        edit_url = source.format_edit_url(relative.as_posix(), branch=branch, version=route.version)

    return Page(
        doc_id=doc_id,
        url=url,
        path=path,
        namespace=route.namespace,
        version=route.version,
        title=title,
        sidebar_position=_meta_number(meta, "sidebar_position"),
        sidebar_label=_meta_str(meta, "sidebar_label"),
        headings=tuple(headings),
        references=tuple(references),
        edit_url=edit_url,
        anchors=frozenset(anchors),
        is_index=directory_url,
    )


def _meta_str(meta: dict[str, Any], key: str) -> Optional[str]:
    value = meta.get(key)
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (str, int, float)):
        text = str(value).strip()
        return text or None
    return None


def _meta_number(meta: dict[str, Any], key: str) -> Optional[float]:
    value = meta.get(key)
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


__all__ = [
    "PAGE_SUFFIXES",
    "is_index_file",
    "iter_page_files",
    "number_prefix",
    "scan_route",
    "strip_number_prefix",
]
