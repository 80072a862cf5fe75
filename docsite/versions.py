"""Enumeration of released documentation versions."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from packaging.version import InvalidVersion, Version as ParsedVersion

from .logging import get_logger
from .models import DocSource, RouteCandidate, Version, VersionedDocSource

VERSION_DIR_PREFIX = "version-"
CURRENT_LABEL = "current"
_SIDEBAR_SUFFIXES = (".json", ".yml", ".yaml")

logger = get_logger("versions")


def parse_version_label(name: str) -> Optional[Tuple[str, ParsedVersion]]:
    """Return ``(label, parsed)`` for a ``version-<label>`` directory name, else None."""
    if not name.startswith(VERSION_DIR_PREFIX):
        return None
    label = name[len(VERSION_DIR_PREFIX):]
    if not label:
        return None
    try:
        return label, ParsedVersion(label)
    except InvalidVersion:
        return None


def materialize_versions(source: DocSource) -> Tuple[Version, ...]:
    """Return released versions (newest first) followed by the current snapshot.

    The result depends only on the names present on disk, never on the order
    in which the filesystem lists them.
    """
    current = Version(
        label=CURRENT_LABEL,
        root=source.root,
        current=True,
        sidebar_path=source.sidebar_path,
    )
    if not isinstance(source, VersionedDocSource) or source.versions_root is None:
        return (current,)

    versions_root = source.versions_root
    if not versions_root.is_dir():
        logger.debug("No released versions for %s (%s missing)", source.namespace, versions_root)
        return (current,)

    found: List[Tuple[ParsedVersion, str, Path]] = []
    for entry in versions_root.iterdir():
        if not entry.is_dir():
            continue
        parsed = parse_version_label(entry.name)
        if parsed is None:
            logger.debug("Skipping %s: not a version directory", entry)
            continue
        label, version = parsed
        found.append((version, label, entry))

    found.sort(key=lambda item: (item[0], item[1]), reverse=True)
    released = tuple(
        Version(
            label=label,
            root=path,
            current=False,
            sidebar_path=_versioned_sidebar(source, label),
        )
        for _, label, path in found
    )
    logger.debug(
        "Materialized %d released versions for %s", len(released), source.namespace
    )
    return released + (current,)


def latest_release(versions: Sequence[Version]) -> Optional[Version]:
    """Highest released version, or None when only current content exists."""
    for version in versions:
        if not version.current:
            return version
    return None


def _versioned_sidebar(source: VersionedDocSource, label: str) -> Optional[Path]:
    if source.sidebars_root is None:
        return None
    for suffix in _SIDEBAR_SUFFIXES:
        candidate = source.sidebars_root / f"{VERSION_DIR_PREFIX}{label}-sidebars{suffix}"
        if candidate.is_file():
            return candidate
    return None


class VersionMaterializer:
    """Materializes route candidates for many sources, optionally in parallel."""

    def __init__(self, max_workers: Optional[int] = None) -> None:
        self.max_workers = max_workers

    def candidates(self, sources: Iterable[DocSource]) -> Tuple[RouteCandidate, ...]:
        ordered = list(sources)
        if not ordered:
            return ()
        # map() yields in declaration order regardless of completion order.
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            per_source = list(pool.map(materialize_versions, ordered))
        return tuple(
            RouteCandidate(source=source, version=version)
            for source, versions in zip(ordered, per_source)
            for version in versions
        )


__all__ = [
    "CURRENT_LABEL",
    "VERSION_DIR_PREFIX",
    "VersionMaterializer",
    "latest_release",
    "materialize_versions",
    "parse_version_label",
]
