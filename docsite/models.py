"""Core data models shared across docsite components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple


class SidebarStrategy(str, Enum):
    """How navigation is produced for a documentation source."""

    AUTO = "auto-from-filesystem"
    EXPLICIT = "explicit-file"


class LinkStatus(str, Enum):
    """Classification of a single cross reference."""

    RESOLVED = "resolved"
    BROKEN_PATH = "broken-path"
    BROKEN_ANCHOR = "broken-anchor"


@dataclass(frozen=True)
class Channel:
    """The release track being built."""

    name: str
    base_prefix: str
    edit_branch: str = "main"


@dataclass(frozen=True)
class DocSource:
    """One independently maintained documentation tree."""

    namespace: str
    root: Path
    route_prefix: str
    sidebar: SidebarStrategy = SidebarStrategy.AUTO
    sidebar_path: Optional[Path] = None
    edit_url: Optional[str] = None

    def format_edit_url(
        self, doc_path: str, *, branch: str, version: Optional[str] = None
    ) -> Optional[str]:
        """Expand the edit link template for a page, or return None when unset."""
        if not self.edit_url:
            return None
        return self.edit_url.format(
            branch=branch,
            doc_path=doc_path,
            version=version or "current",
        )


@dataclass(frozen=True)
class VersionedDocSource(DocSource):
    """A documentation source that also publishes released snapshots."""

    versions_root: Optional[Path] = None
    sidebars_root: Optional[Path] = None


@dataclass(frozen=True)
class Version:
    """A single routable snapshot of a source."""

    label: str
    root: Path
    current: bool = False
    sidebar_path: Optional[Path] = None


@dataclass(frozen=True)
class RouteCandidate:
    """A (source, version) pair waiting to be mounted under a channel."""

    source: DocSource
    version: Version


@dataclass(frozen=True)
class Route:
    """Resolved mapping from a URL prefix to the content that serves it."""

    prefix: str
    root: Path
    namespace: str
    version: Optional[str] = None
    current: bool = True
    sidebar: SidebarStrategy = SidebarStrategy.AUTO
    sidebar_path: Optional[Path] = None

    @property
    def segments(self) -> Tuple[str, ...]:
        return tuple(part for part in self.prefix.split("/") if part)


@dataclass(frozen=True)
class Heading:
    """A heading found in a page together with its anchor id."""

    level: int
    title: str
    anchor: str


@dataclass(frozen=True)
class CrossReference:
    """An internal link found in a content page."""

    source: str
    target: str
    path: str
    anchor: Optional[str] = None
    line: int = 0
    file: Optional[Path] = None


@dataclass(frozen=True)
class Page:
    """A markdown page mounted under a route."""

    doc_id: str
    url: str
    path: Path
    namespace: str
    version: Optional[str] = None
    title: Optional[str] = None
    sidebar_position: Optional[float] = None
    sidebar_label: Optional[str] = None
    headings: Tuple[Heading, ...] = ()
    references: Tuple[CrossReference, ...] = ()
    edit_url: Optional[str] = None
    anchors: frozenset[str] = field(default_factory=frozenset)
    is_index: bool = False


__all__ = [
    "Channel",
    "CrossReference",
    "DocSource",
    "Heading",
    "LinkStatus",
    "Page",
    "Route",
    "RouteCandidate",
    "SidebarStrategy",
    "Version",
    "VersionedDocSource",
]
