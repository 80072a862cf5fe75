"""Link integrity classification over a composed site."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from ..content.index import PageIndex
from ..content.pages import PAGE_SUFFIXES
from ..errors import BrokenLinksError
from ..logging import get_logger
from ..models import CrossReference, LinkStatus, Page
from ..urls import join_url, normalize_url


@dataclass(frozen=True)
class LinkIssue:
    """A cross reference that did not fully resolve."""

    reference: CrossReference
    status: LinkStatus
    detail: str

    def describe(self) -> str:
        location = str(self.reference.file) if self.reference.file else self.reference.source
        if self.reference.line:
            location = f"{location}:{self.reference.line}"
        return f"{location}: {self.detail}"


@dataclass
class LinkReport:
    """Outcome of checking every cross reference of a build."""

    resolved: int = 0
    broken_paths: List[LinkIssue] = field(default_factory=list)
    broken_anchors: List[LinkIssue] = field(default_factory=list)
    on_broken_links: str = "throw"
    on_broken_anchors: str = "warn"

    @property
    def total(self) -> int:
        return self.resolved + len(self.broken_paths) + len(self.broken_anchors)

    @property
    def fatal_issues(self) -> List[LinkIssue]:
        issues: List[LinkIssue] = []
        if self.on_broken_links == "throw":
            issues.extend(self.broken_paths)
        if self.on_broken_anchors == "throw":
            issues.extend(self.broken_anchors)
        return issues

    @property
    def warnings(self) -> List[LinkIssue]:
        issues: List[LinkIssue] = []
        if self.on_broken_links == "warn":
            issues.extend(self.broken_paths)
        if self.on_broken_anchors == "warn":
            issues.extend(self.broken_anchors)
        return issues

    def raise_for_policy(self) -> None:
        """Raise BrokenLinksError if any issue is fatal under the configured policy."""
        fatal = self.fatal_issues
        if not fatal:
            return
        lines = [issue.describe() for issue in fatal]
        message = f"{len(fatal)} broken link(s):\n  " + "\n  ".join(lines)
        raise BrokenLinksError(message, fatal)


class LinkChecker:
    """Classifies cross references as resolved, broken-path or broken-anchor."""

    def __init__(
        self,
        index: PageIndex,
        *,
        static_dirs: Sequence[Path] = (),
        on_broken_links: str = "throw",
        on_broken_anchors: str = "warn",
    ) -> None:
        self.index = index
        self.static_dirs = tuple(static_dirs)
        self.on_broken_links = on_broken_links
        self.on_broken_anchors = on_broken_anchors
        self.logger = get_logger("links")

    def check(self, references: Iterable[CrossReference]) -> LinkReport:
        report = LinkReport(
            on_broken_links=self.on_broken_links,
            on_broken_anchors=self.on_broken_anchors,
        )
        ordered = sorted(references, key=lambda ref: (ref.source, ref.line, ref.target))
        for reference in ordered:
            status, detail = self.classify(reference)
            if status is LinkStatus.RESOLVED:
                report.resolved += 1
            elif status is LinkStatus.BROKEN_PATH:
                report.broken_paths.append(LinkIssue(reference, status, detail))
            else:
                report.broken_anchors.append(LinkIssue(reference, status, detail))

        for issue in report.warnings:
            self.logger.warning("Broken %s: %s", issue.status.value, issue.describe())
        self.logger.info(
            "Checked %d links: %d resolved, %d broken paths, %d broken anchors",
            report.total,
            report.resolved,
            len(report.broken_paths),
            len(report.broken_anchors),
        )
        return report

    def check_pages(self, pages: Iterable[Page]) -> LinkReport:
        return self.check(ref for page in pages for ref in page.references)

    def classify(self, reference: CrossReference) -> Tuple[LinkStatus, str]:
        target = self._resolve_page(reference)
        if target is None:
            if self._is_asset(reference):
                return LinkStatus.RESOLVED, ""
            return LinkStatus.BROKEN_PATH, f"link target not found: {reference.target}"
        if reference.anchor and reference.anchor not in target.anchors:
            return (
                LinkStatus.BROKEN_ANCHOR,
                f"anchor '#{reference.anchor}' not found on {target.url}",
            )
        return LinkStatus.RESOLVED, ""

    # ------------------------------------------------------------------
    # Resolution helpers

    def _resolve_page(self, reference: CrossReference) -> Optional[Page]:
        path = reference.path
        if not path:
            return self.index.lookup(reference.source)
        if path.lower().endswith(PAGE_SUFFIXES):
            return self._resolve_markdown_file(reference)
        return self.index.lookup(self.resolve_url(reference))

    def _resolve_markdown_file(self, reference: CrossReference) -> Optional[Page]:
        if reference.file is None:
            return None
        if reference.path.startswith("/"):
            source_page = self.index.lookup(reference.source)
            route = self.index.table.match(source_page.url) if source_page else None
            if route is None:
                return None
            candidate = route.root / reference.path.lstrip("/")
        else:
            candidate = reference.file.parent / reference.path
        return self.index.lookup_file(candidate)

    def resolve_url(self, reference: CrossReference) -> str:
        """Absolute URL path a reference points to within the channel."""
        if reference.path.startswith("/"):
            return join_url(self.index.table.channel.base_prefix, reference.path)
        # Browser semantics: the last segment of the linking URL is replaced,
        # except on index pages, which are served as their directory.
        source_page = self.index.lookup(reference.source)
        if source_page is not None and source_page.is_index:
            base_dir = reference.source
        else:
            base_dir = posixpath.dirname(reference.source.rstrip("/")) or "/"
        return normalize_url(posixpath.join(base_dir, reference.path))

    def _is_asset(self, reference: CrossReference) -> bool:
        path = reference.path
        if not path or path.lower().endswith(PAGE_SUFFIXES):
            return False
        if path.startswith("/"):
            relative = path.lstrip("/")
            return any((static / relative).is_file() for static in self.static_dirs)
        if reference.file is not None:
            return (reference.file.parent / path).is_file()
        return False


__all__ = ["LinkChecker", "LinkIssue", "LinkReport"]
