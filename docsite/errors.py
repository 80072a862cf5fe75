"""Error types raised while resolving a documentation site."""

from __future__ import annotations

from typing import Sequence, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from docsite.links.checker import LinkIssue


class DocsiteError(RuntimeError):
    """Base class for fatal site resolution failures."""


class ConfigError(DocsiteError):
    """Raised when the site configuration cannot be loaded or is invalid."""


class RouteCollisionError(DocsiteError):
    """Raised when two sources claim overlapping URL space."""

    def __init__(self, message: str, namespaces: Sequence[str]) -> None:
        super().__init__(message)
        self.namespaces = tuple(namespaces)


class BrokenLinksError(DocsiteError):
    """Raised when the link policy treats discovered issues as fatal."""

    def __init__(self, message: str, issues: Sequence["LinkIssue"]) -> None:
        super().__init__(message)
        self.issues = list(issues)


class VendorError(DocsiteError):
    """Raised when vendored documentation cannot be fetched."""


__all__ = [
    "BrokenLinksError",
    "ConfigError",
    "DocsiteError",
    "RouteCollisionError",
    "VendorError",
]
