"""Statically declared table of documentation sources."""

from __future__ import annotations

import string
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from .config import SiteConfig, SourceConfig
from .errors import ConfigError
from .logging import get_logger
from .models import DocSource, SidebarStrategy, VersionedDocSource
from .urls import normalize_route_prefix

EDIT_URL_FIELDS = ("branch", "doc_path", "version")


class SourceRegistry:
    """Ordered collection of sources keyed by unique namespace."""

    def __init__(self, sources: Iterable[DocSource] = ()) -> None:
        self._sources: List[DocSource] = []
        self._by_namespace: Dict[str, DocSource] = {}
        self.logger = get_logger("registry")
        for source in sources:
            self.register(source)

    @classmethod
    def from_config(cls, config: SiteConfig) -> "SourceRegistry":
        """Build a registry from the ``sources:`` list, preserving declaration order."""
        return cls(build_source(entry) for entry in config.sources)

    def register(self, source: DocSource) -> DocSource:
        """Add a source, rejecting namespaces that are already taken."""
        if source.namespace in self._by_namespace:
            raise ConfigError(f"Duplicate source namespace '{source.namespace}'")
        try:
            prefix = normalize_route_prefix(source.route_prefix)
        except ValueError as exc:
            raise ConfigError(f"Source '{source.namespace}' has a malformed route prefix: {exc}") from exc
        if prefix != source.route_prefix:
            raise ConfigError(
                f"Source '{source.namespace}' route prefix {source.route_prefix!r} "
                f"is not normalized (expected {prefix!r})"
            )
        _check_edit_url(source.namespace, source.edit_url)
        self._sources.append(source)
        self._by_namespace[source.namespace] = source
        return source

    def validate(self) -> None:
        """Check that every declared filesystem input exists."""
        for source in self._sources:
            if not source.root.is_dir():
                raise ConfigError(
                    f"Source '{source.namespace}' root does not exist: {source.root}"
                )
            if source.sidebar is SidebarStrategy.EXPLICIT:
                if source.sidebar_path is None:
                    raise ConfigError(
                        f"Source '{source.namespace}' uses an explicit sidebar but has no sidebar_path"
                    )
                if not source.sidebar_path.is_file():
                    raise ConfigError(
                        f"Source '{source.namespace}' sidebar file does not exist: {source.sidebar_path}"
                    )
            if isinstance(source, VersionedDocSource) and source.versions_root is not None:
                if source.versions_root.exists() and not source.versions_root.is_dir():
                    raise ConfigError(
                        f"Source '{source.namespace}' versions path is not a directory: {source.versions_root}"
                    )
        self.logger.debug("Validated %d sources", len(self._sources))

    def get(self, namespace: str) -> DocSource:
        try:
            return self._by_namespace[namespace]
        except KeyError:
            raise ConfigError(f"Unknown source namespace '{namespace}'") from None

    @property
    def sources(self) -> Sequence[DocSource]:
        return tuple(self._sources)

    def __iter__(self) -> Iterator[DocSource]:
        return iter(tuple(self._sources))

    def __len__(self) -> int:
        return len(self._sources)

    def __contains__(self, namespace: object) -> bool:
        return namespace in self._by_namespace


def _check_edit_url(namespace: str, template: Optional[str]) -> None:
    """Reject edit link templates that cannot be expanded for every page."""
    if not template:
        return
    try:
        fields = [name for _, name, _, _ in string.Formatter().parse(template) if name is not None]
    except ValueError as exc:
        raise ConfigError(f"Source '{namespace}' has a malformed edit_url: {exc}") from exc
    unknown = sorted({name for name in fields if name not in EDIT_URL_FIELDS})
    if unknown:
        names = ", ".join(repr(name) for name in unknown)
        allowed = ", ".join("{" + name + "}" for name in EDIT_URL_FIELDS)
        raise ConfigError(
            f"Source '{namespace}' edit_url uses unknown placeholder(s) {names} (expected {allowed})"
        )


def build_source(entry: SourceConfig) -> DocSource:
    """Turn a config entry into a (possibly versioned) source descriptor."""
    try:
        strategy = SidebarStrategy(entry.sidebar)
    except ValueError:
        allowed = ", ".join(item.value for item in SidebarStrategy)
        raise ConfigError(
            f"Source '{entry.namespace}' has unknown sidebar strategy {entry.sidebar!r} (expected {allowed})"
        ) from None
    try:
        prefix = normalize_route_prefix(entry.route)
    except ValueError as exc:
        raise ConfigError(f"Source '{entry.namespace}' has a malformed route prefix: {exc}") from exc

    common = dict(
        namespace=entry.namespace,
        root=entry.path,
        route_prefix=prefix,
        sidebar=strategy,
        sidebar_path=entry.sidebar_path,
        edit_url=entry.edit_url,
    )
    if entry.versions is not None:
        return VersionedDocSource(
            versions_root=entry.versions.path,
            sidebars_root=entry.versions.sidebars_path,
            **common,
        )
    return DocSource(**common)


__all__ = ["EDIT_URL_FIELDS", "SourceRegistry", "build_source"]
