"""End-to-end resolution of a documentation site configuration."""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .channel import resolve_channel
from .config import SiteConfig, load_config
from .content.index import PageIndex, build_page_index
from .content.pages import scan_route
from .links.checker import LinkChecker, LinkReport
from .logging import get_logger
from .models import Channel, Page, Route
from .registry import SourceRegistry
from .routes import RouteTable, compose_routes
from .sidebars import build_sidebar
from .versions import VersionMaterializer


@dataclass(frozen=True)
class SiteBuild:
    """Everything resolved for one channel, ready to be serialized."""

    config: SiteConfig
    channel: Channel
    routes: RouteTable
    pages: PageIndex
    sidebars: Mapping[str, Dict[str, List[Dict[str, Any]]]]
    links: Optional[LinkReport]

    def latest_versions(self) -> Dict[str, Optional[str]]:
        """Highest released version label per namespace."""
        latest: Dict[str, Optional[str]] = {}
        for route in self.routes:
            latest.setdefault(route.namespace, None)
            if not route.current and latest[route.namespace] is None:
                latest[route.namespace] = route.version
        return latest


class SiteResolver:
    """Runs channel -> registry -> versions -> routes -> content -> links.

    Every stage raises on fatal problems, so a returned :class:`SiteBuild` is
    always complete and consistent.
    """

    def __init__(self, max_workers: Optional[int] = None) -> None:
        self.max_workers = max_workers
        self.logger = get_logger("pipeline")

    def resolve(
        self,
        path: str | Path,
        environ: Optional[Mapping[str, str]] = None,
        *,
        check_links: bool = True,
    ) -> SiteBuild:
        config = load_config(Path(path))
        self.logger.info("Resolving site at %s", config.root)
        channel = resolve_channel(os.environ if environ is None else environ, config.channels)
        workers = self.max_workers or config.max_workers

        registry = SourceRegistry.from_config(config)
        registry.validate()
        self.logger.debug("Registered %d sources", len(registry))

        candidates = VersionMaterializer(max_workers=workers).candidates(registry)
        table = compose_routes(channel, candidates)
        self.logger.info("Composed %d routes", len(table))

        scanned = self._scan(table, registry, channel, workers)
        index = build_page_index(table, scanned)
        self.logger.info("Indexed %d pages", len(index))

        sidebars = {route.prefix: build_sidebar(route, index) for route in table}

        report: Optional[LinkReport] = None
        if check_links:
            checker = LinkChecker(
                index,
                static_dirs=config.static_dirs,
                on_broken_links=config.links.on_broken_links,
                on_broken_anchors=config.links.on_broken_anchors,
            )
            report = checker.check_pages(index)
            report.raise_for_policy()

        return SiteBuild(
            config=config,
            channel=channel,
            routes=table,
            pages=index,
            sidebars=sidebars,
            links=report,
        )

    def _scan(
        self,
        table: RouteTable,
        registry: SourceRegistry,
        channel: Channel,
        workers: Optional[int],
    ) -> List[Tuple[Route, Tuple[Page, ...]]]:
        def _scan_one(route: Route) -> Tuple[Page, ...]:
            return scan_route(
                route,
                source=registry.get(route.namespace),
                branch=channel.edit_branch,
            )

        routes = list(table)
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(_scan_one, routes))
        return list(zip(routes, results))


__all__ = ["SiteBuild", "SiteResolver"]
