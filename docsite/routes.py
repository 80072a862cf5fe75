"""Composition of source routes into one channel URL space."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from .errors import RouteCollisionError
from .logging import get_logger
from .models import Channel, Route, RouteCandidate
from .urls import is_segment_prefix, join_url, normalize_url, split_segments

logger = get_logger("routes")


@dataclass(frozen=True)
class RouteTable:
    """Immutable, ordered set of composed routes for one channel."""

    channel: Channel
    routes: Tuple[Route, ...]

    def __iter__(self) -> Iterator[Route]:
        return iter(self.routes)

    def __len__(self) -> int:
        return len(self.routes)

    @property
    def prefixes(self) -> Tuple[str, ...]:
        return tuple(route.prefix for route in self.routes)

    def match(self, url: str) -> Optional[Route]:
        """Return the most specific route serving ``url``."""
        target = normalize_url(url)
        best: Optional[Route] = None
        for route in self.routes:
            if is_segment_prefix(route.prefix, target):
                if best is None or len(route.segments) > len(best.segments):
                    best = route
        return best

    def for_namespace(self, namespace: str) -> Tuple[Route, ...]:
        return tuple(route for route in self.routes if route.namespace == namespace)


def compose_routes(channel: Channel, candidates: Iterable[RouteCandidate]) -> RouteTable:
    """Mount every candidate under the channel base and reject overlapping prefixes."""
    routes: List[Route] = []
    for candidate in candidates:
        source = candidate.source
        version = candidate.version
        prefix = join_url(channel.base_prefix, source.route_prefix)
        if not version.current:
            prefix = join_url(prefix, version.label)
        routes.append(
            Route(
                prefix=prefix,
                root=version.root,
                namespace=source.namespace,
                version=None if version.current else version.label,
                current=version.current,
                sidebar=source.sidebar,
                sidebar_path=version.sidebar_path,
            )
        )

    check_disjoint(channel, routes)
    logger.debug("Composed %d routes under %s", len(routes), channel.base_prefix)
    return RouteTable(channel=channel, routes=tuple(routes))


def check_disjoint(channel: Channel, routes: Sequence[Route]) -> None:
    """Raise RouteCollisionError for any pair of segment-overlapping prefixes."""
    base = normalize_url(channel.base_prefix)
    by_prefix: Dict[str, Route] = {}
    for route in routes:
        existing = by_prefix.get(route.prefix)
        if existing is not None:
            raise _collision(existing, route)
        by_prefix[route.prefix] = route

    for index, first in enumerate(routes):
        for second in routes[index + 1:]:
            outer, inner = _order_by_depth(first, second)
            if not is_segment_prefix(outer.prefix, inner.prefix):
                continue
            if outer.prefix == base:
                continue
            if _is_own_version(outer, inner):
                continue
            raise _collision(outer, inner)


def _order_by_depth(first: Route, second: Route) -> Tuple[Route, Route]:
    if len(split_segments(first.prefix)) <= len(split_segments(second.prefix)):
        return first, second
    return second, first


def _is_own_version(outer: Route, inner: Route) -> bool:
    return (
        outer.namespace == inner.namespace
        and outer.current
        and not inner.current
        and inner.prefix == join_url(outer.prefix, inner.version or "")
    )


def _collision(first: Route, second: Route) -> RouteCollisionError:
    message = (
        f"Route collision between '{first.namespace}' ({first.prefix}) "
        f"and '{second.namespace}' ({second.prefix})"
    )
    return RouteCollisionError(message, (first.namespace, second.namespace))


__all__ = ["RouteTable", "check_disjoint", "compose_routes"]
