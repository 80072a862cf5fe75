"""URL and file lookup over every page of a composed site."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Iterator, Mapping, Optional, Sequence, Tuple

from ..errors import RouteCollisionError
from ..models import Page, Route
from ..routes import RouteTable
from ..urls import normalize_url


class PageIndex:
    """Maps normalized URLs and source files to pages.

    Building the index is where content-level shadowing surfaces: two pages
    resolving to one URL, or a page whose URL falls inside a more specific
    route owned by someone else.
    """

    def __init__(self, table: RouteTable, pages_by_route: Mapping[Route, Sequence[Page]]) -> None:
        self.table = table
        self._by_url: Dict[str, Tuple[Route, Page]] = {}
        self._by_file: Dict[Path, Page] = {}
        self._by_doc_id: Dict[Tuple[str, Optional[str], str], Page] = {}
        for route in table:
            for page in pages_by_route.get(route, ()):
                self._add(route, page)

    def _add(self, route: Route, page: Page) -> None:
        owner = self.table.match(page.url)
        if owner is not None and owner != route:
            raise RouteCollisionError(
                f"Page {page.path} of '{route.namespace}' resolves to {page.url}, "
                f"which is inside '{owner.namespace}' ({owner.prefix})",
                (route.namespace, owner.namespace),
            )
        existing = self._by_url.get(page.url)
        if existing is not None:
            other_route, other = existing
            raise RouteCollisionError(
                f"Pages {other.path} ('{other_route.namespace}') and {page.path} "
                f"('{route.namespace}') both resolve to {page.url}",
                (other_route.namespace, route.namespace),
            )
        self._by_url[page.url] = (route, page)
        self._by_file[page.path.resolve()] = page
        self._by_doc_id[(route.namespace, route.version, page.doc_id)] = page

    def lookup(self, url: str) -> Optional[Page]:
        entry = self._by_url.get(normalize_url(url))
        return entry[1] if entry else None

    def lookup_file(self, path: Path) -> Optional[Page]:
        return self._by_file.get(path.resolve())

    def lookup_doc(self, namespace: str, version: Optional[str], doc_id: str) -> Optional[Page]:
        return self._by_doc_id.get((namespace, version, doc_id))

    def pages_for(self, route: Route) -> Tuple[Page, ...]:
        return tuple(page for owner, page in self._by_url.values() if owner == route)

    def __iter__(self) -> Iterator[Page]:
        return (page for _, page in self._by_url.values())

    def __len__(self) -> int:
        return len(self._by_url)


def build_page_index(table: RouteTable, scanned: Iterable[Tuple[Route, Sequence[Page]]]) -> PageIndex:
    return PageIndex(table, dict(scanned))


__all__ = ["PageIndex", "build_page_index"]
