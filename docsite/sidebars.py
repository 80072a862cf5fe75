"""Sidebar generation for auto and explicit navigation strategies."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .content.index import PageIndex
from .content.pages import is_index_file, number_prefix, strip_number_prefix
from .errors import ConfigError
from .logging import get_logger
from .models import Page, Route, SidebarStrategy

CATEGORY_FILES = ("_category_.json", "_category_.yml", "_category_.yaml")

logger = get_logger("sidebars")


@dataclass
class _CategoryNode:
    name: str
    directory: Path
    children: Dict[str, "_CategoryNode"] = field(default_factory=dict)
    pages: List[Page] = field(default_factory=list)


def build_sidebar(route: Route, index: PageIndex) -> Dict[str, List[Dict[str, Any]]]:
    """Return ``{sidebar_name: items}`` for a route according to its strategy."""
    pages = sorted(index.pages_for(route), key=lambda page: page.path)
    if route.sidebar is SidebarStrategy.EXPLICIT:
        if route.sidebar_path is None:
            raise ConfigError(
                f"Route {route.prefix} of '{route.namespace}' uses an explicit sidebar "
                "but no sidebar file was found"
            )
        return build_explicit_sidebar(route, index, pages)
    return {"default": build_auto_items(route.root, pages)}


def build_auto_items(root: Path, pages: Sequence[Page], directory: str = ".") -> List[Dict[str, Any]]:
    """Generate nested items from the directory layout and ordering hints."""
    tree = _CategoryNode(name="", directory=root)
    for page in pages:
        relative = page.path.relative_to(root)
        node = tree
        for part in relative.parts[:-1]:
            node = node.children.setdefault(part, _CategoryNode(name=part, directory=node.directory / part))
        node.pages.append(page)

    start = tree
    if directory not in ("", "."):
        for part in PurePosixPath(directory).parts:
            child = start.children.get(part)
            if child is None:
                raise ConfigError(f"Autogenerated sidebar directory not found: {root / directory}")
            start = child
    return _render_node_items(start)


def _render_node_items(node: _CategoryNode) -> List[Dict[str, Any]]:
    entries: List[tuple[tuple[bool, float, str], Dict[str, Any]]] = []
    for page in node.pages:
        if node.name and _is_index(page, node.directory):
            continue
        position = page.sidebar_position
        if position is None:
            prefix = number_prefix(page.path.stem)
            position = float(prefix) if prefix is not None else None
        item = {
            "type": "doc",
            "id": page.doc_id,
            "label": page.sidebar_label or page.title or page.doc_id.rsplit("/", 1)[-1],
        }
        entries.append((_sort_key(position, page.path.name), item))

    for name, child in sorted(node.children.items()):
        meta = _read_category(child.directory)
        position = meta.get("position")
        if not isinstance(position, (int, float)) or isinstance(position, bool):
            prefix = number_prefix(name)
            position = float(prefix) if prefix is not None else None
        label = meta.get("label") if isinstance(meta.get("label"), str) else None
        category: Dict[str, Any] = {
            "type": "category",
            "label": label or strip_number_prefix(name),
            "collapsed": bool(meta.get("collapsed", True)),
            "items": _render_node_items(child),
        }
        index_page = next((page for page in child.pages if _is_index(page, child.directory)), None)
        if index_page is not None:
            category["link"] = {"type": "doc", "id": index_page.doc_id}
        entries.append((_sort_key(position, name), category))

    entries.sort(key=lambda entry: entry[0])
    return [item for _, item in entries]


def _sort_key(position: Optional[float], name: str) -> tuple[bool, float, str]:
    return (position is None, position if position is not None else 0.0, name)


def _is_index(page: Page, directory: Path) -> bool:
    return is_index_file(page.path.relative_to(directory.parent))


def _read_category(directory: Path) -> Dict[str, Any]:
    for name in CATEGORY_FILES:
        path = directory / name
        if path.is_file():
            data = _load_structured(path)
            if not isinstance(data, dict):
                raise ConfigError(f"{path} must contain a mapping")
            return data
    return {}


def build_explicit_sidebar(
    route: Route, index: PageIndex, pages: Sequence[Page]
) -> Dict[str, List[Dict[str, Any]]]:
    """Load a declared sidebar file and verify every referenced doc exists."""
    if route.sidebar_path is None:
        raise ConfigError(f"Route {route.prefix} of '{route.namespace}' has no sidebar file")
    data = _load_structured(route.sidebar_path)
    if not isinstance(data, dict):
        raise ConfigError(f"Sidebar file {route.sidebar_path} must map sidebar names to item lists")

    sidebars: Dict[str, List[Dict[str, Any]]] = {}
    for name, items in data.items():
        if not isinstance(items, list):
            raise ConfigError(f"Sidebar '{name}' in {route.sidebar_path} must be a list")
        sidebars[str(name)] = [_normalise_item(route, index, pages, item) for item in items]
    logger.debug("Loaded %d explicit sidebars for %s", len(sidebars), route.prefix)
    return sidebars


def _normalise_item(
    route: Route, index: PageIndex, pages: Sequence[Page], item: Any
) -> Dict[str, Any]:
    if isinstance(item, str):
        return _doc_item(route, index, item, None)
    if not isinstance(item, dict):
        raise ConfigError(f"Unsupported sidebar item in {route.sidebar_path}: {item!r}")

    kind = item.get("type", "doc" if "id" in item else "category")
    if kind == "doc":
        return _doc_item(route, index, str(item.get("id", "")), item.get("label"))
    if kind == "link":
        href = item.get("href")
        if not isinstance(href, str) or not href:
            raise ConfigError(f"Sidebar link in {route.sidebar_path} is missing 'href'")
        return {"type": "link", "label": str(item.get("label", href)), "href": href}
    if kind == "autogenerated":
        directory = str(item.get("dirName", "."))
        return {
            "type": "category",
            "label": str(item.get("label", directory)),
            "collapsed": bool(item.get("collapsed", True)),
            "items": build_auto_items(route.root, pages, directory),
        }
    if kind == "category":
        children = item.get("items", [])
        if not isinstance(children, list):
            raise ConfigError(f"Sidebar category in {route.sidebar_path} must list its items")
        category: Dict[str, Any] = {
            "type": "category",
            "label": str(item.get("label", "")),
            "collapsed": bool(item.get("collapsed", True)),
            "items": [_normalise_item(route, index, pages, child) for child in children],
        }
        link = item.get("link")
        if isinstance(link, dict) and link.get("type") == "doc":
            category["link"] = {"type": "doc", "id": _doc_item(route, index, str(link.get("id", "")), None)["id"]}
        return category
    raise ConfigError(f"Unknown sidebar item type {kind!r} in {route.sidebar_path}")


def _doc_item(route: Route, index: PageIndex, doc_id: str, label: Any) -> Dict[str, Any]:
    page = index.lookup_doc(route.namespace, route.version, doc_id)
    if page is None:
        raise ConfigError(
            f"Sidebar {route.sidebar_path} references unknown doc '{doc_id}' in '{route.namespace}'"
        )
    return {
        "type": "doc",
        "id": doc_id,
        "label": str(label) if label else page.sidebar_label or page.title or doc_id,
    }


def _load_structured(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read {path}: {exc}") from exc
    try:
        if path.suffix.lower() == ".json":
            return json.loads(text)
        return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


__all__ = ["build_auto_items", "build_explicit_sidebar", "build_sidebar"]
