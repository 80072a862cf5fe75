"""Configuration loading for docsite (.docsite.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import ConfigError

CONFIG_FILENAME = ".docsite.yml"
DEFAULT_MANIFEST = "site-manifest.json"

LINK_POLICIES = ("throw", "warn", "ignore")


@dataclass
class ChannelConfig:
    """Per-channel overrides declared under ``channels:``."""

    base_url: Optional[str] = None
    edit_branch: Optional[str] = None


@dataclass
class VersionsConfig:
    """Location of released snapshots for a versioned source."""

    path: Path
    sidebars_path: Optional[Path] = None


@dataclass
class VendorConfig:
    """Upstream repository a source's docs are vendored from."""

    repo: str
    branch: Optional[str] = None
    subdir: str = "docs"


@dataclass
class SourceConfig:
    """A single entry of the ``sources:`` list."""

    namespace: str
    path: Path
    route: str
    sidebar: str = "auto-from-filesystem"
    sidebar_path: Optional[Path] = None
    edit_url: Optional[str] = None
    versions: Optional[VersionsConfig] = None
    vendor: Optional[VendorConfig] = None


@dataclass
class LinkPolicyConfig:
    """How link integrity issues affect the build."""

    on_broken_links: str = "throw"
    on_broken_anchors: str = "warn"


@dataclass
class SiteConfig:
    """Represents the settings defined in .docsite.yml."""

    root: Path
    title: Optional[str] = None
    url: Optional[str] = None
    sources: List[SourceConfig] = field(default_factory=list)
    channels: Dict[str, ChannelConfig] = field(default_factory=dict)
    links: LinkPolicyConfig = field(default_factory=LinkPolicyConfig)
    static_dirs: List[Path] = field(default_factory=list)
    output: Optional[Path] = None
    max_workers: Optional[int] = None


def load_config(config_path: Path) -> SiteConfig:
    """Load and coerce the site configuration from disk."""
    config_file = resolve_config_path(config_path)
    root = config_file.parent

    if not config_file.exists():
        raise ConfigError(f"Site configuration not found: {config_file}")

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    site_data = _as_dict(data.get("site"))

    raw_sources = data.get("sources")
    if not isinstance(raw_sources, list) or not raw_sources:
        raise ConfigError(f"{config_file.name} must declare a non-empty 'sources' list")
    sources = [_parse_source(root, entry, index) for index, entry in enumerate(raw_sources)]

    channels: Dict[str, ChannelConfig] = {}
    for name, value in _as_dict(data.get("channels")).items():
        channel_data = _as_dict(value)
        channels[str(name)] = ChannelConfig(
            base_url=_as_str(channel_data.get("base_url")),
            edit_branch=_as_str(channel_data.get("edit_branch")),
        )

    links_data = _as_dict(data.get("links"))
    links = LinkPolicyConfig(
        on_broken_links=_as_policy(links_data.get("on_broken_links"), "throw", "on_broken_links"),
        on_broken_anchors=_as_policy(
            links_data.get("on_broken_anchors"), "warn", "on_broken_anchors"
        ),
    )

    static_dirs = [root / item for item in _as_str_list(data.get("static_dirs"))]
    output_str = _as_str(data.get("output"))
    max_workers = data.get("max_workers")
    if max_workers is not None and (not isinstance(max_workers, int) or max_workers < 1):
        raise ConfigError("max_workers must be a positive integer")

    return SiteConfig(
        root=root,
        title=_as_str(site_data.get("title")),
        url=_as_str(site_data.get("url")),
        sources=sources,
        channels=channels,
        links=links,
        static_dirs=static_dirs,
        output=root / output_str if output_str else None,
        max_workers=max_workers,
    )


def resolve_config_path(config_path: Path) -> Path:
    """Return the .docsite.yml file for a directory or explicit file path."""
    config_path = Path(config_path).expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        return yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc


def _parse_source(root: Path, entry: Any, index: int) -> SourceConfig:
    data = _as_dict(entry)
    namespace = _as_str(data.get("namespace"))
    if not namespace:
        raise ConfigError(f"Source #{index + 1} is missing a 'namespace'")
    path_str = _as_str(data.get("path"))
    if not path_str:
        raise ConfigError(f"Source '{namespace}' is missing a 'path'")

    route = _as_str(data.get("route"))
    sidebar = _as_str(data.get("sidebar")) or "auto-from-filesystem"
    sidebar_path_str = _as_str(data.get("sidebar_path"))

    versions = None
    versions_data = data.get("versions")
    if versions_data is not None:
        versions_map = _as_dict(versions_data)
        versions_path = _as_str(versions_map.get("path"))
        if not versions_path:
            raise ConfigError(f"Source '{namespace}' declares versions without a 'path'")
        sidebars_path = _as_str(versions_map.get("sidebars_path"))
        versions = VersionsConfig(
            path=root / versions_path,
            sidebars_path=root / sidebars_path if sidebars_path else None,
        )

    vendor = None
    vendor_data = data.get("vendor")
    if vendor_data is not None:
        vendor_map = _as_dict(vendor_data)
        repo = _as_str(vendor_map.get("repo"))
        if not repo:
            raise ConfigError(f"Source '{namespace}' declares vendor without a 'repo'")
        vendor = VendorConfig(
            repo=repo,
            branch=_as_str(vendor_map.get("branch")),
            subdir=_as_str(vendor_map.get("subdir")) or "docs",
        )

    return SourceConfig(
        namespace=namespace,
        path=root / path_str,
        route=route if route is not None else namespace,
        sidebar=sidebar,
        sidebar_path=root / sidebar_path_str if sidebar_path_str else None,
        edit_url=_as_str(data.get("edit_url")),
        versions=versions,
        vendor=vendor,
    )


def _as_policy(value: Any, default: str, key: str) -> str:
    if value is None:
        return default
    policy = str(value).strip().lower()
    if policy not in LINK_POLICIES:
        allowed = ", ".join(LINK_POLICIES)
        raise ConfigError(f"links.{key} must be one of: {allowed} (got {value!r})")
    return policy


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ChannelConfig",
    "ConfigError",
    "DEFAULT_MANIFEST",
    "LinkPolicyConfig",
    "SiteConfig",
    "SourceConfig",
    "VendorConfig",
    "VersionsConfig",
    "load_config",
    "resolve_config_path",
]
