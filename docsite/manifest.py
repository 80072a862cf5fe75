"""Serialized route manifest consumed by the static-site build."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List

from .pipeline import SiteBuild

MANIFEST_VERSION = 1


def build_manifest(build: SiteBuild) -> Dict[str, Any]:
    """Return a JSON-ready description of the composed site.

    Paths are written relative to the config root so identical trees produce
    identical manifests on any machine.
    """
    root = build.config.root
    routes: List[Dict[str, Any]] = []
    for route in build.routes:
        pages = sorted(build.pages.pages_for(route), key=lambda page: page.url)
        routes.append(
            {
                "prefix": route.prefix,
                "namespace": route.namespace,
                "version": route.version,
                "current": route.current,
                "root": _relative(route.root, root),
                "sidebar_strategy": route.sidebar.value,
                "sidebars": build.sidebars.get(route.prefix, {}),
                "pages": [
                    {
                        "id": page.doc_id,
                        "url": page.url,
                        "source": _relative(page.path, root),
                        "title": page.title,
                        "edit_url": page.edit_url,
                    }
                    for page in pages
                ],
            }
        )

    warnings: List[Dict[str, Any]] = []
    if build.links is not None:
        for issue in build.links.warnings:
            ref = issue.reference
            warnings.append(
                {
                    "status": issue.status.value,
                    "page": ref.source,
                    "target": ref.target,
                    "line": ref.line,
                    "detail": issue.detail,
                }
            )

    return {
        "version": MANIFEST_VERSION,
        "site": {"title": build.config.title, "url": build.config.url},
        "channel": {
            "name": build.channel.name,
            "base_url": build.channel.base_prefix,
            "edit_branch": build.channel.edit_branch,
        },
        "latest_versions": build.latest_versions(),
        "routes": routes,
        "warnings": warnings,
    }


def render_manifest(build: SiteBuild) -> str:
    return json.dumps(build_manifest(build), indent=2, sort_keys=True) + "\n"


def write_manifest(build: SiteBuild, path: Path) -> Path:
    """Atomically write the manifest; a failed write leaves any previous file intact."""
    path.parent.mkdir(parents=True, exist_ok=True)
    staging = path.with_name(path.name + ".tmp")
    staging.write_text(render_manifest(build), encoding="utf-8")
    os.replace(staging, path)
    return path


def _relative(path: Path, root: Path) -> str:
    try:
        return path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return path.as_posix()


__all__ = ["MANIFEST_VERSION", "build_manifest", "render_manifest", "write_manifest"]
