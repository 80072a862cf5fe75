"""Tests for the serialized route manifest."""

from __future__ import annotations

import json

from docsite.manifest import MANIFEST_VERSION, build_manifest, write_manifest
from tests._fixtures.site_builder import SiteBuilder


def _build(site_builder: SiteBuilder):
    site_builder.config(
        """
        site:
          title: Miden Docs
        links:
          on_broken_anchors: warn
        sources:
          - namespace: miden-base
            path: base
            versions:
              path: base-versions
        """
    )
    site_builder.write(
        {
            "base/index.md": "# Base\n\n[gone](#nowhere)\n",
            "base/account.md": "# Account\n",
            "base-versions/version-0.9/index.md": "# Base 0.9\n",
        }
    )
    return site_builder.resolve()


def test_manifest_describes_routes_and_pages(site_builder: SiteBuilder) -> None:
    manifest = build_manifest(_build(site_builder))

    assert manifest["version"] == MANIFEST_VERSION
    assert manifest["site"] == {"title": "Miden Docs", "url": None}
    assert manifest["channel"] == {"name": "stable", "base_url": "/", "edit_branch": "main"}
    assert manifest["latest_versions"] == {"miden-base": "0.9"}

    released, current = manifest["routes"]
    assert released["prefix"] == "/miden-base/0.9"
    assert released["version"] == "0.9"
    assert released["current"] is False
    assert released["root"] == "base-versions/version-0.9"

    assert current["prefix"] == "/miden-base"
    assert current["sidebar_strategy"] == "auto-from-filesystem"
    assert [page["url"] for page in current["pages"]] == ["/miden-base", "/miden-base/account"]
    assert current["pages"][0]["source"] == "base/index.md"
    assert current["pages"][0]["edit_url"] is None


def test_manifest_lists_warnings(site_builder: SiteBuilder) -> None:
    manifest = build_manifest(_build(site_builder))

    (warning,) = manifest["warnings"]
    assert warning == {
        "status": "broken-anchor",
        "page": "/miden-base",
        "target": "#nowhere",
        "line": 3,
        "detail": "anchor '#nowhere' not found on /miden-base",
    }


def test_write_manifest_replaces_file(site_builder: SiteBuilder) -> None:
    build = _build(site_builder)
    target = site_builder.path("out/site-manifest.json")
    target.parent.mkdir()
    target.write_text("stale", encoding="utf-8")

    written = write_manifest(build, target)

    assert written == target
    assert json.loads(target.read_text(encoding="utf-8")) == build_manifest(build)
    assert not target.with_name("site-manifest.json.tmp").exists()
