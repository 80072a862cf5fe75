"""Tests for auto-generated and explicit sidebars."""

from __future__ import annotations

import pytest

from docsite.errors import ConfigError
from tests._fixtures.site_builder import SiteBuilder


def test_auto_sidebar_follows_positions_and_categories(site_builder: SiteBuilder) -> None:
    site_builder.config("sources:\n  - namespace: docs\n    path: docs\n")
    site_builder.write(
        {
            "docs/index.md": "# Home\n",
            "docs/01-start.md": "# Start\n",
            "docs/zeta.md": "# Zeta\n",
            "docs/02-guides/_category_.json": '{"label": "Guides", "position": 3, "collapsed": false}\n',
            "docs/02-guides/index.md": "# Guides overview\n",
            "docs/02-guides/b.md": "---\nsidebar_position: 2\n---\n# B\n",
            "docs/02-guides/a.md": "---\nsidebar_position: 1\nsidebar_label: First\n---\n# A\n",
        }
    )

    build = site_builder.resolve()

    assert build.sidebars["/docs"] == {
        "default": [
            {"type": "doc", "id": "start", "label": "Start"},
            {
                "type": "category",
                "label": "Guides",
                "collapsed": False,
                "items": [
                    {"type": "doc", "id": "guides/a", "label": "First"},
                    {"type": "doc", "id": "guides/b", "label": "B"},
                ],
                "link": {"type": "doc", "id": "guides/index"},
            },
            {"type": "doc", "id": "index", "label": "Home"},
            {"type": "doc", "id": "zeta", "label": "Zeta"},
        ]
    }


def test_auto_sidebar_uses_directory_number_prefix_without_category_file(
    site_builder: SiteBuilder,
) -> None:
    site_builder.config("sources:\n  - namespace: docs\n    path: docs\n")
    site_builder.write(
        {
            "docs/2-later/page.md": "# Later\n",
            "docs/1-first/page.md": "# First\n",
        }
    )

    items = site_builder.resolve().sidebars["/docs"]["default"]

    assert [item["label"] for item in items] == ["first", "later"]
    assert items[0]["collapsed"] is True


EXPLICIT_CONFIG = """
sources:
  - namespace: miden-node
    path: node
    sidebar: explicit-file
    sidebar_path: node-sidebars.yml
"""


def test_explicit_sidebar_is_normalised(site_builder: SiteBuilder) -> None:
    site_builder.config(EXPLICIT_CONFIG)
    site_builder.write(
        {
            "node/intro.md": "# Intro\n",
            "node/reference/api.md": "# Api reference\n",
            "node-sidebars.yml": """
                docs:
                  - intro
                  - type: category
                    label: Reference
                    items:
                      - type: doc
                        id: reference/api
                        label: API
                      - type: link
                        label: Repo
                        href: https://github.com/0xMiden/miden-node
                  - type: autogenerated
                    dirName: reference
            """,
        }
    )

    build = site_builder.resolve()

    assert build.sidebars["/miden-node"] == {
        "docs": [
            {"type": "doc", "id": "intro", "label": "Intro"},
            {
                "type": "category",
                "label": "Reference",
                "collapsed": True,
                "items": [
                    {"type": "doc", "id": "reference/api", "label": "API"},
                    {"type": "link", "label": "Repo", "href": "https://github.com/0xMiden/miden-node"},
                ],
            },
            {
                "type": "category",
                "label": "reference",
                "collapsed": True,
                "items": [{"type": "doc", "id": "reference/api", "label": "Api reference"}],
            },
        ]
    }


def test_explicit_sidebar_rejects_unknown_docs(site_builder: SiteBuilder) -> None:
    site_builder.config(EXPLICIT_CONFIG)
    site_builder.write(
        {
            "node/intro.md": "# Intro\n",
            "node-sidebars.yml": "docs:\n  - intro\n  - operator/setup\n",
        }
    )

    with pytest.raises(ConfigError) as excinfo:
        site_builder.resolve()

    assert "unknown doc 'operator/setup' in 'miden-node'" in str(excinfo.value)


def test_explicit_sidebar_requires_the_file(site_builder: SiteBuilder) -> None:
    site_builder.config(EXPLICIT_CONFIG)
    site_builder.write({"node/intro.md": "# Intro\n"})

    with pytest.raises(ConfigError) as excinfo:
        site_builder.resolve()

    assert "sidebar file does not exist" in str(excinfo.value)


def test_page_named_after_its_directory_links_the_category(site_builder: SiteBuilder) -> None:
    site_builder.config("sources:\n  - namespace: docs\n    path: docs\n")
    site_builder.write(
        {
            "docs/01-guides/guides.md": "# Guides\n",
            "docs/01-guides/setup.md": "# Setup\n",
        }
    )

    (category,) = site_builder.resolve().sidebars["/docs"]["default"]

    assert category["link"] == {"type": "doc", "id": "guides/guides"}
    assert category["items"] == [{"type": "doc", "id": "guides/setup", "label": "Setup"}]
