"""Tests for route composition and collision detection."""

from __future__ import annotations

from itertools import combinations
from pathlib import Path

import pytest

from docsite.errors import RouteCollisionError
from docsite.models import Channel, DocSource, RouteCandidate, Version
from docsite.routes import compose_routes
from docsite.urls import is_segment_prefix

STABLE = Channel(name="stable", base_prefix="/")
NEXT = Channel(name="next", base_prefix="/next/", edit_branch="docs-next")


def _candidate(tmp_path: Path, namespace: str, prefix: str, label: str = "current") -> RouteCandidate:
    source = DocSource(namespace=namespace, root=tmp_path / namespace, route_prefix=prefix)
    current = label == "current"
    root = source.root if current else tmp_path / f"{namespace}-{label}"
    return RouteCandidate(source=source, version=Version(label=label, root=root, current=current))


def test_textual_prefix_is_not_a_collision(tmp_path: Path) -> None:
    table = compose_routes(
        STABLE,
        [_candidate(tmp_path, "guide", "/guide"), _candidate(tmp_path, "guide-extra", "/guide-extra")],
    )
    assert table.prefixes == ("/guide", "/guide-extra")


def test_identical_prefixes_collide_naming_both(tmp_path: Path) -> None:
    with pytest.raises(RouteCollisionError) as excinfo:
        compose_routes(
            STABLE,
            [_candidate(tmp_path, "rest-api", "/api"), _candidate(tmp_path, "rpc-api", "/api")],
        )

    assert set(excinfo.value.namespaces) == {"rest-api", "rpc-api"}
    assert "rest-api" in str(excinfo.value)
    assert "rpc-api" in str(excinfo.value)


def test_nested_prefixes_of_different_sources_collide(tmp_path: Path) -> None:
    with pytest.raises(RouteCollisionError) as excinfo:
        compose_routes(
            STABLE,
            [_candidate(tmp_path, "client", "/client"), _candidate(tmp_path, "web-client", "/client/web")],
        )
    assert excinfo.value.namespaces == ("client", "web-client")


def test_collision_is_independent_of_declaration_order(tmp_path: Path) -> None:
    with pytest.raises(RouteCollisionError) as excinfo:
        compose_routes(
            STABLE,
            [_candidate(tmp_path, "web-client", "/client/web"), _candidate(tmp_path, "client", "/client")],
        )
    assert excinfo.value.namespaces == ("client", "web-client")


def test_channel_base_mount_may_contain_other_routes(tmp_path: Path) -> None:
    table = compose_routes(
        NEXT,
        [_candidate(tmp_path, "docs", "/"), _candidate(tmp_path, "miden-vm", "/miden-vm")],
    )
    assert table.prefixes == ("/next", "/next/miden-vm")


def test_versions_get_label_segments_and_current_does_not(tmp_path: Path) -> None:
    table = compose_routes(
        NEXT,
        [
            _candidate(tmp_path, "miden-vm", "/miden-vm", "0.12"),
            _candidate(tmp_path, "miden-vm", "/miden-vm", "0.11"),
            _candidate(tmp_path, "miden-vm", "/miden-vm"),
        ],
    )

    assert table.prefixes == ("/next/miden-vm/0.12", "/next/miden-vm/0.11", "/next/miden-vm")
    assert [route.version for route in table] == ["0.12", "0.11", None]
    assert table.match("/next/miden-vm/0.12/intro").version == "0.12"
    assert table.match("/next/miden-vm/intro").current


def test_version_label_clashing_with_other_source_collides(tmp_path: Path) -> None:
    with pytest.raises(RouteCollisionError):
        compose_routes(
            STABLE,
            [
                _candidate(tmp_path, "miden-vm", "/miden-vm", "0.12"),
                _candidate(tmp_path, "miden-vm", "/miden-vm"),
                _candidate(tmp_path, "legacy", "/miden-vm/0.12/legacy"),
            ],
        )


def test_composed_prefixes_are_pairwise_disjoint(tmp_path: Path) -> None:
    table = compose_routes(
        STABLE,
        [
            _candidate(tmp_path, "miden-base", "/miden-base"),
            _candidate(tmp_path, "miden-client", "/miden-client"),
            _candidate(tmp_path, "miden-node", "/miden-node"),
            _candidate(tmp_path, "miden-tutorials", "/miden-tutorials"),
        ],
    )

    for first, second in combinations(table.prefixes, 2):
        assert not is_segment_prefix(first, second)
        assert not is_segment_prefix(second, first)


def test_match_prefers_most_specific_route(tmp_path: Path) -> None:
    table = compose_routes(
        STABLE,
        [_candidate(tmp_path, "docs", "/"), _candidate(tmp_path, "miden-vm", "/miden-vm")],
    )

    assert table.match("/miden-vm/usage").namespace == "miden-vm"
    assert table.match("/miden-vmx").namespace == "docs"
    assert table.for_namespace("docs")[0].prefix == "/"
