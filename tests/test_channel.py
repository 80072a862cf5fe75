"""Tests for channel resolution."""

from __future__ import annotations

import pytest

from docsite.channel import normalize_base_url, resolve_channel
from docsite.config import ChannelConfig
from docsite.errors import ConfigError
from docsite.models import Channel


def test_missing_channel_defaults_to_stable_root() -> None:
    channel = resolve_channel({})
    assert channel == Channel(name="stable", base_prefix="/", edit_branch="main")


def test_next_channel_uses_next_prefix_and_branch() -> None:
    channel = resolve_channel({"CHANNEL": "next"})
    assert channel.base_prefix == "/next/"
    assert channel.edit_branch == "docs-next"


def test_base_url_override_takes_precedence() -> None:
    channel = resolve_channel({"CHANNEL": "next", "BASE_URL": "/preview/docs"})
    assert channel.name == "next"
    assert channel.base_prefix == "/preview/docs/"
    assert channel.edit_branch == "docs-next"


def test_blank_base_url_is_ignored() -> None:
    assert resolve_channel({"BASE_URL": "  "}).base_prefix == "/"


@pytest.mark.parametrize(
    "value",
    ["next/", "https://example.com/", "//cdn/", "/a//b/", "/a/../b/", "/a b/", "/docs?x=1", "/docs#top"],
)
def test_malformed_base_url_is_fatal(value: str) -> None:
    with pytest.raises(ConfigError):
        resolve_channel({"BASE_URL": value})


def test_normalize_base_url_keeps_root() -> None:
    assert normalize_base_url("/") == "/"
    assert normalize_base_url("/next") == "/next/"


def test_unknown_channel_is_fatal() -> None:
    with pytest.raises(ConfigError) as excinfo:
        resolve_channel({"CHANNEL": "nightly"})
    assert "nightly" in str(excinfo.value)


def test_configured_channels_extend_and_override_builtins() -> None:
    channels = {
        "nightly": ChannelConfig(),
        "next": ChannelConfig(base_url="/preview", edit_branch="develop"),
    }

    nightly = resolve_channel({"CHANNEL": "nightly"}, channels)
    assert nightly.base_prefix == "/nightly/"
    assert nightly.edit_branch == "nightly"

    preview = resolve_channel({"CHANNEL": "next"}, channels)
    assert preview.base_prefix == "/preview/"
    assert preview.edit_branch == "develop"
