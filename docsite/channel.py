"""Release channel resolution.

This is the only component that reads the environment. Everything downstream
receives the resolved :class:`~docsite.models.Channel` explicitly.
"""

from __future__ import annotations

import re
from typing import Mapping, Optional

from .config import ChannelConfig
from .errors import ConfigError
from .logging import get_logger
from .models import Channel

CHANNEL_ENV = "CHANNEL"
BASE_URL_ENV = "BASE_URL"
DEFAULT_CHANNEL = "stable"

_BUILTIN_CHANNELS: dict[str, Channel] = {
    "stable": Channel(name="stable", base_prefix="/", edit_branch="main"),
    "next": Channel(name="next", base_prefix="/next/", edit_branch="docs-next"),
}

_SEGMENT_PATTERN = re.compile(r"^[A-Za-z0-9._~-]+$")

logger = get_logger("channel")


def resolve_channel(
    environ: Mapping[str, str],
    channels: Optional[Mapping[str, ChannelConfig]] = None,
) -> Channel:
    """Return the channel selected by ``CHANNEL`` with its validated base prefix."""
    name = (environ.get(CHANNEL_ENV) or "").strip() or DEFAULT_CHANNEL
    known = _known_channels(channels or {})
    if name not in known:
        available = ", ".join(sorted(known))
        raise ConfigError(f"Unknown channel '{name}' (expected one of: {available})")
    channel = known[name]

    override = environ.get(BASE_URL_ENV)
    if override is not None and override.strip():
        base_prefix = normalize_base_url(override)
        logger.debug("Base URL override %s replaces %s", base_prefix, channel.base_prefix)
        channel = Channel(name=channel.name, base_prefix=base_prefix, edit_branch=channel.edit_branch)

    logger.info("Resolved channel %s at %s", channel.name, channel.base_prefix)
    return channel


def normalize_base_url(value: str) -> str:
    """Validate an absolute base path and return it with a trailing slash.

    Raises :class:`ConfigError` for anything that is not a plain absolute path:
    schemes, hosts, queries, fragments, whitespace and empty, ``.`` or ``..``
    segments are all rejected.
    """
    raw = value.strip()
    if not raw.startswith("/") or raw.startswith("//"):
        raise ConfigError(f"Base URL must be an absolute path starting with '/': {value!r}")
    if raw == "/":
        return raw
    body = raw[1:-1] if raw.endswith("/") else raw[1:]
    for segment in body.split("/"):
        if segment in ("", ".", ".."):
            raise ConfigError(f"Base URL contains an empty or relative segment: {value!r}")
        if not _SEGMENT_PATTERN.match(segment):
            raise ConfigError(f"Base URL contains invalid characters: {value!r}")
    return f"/{body}/"


def _known_channels(overrides: Mapping[str, ChannelConfig]) -> dict[str, Channel]:
    known = dict(_BUILTIN_CHANNELS)
    for name, override in overrides.items():
        base = known.get(name)
        base_prefix = base.base_prefix if base else normalize_base_url(f"/{name}/")
        edit_branch = base.edit_branch if base else name
        if override.base_url:
            base_prefix = normalize_base_url(override.base_url)
        if override.edit_branch:
            edit_branch = override.edit_branch
        known[name] = Channel(name=name, base_prefix=base_prefix, edit_branch=edit_branch)
    return known


__all__ = [
    "BASE_URL_ENV",
    "CHANNEL_ENV",
    "DEFAULT_CHANNEL",
    "normalize_base_url",
    "resolve_channel",
]
