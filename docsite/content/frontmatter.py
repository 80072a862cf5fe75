"""YAML front matter parsing for markdown pages."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Tuple

import yaml

from ..errors import ConfigError

_DELIMITER = "---"


def split_front_matter(text: str, *, path: Path | None = None) -> Tuple[Dict[str, Any], str, int]:
    """Return ``(metadata, body, body_offset)`` where offset is the body's first line number."""
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].strip() != _DELIMITER:
        return {}, text, 1

    for index in range(1, len(lines)):
        if lines[index].strip() == _DELIMITER:
            raw = "".join(lines[1:index])
            body = "".join(lines[index + 1:])
            return _load(raw, path), body, index + 2
    # An opening delimiter without a closing one is ordinary content (a thematic break).
    return {}, text, 1


def _load(raw: str, path: Path | None) -> Dict[str, Any]:
    label = str(path) if path is not None else "<page>"
    try:
        data = yaml.safe_load(raw) if raw.strip() else {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid front matter in {label}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Front matter in {label} must be a mapping")
    return data


__all__ = ["split_front_matter"]
