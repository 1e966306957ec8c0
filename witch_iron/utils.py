"""Dotted-path access to nested document data.

The host stores actors as nested dicts addressed by dotted paths such as
``system.abilities.luck.current``. These helpers are the only place that
walks those paths.
"""

from __future__ import annotations

from typing import Any


def get_path(data: dict[str, Any], path: str, default: Any = None) -> Any:
    """Return the value at a dotted path, or default if any segment is missing."""
    node: Any = data
    for key in path.split("."):
        if not isinstance(node, dict) or key not in node:
            return default
        node = node[key]
    return node


def set_path(data: dict[str, Any], path: str, value: Any) -> None:
    """Set the value at a dotted path, creating intermediate dicts."""
    keys = path.split(".")
    node = data
    for key in keys[:-1]:
        child = node.get(key)
        if not isinstance(child, dict):
            child = node[key] = {}
        node = child
    node[keys[-1]] = value
