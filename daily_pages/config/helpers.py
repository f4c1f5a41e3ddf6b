"""Utility helpers shared by the daily_pages configuration loader."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from .models import EnhancementConfig, SiteConfigError

REMOTE_PREFIXES = ("http://", "https://")


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _coerce_bool(value: object, *, field: str) -> bool:
    """Return ``value`` as a bool, rejecting anything but YAML booleans."""
    if isinstance(value, bool):
        return value
    msg = f"'{field}' must be true or false, got {value!r}."
    raise SiteConfigError(msg)


def _coerce_seconds(value: object, *, field: str) -> float:
    """Return ``value`` as a non-negative number of seconds."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        msg = f"'{field}' must be a number of seconds, got {value!r}."
        raise SiteConfigError(msg)
    if value < 0:
        msg = f"'{field}' must not be negative."
        raise SiteConfigError(msg)
    return float(value)


def _resolve_source(source: str, base_dir: Path) -> str:
    """Resolve a relative source path against the config file's directory."""
    if source.startswith(REMOTE_PREFIXES):
        return source
    path = Path(source)
    if not path.is_absolute():
        path = base_dir / path
    return str(path)


def _normalize_route(route: str | None, key: str) -> str:
    """Return a URL path that starts with ``/``; defaults to ``/<key>``."""
    text = _optional_str(route) or key
    return text if text.startswith("/") else f"/{text}"


def _merge_enhancement(
    base: EnhancementConfig, override: typ.Mapping[str, typ.Any] | None
) -> EnhancementConfig:
    """Merge an override enhancement mapping into ``base``."""
    if not override:
        return base
    if not isinstance(override, dict):
        msg = "'enhancement' must be a mapping."
        raise SiteConfigError(msg)
    values = {}
    for field in ("heading_copy_reset", "code_copy_reset", "initial_scroll_delay"):
        raw = override.get(field, getattr(base, field))
        values[field] = _coerce_seconds(raw, field=f"enhancement.{field}")
    return EnhancementConfig(**values)


__all__ = [
    "REMOTE_PREFIXES",
    "_coerce_bool",
    "_coerce_seconds",
    "_merge_enhancement",
    "_normalize_route",
    "_optional_str",
    "_resolve_source",
]
