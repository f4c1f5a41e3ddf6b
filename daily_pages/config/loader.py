"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .helpers import (
    _coerce_bool,
    _merge_enhancement,
    _normalize_route,
    _optional_str,
    _resolve_source,
)
from .models import EnhancementConfig, PageConfig, SiteConfig, SiteConfigError


def load_site_config(path: Path) -> SiteConfig:
    """Load the YAML configuration describing the pages to render.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``pages.yaml``).

    Returns
    -------
    SiteConfig
        Parsed site configuration with every page's defaults applied and
        relative content sources resolved against the config file's directory.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    SiteConfigError
        If the top-level structure is not a mapping or required sections and
        fields are missing or invalid (for example, no pages are defined).
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from daily_pages.config import load_site_config
    >>> config = load_site_config(Path("pages.yaml"))  # doctest: +SKIP
    >>> config.get_page("day-1").route  # doctest: +SKIP
    '/advent-of-devops/day-1'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise SiteConfigError(msg)
    raw: dict[str, typ.Any] = dict(loaded)
    defaults = raw.get("defaults", {}) or {}
    if not isinstance(defaults, dict):
        msg = "'defaults' must be a mapping."
        raise SiteConfigError(msg)

    page_defaults = _PageDefaults(
        output_dir=Path(defaults.get("output_dir", "public")),
        filename_prefix=str(defaults.get("filename_prefix", "")),
        base_url=str(defaults.get("base_url", "https://devops-daily.com")),
        site_name=str(defaults.get("site_name", "DevOps Daily")),
        pygments_style=str(defaults.get("pygments_style", "monokai")),
        highlight=_coerce_bool(defaults.get("highlight", True), field="highlight"),
        prerender_controls=_coerce_bool(
            defaults.get("prerender_controls", False), field="prerender_controls"
        ),
        disclosure_label=str(defaults.get("disclosure_label", "View Solution")),
        enhancement=_merge_enhancement(
            EnhancementConfig(), defaults.get("enhancement")
        ),
        base_dir=path.parent,
    )

    pages_raw = raw.get("pages") or {}
    if not pages_raw:
        msg = "No pages defined in layout configuration."
        raise SiteConfigError(msg)

    pages: dict[str, PageConfig] = {}
    for key, payload in pages_raw.items():
        match payload:
            case dict():
                pages[str(key)] = _build_page_config(
                    key=str(key), payload=payload, defaults=page_defaults
                )
            case _:
                msg = f"Page '{key}' must be a mapping."
                raise SiteConfigError(msg)

    default_page = _optional_str(raw.get("default_page"))
    if default_page is not None and default_page not in pages:
        msg = f"default_page '{default_page}' is not a configured page."
        raise SiteConfigError(msg)
    return SiteConfig(pages=pages, default_page=default_page)


@dc.dataclass(slots=True)
class _PageDefaults:
    """Internal container for page default configuration values."""

    output_dir: Path
    filename_prefix: str
    base_url: str
    site_name: str
    pygments_style: str
    highlight: bool
    prerender_controls: bool
    disclosure_label: str
    enhancement: EnhancementConfig
    base_dir: Path


def _build_page_config(
    *,
    key: str,
    payload: typ.Mapping[str, typ.Any],
    defaults: _PageDefaults,
) -> PageConfig:
    """Build a PageConfig for a single page entry using defaults and overrides."""
    source = _optional_str(payload.get("source"))
    if not source:
        msg = f"Page '{key}' is missing 'source'."
        raise SiteConfigError(msg)

    return PageConfig(
        key=key,
        source=_resolve_source(source, defaults.base_dir),
        route=_normalize_route(payload.get("route"), key),
        title=_optional_str(payload.get("title")),
        output_dir=Path(payload.get("output_dir", defaults.output_dir)),
        filename_prefix=str(payload.get("filename_prefix", defaults.filename_prefix)),
        base_url=str(payload.get("base_url", defaults.base_url)),
        site_name=str(payload.get("site_name", defaults.site_name)),
        pygments_style=str(payload.get("pygments_style", defaults.pygments_style)),
        highlight=_coerce_bool(
            payload.get("highlight", defaults.highlight), field=f"{key}.highlight"
        ),
        prerender_controls=_coerce_bool(
            payload.get("prerender_controls", defaults.prerender_controls),
            field=f"{key}.prerender_controls",
        ),
        disclosure_label=str(
            payload.get("disclosure_label", defaults.disclosure_label)
        ),
        enhancement=_merge_enhancement(
            defaults.enhancement, payload.get("enhancement")
        ),
    )


__all__ = ["load_site_config"]
