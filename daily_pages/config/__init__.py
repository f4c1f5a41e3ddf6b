"""Load and validate the site configuration YAML for page builds.

This subpackage parses the project's ``pages.yaml`` file, merges global defaults
with per-page overrides, resolves relative content sources, and produces typed
dataclasses (:class:`SiteConfig`, :class:`PageConfig`,
:class:`EnhancementConfig`) that the page generator and the enhancers consume.

Examples
--------
>>> from pathlib import Path
>>> from daily_pages.config import load_site_config
>>> site = load_site_config(Path("config/pages.yaml"))  # doctest: +SKIP
>>> site.get_page(None).key  # doctest: +SKIP
'day-1'
"""

from .loader import load_site_config
from .models import EnhancementConfig, PageConfig, SiteConfig, SiteConfigError

__all__ = [
    "EnhancementConfig",
    "PageConfig",
    "SiteConfig",
    "SiteConfigError",
    "load_site_config",
]
