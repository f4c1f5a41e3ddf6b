"""Typed dataclasses describing daily_pages site configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from daily_pages._constants import (
    CODE_COPY_RESET_SECONDS,
    HEADING_COPY_RESET_SECONDS,
    INITIAL_SCROLL_DELAY_SECONDS,
)


class SiteConfigError(ValueError):
    """Raised when the site configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class EnhancementConfig:
    """Timings used by the client-side enhancers, in seconds."""

    heading_copy_reset: float = HEADING_COPY_RESET_SECONDS
    code_copy_reset: float = CODE_COPY_RESET_SECONDS
    initial_scroll_delay: float = INITIAL_SCROLL_DELAY_SECONDS


@dc.dataclass(slots=True)
class PageConfig:
    """A fully resolved page definition sourced from YAML config."""

    key: str
    source: str
    route: str
    title: str | None = None
    output_dir: Path = Path("public")
    filename_prefix: str = ""
    base_url: str = "https://devops-daily.com"
    site_name: str = "DevOps Daily"
    pygments_style: str = "monokai"
    highlight: bool = True
    prerender_controls: bool = False
    disclosure_label: str = "View Solution"
    enhancement: EnhancementConfig = dc.field(default_factory=EnhancementConfig)

    @property
    def page_url(self) -> str:
        """Return the absolute URL the page is served from."""
        return f"{self.base_url.rstrip('/')}{self.route}"

    @property
    def output_path(self) -> Path:
        """Return the HTML file the generator writes for this page."""
        return self.output_dir / f"{self.filename_prefix}{self.key}.html"


@dc.dataclass(slots=True)
class SiteConfig:
    """Collection of page configs alongside shared defaults."""

    pages: dict[str, PageConfig]
    default_page: str | None = None

    def get_page(self, page_id: str | None) -> PageConfig:
        """Return the requested page or fall back to the configured default."""
        if page_id is None:
            return self._get_default_page()
        try:
            return self.pages[page_id]
        except KeyError as exc:
            available = ", ".join(sorted(self.pages))
            msg = f"Unknown page '{page_id}'. Known pages: {available}"
            raise KeyError(msg) from exc

    def _get_default_page(self) -> PageConfig:
        """Return the configured default page or the first defined page."""
        if self.default_page and self.default_page in self.pages:
            return self.pages[self.default_page]
        if not self.pages:
            msg = "No pages configured in layout file."
            raise SiteConfigError(msg)
        first_key = next(iter(self.pages))
        return self.pages[first_key]


__all__ = [
    "EnhancementConfig",
    "PageConfig",
    "SiteConfig",
    "SiteConfigError",
]
