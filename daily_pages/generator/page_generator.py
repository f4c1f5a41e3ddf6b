"""High-level orchestration for content page generation.

This module loads a page's markdown (from disk or over HTTP), renders it with
the solution disclosure and heading anchors in place, and writes the themed
HTML page plus a metadata JSON file holding the table of contents and any
section-marker problems found in the source. It exposes
:class:`PageContentGenerator`, which consumes a
:class:`~daily_pages.config.PageConfig`.

Example
-------
>>> from pathlib import Path
>>> from daily_pages.config import load_site_config
>>> from daily_pages.generator import PageContentGenerator
>>> config = load_site_config(Path("config/pages.yaml"))  # doctest: +SKIP
>>> page = config.get_page("day-1")  # doctest: +SKIP
>>> PageContentGenerator(page).run()  # doctest: +SKIP
[PosixPath('public/day-1.html')]
"""

from __future__ import annotations

import datetime as dt
import json
import logging
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from daily_pages._constants import PAGE_META_TEMPLATE
from daily_pages.content import ContentDocument, load_content
from daily_pages.enhance.anchors import prerender_heading_controls
from daily_pages.generator.document import DocumentRenderer
from daily_pages.generator.renderer import HtmlContentRenderer
from daily_pages.markdown_parser import MarkerProblem, find_marker_problems

if typ.TYPE_CHECKING:
    from daily_pages.config import PageConfig
    from daily_pages.generator.models import RenderedDocument

logger = logging.getLogger(__name__)


class PageContentGenerator:
    """Load page markdown and emit a themed HTML page."""

    def __init__(
        self,
        page_config: PageConfig,
        *,
        templates_dir: Path | None = None,
        source: str | None = None,
        output_dir: Path | None = None,
    ) -> None:
        """Initialize the generator with configuration and template context.

        Parameters
        ----------
        page_config : PageConfig
            Page configuration describing the source, route, and rendering
            options.
        templates_dir : Path, optional
            Directory containing Jinja templates; defaults to the package templates.
        source : str, optional
            Override for the markdown source; falls back to the page config.
        output_dir : Path, optional
            Override for the HTML output directory; defaults to the page config output.
        """
        self.page = page_config
        self.source = source or page_config.source
        self.output_dir = output_dir or page_config.output_dir
        default_templates = Path(__file__).resolve().parents[1] / "templates"
        self.templates_dir = templates_dir or default_templates
        self.renderer = HtmlContentRenderer(
            page_config.pygments_style, highlight=page_config.highlight
        )
        self.document_renderer = DocumentRenderer(
            self.renderer,
            templates_dir=self.templates_dir,
            disclosure_label=page_config.disclosure_label,
        )
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.get_template("content_page.jinja")

    def run(self) -> list[Path]:
        """Render the page into an HTML file on disk.

        Returns
        -------
        list[Path]
            Path to the generated HTML document.

        Notes
        -----
        Side effects include writing the HTML file and the metadata JSON into
        the output directory. Section-marker problems are logged as warnings
        and recorded in the metadata; they never stop generation.
        """
        content = load_content(self.source)
        problems = find_marker_problems(content.markdown)
        for problem in problems:
            logger.warning("%s:%d: %s", self.source, problem.line, problem.message)

        rendered = self.document_renderer.render(content.markdown)
        body = rendered.html
        if self.page.prerender_controls:
            body = prerender_heading_controls(body)

        title = self._resolve_title(content)
        generated_at = dt.datetime.now(dt.UTC)
        html = self.template.render(
            page=self.page,
            page_url=self.page.page_url,
            title=title,
            html_title=f"{title} | {self.page.site_name}",
            description=content.front_matter.get("excerpt")
            or content.front_matter.get("description"),
            headings=rendered.headings,
            body=body,
            pygments_css=self.renderer.stylesheet,
            generated_at=generated_at,
        )

        self.output_dir.mkdir(parents=True, exist_ok=True)
        output_path = self.output_dir / self.page.output_path.name
        output_path.write_text(html, encoding="utf-8")
        logger.info("rendered %s from %s", output_path, self.source)
        self._write_metadata(output_path.name, title, rendered, problems, generated_at)
        return [output_path]

    def _resolve_title(self, content: ContentDocument) -> str:
        """Return the configured title, the document's own title, or the key."""
        return (
            self.page.title
            or content.title
            or self.page.key.replace("-", " ").title()
        )

    def _metadata_path(self) -> Path:
        """Return the path to the metadata JSON file for this page."""
        filename = PAGE_META_TEMPLATE.format(key=self.page.key)
        return self.output_dir / filename

    def _write_metadata(
        self,
        filename: str,
        title: str,
        rendered: RenderedDocument,
        problems: list[MarkerProblem],
        generated_at: dt.datetime,
    ) -> None:
        """Persist the page's table of contents and authoring problems."""
        metadata = {
            "file": filename,
            "title": title,
            "url": self.page.page_url,
            "generated_at": generated_at.isoformat(),
            "has_solution": rendered.has_solution,
            "headings": [
                {"id": h.id, "text": h.text, "level": h.level}
                for h in rendered.headings
            ],
            "marker_problems": [
                {"line": p.line, "message": p.message} for p in problems
            ],
        }
        self._metadata_path().write_text(json.dumps(metadata), encoding="utf-8")


__all__ = ["PageContentGenerator"]
