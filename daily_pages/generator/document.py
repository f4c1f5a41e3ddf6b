"""Render a whole markdown document: split, convert, and gate the solution.

:class:`DocumentRenderer` owns the per-render heading-id context. Every segment
of one document is converted with the same ``seen`` set, so ids stay unique
across the visible text and the hidden solution, and every call to
:meth:`DocumentRenderer.render` starts from an empty set.

Example
-------
>>> from daily_pages.generator.document import DocumentRenderer
>>> doc = DocumentRenderer().render("## Task\nDo it.\n## Solution\nDone.")
>>> [h.id for h in doc.headings]
['task', 'solution']
>>> doc.has_solution
True
"""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from daily_pages.generator.models import RenderedDocument, RenderedSegment
from daily_pages.generator.renderer import HtmlContentRenderer
from daily_pages.markdown_parser import SegmentRole, split_segments
from daily_pages.slugs import slugify

DEFAULT_DISCLOSURE_LABEL = "View Solution"
DISCLOSURE_CONTENT_ID = "solution-content"


class DocumentRenderer:
    """Turn markdown documents into page body markup."""

    def __init__(
        self,
        renderer: HtmlContentRenderer | None = None,
        *,
        templates_dir: Path | None = None,
        disclosure_label: str = DEFAULT_DISCLOSURE_LABEL,
    ) -> None:
        """Initialize the document renderer.

        Parameters
        ----------
        renderer : HtmlContentRenderer, optional
            Segment converter; defaults to an unhighlighted renderer.
        templates_dir : Path, optional
            Directory containing ``document_body.jinja`` and
            ``disclosure.jinja``. Defaults to the package templates.
        disclosure_label : str, optional
            Text of the control that reveals the solution.
        """
        self.renderer = renderer or HtmlContentRenderer(highlight=False)
        self.disclosure_label = disclosure_label
        self.templates_dir = (
            templates_dir or Path(__file__).resolve().parents[1] / "templates"
        )
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.get_template("document_body.jinja")

    def render(self, markdown_text: str) -> RenderedDocument:
        """Render ``markdown_text`` into a :class:`RenderedDocument`.

        Parameters
        ----------
        markdown_text : str
            Full author document, front matter already removed.

        Returns
        -------
        RenderedDocument
            Converted segments, the combined heading list, and the body HTML in
            which the hidden segment sits inside a collapsed disclosure
            container.
        """
        seen: set[str] = set()
        segments: list[RenderedSegment] = []
        for segment in split_segments(markdown_text):
            fragment = self.renderer.render(segment.markdown, seen)
            segments.append(RenderedSegment(role=segment.role, fragment=fragment))

        disclosure_id = None
        if any(seg.role is SegmentRole.HIDDEN for seg in segments):
            disclosure_id = slugify(DISCLOSURE_CONTENT_ID, seen)

        html = self.template.render(
            segments=segments,
            disclosure_id=disclosure_id,
            disclosure_label=self.disclosure_label,
        ).strip()
        headings = [h for seg in segments for h in seg.fragment.headings]
        return RenderedDocument(segments=segments, headings=headings, html=html)


def render_document(
    markdown_text: str, *, disclosure_label: str = DEFAULT_DISCLOSURE_LABEL
) -> RenderedDocument:
    """Render ``markdown_text`` with a default :class:`DocumentRenderer`."""
    return DocumentRenderer(disclosure_label=disclosure_label).render(markdown_text)


__all__ = [
    "DEFAULT_DISCLOSURE_LABEL",
    "DocumentRenderer",
    "render_document",
]
