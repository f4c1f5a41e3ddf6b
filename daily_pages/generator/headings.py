"""Markdown extensions that shape headings and raw HTML during conversion."""

from __future__ import annotations

import typing as typ
import xml.etree.ElementTree as etree
from html import unescape as unescape_entities

from markdown.extensions import Extension
from markdown.extensions.toc import render_inner_html, strip_tags
from markdown.treeprocessors import Treeprocessor

from daily_pages._constants import HEADING_TAGS
from daily_pages.generator.models import HeadingRecord
from daily_pages.slugs import slugify

if typ.TYPE_CHECKING:
    from markdown import Markdown


class HeadingIdExtension(Extension):
    """Assign document-unique ids to headings and record them.

    The ``seen`` set is shared by every segment of one document render so ids
    stay unique across the visible and hidden parts of an exercise. ``records``
    receives a :class:`HeadingRecord` per heading in document order.
    """

    def __init__(self, seen: set[str], records: list[HeadingRecord]) -> None:
        super().__init__()
        self.seen = seen
        self.records = records

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the heading treeprocessor after inline processing."""
        processor = HeadingIdTreeprocessor(md, self.seen, self.records)
        md.treeprocessors.register(processor, "daily_heading_ids", 15)


class HeadingIdTreeprocessor(Treeprocessor):
    """Set ``id`` on each heading and wrap its content in a self-link."""

    def __init__(
        self, md: Markdown, seen: set[str], records: list[HeadingRecord]
    ) -> None:
        super().__init__(md)
        self.seen = seen
        self.records = records

    def run(self, root: etree.Element) -> None:
        """Walk the parsed tree in document order and annotate headings."""
        for element in list(root.iter()):
            if element.tag not in HEADING_TAGS:
                continue
            text = self._plain_text(element)
            slug = slugify(text, self.seen)
            element.set("id", slug)
            self._wrap_in_self_link(element, slug)
            self.records.append(
                HeadingRecord(id=slug, text=text, level=int(element.tag[1]))
            )

    def _plain_text(self, element: etree.Element) -> str:
        """Return heading text with markup removed and entities resolved."""
        text = strip_tags(render_inner_html(element, self.md))
        return unescape_entities(text).strip()

    @staticmethod
    def _wrap_in_self_link(element: etree.Element, slug: str) -> None:
        """Move the heading's children into ``<a class="heading-anchor">``."""
        link = etree.Element("a", {"class": "heading-anchor", "href": f"#{slug}"})
        link.text = element.text
        element.text = None
        for child in list(element):
            element.remove(child)
            link.append(child)
        element.append(link)


class EscapeHtmlExtension(Extension):
    """Treat raw HTML in markdown source as literal text.

    Removing the block and inline HTML processors makes Python-Markdown escape
    ``<`` and ``&`` in author HTML instead of passing it through. Fenced code
    is stashed before these processors would run and is escaped on its own.
    """

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Deregister the raw HTML processors."""
        md.preprocessors.deregister("html_block")
        md.inlinePatterns.deregister("html")


__all__ = [
    "EscapeHtmlExtension",
    "HeadingIdExtension",
    "HeadingIdTreeprocessor",
]
