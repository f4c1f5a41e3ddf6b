"""Rendering pipeline: markdown conversion, documents, and page output."""

from .document import DocumentRenderer, render_document
from .models import HeadingRecord, RenderedDocument, RenderedFragment, RenderedSegment
from .page_generator import PageContentGenerator
from .renderer import HtmlContentRenderer, convert

__all__ = [
    "DocumentRenderer",
    "HeadingRecord",
    "HtmlContentRenderer",
    "PageContentGenerator",
    "RenderedDocument",
    "RenderedFragment",
    "RenderedSegment",
    "convert",
    "render_document",
]
