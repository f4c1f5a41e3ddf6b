"""Shared dataclasses used by the rendering pipeline."""

from __future__ import annotations

import dataclasses as dc

from daily_pages.markdown_parser import SegmentRole


@dc.dataclass(frozen=True, slots=True)
class HeadingRecord:
    """Heading metadata collected while converting markdown.

    Attributes
    ----------
    id : str
        Slug assigned to the heading element, unique within one render.
    text : str
        Plain heading text.
    level : int
        Heading level between 1 and 6.
    """

    id: str
    text: str
    level: int


@dc.dataclass(slots=True)
class RenderedFragment:
    """Sanitized HTML for one segment and the headings it contains."""

    html: str
    headings: list[HeadingRecord] = dc.field(default_factory=list)


@dc.dataclass(slots=True)
class RenderedSegment:
    """A converted segment paired with the role that decides its treatment."""

    role: SegmentRole
    fragment: RenderedFragment


@dc.dataclass(slots=True)
class RenderedDocument:
    """Full rendering of one markdown document.

    Attributes
    ----------
    segments : list[RenderedSegment]
        Converted segments in document order.
    headings : list[HeadingRecord]
        Headings across every segment, in document order; ids are unique.
    html : str
        Page body markup with the hidden segment wrapped in its disclosure
        container.
    """

    segments: list[RenderedSegment]
    headings: list[HeadingRecord]
    html: str

    @property
    def has_solution(self) -> bool:
        """Return ``True`` when the document contains a hidden segment."""
        return any(seg.role is SegmentRole.HIDDEN for seg in self.segments)


__all__ = ["HeadingRecord", "RenderedDocument", "RenderedFragment", "RenderedSegment"]
