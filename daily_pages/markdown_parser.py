r"""Split exercise markdown into visible and spoiler-gated segments.

Exercises mark their worked answer with a ``## Solution`` heading. Everything
from that heading up to the next visible section (``## Result``,
``## Validation``, ``## Links`` or ``## Share Your Success``) is rendered
behind a disclosure control, while the surrounding text renders normally. The
split is line based and happens on raw markdown, before any HTML exists, so
segment boundaries are exact.

Example
-------
>>> from daily_pages.markdown_parser import split_segments
>>> [s.role.value for s in split_segments("A\n## Solution\nB\n## Result\nC")]
['body', 'hidden', 'after']
"""

from __future__ import annotations

import dataclasses as dc
import enum
import re

from ._constants import SOLUTION_HEADING, VISIBLE_SECTION_TITLES

FENCE_PATTERN = re.compile(r"^[ ]{0,3}(`{3,}|~{3,})")
VISIBLE_SECTION_PATTERN = re.compile(
    r"^## (?:{})".format("|".join(re.escape(t) for t in VISIBLE_SECTION_TITLES))
)


class SegmentRole(enum.StrEnum):
    """Rendering treatment applied to a segment."""

    BODY = "body"
    HIDDEN = "hidden"
    AFTER = "after"


@dc.dataclass(frozen=True, slots=True)
class Segment:
    """Contiguous slice of a markdown document tagged with its role.

    Attributes
    ----------
    role : SegmentRole
        ``body`` for normal flow, ``hidden`` for the solution, ``after`` for
        the visible sections following the solution.
    markdown : str
        Raw markdown lines belonging to the segment, joined by newlines.
    """

    role: SegmentRole
    markdown: str


@dc.dataclass(frozen=True, slots=True)
class MarkerProblem:
    """Content-authoring issue found while scanning section markers."""

    line: int
    message: str


def top_level_flags(lines: list[str]) -> list[bool]:
    """Flag each line as top level (``True``) or inside a fenced code block."""
    flags: list[bool] = []
    fence: str | None = None
    for line in lines:
        match = FENCE_PATTERN.match(line)
        if fence is None:
            flags.append(True)
            if match:
                fence = match.group(1)
            continue
        flags.append(False)
        if match and match.group(1)[0] == fence[0] and len(match.group(1)) >= len(fence):
            if not line.strip().strip(fence[0]):
                fence = None
    return flags


def _is_solution(line: str) -> bool:
    return line.rstrip("\r") == SOLUTION_HEADING


def _is_visible_marker(line: str) -> bool:
    return bool(VISIBLE_SECTION_PATTERN.match(line))


def split_segments(markdown_text: str) -> list[Segment]:
    """Partition ``markdown_text`` into ordered body/hidden/after segments.

    Parameters
    ----------
    markdown_text : str
        Author markdown, possibly containing a ``## Solution`` heading.

    Returns
    -------
    list[Segment]
        A single ``body`` segment holding the whole input when no solution
        heading is present. Otherwise a ``body`` segment (possibly empty), the
        ``hidden`` segment starting at the solution heading and, when a visible
        section follows, an ``after`` segment starting at that heading.

    Notes
    -----
    Only the first ``## Solution`` heading is honoured. Lines inside fenced
    code blocks never count as markers.
    """
    lines = markdown_text.split("\n")
    top_level = top_level_flags(lines)

    start = next(
        (
            idx
            for idx, line in enumerate(lines)
            if top_level[idx] and _is_solution(line)
        ),
        None,
    )
    if start is None:
        return [Segment(SegmentRole.BODY, markdown_text)]

    end = next(
        (
            idx
            for idx in range(start + 1, len(lines))
            if top_level[idx] and _is_visible_marker(lines[idx])
        ),
        None,
    )

    segments = [Segment(SegmentRole.BODY, "\n".join(lines[:start]))]
    if end is None:
        segments.append(Segment(SegmentRole.HIDDEN, "\n".join(lines[start:])))
        return segments
    segments.append(Segment(SegmentRole.HIDDEN, "\n".join(lines[start:end])))
    segments.append(Segment(SegmentRole.AFTER, "\n".join(lines[end:])))
    return segments


def find_marker_problems(markdown_text: str) -> list[MarkerProblem]:
    """Report section-marker layouts that ``split_segments`` cannot honour.

    Parameters
    ----------
    markdown_text : str
        Author markdown to inspect.

    Returns
    -------
    list[MarkerProblem]
        One entry per duplicate ``## Solution`` heading and per visible-section
        heading that appears before the first solution heading of a document
        that has one. Line numbers are 1-based. Empty when the layout is valid.
    """
    lines = markdown_text.split("\n")
    top_level = top_level_flags(lines)
    problems: list[MarkerProblem] = []
    solution_line: int | None = None
    early_markers: list[int] = []
    for idx, line in enumerate(lines):
        if not top_level[idx]:
            continue
        if _is_solution(line):
            if solution_line is None:
                solution_line = idx + 1
            else:
                msg = (
                    f"duplicate '{SOLUTION_HEADING}' heading; only the one on "
                    f"line {solution_line} is hidden"
                )
                problems.append(MarkerProblem(idx + 1, msg))
        elif solution_line is None and _is_visible_marker(line):
            early_markers.append(idx + 1)

    if solution_line is not None:
        for line_no in early_markers:
            msg = (
                f"'{lines[line_no - 1].strip()}' appears before "
                f"'{SOLUTION_HEADING}' and does not close the hidden section"
            )
            problems.append(MarkerProblem(line_no, msg))
    return sorted(problems, key=lambda problem: problem.line)


__all__ = [
    "MarkerProblem",
    "Segment",
    "SegmentRole",
    "find_marker_problems",
    "split_segments",
    "top_level_flags",
]
