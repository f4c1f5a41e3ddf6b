"""Record fenced code languages on highlighted blocks.

With ``codehilite`` enabled, Python-Markdown renders both fenced and indented
code as ``<div class="codehilite">``, and Pygments drops the fence's language
token. :class:`FenceLanguageExtension` reads each fence's language just before
``fenced_code`` runs and writes it onto that fence's stashed wrapper as
``data-language`` right after, so indented blocks never receive one.
"""

from __future__ import annotations

import re
import typing as typ
from html import escape

from markdown.extensions import Extension
from markdown.extensions.attr_list import get_attrs_and_remainder
from markdown.extensions.fenced_code import FencedBlockPreprocessor
from markdown.preprocessors import Preprocessor

from daily_pages._constants import LANGUAGE_ATTR

if typ.TYPE_CHECKING:
    from markdown import Markdown

# fenced_code registers its preprocessor at priority 25.
COLLECT_PRIORITY = 26
TAG_PRIORITY = 24

WRAPPER_OPEN_TAG = re.compile(r'^<div class="([^"]*\bcodehilite\b[^"]*)">')


def _fence_language(match: re.Match[str]) -> tuple[str | None, int | None]:
    """Return a fence's language, or the resume offset when it is skipped."""
    if match.group("attrs"):
        attrs, remainder = get_attrs_and_remainder(match.group("attrs"))
        if remainder:
            return None, match.end("attrs")
        return next((value for key, value in attrs if key == "."), None), None
    return match.group("lang") or None, None


def _tag_wrapper(block: str, language: str) -> str:
    """Return ``block`` with ``data-language`` on its ``codehilite`` wrapper."""
    attr = f'{LANGUAGE_ATTR}="{escape(language, quote=True)}"'
    return WRAPPER_OPEN_TAG.sub(
        lambda match: f'<div class="{match.group(1)}" {attr}>', block, count=1
    )


class FenceLanguageCollector(Preprocessor):
    """List fence languages in the order ``fenced_code`` will stash them."""

    def __init__(self, md: Markdown, languages: list[str | None]) -> None:
        super().__init__(md)
        self.languages = languages

    def run(self, lines: list[str]) -> list[str]:
        text = "\n".join(lines)
        self.languages.clear()
        pattern = FencedBlockPreprocessor.FENCED_BLOCK_RE
        index = 0
        while (match := pattern.search(text, index)) is not None:
            language, resume = _fence_language(match)
            if resume is not None:
                index = resume
                continue
            self.languages.append(language)
            index = match.end()
        return lines


class FenceLanguageTagger(Preprocessor):
    """Add ``data-language`` to the highlighted wrapper of each fence."""

    def __init__(self, md: Markdown, languages: list[str | None]) -> None:
        super().__init__(md)
        self.languages = languages

    def run(self, lines: list[str]) -> list[str]:
        blocks = self.md.htmlStash.rawHtmlBlocks
        for position, language in enumerate(self.languages[: len(blocks)]):
            block = blocks[position]
            if not language or not isinstance(block, str):
                continue
            blocks[position] = _tag_wrapper(block, language)
        return lines


class FenceLanguageExtension(Extension):
    """Keep fence languages on ``codehilite`` output."""

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the collector before ``fenced_code`` and the tagger after it."""
        languages: list[str | None] = []
        md.preprocessors.register(
            FenceLanguageCollector(md, languages),
            "daily_fence_languages",
            COLLECT_PRIORITY,
        )
        md.preprocessors.register(
            FenceLanguageTagger(md, languages),
            "daily_fence_language_tags",
            TAG_PRIORITY,
        )


__all__ = ["FenceLanguageExtension"]
