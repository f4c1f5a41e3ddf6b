"""Convert author markdown into sanitized, heading-annotated HTML fragments.

The converter is a pure function of its input: no DOM, no network, no file
access. Headings receive their ids here (through :class:`HeadingIdExtension`)
so the server-rendered page already carries stable link targets, raw author
HTML is escaped, and fenced code keeps its language as ``data-language`` on the
``<pre>`` element for the client-side code block enhancer.

Example
-------
>>> from daily_pages.generator.renderer import convert
>>> convert("## Setup")
'<h2 id="setup"><a class="heading-anchor" href="#setup">Setup</a></h2>'
"""

from __future__ import annotations

import logging
import re
import typing as typ
from html import escape

from bs4 import BeautifulSoup
from markdown import Markdown
from pygments.formatters.html import HtmlFormatter

from daily_pages._constants import LANGUAGE_ATTR
from daily_pages.generator.fences import FenceLanguageExtension
from daily_pages.generator.headings import EscapeHtmlExtension, HeadingIdExtension
from daily_pages.generator.models import HeadingRecord, RenderedFragment
from daily_pages.generator.sanitizer import sanitize_html
from daily_pages.markdown_parser import top_level_flags

if typ.TYPE_CHECKING:
    from markdown.extensions import Extension
else:  # pragma: no cover - type-checking fallback
    Extension = typ.Any

logger = logging.getLogger(__name__)

FENCED_INDENT_PATTERN = re.compile(r"^[ ]{1,3}([`~]{3,})", re.MULTILINE)
FENCE_LABEL_PATTERN = re.compile(
    r"^([`~]{3,})([A-Za-z0-9_+#.-]+)?(,[^\r\n]+)$", re.MULTILINE
)
LANGUAGE_CLASS_PREFIX = "language-"


class HtmlContentRenderer:
    """Render markdown segments with consistent extensions and sanitization."""

    def __init__(
        self,
        pygments_style: str = "monokai",
        *,
        highlight: bool = True,
        extensions: typ.Sequence[Extension] = (),
    ) -> None:
        """Initialize a renderer.

        Parameters
        ----------
        pygments_style : str, optional
            Name of the Pygments style used for syntax highlighting. Defaults to
            ``"monokai"``.
        highlight : bool, optional
            Highlight fenced code with Pygments (``codehilite``). When ``False``
            code renders as plain ``<pre><code class="language-…">``.
        extensions : Sequence[Extension], optional
            Extra Python-Markdown extensions appended to the defaults.
        """
        self.pygments_style = pygments_style
        self.highlight = highlight
        self._formatter = HtmlFormatter(style=pygments_style, cssclass="codehilite")
        self._extra_extensions = list(extensions)

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        if not self.highlight:
            return ""
        return self._formatter.get_style_defs(".codehilite")

    def markdown(self, text: str, seen: set[str] | None = None) -> str:
        """Render ``text`` and return only the HTML."""
        return self.render(text, seen).html

    def render(self, text: str, seen: set[str] | None = None) -> RenderedFragment:
        """Convert one markdown segment into a :class:`RenderedFragment`.

        Parameters
        ----------
        text : str
            Markdown source for the segment.
        seen : set[str], optional
            Heading ids already used in the current document render. Shared
            between the segments of one document and updated in place. A fresh
            set is used when omitted.

        Returns
        -------
        RenderedFragment
            Sanitized HTML and the headings it contains, in document order.

        Notes
        -----
        Conversion never raises for content problems. When the whole document
        cannot be converted, it is converted block by block and any block that
        still fails is rendered as an escaped paragraph of its source.
        """
        seen = set() if seen is None else seen
        normalized = self._normalize_fenced_blocks(text)
        if not normalized.strip():
            return RenderedFragment(html="")

        records: list[HeadingRecord] = []
        snapshot = set(seen)
        try:
            html = self._convert(normalized, seen, records)
        except Exception:
            logger.warning(
                "markdown conversion failed; retrying block by block", exc_info=True
            )
            seen.clear()
            seen.update(snapshot)
            records.clear()
            html = self._convert_blocks(normalized, seen, records)

        html = sanitize_html(html)
        return RenderedFragment(html=self._tag_code_languages(html), headings=records)

    def _build_markdown(self, seen: set[str], records: list[HeadingRecord]) -> Markdown:
        extensions: list[Extension | str] = [
            "fenced_code",
            "tables",
            "sane_lists",
            EscapeHtmlExtension(),
            HeadingIdExtension(seen, records),
        ]
        if self.highlight:
            extensions.extend(["codehilite", FenceLanguageExtension()])
        extensions.extend(self._extra_extensions)
        return Markdown(
            extensions=extensions,
            extension_configs={
                "codehilite": {
                    "linenums": False,
                    "guess_lang": False,
                    "css_class": "codehilite",
                    "pygments_style": self.pygments_style,
                }
            },
        )

    def _convert(
        self, text: str, seen: set[str], records: list[HeadingRecord]
    ) -> str:
        """Run Python-Markdown over ``text``."""
        return self._build_markdown(seen, records).convert(text)

    def _convert_blocks(
        self, text: str, seen: set[str], records: list[HeadingRecord]
    ) -> str:
        """Convert ``text`` one top-level block at a time, escaping failures."""
        parts: list[str] = []
        for block in _split_blocks(text):
            snapshot = set(seen)
            mark = len(records)
            try:
                parts.append(self._convert(block, seen, records))
            except Exception:
                first_line = block.split("\n", 1)[0]
                logger.warning(
                    "rendering block as text after conversion error: %r",
                    first_line,
                    exc_info=True,
                )
                seen.clear()
                seen.update(snapshot)
                del records[mark:]
                parts.append(f"<p>{escape(block)}</p>")
        return "\n".join(parts)

    @staticmethod
    def _tag_code_languages(html: str) -> str:
        """Copy each code block's language onto its ``<pre>`` element."""
        if "<pre" not in html:
            return html
        soup = BeautifulSoup(html, "html.parser")
        for pre in soup.find_all("pre"):
            language = _code_language(pre)
            if language:
                pre[LANGUAGE_ATTR] = language
        return str(soup)

    @staticmethod
    def _normalize_fenced_blocks(text: str) -> str:
        without_indent = FENCED_INDENT_PATTERN.sub(r"\1", text)

        def _strip_labels(match: re.Match[str]) -> str:
            fence, language, _extras = match.groups()
            label = language or ""
            return f"{fence}{label}"

        return FENCE_LABEL_PATTERN.sub(_strip_labels, without_indent)


def _code_language(pre: typ.Any) -> str | None:
    """Return the fence language recorded on a ``<pre>`` block, if any."""
    code = pre.find("code")
    if code is not None:
        for css_class in code.get("class", []):
            if css_class.startswith(LANGUAGE_CLASS_PREFIX):
                return css_class[len(LANGUAGE_CLASS_PREFIX) :]
    wrapper = pre.find_parent("div", class_="codehilite")
    if wrapper is not None:
        return wrapper.get(LANGUAGE_ATTR)
    return None


def _split_blocks(text: str) -> list[str]:
    """Split markdown into blank-line separated blocks, keeping fences whole."""
    lines = text.split("\n")
    blocks: list[str] = []
    current: list[str] = []
    for line, top_level in zip(lines, top_level_flags(lines), strict=True):
        if top_level and not line.strip():
            if current:
                blocks.append("\n".join(current))
                current = []
            continue
        current.append(line)
    if current:
        blocks.append("\n".join(current))
    return blocks


def convert(markdown_text: str) -> str:
    """Convert a standalone markdown document into sanitized HTML.

    Uses a fresh heading-id context and plain (unhighlighted) code blocks.
    """
    return HtmlContentRenderer(highlight=False).markdown(markdown_text)


__all__ = ["HtmlContentRenderer", "convert"]
