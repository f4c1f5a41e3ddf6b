"""Tests for the markdown converter: ids, escaping, code metadata and fallback.

The converter must never pass raw author HTML through, must keep fenced code
inert, must record fence languages on ``<pre>`` elements, and must degrade to
escaped paragraphs block by block rather than raise when conversion fails.
"""

from __future__ import annotations

import logging
import typing as typ

import pytest
from bs4 import BeautifulSoup
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from daily_pages.generator.renderer import HtmlContentRenderer, convert

if typ.TYPE_CHECKING:
    from markdown import Markdown


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


class _ExplodingTreeprocessor(Treeprocessor):
    def run(self, root: typ.Any) -> None:
        for element in root.iter():
            if "BOOM" in (element.text or ""):
                msg = "cannot render this block"
                raise RuntimeError(msg)


class _ExplodingExtension(Extension):
    """Fail conversion of any document that mentions BOOM."""

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        md.treeprocessors.register(_ExplodingTreeprocessor(md), "explode", 1)


def test_heading_gets_id_and_self_link() -> None:
    """Headings carry their slug and wrap their text in an anchor."""
    soup = _soup(convert("## Setup"))
    heading = soup.find("h2")
    assert heading is not None
    assert heading["id"] == "setup"
    link = heading.find("a", class_="heading-anchor")
    assert link is not None, "heading text should be wrapped in a self-link"
    assert link["href"] == "#setup"
    assert link.get_text() == "Setup"


def test_render_records_headings_in_order() -> None:
    """The fragment lists every heading with its level and plain text."""
    fragment = HtmlContentRenderer(highlight=False).render(
        "# Intro\n\n## Step *one*\n\n### Step &amp; two\n\n## Step one"
    )
    assert [(h.id, h.text, h.level) for h in fragment.headings] == [
        ("intro", "Intro", 1),
        ("step-one", "Step one", 2),
        ("step-two", "Step & two", 3),
        ("step-one-2", "Step one", 2),
    ]


def test_shared_seen_set_spans_calls() -> None:
    """Passing the same seen set keeps ids unique across segments."""
    renderer = HtmlContentRenderer(highlight=False)
    seen: set[str] = set()
    first = renderer.render("## Setup", seen)
    second = renderer.render("## Setup", seen)
    assert first.headings[0].id == "setup"
    assert second.headings[0].id == "setup-2"


def test_script_inside_fence_never_becomes_element() -> None:
    """Fenced HTML is displayed as code, not executed."""
    soup = _soup(convert("```html\n<script>alert(1)</script>\n```"))
    assert soup.find("script") is None, "fenced markup must stay inert"
    code = soup.find("code")
    assert code is not None
    assert "<script>alert(1)</script>" in code.get_text()


def test_raw_html_outside_fence_is_escaped() -> None:
    """Author HTML is shown as text rather than passed through."""
    soup = _soup(convert('Hello <script>alert(1)</script> <b onclick="x()">bold</b>'))
    assert soup.find("script") is None
    assert soup.find("b") is None
    assert "<script>alert(1)</script>" in soup.get_text()


def test_unsafe_link_protocols_are_removed() -> None:
    """javascript: URLs lose their href; http links keep it."""
    soup = _soup(convert("[bad](javascript:alert(1)) [good](https://example.com)"))
    links = soup.find_all("a")
    assert links[0].get("href") is None
    assert links[1]["href"] == "https://example.com"


def test_fence_language_recorded_on_pre() -> None:
    """Plain code blocks expose their language as data-language."""
    soup = _soup(convert("```python\nprint('hi')\n```"))
    pre = soup.find("pre")
    assert pre is not None
    assert pre["data-language"] == "python"


def test_fence_without_language_has_no_metadata() -> None:
    """Unlabelled fences do not invent a language."""
    soup = _soup(convert("```\nplain\n```"))
    pre = soup.find("pre")
    assert pre is not None
    assert not pre.has_attr("data-language")


def test_highlighted_fence_keeps_language() -> None:
    """Pygments output still records the fence language on the pre element."""
    renderer = HtmlContentRenderer(highlight=True)
    soup = _soup(renderer.markdown("Text\n\n```bash\necho hi\n```"))
    wrapper = soup.find("div", class_="codehilite")
    assert wrapper is not None, "expected a codehilite wrapper"
    assert wrapper["data-language"] == "bash"
    pre = wrapper.find("pre")
    assert pre is not None
    assert pre["data-language"] == "bash"


def test_inline_code_is_untouched() -> None:
    """Inline code renders as bare code without metadata."""
    soup = _soup(convert("Run `make test` now."))
    code = soup.find("code")
    assert code is not None
    assert code.get_text() == "make test"
    assert code.find_parent("pre") is None
    assert not code.attrs


def test_tables_lists_and_blockquotes_render() -> None:
    """Standard block structures map onto standard HTML."""
    soup = _soup(
        convert(
            "| a | b |\n|---|---|\n| 1 | 2 |\n\n- one\n- two\n\n> quoted\n\n"
            "![alt text](/img.png)"
        )
    )
    assert soup.find("table") is not None
    assert len(soup.find_all("li")) == 2
    assert soup.find("blockquote") is not None
    img = soup.find("img")
    assert img is not None
    assert img["alt"] == "alt text"


def test_stylesheet_only_when_highlighting() -> None:
    """Highlighting exposes Pygments CSS; plain rendering exposes none."""
    assert ".codehilite" in HtmlContentRenderer(highlight=True).stylesheet
    assert HtmlContentRenderer(highlight=False).stylesheet == ""


def test_empty_input_renders_empty_fragment() -> None:
    """Whitespace-only segments render to nothing."""
    fragment = HtmlContentRenderer(highlight=False).render("  \n\n")
    assert fragment.html == ""
    assert fragment.headings == []


def test_failing_block_is_escaped_and_rest_renders(
    caplog: pytest.LogCaptureFixture,
) -> None:
    """A block that cannot convert becomes an escaped paragraph."""
    renderer = HtmlContentRenderer(highlight=False, extensions=[_ExplodingExtension()])
    with caplog.at_level(logging.WARNING, logger="daily_pages.generator.renderer"):
        fragment = renderer.render("# Title\n\nBOOM <i>here</i>\n\n## After")

    soup = _soup(fragment.html)
    assert [h["id"] for h in soup.find_all(["h1", "h2"])] == ["title", "after"]
    assert [h.id for h in fragment.headings] == ["title", "after"]
    paragraph = soup.find("p")
    assert paragraph is not None
    assert paragraph.get_text() == "BOOM <i>here</i>"
    assert soup.find("i") is None
    assert any("BOOM" in record.getMessage() for record in caplog.records), (
        "expected the failing block to be logged"
    )


def test_indented_code_does_not_take_fence_language() -> None:
    """Highlighted indented blocks stay unlabelled; fences keep their own."""
    renderer = HtmlContentRenderer(highlight=True)
    soup = _soup(
        renderer.markdown(
            "Intro\n\n    indented code\n\nMore\n\n```python\nprint(1)\n```\n\n"
            "```\nplain\n```\n\n```bash\necho hi\n```"
        )
    )
    pres = soup.find_all("pre")
    assert len(pres) == 4
    assert pres[0].get("data-language") is None, "indented code has no fence label"
    assert "indented code" in pres[0].get_text()
    assert pres[1].get("data-language") == "python"
    assert pres[2].get("data-language") is None
    assert pres[3].get("data-language") == "bash"


def test_heading_text_avoids_deprecated_markdown_helpers(
    recwarn: pytest.WarningsRecorder,
) -> None:
    """Extracting heading text raises no deprecation warnings from our code."""
    fragment = HtmlContentRenderer(highlight=False).render("## Step &amp; *two*")
    assert fragment.headings[0].text == "Step & two"
    deprecations = [
        str(warning.message)
        for warning in recwarn
        if issubclass(warning.category, DeprecationWarning)
        and "daily_pages" in warning.filename
    ]
    assert deprecations == []


def test_table_alignment_survives_sanitizing() -> None:
    """Column alignment styles are kept; other inline styles are dropped."""
    soup = _soup(convert("| left | right |\n|:--|--:|\n| 1 | 2 |"))
    headers = soup.find_all("th")
    assert "text-align: left" in headers[0]["style"]
    assert "text-align: right" in headers[1]["style"]
    cells = soup.find_all("td")
    assert "text-align: right" in cells[1]["style"]
