"""End-to-end tests for rendering a configured page to disk.

``PageContentGenerator`` loads the page markdown, renders it with the
solution gate and heading anchors, writes ``<key>.html`` and records the
table of contents and section-marker problems in the ``PAGE_META_TEMPLATE``
JSON file.
"""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

import msgspec.json as msgspec_json
import pytest
from bs4 import BeautifulSoup

from daily_pages._constants import PAGE_META_TEMPLATE
from daily_pages.config import PageConfig
from daily_pages.generator import PageContentGenerator

EXERCISE = """---
title: Day 5 - Rolling updates
excerpt: Ship without downtime.
---
# Rolling updates

Roll out a new version.

## Setup

```bash
kubectl create deployment web --image=nginx:1.25
```

## Solution

## Setup

```bash
kubectl set image deployment/web nginx=nginx:1.27
```

## Result

It works.
"""


@pytest.fixture
def page_config(tmp_path: Path) -> PageConfig:
    """Build a page configuration rooted in a temp directory."""
    source = tmp_path / "day-5.md"
    source.write_text(EXERCISE, encoding="utf-8")
    return PageConfig(
        key="day-5",
        source=str(source),
        route="/advent-of-devops/day-5",
        output_dir=tmp_path / "public",
    )


@pytest.fixture
def generated_page(page_config: PageConfig) -> BeautifulSoup:
    """Run the generator and parse the written page."""
    written = PageContentGenerator(page_config).run()
    assert written == [page_config.output_dir / "day-5.html"]
    return BeautifulSoup(written[0].read_text(encoding="utf-8"), "html.parser")


def _metadata(page_config: PageConfig) -> dict[str, typ.Any]:
    path = page_config.output_dir / PAGE_META_TEMPLATE.format(key=page_config.key)
    return msgspec_json.decode(path.read_bytes())


def test_page_title_and_canonical_url(generated_page: BeautifulSoup) -> None:
    """Front matter supplies the title; the route builds the canonical URL."""
    assert generated_page.title.get_text() == "Day 5 - Rolling updates | DevOps Daily"
    canonical = generated_page.find("link", rel="canonical")
    assert canonical is not None
    assert canonical["href"] == "https://devops-daily.com/advent-of-devops/day-5"
    description = generated_page.find("meta", attrs={"name": "description"})
    assert description is not None
    assert description["content"] == "Ship without downtime."


def test_solution_is_gated_but_present(generated_page: BeautifulSoup) -> None:
    """The solution renders inside a collapsed disclosure container."""
    gate = generated_page.select_one("section.solution-reveal[data-disclosure]")
    assert gate is not None
    assert gate["data-state"] == "collapsed"
    content = gate.select_one(".solution-reveal-content")
    assert content is not None
    assert content.has_attr("hidden")
    assert "nginx=nginx:1.27" in content.get_text()


def test_toc_lists_unique_heading_ids(generated_page: BeautifulSoup) -> None:
    """The on-page contents link every heading by its unique id."""
    links = [a["href"] for a in generated_page.select(".content-page__toc a")]
    assert links == [
        "#rolling-updates",
        "#setup",
        "#solution",
        "#setup-2",
        "#result",
    ]
    for href in links:
        assert generated_page.find(id=href[1:]) is not None, href


def test_code_blocks_are_highlighted_with_language(
    generated_page: BeautifulSoup,
) -> None:
    """Highlighted blocks keep their fence language on the pre element."""
    blocks = generated_page.select("div.codehilite pre")
    assert len(blocks) == 2
    assert {pre["data-language"] for pre in blocks} == {"bash"}
    assert generated_page.find("style") is not None, "expected Pygments CSS"


def test_metadata_records_headings(
    page_config: PageConfig, generated_page: BeautifulSoup  # noqa: ARG001
) -> None:
    """The metadata JSON mirrors the table of contents."""
    metadata = _metadata(page_config)
    assert metadata["file"] == "day-5.html"
    assert metadata["has_solution"] is True
    assert metadata["marker_problems"] == []
    assert metadata["headings"][3] == {"id": "setup-2", "text": "Setup", "level": 2}


def test_marker_problems_are_logged_and_recorded(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    """Duplicate solutions warn but still render."""
    source = tmp_path / "dup.md"
    source.write_text("## Solution\n\nA\n\n## Solution\n\nB\n", encoding="utf-8")
    page = PageConfig(
        key="dup", source=str(source), route="/dup", output_dir=tmp_path / "out"
    )
    with caplog.at_level(logging.WARNING, logger="daily_pages.generator.page_generator"):
        written = PageContentGenerator(page).run()

    assert written[0].exists()
    assert "duplicate '## Solution'" in caplog.text
    assert _metadata(page)["marker_problems"] == [
        {
            "line": 5,
            "message": "duplicate '## Solution' heading; only the one on line 1 "
            "is hidden",
        }
    ]


def test_prerendered_controls_are_emitted(page_config: PageConfig) -> None:
    """With prerendering enabled, headings ship with their copy buttons."""
    page_config.prerender_controls = True
    written = PageContentGenerator(page_config).run()
    soup = BeautifulSoup(written[0].read_text(encoding="utf-8"), "html.parser")
    article = soup.select_one(".content-page__body")
    assert article is not None
    buttons = article.find_all("button", attrs={"data-heading-id": True})
    assert [b["data-heading-id"] for b in buttons] == [
        "rolling-updates",
        "setup",
        "solution",
        "setup-2",
        "result",
    ]
    assert not article.find_all(attrs={"data-enhanced": True})


def test_overrides_redirect_source_and_output(
    page_config: PageConfig, tmp_path: Path
) -> None:
    """Explicit source and output overrides take precedence over config."""
    other = tmp_path / "other.md"
    other.write_text("# Other\n\nPlain page.\n", encoding="utf-8")
    out_dir = tmp_path / "elsewhere"
    written = PageContentGenerator(
        page_config, source=str(other), output_dir=out_dir
    ).run()
    assert written == [out_dir / "day-5.html"]
    soup = BeautifulSoup(written[0].read_text(encoding="utf-8"), "html.parser")
    assert soup.select_one("section.solution-reveal") is None
    assert soup.select_one(".content-page__title").get_text() == "Other"
