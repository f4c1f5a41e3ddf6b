"""Tests for the ``pages`` command functions."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from daily_pages import cli


@pytest.fixture
def site(tmp_path: Path) -> Path:
    """Write two content files and a configuration that points at them."""
    content = tmp_path / "content"
    content.mkdir()
    (content / "day-1.md").write_text(
        "# Day 1\n\n## Task\n\n## Solution\n\nDone.\n\n## Result\n\nOk.\n",
        encoding="utf-8",
    )
    (content / "day-2.md").write_text(
        "## Result\n\nEarly.\n\n## Solution\n\nA\n\n## Solution\n\nB\n",
        encoding="utf-8",
    )
    config = tmp_path / "pages.yaml"
    config.write_text(
        textwrap.dedent(
            f"""
            defaults:
              output_dir: {tmp_path / "public"}
            pages:
              day-1:
                source: content/day-1.md
              day-2:
                source: content/day-2.md
            """
        ).lstrip(),
        encoding="utf-8",
    )
    return config


def test_generate_single_page(site: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Generating one page prints the written path."""
    cli.generate(page="day-1", config=site)
    out = capsys.readouterr().out
    expected = site.parent / "public" / "day-1.html"
    assert expected.exists()
    assert f"wrote {expected}" in out


def test_generate_all_pages(site: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Without --page every configured page is rendered."""
    cli.generate(config=site)
    out = capsys.readouterr().out
    assert out.count("wrote ") == 2


def test_generate_rejects_overrides_for_many_pages(site: Path) -> None:
    """Source and output overrides only make sense for one page."""
    with pytest.raises(ValueError, match="multiple pages"):
        cli.generate(config=site, output_dir=site.parent / "x")


def test_check_reports_problems_and_fails(
    site: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Marker problems are printed per page and exit with status 1."""
    with pytest.raises(SystemExit) as excinfo:
        cli.check(config=site)
    assert excinfo.value.code == 1
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "day-1: ok"
    assert lines[1].startswith("day-2:1: '## Result' appears before")
    assert lines[2].startswith("day-2:9: duplicate")


def test_check_clean_page_succeeds(
    site: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """A clean page prints ok and returns normally."""
    cli.check(page="day-1", config=site)
    assert capsys.readouterr().out.strip() == "day-1: ok"


def test_toc_prints_headings(site: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """The table of contents lists level, id and text per heading."""
    cli.toc(site.parent / "content" / "day-1.md")
    assert capsys.readouterr().out.splitlines() == [
        "1\tday-1\tDay 1",
        "2\ttask\tTask",
        "2\tsolution\tSolution",
        "2\tresult\tResult",
    ]


def test_app_dispatches_toc(site: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """The Cyclopts app routes positional arguments to ``toc``."""
    path = site.parent / "content" / "day-1.md"
    try:
        cli.app(["toc", str(path)])
    except SystemExit as exc:
        assert not exc.code, "toc should succeed"
    assert "2\ttask\tTask" in capsys.readouterr().out
