"""Cyclopts CLI entrypoint for rendering content pages and checking sources.

The ``pages`` console script defined here renders configured markdown pages
into static HTML, reports section-marker problems in their sources, and prints
a document's heading table of contents. Typical usage involves running
``pages generate`` locally or in CI and ``pages check`` as a content lint.

Examples
--------
Generate all pages for the default configuration:

>>> from daily_pages.cli import main
>>> main()  # doctest: +SKIP

Regenerate a single page into a custom directory:

>>> from daily_pages.cli import app
>>> app(["generate", "--page", "day-1", "--output-dir", "dist"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import load_site_config
from .content import load_content
from .generator import PageContentGenerator, render_document
from .markdown_parser import find_marker_problems

if typ.TYPE_CHECKING:
    from .config import PageConfig, SiteConfig

DEFAULT_CONFIG = Path("config/pages.yaml")
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

app = App(name="pages", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]


def _configure_logging(verbose: bool) -> None:
    """Send log records to stderr at WARNING, or INFO when ``verbose``."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:
            return str(path)
    return str(path)


def _select_pages(site_config: SiteConfig, page: str | None) -> list[PageConfig]:
    if page:
        return [site_config.get_page(page)]
    return list(site_config.pages.values())


@app.command(help="Render configured markdown pages into static HTML.")
def generate(
    *,
    page: typ.Annotated[
        str | None, Parameter(help="Page identifier", env_var="INPUT_PAGE")
    ] = None,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    source: typ.Annotated[
        str | None,
        Parameter(help="Override the page markdown source", env_var="INPUT_SOURCE"),
    ] = None,
    output_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the output folder", env_var="INPUT_OUTPUT_DIR"),
    ] = None,
    verbose: typ.Annotated[
        bool, Parameter(help="Log progress at INFO level", env_var="INPUT_VERBOSE")
    ] = False,
) -> None:
    """Generate HTML pages for the requested site configuration.

    Parameters
    ----------
    page : str or None, optional
        Specific page key to render; when ``None`` (default) all pages are
        rendered.
    config : Path, optional
        Path to the ``pages.yaml`` configuration file (overridable via
        ``INPUT_CONFIG``).
    source : str or None, optional
        Override markdown source path or URL for single-page rendering.
    output_dir : Path or None, optional
        Override output directory for single-page rendering.
    verbose : bool, optional
        Emit INFO-level log records.

    Raises
    ------
    ValueError
        If ``source`` or ``output_dir`` overrides are supplied when more than
        one page is requested.
    """
    _configure_logging(verbose)
    site_config = load_site_config(config)
    target_pages = _select_pages(site_config, page)

    if len(target_pages) > 1 and (source or output_dir):
        msg = "Cannot override source/output_dir when generating multiple pages."
        raise ValueError(msg)

    for page_config in target_pages:
        generator = PageContentGenerator(
            page_config, source=source, output_dir=output_dir
        )
        for path in generator.run():
            print(f"wrote {_format_path(path)}")


@app.command(help="Report misplaced or duplicate solution markers.")
def check(
    *,
    page: typ.Annotated[
        str | None, Parameter(help="Page identifier", env_var="INPUT_PAGE")
    ] = None,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
) -> None:
    """Lint page sources for section-marker layouts that render unexpectedly.

    Prints one ``<page>:<line>: <message>`` line per problem, or
    ``<page>: ok`` for a clean source.

    Raises
    ------
    SystemExit
        With status 1 when any problem is found.
    """
    _configure_logging(False)
    site_config = load_site_config(config)
    failed = False
    for page_config in _select_pages(site_config, page):
        content = load_content(page_config.source)
        problems = find_marker_problems(content.markdown)
        if not problems:
            print(f"{page_config.key}: ok")
            continue
        failed = True
        for problem in problems:
            print(f"{page_config.key}:{problem.line}: {problem.message}")
    if failed:
        raise SystemExit(1)


@app.command(help="Print the heading table of contents of a markdown file.")
def toc(
    path: typ.Annotated[Path, Parameter(help="Markdown file to inspect")],
) -> None:
    """Print ``level``, ``id`` and text for each heading, tab separated."""
    _configure_logging(False)
    content = load_content(path)
    for heading in render_document(content.markdown).headings:
        print(f"{heading.level}\t{heading.id}\t{heading.text}")


def main() -> None:
    """Invoke the Cyclopts application that powers the ``pages`` console command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
