"""Render author markdown into enhanced, spoiler-gated content pages.

This package exposes the CLI entry points used by ``pages`` to render
configured pages, lint their sources, and inspect heading tables of contents.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from daily_pages import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
