"""Static knowledge-base site generator and live-content review tools.

This package exposes the CLI entry points used by ``uv run pages`` to render
the knowledge-base pages from a JSON content document, build the review queue
that pairs live-site pages with generated ones, and apply converted live
content to matched pages.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from kb_pages import main
>>> main(["generate", "--dry-run"])  # doctest: +SKIP
>>> from kb_pages import app
>>> isinstance(app.name[0], str)
True
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
