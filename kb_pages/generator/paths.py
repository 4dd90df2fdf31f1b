"""Depth-relative link helpers for generated pages.

Every page links to assets, the search index, and its siblings through
relative paths computed from its own directory depth, so the output tree can
be served from any root. Page locations are expressed as tuples of path
segments relative to the output root (``()`` is the home page).
"""

from __future__ import annotations

import posixpath
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc


def article_segments(path: str) -> tuple[str, ...]:
    """Split a normalized article path into its non-empty segments."""
    return tuple(part for part in path.split("/") if part)


def relative_href(
    from_segments: cabc.Sequence[str], to_segments: cabc.Sequence[str]
) -> str:
    """Return a directory href from one page directory to another.

    The result always ends with ``/``; linking a directory to itself yields
    ``./``.
    """
    start = "/" + "/".join(from_segments)
    target = "/" + "/".join(to_segments)
    rel = posixpath.relpath(target, start=start)
    if rel in {"", "."}:
        return "./"
    return rel if rel.endswith("/") else f"{rel}/"


def asset_prefix(depth: int) -> str:
    """Return the prefix to the ``_assets`` directory beside the output root."""
    return "../" * (depth + 1)


def search_index_prefix(depth: int) -> str:
    """Return the prefix to the output root, where the search index lives."""
    return "../" * depth


def home_href(depth: int) -> str:
    """Return the href to the home page from a page at ``depth``."""
    return "../" * depth + "./"


__all__ = [
    "article_segments",
    "asset_prefix",
    "home_href",
    "relative_href",
    "search_index_prefix",
]
