"""Load and validate the JSON content document for knowledge-base builds.

This subpackage parses the ``data.json`` content source, checks that every
article, section, and code block carries its required fields, and produces
typed dataclasses (:class:`ContentDocument`, :class:`Article`, etc.) that the
page generator consumes. The primary entry point is :func:`load_content`.

Examples
--------
>>> from pathlib import Path
>>> from kb_pages.content import load_content
>>> document = load_content(Path("data.json"))  # doctest: +SKIP
>>> document.articles[0].path  # doctest: +SKIP
'tools/date-tool'
"""

from .loader import load_content, parse_content
from .models import Article, CodeBlock, ContentDocument, ContentError, Section

__all__ = [
    "Article",
    "CodeBlock",
    "ContentDocument",
    "ContentError",
    "Section",
    "load_content",
    "parse_content",
]
