"""Typed dataclasses describing the knowledge-base content document."""

from __future__ import annotations

import dataclasses as dc


class ContentError(ValueError):
    """Raised when the content document or a content selection is invalid."""


@dc.dataclass(slots=True)
class CodeBlock:
    """A code sample attached to an article section."""

    code: str
    language: str
    explanation: str


@dc.dataclass(slots=True)
class Section:
    """A titled block of free text within an article.

    Attributes
    ----------
    header : str
        Heading text; may be empty.
    content : str
        Free text split into paragraphs and lists at render time.
    is_cloud : str
        Cloud-specific note rendered as a callout when non-empty.
    code_blocks : list[CodeBlock]
        Ordered code samples rendered after the content.
    """

    header: str
    content: str
    is_cloud: str = ""
    code_blocks: list[CodeBlock] = dc.field(default_factory=list)


@dc.dataclass(slots=True)
class Article:
    """One documentation page keyed by its slash-delimited path."""

    path: str
    title: str
    sections: list[Section] = dc.field(default_factory=list)


@dc.dataclass(slots=True)
class ContentDocument:
    """The validated content source for one generator run."""

    articles: list[Article]


__all__ = ["Article", "CodeBlock", "ContentDocument", "ContentError", "Section"]
