"""Shared models used by the page generation pipeline."""

from __future__ import annotations

import dataclasses as dc

import msgspec

from kb_pages.content import Article  # noqa: TC001 - used for runtime type metadata


@dc.dataclass(slots=True)
class SectionGroup:
    """Articles sharing a first path segment, rendered as one landing page.

    Attributes
    ----------
    key : str
        First path segment shared by every article in the group.
    label : str
        Title-cased rendering of ``key`` used in navigation.
    path : str
        Output directory of the landing page (equal to ``key``).
    articles : list[Article]
        Group members sorted by title.
    """

    key: str
    label: str
    path: str
    articles: list[Article] = dc.field(default_factory=list)

    @property
    def count(self) -> int:
        """Return the number of articles in the group."""
        return len(self.articles)


@dc.dataclass(slots=True)
class HomePageModel:
    """Aggregate data shown on the site home page."""

    title: str
    description: str
    groups: list[SectionGroup]
    total_articles: int


@dc.dataclass(slots=True)
class LandingPageModel:
    """A section landing page listing previews of the group's articles."""

    group: SectionGroup
    title: str
    description: str


@dc.dataclass(slots=True)
class ArticlePageModel:
    """An article together with the siblings used for prev/next links."""

    article: Article
    group: SectionGroup
    siblings: list[Article]


class SearchDoc(msgspec.Struct, frozen=True):
    """One record of the client-side search index."""

    id: str
    title: str
    category: str
    body: str
    url: str


@dc.dataclass(slots=True)
class SiteModel:
    """Everything derived from the content document for a single run.

    Attributes
    ----------
    articles : list[Article]
        Selected articles with normalized paths, sorted by path.
    groups : list[SectionGroup]
        Section groups sorted by label.
    home : HomePageModel
        Home page model.
    landings : list[LandingPageModel]
        One landing model per group.
    article_pages : list[ArticlePageModel]
        One page model per selected article, in path order.
    search_docs : list[SearchDoc]
        Search index records in path order.
    duplicates : list[str]
        Normalized paths dropped because an earlier article used them.
    total_input : int
        Number of articles in the content document.
    """

    articles: list[Article]
    groups: list[SectionGroup]
    home: HomePageModel
    landings: list[LandingPageModel]
    article_pages: list[ArticlePageModel]
    search_docs: list[SearchDoc]
    duplicates: list[str]
    total_input: int


__all__ = [
    "ArticlePageModel",
    "HomePageModel",
    "LandingPageModel",
    "SearchDoc",
    "SectionGroup",
    "SiteModel",
]
