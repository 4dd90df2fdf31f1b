"""Build page models from the validated content document.

The builder normalizes and deduplicates article paths, applies the optional
include filter, groups articles by their first path segment, and derives the
home, landing, article, and search-index models. Duplicate paths are logged
and dropped; unknown include paths and unusable article paths are fatal.

Example
-------
>>> from kb_pages.content import Article
>>> from kb_pages.generator.builder import build_section_groups
>>> groups = build_section_groups([Article(path="a/b/c", title="C")])
>>> groups[0].key
'a'
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

from kb_pages._constants import FALLBACK_GROUP_KEY
from kb_pages.content import Article, ContentError

from .models import (
    ArticlePageModel,
    HomePageModel,
    LandingPageModel,
    SearchDoc,
    SectionGroup,
    SiteModel,
)
from .paths import article_segments
from .text import SPACE_RUN_PATTERN, clean_text, pluralize, slugify, title_case_segment

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from kb_pages.content import ContentDocument

logger = logging.getLogger(__name__)

MAX_LISTED_DUPLICATES = 20


def normalize_article_path(value: str) -> str:
    """Return ``value`` with forward slashes and no leading/trailing slashes."""
    return str(value or "").replace("\\", "/").strip().strip("/")


def group_key(path: str) -> str:
    """Return the section group key (first path segment) for ``path``."""
    segments = article_segments(path)
    return segments[0] if segments else FALLBACK_GROUP_KEY


def _sort_key(value: str) -> tuple[str, str]:
    return (value.casefold(), value)


def dedupe_articles(
    articles: cabc.Iterable[Article],
) -> tuple[list[Article], list[str]]:
    """Normalize paths and titles, keeping the first article per path.

    Parameters
    ----------
    articles : Iterable[Article]
        Articles in document order.

    Returns
    -------
    tuple[list[Article], list[str]]
        Unique articles (new instances with normalized ``path`` and cleaned
        ``title``) and the normalized paths that were dropped.

    Raises
    ------
    ContentError
        If a path normalizes to nothing or contains ``.``/``..`` segments.
    """
    seen: set[str] = set()
    unique: list[Article] = []
    duplicates: list[str] = []
    for article in articles:
        path = normalize_article_path(article.path)
        _check_article_path(article.path, path)
        if path in seen:
            duplicates.append(path)
            continue
        seen.add(path)
        unique.append(dc.replace(article, path=path, title=clean_text(article.title)))
    _log_duplicates(duplicates)
    return unique, duplicates


def _check_article_path(raw: str, path: str) -> None:
    if not path:
        msg = f"Article path {raw!r} has no path segments."
        raise ContentError(msg)
    if any(segment in {".", ".."} for segment in path.split("/")):
        msg = f"Article path {raw!r} must not contain '.' or '..' segments."
        raise ContentError(msg)


def _log_duplicates(duplicates: list[str]) -> None:
    if not duplicates:
        return
    logger.warning("Duplicate article paths skipped (%d):", len(duplicates))
    for path in duplicates[:MAX_LISTED_DUPLICATES]:
        logger.warning("  - %s", path)
    if len(duplicates) > MAX_LISTED_DUPLICATES:
        logger.warning("  ... and %d more", len(duplicates) - MAX_LISTED_DUPLICATES)


def parse_include_paths(raw: str) -> list[str]:
    """Split a comma-separated include list into normalized article paths.

    Raises
    ------
    ContentError
        If any token is empty after normalization.
    """
    normalized = [normalize_article_path(part) for part in raw.split(",")]
    if any(not part for part in normalized):
        msg = (
            "Invalid --include-paths value: empty path token found. "
            "Use a comma-separated list of non-empty paths."
        )
        raise ContentError(msg)
    return normalized


def filter_included(
    articles: list[Article], include_paths: cabc.Sequence[str]
) -> list[Article]:
    """Keep only articles whose path was requested; every request must match."""
    requested = [normalize_article_path(path) for path in include_paths]
    wanted = set(requested)
    selected = [article for article in articles if article.path in wanted]
    found = {article.path for article in selected}
    missing = [path for path in requested if path not in found]
    if missing:
        msg = f"Unknown include path(s): {', '.join(missing)}"
        raise ContentError(msg)
    return selected


def build_section_groups(articles: cabc.Iterable[Article]) -> list[SectionGroup]:
    """Partition articles by first path segment into sorted section groups."""
    groups: dict[str, SectionGroup] = {}
    for article in articles:
        key = group_key(article.path)
        group = groups.get(key)
        if group is None:
            group = SectionGroup(key=key, label=title_case_segment(key), path=key)
            groups[key] = group
        group.articles.append(article)
    for group in groups.values():
        group.articles.sort(key=lambda item: _sort_key(item.title))
    return sorted(groups.values(), key=lambda group: _sort_key(group.label))


def build_home_model(title: str, groups: list[SectionGroup]) -> HomePageModel:
    """Return the home page model with aggregate counts."""
    total = sum(group.count for group in groups)
    description = (
        f"Browse {pluralize(total, 'documentation article')} "
        f"across {pluralize(len(groups), 'section')}."
    )
    return HomePageModel(
        title=title, description=description, groups=groups, total_articles=total
    )


def build_landing_models(groups: list[SectionGroup]) -> list[LandingPageModel]:
    """Return one landing page model per section group."""
    return [
        LandingPageModel(
            group=group,
            title=group.label,
            description=f"{pluralize(group.count, 'article')} in {group.label}.",
        )
        for group in groups
    ]


def build_article_pages(
    articles: list[Article], groups: list[SectionGroup]
) -> list[ArticlePageModel]:
    """Pair each article with its group and the group's sorted siblings."""
    by_key = {group.key: group for group in groups}
    pages: list[ArticlePageModel] = []
    for article in articles:
        group = by_key[group_key(article.path)]
        pages.append(
            ArticlePageModel(article=article, group=group, siblings=group.articles)
        )
    return pages


def build_search_doc(article: Article) -> SearchDoc:
    """Return the search-index record for ``article``."""
    parts: list[str] = []
    for section in article.sections:
        explanation = " ".join(
            text
            for text in (clean_text(block.explanation) for block in section.code_blocks)
            if text
        )
        pieces = (clean_text(section.header), clean_text(section.content), explanation)
        parts.append(" ".join(piece for piece in pieces if piece))
    body = SPACE_RUN_PATTERN.sub(" ", " ".join(parts)).strip()
    return SearchDoc(
        id=slugify(article.path),
        title=article.title,
        category=title_case_segment(group_key(article.path)),
        body=body,
        url=f"/{article.path}/",
    )


def _check_landing_collisions(
    articles: list[Article], groups: list[SectionGroup]
) -> None:
    keys = {group.key for group in groups}
    clashes = sorted(article.path for article in articles if article.path in keys)
    if clashes:
        msg = (
            "Article path(s) collide with section landing pages: "
            f"{', '.join(clashes)}. Nest them below the section or disable "
            "landing generation."
        )
        raise ContentError(msg)


def build_site_model(
    document: ContentDocument,
    *,
    site_title: str,
    include_paths: cabc.Sequence[str] | None = None,
    generate_landings: bool = True,
) -> SiteModel:
    """Run every builder step and return the model for one generator run.

    Parameters
    ----------
    document : ContentDocument
        Validated content document.
    site_title : str
        Title used for the home page model.
    include_paths : Sequence[str] or None, optional
        When given, only these article paths are kept.
    generate_landings : bool, optional
        Whether landing pages will be written; enables the check that no
        article shares a landing page's output file.

    Returns
    -------
    SiteModel
        Fully derived models, with articles sorted by path.

    Raises
    ------
    ContentError
        For unusable article paths, unknown include paths, or articles that
        collide with landing pages.
    """
    unique, duplicates = dedupe_articles(document.articles)
    selected = unique
    if include_paths is not None:
        selected = filter_included(unique, include_paths)
    selected = sorted(selected, key=lambda item: _sort_key(item.path))

    groups = build_section_groups(selected)
    if generate_landings:
        _check_landing_collisions(selected, groups)

    return SiteModel(
        articles=selected,
        groups=groups,
        home=build_home_model(site_title, groups),
        landings=build_landing_models(groups),
        article_pages=build_article_pages(selected, groups),
        search_docs=[build_search_doc(article) for article in selected],
        duplicates=duplicates,
        total_input=len(document.articles),
    )


__all__ = [
    "build_article_pages",
    "build_home_model",
    "build_landing_models",
    "build_search_doc",
    "build_section_groups",
    "build_site_model",
    "dedupe_articles",
    "filter_included",
    "group_key",
    "normalize_article_path",
    "parse_include_paths",
]
