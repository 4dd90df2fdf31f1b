"""Tests for deriving section groups and page models from content."""

from __future__ import annotations

import logging
import typing as typ

import pytest

from kb_pages.content import ContentError, load_content, parse_content
from kb_pages.generator.builder import (
    build_search_doc,
    build_section_groups,
    build_site_model,
    dedupe_articles,
    group_key,
    normalize_article_path,
    parse_include_paths,
)

if typ.TYPE_CHECKING:
    from pathlib import Path


def _document(article_factory: typ.Callable[..., dict[str, object]], *paths: str):
    return parse_content(
        {"articles": [article_factory(path, f"Title {path}") for path in paths]}
    )


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("a/b", "a/b"),
        ("/a/b/", "a/b"),
        ("a\\b", "a/b"),
        ("  a/b  ", "a/b"),
    ],
)
def test_normalize_article_path(raw: str, expected: str) -> None:
    assert normalize_article_path(raw) == expected


def test_group_key_is_first_segment() -> None:
    assert group_key("tools/date-tool") == "tools"
    assert group_key("single") == "single"


def test_duplicates_keep_first_and_log(
    article_factory: typ.Callable[..., dict[str, object]],
    caplog: pytest.LogCaptureFixture,
) -> None:
    document = parse_content(
        {
            "articles": [
                article_factory("a/b", "First"),
                article_factory("a/b/", "Second"),
            ]
        }
    )

    with caplog.at_level(logging.WARNING):
        unique, duplicates = dedupe_articles(document.articles)

    assert [article.title for article in unique] == ["First"]
    assert duplicates == ["a/b"]
    assert "Duplicate article paths skipped (1):" in caplog.text
    assert "  - a/b" in caplog.text


def test_duplicate_listing_is_truncated(
    article_factory: typ.Callable[..., dict[str, object]],
    caplog: pytest.LogCaptureFixture,
) -> None:
    articles = [article_factory("a/b", "First")]
    articles.extend(article_factory("a/b", f"Copy {index}") for index in range(22))

    with caplog.at_level(logging.WARNING):
        dedupe_articles(parse_content({"articles": articles}).articles)

    assert "... and 2 more" in caplog.text


@pytest.mark.parametrize("path", ["///", "a/../b", "./a"])
def test_unusable_paths_are_rejected(
    article_factory: typ.Callable[..., dict[str, object]], path: str
) -> None:
    document = parse_content({"articles": [article_factory(path, "Bad")]})

    with pytest.raises(ContentError, match="Article path"):
        dedupe_articles(document.articles)


def test_groups_sorted_by_label_and_articles_by_title(
    article_factory: typ.Callable[..., dict[str, object]],
) -> None:
    document = parse_content(
        {
            "articles": [
                article_factory("tools/z", "zeta"),
                article_factory("tools/a", "Alpha"),
                article_factory("admin/users", "Users"),
            ]
        }
    )

    groups = build_section_groups(document.articles)

    assert [group.label for group in groups] == ["Admin", "Tools"]
    assert [article.title for article in groups[1].articles] == ["Alpha", "zeta"]
    assert groups[1].count == 2


def test_site_model_for_sample_content(content_file: Path) -> None:
    model = build_site_model(load_content(content_file), site_title="KB")

    assert [article.path for article in model.articles] == [
        "getting-started/install",
        "tools/date-tool",
        "tools/list-tool",
    ]
    assert model.home.description == (
        "Browse 3 documentation articles across 2 sections."
    )
    assert [landing.description for landing in model.landings] == [
        "1 article in Getting Started.",
        "2 articles in Tools.",
    ]
    tools_page = model.article_pages[1]
    assert tools_page.group.key == "tools"
    assert [sibling.path for sibling in tools_page.siblings] == [
        "tools/date-tool",
        "tools/list-tool",
    ]


def test_search_doc_collects_section_text(content_file: Path) -> None:
    document = load_content(content_file)

    doc = build_search_doc(document.articles[0])

    assert doc.id == "tools-date-tool"
    assert doc.category == "Tools"
    assert doc.url == "/tools/date-tool/"
    assert doc.body.startswith("Overview Format dates in templates.")
    assert doc.body.endswith("Returns the current date.")


def test_include_filter_selects_requested_articles(content_file: Path) -> None:
    model = build_site_model(
        load_content(content_file),
        site_title="KB",
        include_paths=parse_include_paths("tools/date-tool, /tools/list-tool/"),
    )

    assert [article.path for article in model.articles] == [
        "tools/date-tool",
        "tools/list-tool",
    ]
    assert model.total_input == 3


def test_unknown_include_paths_fail(content_file: Path) -> None:
    with pytest.raises(ContentError, match=r"Unknown include path\(s\): nope, also/nope"):
        build_site_model(
            load_content(content_file),
            site_title="KB",
            include_paths=["nope", "tools/date-tool", "also/nope"],
        )


def test_empty_include_token_is_rejected() -> None:
    with pytest.raises(ContentError, match="empty path token"):
        parse_include_paths("a/b,,c")


def test_single_segment_article_collides_with_landing(
    article_factory: typ.Callable[..., dict[str, object]],
) -> None:
    document = _document(article_factory, "tools", "tools/date-tool")

    with pytest.raises(ContentError, match="collide with section landing pages: tools"):
        build_site_model(document, site_title="KB")

    model = build_site_model(document, site_title="KB", generate_landings=False)
    assert [article.path for article in model.articles] == ["tools", "tools/date-tool"]
