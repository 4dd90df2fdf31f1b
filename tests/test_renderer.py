"""HTML rendering tests for home, landing, and article pages."""

from __future__ import annotations

import datetime as dt
import typing as typ

import pytest
from bs4 import BeautifulSoup

from kb_pages.config import NavLinkConfig, SiteConfig
from kb_pages.content import load_content, parse_content
from kb_pages.generator import HtmlPageRenderer, build_site_model

if typ.TYPE_CHECKING:
    from pathlib import Path

    from kb_pages.generator import SiteModel


@pytest.fixture
def site() -> SiteConfig:
    return SiteConfig(
        title="Test KB",
        logo_primary="Test",
        logo_secondary="Docs",
        footer_links=[NavLinkConfig(label="Privacy", href="https://example.com/privacy")],
        copyright_holder="Example Co",
    )


@pytest.fixture
def model(content_file: Path) -> SiteModel:
    return build_site_model(load_content(content_file), site_title="Test KB")


@pytest.fixture
def renderer(site: SiteConfig, fixed_time: dt.datetime) -> HtmlPageRenderer:
    return HtmlPageRenderer(site, generated_at=fixed_time)


def _article_soup(renderer: HtmlPageRenderer, model: SiteModel, path: str) -> BeautifulSoup:
    page = next(page for page in model.article_pages if page.article.path == path)
    return BeautifulSoup(renderer.render_article(page, model.groups), "html.parser")


def test_home_page_lists_sections(renderer: HtmlPageRenderer, model: SiteModel) -> None:
    soup = BeautifulSoup(renderer.render_home(model.home), "html.parser")

    assert soup.title.string == "Test KB - Test KB"
    assert soup.select_one(".content__description").get_text() == (
        "Browse 3 documentation articles across 2 sections."
    )
    cards = soup.select(".card-grid a.card")
    assert [card["href"] for card in cards] == ["getting-started/", "tools/"]
    assert [card.select_one(".card__description").get_text() for card in cards] == [
        "1 article",
        "2 articles",
    ]
    assert soup.select_one('link[href="../_assets/css/tokens.css"]') is not None
    assert soup.select_one('link[href$="toc.css"]') is None
    assert soup.select_one(".search-overlay")["data-search-index"] == "search-index.json"
    assert soup.select_one(".header__logo")["href"] == "./"


def test_home_sidebar_is_collapsed(renderer: HtmlPageRenderer, model: SiteModel) -> None:
    soup = BeautifulSoup(renderer.render_home(model.home), "html.parser")

    for section in soup.select(".sidebar__section"):
        assert section.select_one(".sidebar__category")["aria-expanded"] == "false"
        assert section.select_one("ul").has_attr("hidden")
    overview = soup.select(".sidebar__link")[0]
    assert overview.get_text() == "Getting Started Overview"
    assert overview["href"] == "getting-started/"


def test_landing_page_previews_articles(renderer: HtmlPageRenderer, model: SiteModel) -> None:
    landing = next(item for item in model.landings if item.group.key == "tools")
    soup = BeautifulSoup(renderer.render_landing(landing, model.groups), "html.parser")

    assert soup.select_one(".content__title").get_text() == "Tools"
    assert soup.select_one(".content__description").get_text() == "2 articles in Tools."
    previews = soup.select(".card__description")
    assert previews[0].get_text().startswith("Format dates in templates.")
    assert previews[1].get_text() == "Work with lists."
    assert [card["href"] for card in soup.select("a.card")] == ["date-tool/", "list-tool/"]
    crumbs = soup.select(".breadcrumb__item")
    assert crumbs[0].a["href"] == ".././"
    assert crumbs[-1].get_text(strip=True) == "Tools"
    assert soup.select_one('link[href="../../_assets/css/tokens.css"]') is not None
    active = soup.select_one(".sidebar__link--active")
    assert active.get_text() == "Tools Overview"
    assert active["aria-current"] == "page"


def test_article_page_structure(renderer: HtmlPageRenderer, model: SiteModel) -> None:
    soup = _article_soup(renderer, model, "tools/date-tool")

    assert soup.select_one(".content__category-label").get_text() == "Tools"
    assert soup.select_one("h1.content__title").get_text() == "Date Tool"
    heading = soup.select_one(".content__body h2")
    assert heading["id"] == "tools-date-tool-section-1"
    assert heading.get_text() == "Overview"
    items = [li.get_text() for li in soup.select(".content__body ul li")]
    assert items == ["$_DateTool.getDate()", "$_DateTool.format()"]

    code = soup.select_one(".code-block code")
    assert code["id"] == "tools-date-tool-s1-c1"
    assert code["class"] == ["language-velocity"]
    assert code.get_text() == "$_DateTool.getCurrentDate()"
    assert soup.select_one(".code-block__language").get_text() == "Velocity"
    assert soup.select_one(".code-block__copy")["data-copy-target"] == "tools-date-tool-s1-c1"

    assert soup.select_one('link[href="../../../_assets/css/components/toc.css"]') is not None
    assert soup.select_one('script[src="../../../_assets/js/toc.js"]') is not None
    assert soup.select_one(".search-overlay")["data-search-index"] == "../../search-index.json"
    assert soup.select_one(".toc") is not None
    assert soup.select_one('meta[name="description"]')["content"].startswith(
        "Format dates in templates."
    )


def test_article_sidebar_and_breadcrumb(renderer: HtmlPageRenderer, model: SiteModel) -> None:
    soup = _article_soup(renderer, model, "tools/date-tool")

    expanded = [
        section.select_one(".sidebar__category").get_text(strip=True)
        for section in soup.select(".sidebar__section")
        if section.select_one(".sidebar__category")["aria-expanded"] == "true"
    ]
    assert expanded == ["Tools"]
    active = soup.select_one(".sidebar__link--active")
    assert active.get_text() == "Date Tool"
    assert active["href"] == "./"

    crumbs = soup.select(".breadcrumb__item")
    assert [crumb.get_text(strip=True) for crumb in crumbs] == ["Home", "Tools", "Date Tool"]
    assert crumbs[0].a["href"] == "../.././"
    assert crumbs[1].a["href"] == "../"


def test_pagination_stays_within_group(renderer: HtmlPageRenderer, model: SiteModel) -> None:
    first = _article_soup(renderer, model, "tools/date-tool")
    last = _article_soup(renderer, model, "tools/list-tool")

    previous = first.select_one(".content__prev")
    assert previous.name == "span"
    assert previous["aria-disabled"] == "true"
    assert "None" in previous.get_text()
    following = first.select_one(".content__next")
    assert following["href"] == "../list-tool/"
    assert "List Tool" in following.get_text()

    assert last.select_one(".content__prev")["href"] == "../date-tool/"
    assert last.select_one(".content__next").name == "span"


def test_footer_uses_generation_date_and_branding(
    renderer: HtmlPageRenderer, model: SiteModel
) -> None:
    soup = _article_soup(renderer, model, "tools/date-tool")

    assert soup.select_one(".content__meta").get_text(strip=True) == "Last updated: March 5, 2026"
    copyright_text = soup.select_one(".site-footer__copyright").get_text()
    assert "2026 Example Co" in copyright_text
    assert soup.select_one(".site-footer__link")["href"] == "https://example.com/privacy"
    assert soup.select_one(".header__logo").get_text() == "Test\xa0Docs"


def test_cloud_note_renders_callout(renderer: HtmlPageRenderer, model: SiteModel) -> None:
    soup = _article_soup(renderer, model, "getting-started/install")

    callout = soup.select_one(".content__body .callout--info")
    assert callout.select_one(".callout__title").get_text() == "Cloud"
    assert "Cloud customers skip this step." in callout.get_text()
    assert [li.get_text() for li in soup.select(".content__body ol li")] == [
        "Download",
        "Run the installer",
    ]


def test_code_blocks_without_code_or_text_are_skipped(
    renderer: HtmlPageRenderer, article_factory: typ.Callable[..., dict[str, object]]
) -> None:
    document = parse_content(
        {
            "articles": [
                article_factory(
                    "a/b",
                    "B",
                    code_blocks=[
                        {"code": "  ", "language": "js", "explanation": ""},
                        {"code": "", "language": "", "explanation": "Only words."},
                        {"code": "<b>x</b>", "language": "cobol", "explanation": ""},
                    ],
                )
            ]
        }
    )
    model = build_site_model(document, site_title="KB")
    page = model.article_pages[0]
    soup = BeautifulSoup(renderer.render_article(page, model.groups), "html.parser")

    blocks = soup.select(".code-block")
    assert len(blocks) == 1
    code = blocks[0].select_one("code")
    assert code["id"] == "a-b-s1-c3"
    assert code["class"] == ["language-none"]
    assert code.get_text() == "<b>x</b>"
    assert blocks[0].select_one(".code-block__language").get_text() == "Plain Text"
    assert "Only words." in soup.select_one(".content__body").get_text()


def test_article_without_content_shows_placeholder(renderer: HtmlPageRenderer) -> None:
    document = parse_content({"articles": [{"path": "a/b", "title": "B", "sections": []}]})
    model = build_site_model(document, site_title="KB")
    soup = BeautifulSoup(
        renderer.render_article(model.article_pages[0], model.groups), "html.parser"
    )

    assert soup.select_one(".content__body").get_text(strip=True) == "No content available."
    assert soup.select_one('meta[name="description"]')["content"] == ""
