"""Render page models into complete HTML documents with Jinja templates.

:class:`HtmlPageRenderer` turns the home, landing, and article models built
by :mod:`kb_pages.generator.builder` into HTML strings. Rendering is free of
side effects: every href is computed relative to the page's own depth in the
output tree, and the only time-dependent output is the "last updated" date
and copyright year derived from ``generated_at``.

Example
-------
>>> from kb_pages.config import SiteConfig
>>> from kb_pages.generator.renderer import HtmlPageRenderer
>>> renderer = HtmlPageRenderer(SiteConfig())
>>> html = renderer.render_home(site_model.home)  # doctest: +SKIP
"""

from __future__ import annotations

import datetime as dt
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from kb_pages._constants import SEARCH_INDEX_FILENAME

from .paths import (
    article_segments,
    asset_prefix,
    home_href,
    relative_href,
    search_index_prefix,
)
from .text import (
    clean_text,
    code_title,
    normalize_language,
    pluralize,
    slugify,
    split_content_blocks,
)

if typ.TYPE_CHECKING:
    from kb_pages.config import SiteConfig
    from kb_pages.content import Article, Section

    from .models import ArticlePageModel, HomePageModel, LandingPageModel, SectionGroup

BASE_STYLESHEETS = (
    "css/tokens.css",
    "css/reset.css",
    "css/layout.css",
    "css/typography.css",
    "css/components/sidebar.css",
)
COMPONENT_STYLESHEETS = (
    "css/components/breadcrumb.css",
    "css/components/code-block.css",
    "css/components/callout.css",
    "css/components/accordion.css",
    "css/components/steps.css",
    "css/components/tabs.css",
    "css/components/table.css",
    "css/components/search.css",
    "css/components/theme-toggle.css",
    "css/components/cards.css",
    "css/components/footer.css",
    "css/components/buttons.css",
    "css/components/badges.css",
    "css/components/tooltip.css",
    "css/utilities.css",
)
VENDOR_SCRIPTS = (
    "vendor/prism/prism.min.js",
    "vendor/prism/prism-markup.min.js",
    "vendor/prism/prism-css.min.js",
    "vendor/prism/prism-javascript.min.js",
    "vendor/prism/prism-java.min.js",
    "vendor/prism/prism-python.min.js",
    "vendor/prism/prism-json.min.js",
    "vendor/prism/prism-bash.min.js",
    "vendor/prism/prism-yaml.min.js",
    "vendor/prism/prism-sql.min.js",
    "vendor/prism/prism-markup-templating.min.js",
    "vendor/prism/prism-velocity.min.js",
    "vendor/lunr/lunr.min.js",
    "js/theme.js",
    "js/sidebar.js",
)
TOC_STYLESHEET = "css/components/toc.css"
TOC_SCRIPT = "js/toc.js"
WIDGET_SCRIPTS = ("js/tabs.js", "js/accordion.js", "js/code-block.js", "js/search.js")

ARTICLE_DESCRIPTION_LIMIT = 180
CARD_PREVIEW_LIMIT = 140


class HtmlPageRenderer:
    """Render knowledge-base page models with the shared page chrome."""

    def __init__(
        self,
        site: SiteConfig,
        *,
        templates_dir: Path | None = None,
        generated_at: dt.datetime | None = None,
    ) -> None:
        """Initialize the renderer and its Jinja environment.

        Parameters
        ----------
        site : SiteConfig
            Branding and navigation links shared by every page.
        templates_dir : Path, optional
            Directory containing the Jinja templates; defaults to the
            package ``templates`` directory.
        generated_at : datetime, optional
            Timestamp used for the "last updated" text and copyright year;
            defaults to the current UTC time.
        """
        self.site = site
        self.templates_dir = templates_dir or Path(__file__).resolve().parents[1] / "templates"
        self.generated_at = generated_at or dt.datetime.now(dt.UTC)
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render_home(self, home: HomePageModel) -> str:
        """Return the home page HTML listing every section group."""
        here: tuple[str, ...] = ()
        cards = [
            {
                "href": relative_href(here, (group.path,)),
                "title": group.label,
                "description": pluralize(group.count, "article"),
            }
            for group in home.groups
        ]
        context = self._page_context(
            depth=0,
            title=home.title,
            description=home.description,
            sidebar=self._sidebar(home.groups, here),
            include_toc=False,
        )
        return self._render("home_page.jinja", context, home=home, cards=cards)

    def render_landing(
        self, landing: LandingPageModel, groups: list[SectionGroup]
    ) -> str:
        """Return a section landing page with previews of its articles."""
        group = landing.group
        here = (group.path,)
        cards = [
            {
                "href": relative_href(here, article_segments(article.path)),
                "title": article.title,
                "description": _first_content(article)[:CARD_PREVIEW_LIMIT]
                or "Open article",
            }
            for article in group.articles
        ]
        context = self._page_context(
            depth=1,
            title=landing.title,
            description=landing.description,
            sidebar=self._sidebar(groups, here, landing_key=group.key),
            include_toc=False,
        )
        context["breadcrumb"] = [{"label": group.label, "href": None}]
        return self._render("landing_page.jinja", context, landing=landing, cards=cards)

    def render_article(self, page: ArticlePageModel, groups: list[SectionGroup]) -> str:
        """Return an article page with sections, code samples, and pagination."""
        article = page.article
        here = article_segments(article.path)
        page_id = slugify(article.path) or "page"
        context = self._page_context(
            depth=len(here),
            title=article.title,
            description=clean_text(_raw_first_content(article)[:ARTICLE_DESCRIPTION_LIMIT]),
            sidebar=self._sidebar(
                groups, here, article_key=page.group.key, article_path=article.path
            ),
            include_toc=True,
        )
        context["breadcrumb"] = [
            {"label": page.group.label, "href": relative_href(here, (page.group.path,))},
            {"label": article.title, "href": None},
        ]
        return self._render(
            "article_page.jinja",
            context,
            article=article,
            category_label=page.group.label,
            sections=self._section_contexts(article.sections, page_id),
            pagination=self._pagination(page, here),
            last_updated=self.last_updated,
        )

    @property
    def last_updated(self) -> str:
        """Return the display date, e.g. ``October 19, 2026``."""
        stamp = self.generated_at
        return f"{stamp:%B} {stamp.day}, {stamp.year}"

    def _render(
        self, template_name: str, context: dict[str, typ.Any], **extra: typ.Any
    ) -> str:
        template = self.env.get_template(template_name)
        html = template.render(**context, **extra)
        if not html.endswith("\n"):
            html += "\n"
        return html

    def _page_context(
        self,
        *,
        depth: int,
        title: str,
        description: str,
        sidebar: list[dict[str, typ.Any]],
        include_toc: bool,
    ) -> dict[str, typ.Any]:
        """Build the context shared by the head, header, footer, and overlay."""
        stylesheets = list(BASE_STYLESHEETS)
        if include_toc:
            stylesheets.append(TOC_STYLESHEET)
        stylesheets.extend(COMPONENT_STYLESHEETS)
        scripts = list(VENDOR_SCRIPTS)
        if include_toc:
            scripts.append(TOC_SCRIPT)
        scripts.extend(WIDGET_SCRIPTS)
        return {
            "site": self.site,
            "page_title": title,
            "page_description": description,
            "asset_root": asset_prefix(depth),
            "search_root": search_index_prefix(depth),
            "search_index_filename": SEARCH_INDEX_FILENAME,
            "home_href": home_href(depth),
            "stylesheets": stylesheets,
            "scripts": scripts,
            "sidebar": sidebar,
            "year": self.generated_at.year,
        }

    @staticmethod
    def _sidebar(
        groups: list[SectionGroup],
        here: tuple[str, ...],
        *,
        landing_key: str | None = None,
        article_key: str | None = None,
        article_path: str | None = None,
    ) -> list[dict[str, typ.Any]]:
        """Build sidebar entries, expanding the group that owns the page."""
        entries: list[dict[str, typ.Any]] = []
        for group in groups:
            landing_active = landing_key == group.key
            links = [
                {
                    "label": f"{group.label} Overview",
                    "href": relative_href(here, (group.path,)),
                    "active": landing_active,
                }
            ]
            links.extend(
                {
                    "label": article.title,
                    "href": relative_href(here, article_segments(article.path)),
                    "active": article.path == article_path,
                }
                for article in group.articles
            )
            entries.append(
                {
                    "label": group.label,
                    "expanded": landing_active or article_key == group.key,
                    "links": links,
                }
            )
        return entries

    @staticmethod
    def _section_contexts(
        sections: list[Section], page_id: str
    ) -> list[dict[str, typ.Any]]:
        """Prepare section headings, text blocks, and code samples for rendering."""
        rendered: list[dict[str, typ.Any]] = []
        for section_index, section in enumerate(sections):
            code_blocks: list[dict[str, typ.Any]] = []
            for code_index, block in enumerate(section.code_blocks):
                has_code = bool(block.code.strip())
                explanation = clean_text(block.explanation)
                if not has_code and not explanation:
                    continue
                code_blocks.append(
                    {
                        "has_code": has_code,
                        "id": f"{page_id}-s{section_index + 1}-c{code_index + 1}",
                        "language": normalize_language(block.language),
                        "title": code_title(block.language),
                        "code": block.code,
                        "explanation": explanation,
                    }
                )
            context = {
                "header": clean_text(section.header),
                "heading_id": f"{page_id}-section-{section_index + 1}",
                "cloud_note": clean_text(section.is_cloud),
                "blocks": split_content_blocks(section.content),
                "code_blocks": code_blocks,
            }
            if any(context[key] for key in ("header", "cloud_note", "blocks", "code_blocks")):
                rendered.append(context)
        return rendered

    @staticmethod
    def _pagination(
        page: ArticlePageModel, here: tuple[str, ...]
    ) -> dict[str, dict[str, str] | None]:
        """Return previous/next links within the article's section group."""
        paths = [sibling.path for sibling in page.siblings]
        try:
            index = paths.index(page.article.path)
        except ValueError:
            return {"previous": None, "next": None}

        def _link(article: Article) -> dict[str, str]:
            return {
                "href": relative_href(here, article_segments(article.path)),
                "title": article.title,
            }

        previous = page.siblings[index - 1] if index > 0 else None
        following = page.siblings[index + 1] if index < len(paths) - 1 else None
        return {
            "previous": _link(previous) if previous else None,
            "next": _link(following) if following else None,
        }


def _raw_first_content(article: Article) -> str:
    return article.sections[0].content if article.sections else ""


def _first_content(article: Article) -> str:
    return clean_text(_raw_first_content(article))


__all__ = ["HtmlPageRenderer"]
