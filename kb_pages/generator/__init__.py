"""Knowledge-base page generation pipeline.

The pipeline turns a validated content document into a tree of static HTML
pages plus a client-side search index:

- :mod:`.builder` derives section groups and page models,
- :mod:`.renderer` renders them with Jinja templates,
- :mod:`.writer` writes pages and prunes stale ones,
- :mod:`.site_generator` orchestrates a run and reports on it.
"""

from .builder import build_site_model, parse_include_paths
from .models import (
    ArticlePageModel,
    HomePageModel,
    LandingPageModel,
    SearchDoc,
    SectionGroup,
    SiteModel,
)
from .renderer import HtmlPageRenderer
from .site_generator import GenerationReport, SiteGenerator
from .writer import OutputWriter

__all__ = [
    "ArticlePageModel",
    "GenerationReport",
    "HomePageModel",
    "HtmlPageRenderer",
    "LandingPageModel",
    "OutputWriter",
    "SearchDoc",
    "SectionGroup",
    "SiteGenerator",
    "SiteModel",
    "build_site_model",
    "parse_include_paths",
]
