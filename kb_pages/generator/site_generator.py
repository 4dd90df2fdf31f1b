"""Run the full page generation pipeline and report what happened.

:class:`SiteGenerator` wires together the content loader, the model builder,
the HTML renderer, and the output writer. All validation happens before the
first file is touched, so an unknown include path or malformed document
leaves the output directory unchanged.

Example
-------
>>> from pathlib import Path
>>> from kb_pages.generator import SiteGenerator
>>> report = SiteGenerator(Path("data.json"), Path("docs")).run()  # doctest: +SKIP
>>> print("\n".join(report.summary_lines()))  # doctest: +SKIP
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import logging
import time
import typing as typ
from pathlib import Path

from kb_pages.config import SiteConfig
from kb_pages.content import load_content

from .builder import build_site_model, normalize_article_path
from .paths import article_segments
from .renderer import HtmlPageRenderer
from .writer import OutputWriter

if typ.TYPE_CHECKING:
    import collections.abc as cabc

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True)
class GenerationReport:
    """Counts and settings describing one generator run."""

    dry_run: bool
    input_path: Path
    output_dir: Path
    include_paths: list[str] | None
    generate_home: bool
    generate_landings: bool
    total_input: int = 0
    selected: int = 0
    home_written: int = 0
    landings_written: int = 0
    articles_written: int = 0
    stale_deleted: int = 0
    stale_dirs_removed: int = 0
    duplicates: list[str] = dc.field(default_factory=list)
    search_docs: int = 0
    elapsed: float = 0.0

    @property
    def pages_written(self) -> int:
        """Return the total number of pages written (or planned)."""
        return self.home_written + self.landings_written + self.articles_written

    @property
    def skipped(self) -> int:
        """Return input articles not rendered (duplicates or filtered out)."""
        return self.total_input - self.selected

    @property
    def mode(self) -> str:
        """Return ``DRY RUN`` or ``WRITE``."""
        return "DRY RUN" if self.dry_run else "WRITE"

    def summary_lines(self) -> list[str]:
        """Return the human-readable run summary, one line per field."""
        include = ", ".join(self.include_paths) if self.include_paths is not None else "all"
        return [
            f"[{self.mode}] Generation complete",
            f"Input: {self.input_path}",
            f"Output: {self.output_dir}",
            f"Include paths: {include}",
            f"Generate home: {_flag(self.generate_home)}",
            f"Generate landings: {_flag(self.generate_landings)}",
            f"Total input articles: {self.total_input}",
            f"Selected articles: {self.selected}",
            f"Pages written: {self.pages_written}",
            f"Home pages written: {self.home_written}",
            f"Landing pages written: {self.landings_written}",
            f"Article pages written: {self.articles_written}",
            f"Stale pages deleted: {self.stale_deleted}",
            f"Stale dirs removed: {self.stale_dirs_removed}",
            f"Skipped: {self.skipped}",
            f"Search index docs: {self.search_docs}",
            f"Elapsed: {self.elapsed:.2f}s",
        ]


def _flag(value: bool) -> str:  # noqa: FBT001 - formatting helper
    return "true" if value else "false"


class SiteGenerator:
    """Generate the static knowledge-base site from a content document."""

    def __init__(
        self,
        input_path: Path,
        out_dir: Path,
        *,
        site: SiteConfig | None = None,
        include_paths: cabc.Sequence[str] | None = None,
        generate_home: bool = True,
        generate_landings: bool = True,
        dry_run: bool = False,
        generated_at: dt.datetime | None = None,
    ) -> None:
        """Configure a generator run.

        Parameters
        ----------
        input_path : Path
            JSON content document.
        out_dir : Path
            Output root; owned exclusively by the generator.
        site : SiteConfig, optional
            Branding configuration; defaults to :class:`SiteConfig`.
        include_paths : Sequence[str], optional
            Restrict the run to these article paths.
        generate_home, generate_landings : bool, optional
            Whether to write the home page and the section landing pages.
        dry_run : bool, optional
            Compute and log every action without touching the filesystem.
        generated_at : datetime, optional
            Timestamp rendered into pages; defaults to now.
        """
        self.input_path = input_path
        self.out_dir = out_dir
        self.site = site or SiteConfig()
        self.include_paths = list(include_paths) if include_paths is not None else None
        self.generate_home = generate_home
        self.generate_landings = generate_landings
        self.dry_run = dry_run
        self.renderer = HtmlPageRenderer(self.site, generated_at=generated_at)
        self.writer = OutputWriter(out_dir, dry_run=dry_run)

    def run(self) -> GenerationReport:
        """Execute the pipeline and return the run report."""
        started = time.perf_counter()
        document = load_content(self.input_path)
        model = build_site_model(
            document,
            site_title=self.site.title,
            include_paths=self.include_paths,
            generate_landings=self.generate_landings,
        )
        report = GenerationReport(
            dry_run=self.dry_run,
            input_path=self.input_path.resolve(),
            output_dir=self.writer.out_dir,
            include_paths=self._normalized_includes(),
            generate_home=self.generate_home,
            generate_landings=self.generate_landings,
            total_input=model.total_input,
            selected=len(model.articles),
            duplicates=list(model.duplicates),
        )

        expected: list[Path] = []
        if self.generate_home:
            html = self.renderer.render_home(model.home)
            expected.append(self.writer.write_page((), html))
            report.home_written += 1

        if self.generate_landings:
            for landing in model.landings:
                html = self.renderer.render_landing(landing, model.groups)
                expected.append(self.writer.write_page((landing.group.path,), html))
                report.landings_written += 1

        for page in model.article_pages:
            html = self.renderer.render_article(page, model.groups)
            segments = article_segments(page.article.path)
            expected.append(self.writer.write_page(segments, html))
            report.articles_written += 1

        deleted, removed_dirs = self.writer.prune_stale(expected)
        report.stale_deleted = len(deleted)
        report.stale_dirs_removed = len(removed_dirs)

        self.writer.write_search_index(model.search_docs)
        report.search_docs = len(model.search_docs)
        report.elapsed = time.perf_counter() - started
        logger.debug("generation finished in %.2fs", report.elapsed)
        return report

    def _normalized_includes(self) -> list[str] | None:
        if self.include_paths is None:
            return None
        return [normalize_article_path(path) for path in self.include_paths]


__all__ = ["GenerationReport", "SiteGenerator"]
