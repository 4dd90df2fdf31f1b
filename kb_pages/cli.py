"""Cyclopts CLI entrypoint for building and reconciling the knowledge-base site.

The ``pages`` console script defined here renders the static knowledge-base
pages from a JSON content document, builds the review queue that pairs pages
downloaded from the live site with generated ones, and applies converted live
content to matched pages. Typical usage involves running ``pages generate``
locally or in CI, and ``pages review-queue`` followed by
``pages apply-updates --dry-run`` when syncing with the live site.

Examples
--------
Generate every page into the default ``docs`` directory:

>>> from kb_pages.cli import main
>>> main(["generate"])  # doctest: +SKIP

Regenerate two articles without touching the home or landing pages:

>>> main(
...     [
...         "generate",
...         "--include-paths",
...         "tools/date-tool,tools/list-tool",
...         "--generate-home",
...         "false",
...     ]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from ._constants import (
    DEFAULT_DOWNLOAD_ROOT,
    DEFAULT_INPUT,
    DEFAULT_OUTPUT_DIR,
    REVIEW_QUEUE_TEMPLATE,
)
from .config import SiteConfigError, load_site_config
from .content import ContentError
from .generator import SiteGenerator, parse_include_paths
from .review import (
    ReviewQueueError,
    apply_review_queue,
    build_review_queue,
    collect_local_docs,
    load_manifest,
    write_review_queue,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

BOOL_FLAGS = ("--generate-home", "--generate-landings")
BOOL_VALUES = {"true": True, "false": False}
CLI_ERRORS = (
    cyclopts.CycloptsError,
    ContentError,
    SiteConfigError,
    ReviewQueueError,
    OSError,
    ValueError,
)

app = App(name="pages", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def normalize_bool_flags(tokens: cabc.Sequence[str]) -> list[str]:
    """Rewrite ``--flag true|false`` and ``--flag=value`` into Cyclopts flags.

    A bare flag stays as it is (meaning true); ``false`` becomes the
    ``--no-`` form.

    Raises
    ------
    ValueError
        If a value other than ``true`` or ``false`` follows a boolean flag.
    """
    result: list[str] = []
    index = 0
    while index < len(tokens):
        token = tokens[index]
        index += 1
        flag, sep, inline = token.partition("=")
        if flag not in BOOL_FLAGS:
            result.append(token)
            continue
        raw: str | None = inline if sep else None
        if raw is None and index < len(tokens) and not tokens[index].startswith("-"):
            raw = tokens[index]
            index += 1
        if raw is None:
            result.append(flag)
            continue
        value = BOOL_VALUES.get(raw.strip().lower())
        if value is None:
            msg = f"Invalid value for {flag}: {raw}. Expected true or false."
            raise ValueError(msg)
        result.append(flag if value else f"--no-{flag[2:]}")
    return result


@app.command(help="Generate the static knowledge-base pages from a JSON document.")
def generate(
    *,
    input_file: typ.Annotated[
        Path,
        Parameter(name="--input", help="Path to the JSON content document", env_var="INPUT_INPUT"),
    ] = DEFAULT_INPUT,
    out: typ.Annotated[
        Path, Parameter(help="Output directory for generated pages", env_var="INPUT_OUT")
    ] = DEFAULT_OUTPUT_DIR,
    dry_run: typ.Annotated[
        bool, Parameter(help="Report actions without writing files", env_var="INPUT_DRY_RUN")
    ] = False,
    include_paths: typ.Annotated[
        str | None,
        Parameter(
            help="Comma-separated article paths to generate",
            env_var="INPUT_INCLUDE_PATHS",
        ),
    ] = None,
    generate_home: typ.Annotated[
        bool, Parameter(help="Write the home page", env_var="INPUT_GENERATE_HOME")
    ] = True,
    generate_landings: typ.Annotated[
        bool,
        Parameter(help="Write section landing pages", env_var="INPUT_GENERATE_LANDINGS"),
    ] = True,
    config: typ.Annotated[
        Path | None, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
    ] = None,
) -> None:
    """Generate knowledge-base pages and print the run summary.

    Parameters
    ----------
    input_file : Path, optional
        JSON content document (``--input``); defaults to ``data.json``.
    out : Path, optional
        Output directory; defaults to ``docs``. The generator owns this
        directory and deletes ``index.html`` files it no longer produces.
    dry_run : bool, optional
        Compute every page and log the actions without touching the disk.
    include_paths : str or None, optional
        Comma-separated article paths; when given only those articles are
        generated and unknown paths abort the run before anything is written.
    generate_home, generate_landings : bool, optional
        Whether to write the home page and the section landing pages.
    config : Path or None, optional
        Site branding YAML; defaults to ``config/site.yaml`` when present.

    Raises
    ------
    ContentError
        If the content document or include paths are invalid.
    SiteConfigError
        If the site configuration is malformed.
    """
    site = load_site_config(config)
    includes = parse_include_paths(include_paths) if include_paths is not None else None
    report = SiteGenerator(
        input_file,
        out,
        site=site,
        include_paths=includes,
        generate_home=generate_home,
        generate_landings=generate_landings,
        dry_run=dry_run,
    ).run()
    for line in report.summary_lines():
        print(line)


@app.command(help="Match downloaded live pages to local pages for review.")
def review_queue(
    *,
    manifest: typ.Annotated[
        Path, Parameter(help="Downloader manifest JSON", env_var="INPUT_MANIFEST")
    ] = DEFAULT_DOWNLOAD_ROOT / "manifest.json",
    docs_root: typ.Annotated[
        Path, Parameter(help="Local docs root", env_var="INPUT_DOCS_ROOT")
    ] = DEFAULT_OUTPUT_DIR,
    out_dir: typ.Annotated[
        Path, Parameter(help="Directory for the review queue files", env_var="INPUT_OUT_DIR")
    ] = DEFAULT_DOWNLOAD_ROOT,
    config: typ.Annotated[
        Path | None, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
    ] = None,
) -> None:
    """Write ``review-queue.{json,csv,md}`` pairing live and local pages.

    Parameters
    ----------
    manifest : Path, optional
        Manifest written by the live-site downloader.
    docs_root : Path, optional
        Root of the generated pages; defaults to ``docs``.
    out_dir : Path, optional
        Directory receiving the three queue files.
    config : Path or None, optional
        Site config supplying ``live_site.path_prefix``.
    """
    site = load_site_config(config)
    queue = build_review_queue(
        load_manifest(manifest),
        collect_local_docs(docs_root),
        path_prefix=site.live_site.path_prefix,
        source_manifest=manifest.as_posix(),
        docs_root=docs_root.as_posix(),
    )
    written = write_review_queue(queue, out_dir)
    for ext, path in written.items():
        print(f"review-queue-{ext}: {_format_path(path)}")
    print(f"matched: {len(queue.matched)}")
    print(f"unmatched-kb: {len(queue.unmatched_kb)}")
    print(f"unmatched-local: {len(queue.unmatched_local)}")


@app.command(help="Apply converted live content to matched local pages.")
def apply_updates(
    *,
    queue: typ.Annotated[
        Path | None,
        Parameter(help="Review queue JSON (defaults inside the download root)", env_var="INPUT_QUEUE"),
    ] = None,
    download_root: typ.Annotated[
        Path, Parameter(help="Directory holding downloaded pages", env_var="INPUT_DOWNLOAD_ROOT")
    ] = DEFAULT_DOWNLOAD_ROOT,
    docs_root: typ.Annotated[
        Path, Parameter(help="Local docs root", env_var="INPUT_DOCS_ROOT")
    ] = DEFAULT_OUTPUT_DIR,
    limit: typ.Annotated[
        int, Parameter(help="Maximum pages to process (0 for all)", env_var="INPUT_LIMIT")
    ] = 0,
    dry_run: typ.Annotated[
        bool, Parameter(help="Report only; do not modify pages", env_var="INPUT_DRY_RUN")
    ] = False,
) -> None:
    """Splice converted live bodies into matched pages and write a report.

    Parameters
    ----------
    queue : Path or None, optional
        Review queue JSON; defaults to ``<download-root>/review-queue.json``.
    download_root : Path, optional
        Directory the downloader wrote to; the report is written here.
    docs_root : Path, optional
        Root of the generated pages; entries outside it are skipped.
    limit : int, optional
        Process at most this many matched entries; ``0`` processes all.
    dry_run : bool, optional
        Convert and validate without writing pages.

    Raises
    ------
    ReviewQueueError
        If ``limit`` is negative or the queue document is malformed.
    """
    if limit < 0:
        msg = "--limit must be a non-negative number"
        raise ReviewQueueError(msg)
    queue_path = queue or download_root / REVIEW_QUEUE_TEMPLATE.format(ext="json")
    report, report_path = apply_review_queue(
        queue_path, download_root, docs_root, limit=limit, dry_run=dry_run
    )
    print(f"processed: {report.processed}")
    print(f"updated: {report.updated}")
    print(f"skipped: {report.skipped}")
    print(f"errors: {report.errors}")
    print(f"report: {_format_path(report_path)}")


def main(tokens: cabc.Sequence[str] | None = None) -> None:
    """Invoke the Cyclopts application that powers the `pages` console command.

    Parameters
    ----------
    tokens : Sequence[str] or None, optional
        Arguments to parse instead of ``sys.argv[1:]``.

    Raises
    ------
    SystemExit
        With status 1 after printing ``Error: <message>`` to stderr when the
        options cannot be parsed or the command fails.

    Examples
    --------
    >>> main(["generate", "--dry-run"])  # doctest: +SKIP
    """
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    argv = list(sys.argv[1:] if tokens is None else tokens)
    try:
        app(normalize_bool_flags(argv), print_error=False, exit_on_error=False)
    except CLI_ERRORS as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
