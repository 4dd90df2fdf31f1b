"""Pair downloaded live-site pages with generated local pages.

Live pages are identified by the part of their URL path below the live
site's prefix (``/cascadecms/latest/tools/date-tool.html`` has the key
``tools/date-tool``); local pages by their directory below the docs root
(``docs/tools/date-tool/index.html``). Pages sharing a key are queued for
review; the rest are listed as unmatched on either side.

Example
-------
>>> from kb_pages.review.queue import live_key_from_url
>>> live_key_from_url("https://example.com/cascadecms/latest/a/b.html", "/cascadecms/latest/")
'a/b'
"""

from __future__ import annotations

import csv
import datetime as dt
import io
import logging
import posixpath
import typing as typ
from pathlib import Path
from urllib.parse import urlsplit

import msgspec

from kb_pages._constants import INDEX_FILENAME, REVIEW_QUEUE_TEMPLATE

from .models import (
    Manifest,
    ManifestEntry,
    MatchedPage,
    QueueCounts,
    ReviewQueue,
    ReviewQueueError,
    UnmatchedLivePage,
    UnmatchedLocalPage,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

logger = logging.getLogger(__name__)

CSV_HEADER = (
    "status",
    "key",
    "kb_url",
    "kb_title",
    "downloaded_html_path",
    "local_doc_path",
)


def _segments(parts: cabc.Iterable[str]) -> list[str]:
    return [part.strip() for part in parts if part.strip()]


def _sort_key(value: str) -> tuple[str, str]:
    return (value.casefold(), value)


def local_doc_key(path: Path, docs_root: Path) -> str:
    """Return the page key of a local ``index.html`` below ``docs_root``.

    The root ``index.html`` and files that are not page indexes have no key
    and yield an empty string.
    """
    try:
        relative = path.relative_to(docs_root)
    except ValueError:
        return ""
    if relative.name != INDEX_FILENAME:
        return ""
    return "/".join(_segments(relative.parent.parts))


def live_key_from_url(url: str, prefix: str) -> str:
    """Return the page key for a live URL, or ``""`` when it has none.

    Parameters
    ----------
    url : str
        Absolute URL of a downloaded live page.
    prefix : str
        URL path prefix under which live pages are published.

    Returns
    -------
    str
        Path segments below ``prefix`` with a trailing ``index.html`` or
        ``.html`` suffix removed. URLs outside the prefix and non-HTML
        resources have no key.
    """
    pathname = urlsplit(url).path or "/"
    if not pathname.startswith(prefix):
        return ""
    rest = pathname[len(prefix) :]
    if not rest or rest.endswith("/"):
        rest += INDEX_FILENAME
    extension = posixpath.splitext(rest)[1]
    if extension and extension != ".html":
        return ""
    parts = _segments(rest.split("/"))
    if not parts:
        return ""
    if parts[-1] == INDEX_FILENAME:
        return "/".join(parts[:-1])
    parts[-1] = parts[-1].removesuffix(".html")
    return "/".join(parts)


def collect_local_docs(docs_root: Path) -> dict[str, str]:
    """Map page keys to ``index.html`` paths (POSIX, as given) below ``docs_root``."""
    if not docs_root.is_dir():
        msg = f"Docs root {docs_root} is not a directory."
        raise ReviewQueueError(msg)
    found: dict[str, str] = {}
    for path in sorted(docs_root.rglob(INDEX_FILENAME)):
        if not path.is_file():
            continue
        key = local_doc_key(path, docs_root)
        if key and key not in found:
            found[key] = path.as_posix()
    return found


def load_manifest(path: Path) -> Manifest:
    """Decode the downloader manifest at ``path``."""
    try:
        return msgspec.json.decode(path.read_bytes(), type=Manifest)
    except msgspec.DecodeError as exc:
        msg = f'Manifest "{path}" is not a valid downloader manifest: {exc}'
        raise ReviewQueueError(msg) from exc


def load_review_queue(path: Path) -> ReviewQueue:
    """Decode a review queue document written by :func:`write_review_queue`."""
    try:
        return msgspec.json.decode(path.read_bytes(), type=ReviewQueue)
    except msgspec.DecodeError as exc:
        msg = f'Review queue "{path}" is malformed: {exc}'
        raise ReviewQueueError(msg) from exc


def build_review_queue(
    manifest: Manifest,
    local_docs: dict[str, str],
    *,
    path_prefix: str,
    source_manifest: str = "",
    docs_root: str = "",
    generated_at: dt.datetime | None = None,
) -> ReviewQueue:
    """Match manifest entries to local pages by key.

    Only entries with status ``ok`` and a URL take part; the first entry per
    key wins. All three lists are sorted by key.
    """
    live_by_key: dict[str, ManifestEntry] = {}
    for entry in manifest.entries:
        if entry.status != "ok" or not entry.url:
            continue
        key = live_key_from_url(entry.url, path_prefix)
        if key and key not in live_by_key:
            live_by_key[key] = entry

    matched: list[MatchedPage] = []
    unmatched_live: list[UnmatchedLivePage] = []
    for key, entry in live_by_key.items():
        local_path = local_docs.get(key)
        if local_path is None:
            unmatched_live.append(
                UnmatchedLivePage(
                    key=key,
                    kb_url=entry.url,
                    kb_title=entry.title or "",
                    downloaded_html_path=entry.output_path or "",
                )
            )
            continue
        matched.append(
            MatchedPage(
                key=key,
                kb_url=entry.url,
                kb_title=entry.title or "",
                downloaded_html_path=entry.output_path or "",
                local_doc_path=local_path,
            )
        )
    unmatched_local = [
        UnmatchedLocalPage(key=key, local_doc_path=path)
        for key, path in local_docs.items()
        if key not in live_by_key
    ]

    matched.sort(key=lambda item: _sort_key(item.key))
    unmatched_live.sort(key=lambda item: _sort_key(item.key))
    unmatched_local.sort(key=lambda item: _sort_key(item.key))

    stamp = generated_at or dt.datetime.now(dt.UTC)
    return ReviewQueue(
        generated_at=stamp.isoformat(),
        source_manifest=source_manifest,
        docs_root=docs_root,
        counts=QueueCounts(
            manifest_entries=len(manifest.entries),
            local_docs=len(local_docs),
            matched=len(matched),
            unmatched_kb=len(unmatched_live),
            unmatched_local=len(unmatched_local),
        ),
        matched=matched,
        unmatched_kb=unmatched_live,
        unmatched_local=unmatched_local,
    )


def render_csv(queue: ReviewQueue) -> str:
    """Render matched pages as CSV, one row per page."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for row in queue.matched:
        writer.writerow(
            (
                row.status,
                row.key,
                row.kb_url,
                row.kb_title,
                row.downloaded_html_path,
                row.local_doc_path,
            )
        )
    return buffer.getvalue()


def render_markdown(queue: ReviewQueue) -> str:
    """Render the queue as a Markdown checklist for reviewers."""
    lines = [
        "# KB Review Queue",
        "",
        f"Generated: {queue.generated_at}",
        "",
        "## Counts",
        "",
        f"- Matched: {len(queue.matched)}",
        f"- Unmatched KB: {len(queue.unmatched_kb)}",
        f"- Unmatched Local: {len(queue.unmatched_local)}",
        "",
        "## Matched Pages",
        "",
        "| Status | Key | Local Doc | Downloaded HTML | KB URL |",
        "|---|---|---|---|---|",
    ]
    lines.extend(
        f"| {row.status} | `{row.key}` | `{row.local_doc_path}` | "
        f"`{row.downloaded_html_path}` | {row.kb_url} |"
        for row in queue.matched
    )
    if queue.unmatched_kb:
        lines.extend(["", "## Unmatched KB", ""])
        lines.extend(f"- `{row.key}` -> {row.kb_url}" for row in queue.unmatched_kb)
    if queue.unmatched_local:
        lines.extend(["", "## Unmatched Local", ""])
        lines.extend(
            f"- `{row.key}` -> `{row.local_doc_path}`" for row in queue.unmatched_local
        )
    return "\n".join(lines) + "\n"


def write_review_queue(queue: ReviewQueue, out_dir: Path) -> dict[str, Path]:
    """Write the queue as JSON, CSV, and Markdown files under ``out_dir``.

    Returns
    -------
    dict[str, Path]
        Written paths keyed by format (``json``, ``csv``, ``md``).
    """
    out_dir.mkdir(parents=True, exist_ok=True)
    paths = {
        ext: out_dir / REVIEW_QUEUE_TEMPLATE.format(ext=ext) for ext in ("json", "csv", "md")
    }
    payload = msgspec.json.format(msgspec.json.encode(queue), indent=2)
    paths["json"].write_bytes(payload + b"\n")
    paths["csv"].write_text(render_csv(queue), encoding="utf-8")
    paths["md"].write_text(render_markdown(queue), encoding="utf-8")
    for path in paths.values():
        logger.debug("wrote %s", path)
    return paths


__all__ = [
    "build_review_queue",
    "collect_local_docs",
    "live_key_from_url",
    "load_manifest",
    "load_review_queue",
    "local_doc_key",
    "render_csv",
    "render_markdown",
    "write_review_queue",
]
