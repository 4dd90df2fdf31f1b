"""Apply converted live content to matched local pages in batch.

For each matched review queue entry the applier reads the local generated
page and the downloaded live page, converts the live article body, validates
it, and splices it into the local page's ``content__body`` element. Every
entry gets an outcome (``updated``, ``skipped`` or ``error``) in the report
written beside the downloads; in dry-run mode no page is modified.
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import logging
import typing as typ
from pathlib import Path

import msgspec

from kb_pages._constants import APPLY_REPORT_FILENAME

from .converter import (
    LiveBodyConverter,
    extract_live_body,
    list_h2_ids,
    validate_converted_body,
)
from .models import ApplyEntry, ApplyReport, MatchedPage, ReviewQueueError
from .queue import load_review_queue

if typ.TYPE_CHECKING:
    import collections.abc as cabc

logger = logging.getLogger(__name__)

BODY_START_MARKER = '<div class="content__body">'
BODY_END_MARKER = '<footer class="content__footer">'
CLOSING_DIV = "</div>"


@dc.dataclass(frozen=True, slots=True)
class BodyRange:
    """Character offsets of the inner HTML of a page's ``content__body``."""

    start: int
    end: int

    def body(self, html: str) -> str:
        """Return the current body markup."""
        return html[self.start : self.end]

    def splice(self, html: str, body: str) -> str:
        """Return ``html`` with the body replaced by ``body``."""
        return f"{html[: self.start]}\n{body}\n{html[self.end :]}"


def find_body_range(local_html: str) -> BodyRange | None:
    """Locate the ``content__body`` element of a generated article page.

    The body begins after the opening ``<div class="content__body">`` and ends
    at the last ``</div>`` before the content footer. Returns ``None`` when
    either marker is missing or they are out of order.
    """
    start = local_html.find(BODY_START_MARKER)
    footer = local_html.find(BODY_END_MARKER)
    if start < 0 or footer < 0 or footer <= start:
        return None
    inner_start = start + len(BODY_START_MARKER)
    end = local_html.rfind(CLOSING_DIV, inner_start, footer)
    if end < 0:
        return None
    return BodyRange(start=inner_start, end=end)


def _is_within(path: Path, root: Path) -> bool:
    return path == root or root in path.parents


class LiveUpdateApplier:
    """Splice converted live bodies into matched local pages."""

    def __init__(
        self,
        download_root: Path,
        docs_root: Path,
        *,
        dry_run: bool = False,
        converter: LiveBodyConverter | None = None,
        generated_at: dt.datetime | None = None,
    ) -> None:
        self.download_root = download_root.resolve()
        self.docs_root = docs_root.resolve()
        self.dry_run = dry_run
        self.converter = converter or LiveBodyConverter()
        self.generated_at = generated_at

    def apply(
        self, items: cabc.Iterable[MatchedPage], *, limit: int = 0
    ) -> ApplyReport:
        """Process queue entries and return the run report.

        Parameters
        ----------
        items : Iterable[MatchedPage]
            Matched entries from a review queue, in queue order.
        limit : int, optional
            Maximum number of entries to process; ``0`` processes all.

        Raises
        ------
        ReviewQueueError
            If ``limit`` is negative.
        """
        if limit < 0:
            msg = "--limit must be a non-negative number"
            raise ReviewQueueError(msg)
        selected = list(items)
        if limit:
            selected = selected[:limit]
        stamp = self.generated_at or dt.datetime.now(dt.UTC)
        report = ApplyReport(
            generated_at=stamp.isoformat(),
            dry_run=self.dry_run,
            processed=len(selected),
        )
        for item in selected:
            entry = self.apply_one(item)
            report.entries.append(entry)
            if entry.outcome == "updated":
                report.updated += 1
            elif entry.outcome == "error":
                report.errors += 1
        report.skipped = report.processed - report.updated - report.errors
        return report

    def apply_one(self, item: MatchedPage) -> ApplyEntry:
        """Convert and splice a single matched page."""
        entry = ApplyEntry(
            key=item.key, local_doc_path=item.local_doc_path, kb_url=item.kb_url
        )
        local_path = Path(item.local_doc_path).resolve()
        if not _is_within(local_path, self.docs_root):
            entry.reason = "local path outside docs root"
            return entry
        try:
            local_html = local_path.read_text(encoding="utf-8")
            live_html = (self.download_root / item.downloaded_html_path).read_text(
                encoding="utf-8"
            )
        except (OSError, UnicodeDecodeError) as exc:
            entry.outcome = "error"
            entry.reason = str(exc)
            logger.warning("could not read pages for %s: %s", item.key, exc)
            return entry

        body_range = find_body_range(local_html)
        if body_range is None:
            entry.reason = "could not locate content__body"
            return entry
        live_body = extract_live_body(live_html)
        if not live_body:
            entry.reason = "could not extract live body"
            return entry

        converted = self.converter.convert(
            live_body, list_h2_ids(body_range.body(local_html)), item.local_doc_path
        )
        problem = validate_converted_body(converted)
        if problem:
            entry.reason = problem
            return entry

        if self.dry_run:
            logger.info("would update %s", local_path)
        else:
            try:
                local_path.write_text(
                    body_range.splice(local_html, converted), encoding="utf-8"
                )
            except OSError as exc:
                entry.outcome = "error"
                entry.reason = str(exc)
                logger.warning("could not write %s: %s", local_path, exc)
                return entry
            logger.info("updated %s", local_path)
        entry.outcome = "updated"
        return entry

    def write_report(self, report: ApplyReport) -> Path:
        """Write ``report`` as JSON into the download root and return its path."""
        target = self.download_root / APPLY_REPORT_FILENAME
        self.download_root.mkdir(parents=True, exist_ok=True)
        payload = msgspec.json.format(msgspec.json.encode(report), indent=2)
        target.write_bytes(payload + b"\n")
        return target


def apply_review_queue(
    queue_path: Path,
    download_root: Path,
    docs_root: Path,
    *,
    limit: int = 0,
    dry_run: bool = False,
) -> tuple[ApplyReport, Path]:
    """Apply every matched entry of the queue at ``queue_path``.

    Returns
    -------
    tuple[ApplyReport, Path]
        The run report and the path it was written to. The report is written
        in dry-run mode too.
    """
    queue = load_review_queue(queue_path)
    applier = LiveUpdateApplier(download_root, docs_root, dry_run=dry_run)
    report = applier.apply(queue.matched, limit=limit)
    return report, applier.write_report(report)


__all__ = [
    "BodyRange",
    "LiveUpdateApplier",
    "apply_review_queue",
    "find_body_range",
]
