"""Records exchanged between the review queue builder and the applier.

The JSON documents written here are read back by other commands and by
people, so field names are camelCased on the wire (``kbUrl``,
``localDocPath``) while Python code uses snake_case attributes.
"""

from __future__ import annotations

import msgspec


class ReviewQueueError(ValueError):
    """Raised when a manifest or review queue document is malformed."""


class ManifestEntry(msgspec.Struct, rename="camel"):
    """One downloaded live page as recorded by the downloader manifest."""

    url: str | None = None
    status: str | None = None
    title: str | None = None
    output_path: str | None = None


class Manifest(msgspec.Struct):
    """The downloader manifest; unknown top-level fields are ignored."""

    entries: list[ManifestEntry] = msgspec.field(default_factory=list)


class MatchedPage(msgspec.Struct, rename="camel"):
    """A live page paired with the local page that shares its key."""

    key: str
    kb_url: str
    kb_title: str
    downloaded_html_path: str
    local_doc_path: str
    status: str = "pending"


class UnmatchedLivePage(msgspec.Struct, rename="camel"):
    """A live page with no local counterpart."""

    key: str
    kb_url: str
    kb_title: str
    downloaded_html_path: str


class UnmatchedLocalPage(msgspec.Struct, rename="camel"):
    """A local page with no live counterpart."""

    key: str
    local_doc_path: str


class QueueCounts(msgspec.Struct, rename="camel"):
    """Aggregate counts stored alongside the queue."""

    manifest_entries: int
    local_docs: int
    matched: int
    unmatched_kb: int
    unmatched_local: int


class ReviewQueue(msgspec.Struct, rename="camel"):
    """Matched and unmatched pages awaiting human review."""

    generated_at: str = ""
    source_manifest: str = ""
    docs_root: str = ""
    counts: QueueCounts | None = None
    matched: list[MatchedPage] = msgspec.field(default_factory=list)
    unmatched_kb: list[UnmatchedLivePage] = msgspec.field(default_factory=list)
    unmatched_local: list[UnmatchedLocalPage] = msgspec.field(default_factory=list)


class ApplyEntry(msgspec.Struct, rename="camel"):
    """Outcome of applying live content to one matched page."""

    key: str
    local_doc_path: str
    kb_url: str
    outcome: str = "skipped"
    reason: str = ""


class ApplyReport(msgspec.Struct, rename="camel"):
    """Per-run report written by the applier."""

    generated_at: str
    dry_run: bool
    processed: int = 0
    updated: int = 0
    skipped: int = 0
    errors: int = 0
    entries: list[ApplyEntry] = msgspec.field(default_factory=list)


__all__ = [
    "ApplyEntry",
    "ApplyReport",
    "Manifest",
    "ManifestEntry",
    "MatchedPage",
    "QueueCounts",
    "ReviewQueue",
    "ReviewQueueError",
    "UnmatchedLivePage",
    "UnmatchedLocalPage",
]
