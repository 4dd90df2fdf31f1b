"""Reconcile generated pages with content downloaded from the live site.

- :mod:`.queue` pairs downloaded live pages with local pages by URL key and
  writes the review queue as JSON, CSV, and Markdown.
- :mod:`.converter` rewrites live article markup into page components.
- :mod:`.apply` splices converted bodies into matched local pages.

Examples
--------
>>> from pathlib import Path
>>> from kb_pages.review import apply_review_queue
>>> report, path = apply_review_queue(
...     Path("_downloads/live-kb/review-queue.json"),
...     Path("_downloads/live-kb"),
...     Path("docs"),
...     dry_run=True,
... )  # doctest: +SKIP
"""

from .apply import LiveUpdateApplier, apply_review_queue, find_body_range
from .converter import LiveBodyConverter, extract_live_body, validate_converted_body
from .models import (
    ApplyEntry,
    ApplyReport,
    Manifest,
    ManifestEntry,
    MatchedPage,
    ReviewQueue,
    ReviewQueueError,
)
from .queue import (
    build_review_queue,
    collect_local_docs,
    live_key_from_url,
    load_manifest,
    load_review_queue,
    local_doc_key,
    write_review_queue,
)

__all__ = [
    "ApplyEntry",
    "ApplyReport",
    "LiveBodyConverter",
    "LiveUpdateApplier",
    "Manifest",
    "ManifestEntry",
    "MatchedPage",
    "ReviewQueue",
    "ReviewQueueError",
    "apply_review_queue",
    "build_review_queue",
    "collect_local_docs",
    "extract_live_body",
    "find_body_range",
    "live_key_from_url",
    "load_manifest",
    "load_review_queue",
    "local_doc_key",
    "validate_converted_body",
    "write_review_queue",
]
