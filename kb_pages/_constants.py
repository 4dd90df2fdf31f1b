"""Common literal values used across kb_pages.

These constants keep filenames and defaults centralized so the generator,
review tooling, and tests can import the same values without drifting.
Intended for internal use within the kb_pages package.

Examples
--------
>>> from kb_pages import _constants
>>> _constants.INDEX_FILENAME
'index.html'
>>> _constants.REVIEW_QUEUE_TEMPLATE.format(ext="csv")
'review-queue.csv'
"""

from pathlib import Path

INDEX_FILENAME = "index.html"
SEARCH_INDEX_FILENAME = "search-index.json"
FALLBACK_GROUP_KEY = "misc"
DEFAULT_INPUT = Path("data.json")
DEFAULT_OUTPUT_DIR = Path("docs")
DEFAULT_SITE_CONFIG = Path("config/site.yaml")
DEFAULT_DOWNLOAD_ROOT = Path("_downloads/live-kb")
REVIEW_QUEUE_TEMPLATE = "review-queue.{ext}"
APPLY_REPORT_FILENAME = "apply-live-updates-report.json"
