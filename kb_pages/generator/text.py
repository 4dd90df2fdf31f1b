r"""Text helpers shared by the page builder and renderer.

These functions clean free text from the content document, derive slugs and
labels from article paths, and classify content blocks into paragraphs and
lists. The list detection is a line-marker heuristic, not a Markdown parser:
a block only becomes a list when every line carries the same kind of marker.

Example
-------
>>> from kb_pages.generator.text import split_content_blocks
>>> [block.kind for block in split_content_blocks("Intro\n\n- one\n- two")]
['p', 'ul']
"""

from __future__ import annotations

import dataclasses as dc
import re

ENTITY_REPLACEMENTS = (
    (re.compile(r"&#160;|&nbsp;"), " "),
    (re.compile(r"&lt;"), "<"),
    (re.compile(r"&gt;"), ">"),
    (re.compile(r"&quot;"), '"'),
    (re.compile(r"&#39;|&apos;"), "'"),
    (re.compile(r"&amp;"), "&"),
)
SPACE_RUN_PATTERN = re.compile(r"[ \u00a0]+")
BLANK_LINE_PATTERN = re.compile(r"\n\s*\n")
UNORDERED_MARKER = re.compile(r"^[-*•]\s+")
ORDERED_MARKER = re.compile(r"^\d+[.)]\s+")
LIST_MARKER = re.compile(r"^([-*•]|\d+[.)])\s+")

KNOWN_LANGUAGES = frozenset(
    {
        "markup",
        "html",
        "xml",
        "css",
        "javascript",
        "js",
        "json",
        "bash",
        "shell",
        "yaml",
        "yml",
        "sql",
        "velocity",
        "java",
        "python",
        "php",
    }
)
LANGUAGE_ALIASES = {
    "js": "javascript",
    "shell": "bash",
    "yml": "yaml",
    "html": "markup",
}


@dc.dataclass(slots=True)
class ContentBlock:
    """A paragraph (``p``) or list (``ul``/``ol``) derived from free text."""

    kind: str
    text: str = ""
    items: list[str] = dc.field(default_factory=list)


def decode_entities(value: str) -> str:
    """Replace the handful of HTML entities found in exported content."""
    for pattern, replacement in ENTITY_REPLACEMENTS:
        value = pattern.sub(replacement, value)
    return value


def normalize_whitespace(value: str) -> str:
    """Normalize line endings and expand tabs to two spaces."""
    return value.replace("\r\n", "\n").replace("\t", "  ")


def clean_text(value: object) -> str:
    """Decode entities and collapse runs of spaces; newlines are kept."""
    text = normalize_whitespace(decode_entities(str(value or "")))
    return SPACE_RUN_PATTERN.sub(" ", text).strip()


def slugify(value: str) -> str:
    """Convert a string into a lowercase hyphen-separated slug."""
    return re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")


def title_case_segment(segment: str) -> str:
    """Render a hyphenated path segment as a label (``date-tool`` -> ``Date Tool``)."""
    return " ".join(
        part[:1].upper() + part[1:] for part in segment.split("-") if part
    )


def pluralize(count: int, noun: str) -> str:
    """Return ``"<count> <noun>"`` with a trailing ``s`` unless count is one."""
    suffix = "" if count == 1 else "s"
    return f"{count} {noun}{suffix}"


def split_content_blocks(raw: str) -> list[ContentBlock]:
    """Split free text into paragraph and list blocks on blank lines."""
    normalized = normalize_whitespace(str(raw or ""))
    blocks: list[ContentBlock] = []
    for group in BLANK_LINE_PATTERN.split(normalized):
        lines = [line.strip() for line in group.strip().split("\n") if line.strip()]
        if not lines:
            continue
        if all(UNORDERED_MARKER.match(line) for line in lines):
            blocks.append(ContentBlock(kind="ul", items=_list_items(lines)))
            continue
        if all(ORDERED_MARKER.match(line) for line in lines):
            blocks.append(ContentBlock(kind="ol", items=_list_items(lines)))
            continue
        text = clean_text(" ".join(lines))
        if text:
            blocks.append(ContentBlock(kind="p", text=text))
    return blocks


def _list_items(lines: list[str]) -> list[str]:
    items = [LIST_MARKER.sub("", clean_text(line)).strip() for line in lines]
    return [item for item in items if item]


def normalize_language(language: str) -> str:
    """Map a free-text language onto the highlighter's class names or ``none``."""
    raw = str(language or "").strip().lower()
    if raw not in KNOWN_LANGUAGES:
        return "none"
    return LANGUAGE_ALIASES.get(raw, raw)


def code_title(language: str) -> str:
    """Return the label shown in a code block header."""
    normalized = normalize_language(language)
    if normalized == "none":
        return "Plain Text"
    return normalized[:1].upper() + normalized[1:]


__all__ = [
    "KNOWN_LANGUAGES",
    "ContentBlock",
    "clean_text",
    "code_title",
    "decode_entities",
    "normalize_language",
    "normalize_whitespace",
    "pluralize",
    "slugify",
    "split_content_blocks",
    "title_case_segment",
]
