"""Convert downloaded live-site HTML into the generated pages' component markup.

The live site renders articles with its own markup: anchor-heading sections,
Bootstrap alerts, bare tables, ``<details>`` accordions, and highlighted
``<pre><code>`` blocks. :class:`LiveBodyConverter` extracts the article body
and rewrites those constructs into the callout, table, accordion, and
code-block components used by generated pages.

The transforms are regular-expression based and best-effort. Every converted
body is checked by :func:`validate_converted_body` before it is used, and the
result is meant to be reviewed by a person.
"""

from __future__ import annotations

import html
import re
from pathlib import Path

from jinja2 import Environment, FileSystemLoader
from markupsafe import Markup

from kb_pages.generator.text import slugify

SECTION_START = '<section aria-label="'
OVERVIEW_START = '<section aria-label="Overview"'
BACK_TO_TOP = '<a aria-label="Back to top"'
MAIN_END = "</main>"

MIN_BODY_LENGTH = 200
FORBIDDEN_MARKERS = (
    "btn-copy",
    "token keyword",
    "<script",
    'class="anchor-heading"',
    "<main",
    "</main>",
)

LANGUAGE_LABELS = {
    "velocity": "Velocity",
    "markup": "Markup",
    "json": "JSON",
    "sql": "SQL",
    "plain": "Plaintext",
}

TAG_PATTERN = re.compile(r"<[^>]+>")
WHITESPACE_RUN = re.compile(r"\s+")
EXCESS_BLANK_LINES = re.compile(r"\n{3,}")
TRAILING_SPACE = re.compile(r"[ \t]+$", re.MULTILINE)

VELOCITY_DIRECTIVE = re.compile(
    r"#(set|if|elseif|else|foreach|end|macro|parse|include|import|"
    r"queryexecute|queryfilter|querysortvalue)\b",
    re.IGNORECASE,
)
VELOCITY_REFERENCE = re.compile(r"\$[A-Za-z_][A-Za-z0-9_.]*")
MARKUP_TAG = re.compile(r"</?[a-z][^>]*>", re.IGNORECASE)
ESCAPED_MARKUP_TAG = re.compile(r"&lt;/?[a-z][^&]*&gt;", re.IGNORECASE)
SQL_QUERY = re.compile(r"\bSELECT\b.*\bFROM\b", re.IGNORECASE | re.DOTALL)

HEADING_SECTION = re.compile(
    r'<section aria-label="[^"]*" class="anchor-heading" id="[^"]*">\s*<h2>(.*?)</h2>',
    re.IGNORECASE | re.DOTALL,
)
SECTION_CLOSE = re.compile(r"</section>\s*", re.IGNORECASE)
ALERT_PATTERN = re.compile(
    r'<div class="alert alert-(warning|success)"><strong>([^<]+)</strong>:\s*(.*?)</div>',
    re.IGNORECASE | re.DOTALL,
)
ALERT_VARIANTS = {"warning": "warning", "success": "tip"}
TABLE_PATTERN = re.compile(r"<table[^>]*>(.*?)</table>", re.IGNORECASE | re.DOTALL)
ACCORDION_PATTERN = re.compile(
    r'<details class="accordion"[^>]*>\s*<summary>(.*?)</summary>\s*'
    r'<div class="accordion-inner">(.*?)</div>\s*</details>',
    re.IGNORECASE | re.DOTALL,
)
CODE_PATTERN = re.compile(
    r"<pre[^>]*>\s*(?:<button[^>]*>.*?</button>\s*)?"
    r'<code(?:\s+class="([^"]*)")?[^>]*>(.*?)</code>\s*</pre>',
    re.IGNORECASE | re.DOTALL,
)
CODE_LANGUAGE_CLASS = re.compile(r"(?:^|\s)language-([a-z0-9-]+)(?:\s|$)", re.IGNORECASE)
LOCAL_H2_ID = re.compile(r'<h2 id="([^"]+)">', re.IGNORECASE)

CLEANUP_PATTERNS = (
    (re.compile(r'<a name="[^"]*"></a>', re.IGNORECASE), ""),
    (re.compile(r'\s+style="[^"]*"', re.IGNORECASE), ""),
    (re.compile(r'\s+tabindex="[^"]*"', re.IGNORECASE), ""),
    (re.compile(r'\s+class="anchor-heading"', re.IGNORECASE), ""),
    (re.compile(r"<section\b[^>]*>", re.IGNORECASE), ""),
    (SECTION_CLOSE, "\n"),
)
INLINE_CALLOUT = re.compile(r'<p class="callout">(.*?)</p>', re.IGNORECASE | re.DOTALL)
ADJACENT_ACCORDIONS = re.compile(r'</div>\s+<div class="accordion">')
NESTED_IN_PARAGRAPH = (
    (re.compile(r'<p>\s*<div class="code-block">', re.IGNORECASE), "code-block"),
    (re.compile(r'<p>\s*<div class="card-grid">', re.IGNORECASE), "card-grid"),
)


def decode_text(value: str) -> str:
    """Decode HTML entities, mapping non-breaking spaces to plain spaces."""
    return html.unescape(value).replace("\u00a0", " ")


def strip_tags(value: str) -> str:
    """Remove every HTML tag from ``value``."""
    return TAG_PATTERN.sub("", value)


def inline_text(value: str) -> str:
    """Return the decoded, single-line text content of an HTML fragment."""
    return WHITESPACE_RUN.sub(" ", decode_text(strip_tags(value))).strip()


def clean_code(code_html: str) -> str:
    """Return plain source text from highlighted ``<code>`` markup."""
    text = decode_text(strip_tags(code_html)).replace("\r", "")
    text = TRAILING_SPACE.sub("", text)
    return EXCESS_BLANK_LINES.sub("\n\n", text).strip()


def infer_language(code: str) -> str:
    """Guess the language of a code sample from its content."""
    trimmed = code.strip()
    if VELOCITY_DIRECTIVE.search(trimmed) or VELOCITY_REFERENCE.search(trimmed):
        return "velocity"
    if MARKUP_TAG.search(trimmed) or ESCAPED_MARKUP_TAG.search(code):
        return "markup"
    if trimmed.startswith(("{", "[")) and ":" in trimmed:
        return "json"
    if SQL_QUERY.search(trimmed):
        return "sql"
    return "plain"


def language_label(language: str) -> str:
    """Return the display label of a code-block language."""
    return LANGUAGE_LABELS.get(language, language[:1].upper() + language[1:])


def extract_live_body(live_html: str) -> str:
    """Return the article body of a downloaded live page, or ``""``.

    The body starts at the "Overview" section (or the first labelled section
    when there is none) and ends before the "Back to top" link, falling back
    to the end of ``<main>``.
    """
    start = live_html.find(OVERVIEW_START)
    if start < 0:
        start = live_html.find(SECTION_START)
    if start < 0:
        return ""
    end = live_html.find(BACK_TO_TOP, start)
    if end < 0:
        end = live_html.find(MAIN_END, start)
    if end < 0:
        return ""
    return live_html[start:end]


def list_h2_ids(body_html: str) -> list[str]:
    """Return the ids of ``<h2 id="...">`` headings in document order."""
    return LOCAL_H2_ID.findall(body_html)


def validate_converted_body(body_html: str) -> str | None:
    """Return why ``body_html`` is unusable, or ``None`` when it passes."""
    for marker in FORBIDDEN_MARKERS:
        if marker in body_html:
            return f"contains forbidden marker: {marker}"
    if "<h2" not in body_html:
        return "missing h2 headings"
    if len(body_html) < MIN_BODY_LENGTH:
        return "body too short"
    for pattern, component in NESTED_IN_PARAGRAPH:
        if pattern.search(body_html):
            return f"invalid nesting: {component} inside p"
    return None


class LiveBodyConverter:
    """Rewrite live article markup into generated-page components."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        templates_dir = templates_dir or Path(__file__).resolve().parents[1] / "templates"
        env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.components = env.get_template("partials/_components.jinja").module

    def convert(self, live_body: str, local_h2_ids: list[str], local_doc_path: str) -> str:
        """Apply every transform to an extracted live body.

        Parameters
        ----------
        live_body : str
            Output of :func:`extract_live_body`.
        local_h2_ids : list[str]
            Heading ids of the local page, reused in order so existing
            anchors keep working.
        local_doc_path : str
            Path of the local page; used to derive ids for extra headings.

        Returns
        -------
        str
            The converted body; pass it to :func:`validate_converted_body`
            before use.
        """
        converted = self.normalize_headings(live_body, local_h2_ids, local_doc_path)
        converted = self.convert_alerts(converted)
        converted = self.convert_tables(converted)
        converted = self.convert_accordions(converted)
        converted = self.convert_code_blocks(converted)
        return self.cleanup(converted)

    @staticmethod
    def normalize_headings(
        body: str, local_h2_ids: list[str], local_doc_path: str
    ) -> str:
        """Turn anchor-heading sections into plain ``h2`` elements."""
        page_slug = slugify(local_doc_path)
        index = 0

        def _heading(match: re.Match[str]) -> str:
            nonlocal index
            heading_id = (
                local_h2_ids[index]
                if index < len(local_h2_ids)
                else f"{page_slug}-section-{index + 1}"
            )
            index += 1
            title = html.escape(inline_text(match.group(1)), quote=False)
            return f'<h2 id="{html.escape(heading_id)}">{title}</h2>'

        converted = HEADING_SECTION.sub(_heading, body)
        return SECTION_CLOSE.sub("\n", converted)

    def convert_alerts(self, body: str) -> str:
        """Rewrite warning and success alerts as callouts."""

        def _callout(match: re.Match[str]) -> str:
            variant = ALERT_VARIANTS[match.group(1).lower()]
            title = inline_text(match.group(2))
            return str(
                self.components.callout(variant, Markup(match.group(3).strip()), title)
            )

        return ALERT_PATTERN.sub(_callout, body)

    def convert_tables(self, body: str) -> str:
        """Wrap tables in the striped table component."""
        return TABLE_PATTERN.sub(
            lambda match: str(self.components.table(Markup(match.group(1)))), body
        )

    def convert_accordions(self, body: str) -> str:
        """Rewrite ``<details>`` accordions as accordion components."""
        index = 0

        def _accordion(match: re.Match[str]) -> str:
            nonlocal index
            index += 1
            return str(
                self.components.accordion(
                    f"live-acc-{index}",
                    inline_text(match.group(1)),
                    Markup(match.group(2).strip()),
                )
            )

        return ACCORDION_PATTERN.sub(_accordion, body)

    def convert_code_blocks(self, body: str) -> str:
        """Rewrite highlighted ``<pre><code>`` blocks as code-block components."""

        def _code_block(match: re.Match[str]) -> str:
            language_match = CODE_LANGUAGE_CLASS.search(match.group(1) or "")
            language = language_match.group(1).lower() if language_match else ""
            code = clean_code(match.group(2))
            if language in {"", "none", "plain"}:
                language = infer_language(code)
            return str(self.components.code_block(language, language_label(language), code))

        return CODE_PATTERN.sub(_code_block, body)

    def cleanup(self, body: str) -> str:
        """Strip live-site attributes and leftovers, then tidy whitespace."""
        for pattern, replacement in CLEANUP_PATTERNS:
            body = pattern.sub(replacement, body)
        body = INLINE_CALLOUT.sub(
            lambda match: str(
                self.components.callout("info", Markup(match.group(1).strip()))
            ),
            body,
        )
        body = body.replace("&nbsp;", " ")
        body = ADJACENT_ACCORDIONS.sub('</div>\n<div class="accordion">', body)
        return EXCESS_BLANK_LINES.sub("\n\n", body).strip()


__all__ = [
    "LiveBodyConverter",
    "clean_code",
    "extract_live_body",
    "infer_language",
    "language_label",
    "list_h2_ids",
    "validate_converted_body",
]
