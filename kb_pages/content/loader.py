"""Load the JSON content document into typed dataclasses.

The loader validates the structural shape of the document and fails fast on
the first violation, naming the offending array index and field. There is no
best-effort mode: either every article loads or none does.
"""

from __future__ import annotations

import typing as typ

import msgspec

from .models import Article, CodeBlock, ContentDocument, ContentError, Section

if typ.TYPE_CHECKING:
    from pathlib import Path

_SECTION_KEYS = ("header", "isCloud", "content")
_CODE_BLOCK_KEYS = ("code", "language", "explanation")


def load_content(path: Path) -> ContentDocument:
    """Read and validate the content document stored at ``path``.

    Parameters
    ----------
    path : Path
        JSON file with a top-level ``articles`` array.

    Returns
    -------
    ContentDocument
        Articles in document order with paths and titles as written; the
        model builder normalizes them.

    Raises
    ------
    ContentError
        If the file cannot be read, is not valid JSON, or any article,
        section, or code block is missing a required field.
    """
    try:
        raw = path.read_bytes()
    except OSError as exc:
        msg = f'Could not read input file "{path}": {exc.strerror or exc}'
        raise ContentError(msg) from exc

    try:
        payload = msgspec.json.decode(raw)
    except msgspec.DecodeError as exc:
        msg = f'Input file "{path}" is not valid JSON: {exc}'
        raise ContentError(msg) from exc

    return parse_content(payload)


def parse_content(payload: object) -> ContentDocument:
    """Validate an already decoded JSON payload and build the document."""
    if not isinstance(payload, dict):
        msg = "Input root must be an object."
        raise ContentError(msg)
    articles_raw = payload.get("articles")
    if not isinstance(articles_raw, list):
        msg = 'Input schema error: root must include an "articles" array.'
        raise ContentError(msg)

    articles = [
        _parse_article(entry, f"articles[{index}]")
        for index, entry in enumerate(articles_raw)
    ]
    return ContentDocument(articles=articles)


def _parse_article(entry: object, prefix: str) -> Article:
    if not isinstance(entry, dict):
        msg = f"{prefix} must be an object."
        raise ContentError(msg)
    path = entry.get("path")
    if not isinstance(path, str) or not path.strip():
        msg = f"{prefix}.path must be a non-empty string."
        raise ContentError(msg)
    title = entry.get("title")
    if not isinstance(title, str) or not title.strip():
        msg = f"{prefix}.title must be a non-empty string."
        raise ContentError(msg)
    sections_raw = entry.get("sections")
    if not isinstance(sections_raw, list):
        msg = f"{prefix}.sections must be an array."
        raise ContentError(msg)

    sections = [
        _parse_section(section, f"{prefix}.sections[{index}]")
        for index, section in enumerate(sections_raw)
    ]
    return Article(path=path, title=title, sections=sections)


def _parse_section(entry: object, prefix: str) -> Section:
    if not isinstance(entry, dict):
        msg = f"{prefix} must be an object."
        raise ContentError(msg)
    _require_keys(entry, _SECTION_KEYS, prefix)
    blocks_raw = entry.get("codeBlocks")
    if not isinstance(blocks_raw, list):
        msg = f"{prefix}.codeBlocks must be an array."
        raise ContentError(msg)

    code_blocks = [
        _parse_code_block(block, f"{prefix}.codeBlocks[{index}]")
        for index, block in enumerate(blocks_raw)
    ]
    return Section(
        header=_as_text(entry["header"]),
        content=_as_text(entry["content"]),
        is_cloud=_as_text(entry["isCloud"]),
        code_blocks=code_blocks,
    )


def _parse_code_block(entry: object, prefix: str) -> CodeBlock:
    if not isinstance(entry, dict):
        msg = f"{prefix} must be an object."
        raise ContentError(msg)
    _require_keys(entry, _CODE_BLOCK_KEYS, prefix)
    return CodeBlock(
        code=_as_text(entry["code"]),
        language=_as_text(entry["language"]),
        explanation=_as_text(entry["explanation"]),
    )


def _require_keys(
    entry: typ.Mapping[str, object], keys: tuple[str, ...], prefix: str
) -> None:
    for key in keys:
        if key not in entry:
            msg = f"{prefix}.{key} is required."
            raise ContentError(msg)


def _as_text(value: object) -> str:
    """Return ``value`` as text; falsy values are empty and ``True`` is ``"true"``."""
    if not value:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true"
    return str(value)


__all__ = ["load_content", "parse_content"]
