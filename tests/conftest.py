"""Shared fixtures for the kb-pages test suite."""

from __future__ import annotations

import datetime as dt
import json
import typing as typ

import pytest

if typ.TYPE_CHECKING:
    from pathlib import Path

FIXED_TIME = dt.datetime(2026, 3, 5, 12, 0, tzinfo=dt.UTC)


def make_article(
    path: str,
    title: str,
    *,
    content: str = "Intro paragraph.",
    header: str = "Overview",
    code_blocks: list[dict[str, str]] | None = None,
    is_cloud: str = "",
) -> dict[str, object]:
    """Return a raw article mapping in the content document's JSON shape."""
    return {
        "path": path,
        "title": title,
        "sections": [
            {
                "header": header,
                "isCloud": is_cloud,
                "content": content,
                "codeBlocks": code_blocks or [],
            }
        ],
    }


def write_document(path: Path, articles: list[dict[str, object]]) -> Path:
    """Write ``articles`` as a content document to ``path``."""
    path.write_text(json.dumps({"articles": articles}, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def sample_articles() -> list[dict[str, object]]:
    """Return a small two-section knowledge base."""
    return [
        make_article(
            "tools/date-tool",
            "Date Tool",
            content="Format dates in templates.\n\n- $_DateTool.getDate()\n- $_DateTool.format()",
            code_blocks=[
                {
                    "code": "$_DateTool.getCurrentDate()",
                    "language": "velocity",
                    "explanation": "Returns the current date.",
                }
            ],
        ),
        make_article("tools/list-tool", "List Tool", content="Work with lists."),
        make_article(
            "getting-started/install",
            "Install",
            content="1. Download\n2. Run the installer",
            is_cloud="Cloud customers skip this step.",
        ),
    ]


@pytest.fixture
def content_file(tmp_path: Path, sample_articles: list[dict[str, object]]) -> Path:
    """Write the sample articles to ``data.json`` under ``tmp_path``."""
    return write_document(tmp_path / "data.json", sample_articles)


@pytest.fixture
def fixed_time() -> dt.datetime:
    """Return the timestamp rendered into pages by deterministic tests."""
    return FIXED_TIME


@pytest.fixture
def article_factory() -> typ.Callable[..., dict[str, object]]:
    """Return :func:`make_article` for tests that build custom documents."""
    return make_article


@pytest.fixture
def document_writer() -> typ.Callable[[Path, list[dict[str, object]]], Path]:
    """Return :func:`write_document` for tests that write custom documents."""
    return write_document
