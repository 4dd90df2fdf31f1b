"""End-to-end tests for the ``pages generate`` command."""

from __future__ import annotations

import json
import typing as typ

import pytest
from bs4 import BeautifulSoup

from kb_pages import cli

if typ.TYPE_CHECKING:
    from pathlib import Path

    from pytest_mock import MockerFixture


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run commands from an empty directory so no site config is picked up."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _generate(*args: str) -> None:
    cli.main(["generate", *args])


def _index_files(root: Path) -> set[str]:
    return {path.relative_to(root).as_posix() for path in root.rglob("index.html")}


def test_generate_writes_every_page(
    workdir: Path, content_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    out = workdir / "site"

    _generate("--input", str(content_file), "--out", str(out))

    assert _index_files(out) == {
        "index.html",
        "getting-started/index.html",
        "getting-started/install/index.html",
        "tools/index.html",
        "tools/date-tool/index.html",
        "tools/list-tool/index.html",
    }
    search = json.loads((out / "search-index.json").read_text(encoding="utf-8"))
    assert [doc["url"] for doc in search] == [
        "/getting-started/install/",
        "/tools/date-tool/",
        "/tools/list-tool/",
    ]
    summary = capsys.readouterr().out
    assert "[WRITE] Generation complete" in summary
    assert "Include paths: all" in summary
    assert "Generate home: true" in summary
    assert "Pages written: 6" in summary
    assert "Article pages written: 3" in summary
    assert "Search index docs: 3" in summary


def test_date_tool_example(
    workdir: Path,
    article_factory: typ.Callable[..., dict[str, object]],
    document_writer: typ.Callable[[Path, list[dict[str, object]]], Path],
) -> None:
    data = document_writer(
        workdir / "data.json", [article_factory("tools/date-tool", "Date Tool")]
    )

    _generate("--input", str(data))

    page = workdir / "docs" / "tools" / "date-tool" / "index.html"
    soup = BeautifulSoup(page.read_text(encoding="utf-8"), "html.parser")
    assert soup.select_one('link[href="../../../_assets/css/tokens.css"]') is not None
    assert soup.select_one(".search-overlay")["data-search-index"] == "../../search-index.json"
    search = json.loads((workdir / "docs" / "search-index.json").read_text(encoding="utf-8"))
    assert search == [
        {
            "id": "tools-date-tool",
            "title": "Date Tool",
            "category": "Tools",
            "body": "Overview Intro paragraph.",
            "url": "/tools/date-tool/",
        }
    ]


def test_duplicate_paths_warn_and_keep_first(
    workdir: Path,
    article_factory: typ.Callable[..., dict[str, object]],
    document_writer: typ.Callable[[Path, list[dict[str, object]]], Path],
    caplog: pytest.LogCaptureFixture,
    capsys: pytest.CaptureFixture[str],
) -> None:
    data = document_writer(
        workdir / "data.json",
        [article_factory("a/b", "First"), article_factory("a/b/", "Second")],
    )

    _generate("--input", str(data))

    html = (workdir / "docs" / "a" / "b" / "index.html").read_text(encoding="utf-8")
    assert "First" in html
    assert "Second" not in html
    assert "Duplicate article paths skipped (1):" in caplog.text
    summary = capsys.readouterr().out
    assert "Total input articles: 2" in summary
    assert "Selected articles: 1" in summary
    assert "Skipped: 1" in summary


def test_include_paths_limit_output_and_prune_the_rest(
    workdir: Path, content_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    out = workdir / "docs"
    _generate("--input", str(content_file))
    capsys.readouterr()

    _generate(
        "--input",
        str(content_file),
        "--include-paths",
        "tools/date-tool",
        "--generate-home",
        "false",
        "--generate-landings=false",
    )

    assert _index_files(out) == {"tools/date-tool/index.html"}
    assert not (out / "getting-started").exists()
    summary = capsys.readouterr().out
    assert "Include paths: tools/date-tool" in summary
    assert "Generate home: false" in summary
    assert "Generate landings: false" in summary
    assert "Stale pages deleted: 5" in summary
    assert "Stale dirs removed: 3" in summary


def test_unknown_include_path_writes_nothing(
    workdir: Path, content_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        _generate("--input", str(content_file), "--include-paths", "missing/page")

    assert excinfo.value.code == 1
    assert not (workdir / "docs").exists()
    assert "Error: Unknown include path(s): missing/page" in capsys.readouterr().err


def test_invalid_boolean_value_is_rejected(
    workdir: Path, content_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        _generate("--input", str(content_file), "--generate-home", "maybe")

    assert excinfo.value.code == 1
    assert (
        "Invalid value for --generate-home: maybe. Expected true or false."
        in capsys.readouterr().err
    )


def test_missing_input_reports_error(workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit):
        _generate("--input", str(workdir / "nope.json"))

    assert "Error: Could not read input file" in capsys.readouterr().err


def test_dry_run_leaves_output_untouched(
    workdir: Path, content_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _generate("--input", str(content_file), "--dry-run")

    assert not (workdir / "docs").exists()
    summary = capsys.readouterr().out
    assert "[DRY RUN] Generation complete" in summary
    assert "Pages written: 6" in summary


def test_generation_is_idempotent(workdir: Path, content_file: Path) -> None:
    out = workdir / "docs"
    _generate("--input", str(content_file))
    first = {path: path.read_bytes() for path in sorted(out.rglob("*")) if path.is_file()}

    _generate("--input", str(content_file))
    second = {path: path.read_bytes() for path in sorted(out.rglob("*")) if path.is_file()}

    assert first == second


def test_site_config_branding_is_applied(workdir: Path, content_file: Path) -> None:
    config = workdir / "site.yaml"
    config.write_text(
        "title: Acme Help\nlogo:\n  primary: Acme\n  secondary: Help\n",
        encoding="utf-8",
    )

    _generate("--input", str(content_file), "--config", str(config))

    soup = BeautifulSoup(
        (workdir / "docs" / "index.html").read_text(encoding="utf-8"), "html.parser"
    )
    assert soup.title.string == "Acme Help - Acme Help"
    assert soup.select_one(".content__title").get_text() == "Acme Help"


@pytest.mark.parametrize(
    ("tokens", "expected"),
    [
        (["--generate-home"], ["--generate-home"]),
        (["--generate-home", "TRUE"], ["--generate-home"]),
        (["--generate-home", "false", "--dry-run"], ["--no-generate-home", "--dry-run"]),
        (["--generate-landings=False"], ["--no-generate-landings"]),
        (["--generate-home", "--dry-run"], ["--generate-home", "--dry-run"]),
        (["--no-generate-home"], ["--no-generate-home"]),
    ],
)
def test_normalize_bool_flags(tokens: list[str], expected: list[str]) -> None:
    assert cli.normalize_bool_flags(tokens) == expected


def test_filesystem_errors_exit_with_status_one(
    workdir: Path,
    content_file: Path,
    mocker: MockerFixture,
    capsys: pytest.CaptureFixture[str],
) -> None:
    run = mocker.patch.object(
        cli.SiteGenerator, "run", side_effect=PermissionError("docs is read-only")
    )

    with pytest.raises(SystemExit) as excinfo:
        _generate("--input", str(content_file))

    run.assert_called_once_with()
    assert excinfo.value.code == 1
    assert "Error: docs is read-only" in capsys.readouterr().err


def test_unknown_option_is_reported_as_plain_error(
    workdir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        _generate("--bogus")

    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert captured.err.startswith('Error: Unknown option: "--bogus"')
    assert "╭" not in captured.err + captured.out
