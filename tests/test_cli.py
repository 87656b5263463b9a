"""Tests for the command-line entry point."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from ai_writer.app import cli
from ai_writer.platforms import PublishResult
from ai_writer.services import MultiPublisher
from ai_writer.settings import PublishersConfig, WordPressConfig


class StubResponse:
    status_code = 200

    def __init__(self, payload: dict[str, object]) -> None:
        self._payload = payload

    def raise_for_status(self) -> None:
        return None

    def json(self) -> dict[str, object]:
        return self._payload


class StubSession:
    def post(self, url: str, **kwargs: object) -> StubResponse:
        return StubResponse({"link": "https://x/1", "id": 1})


class StubWriter:
    def __init__(self, article: str) -> None:
        self.article = article
        self.calls: list[tuple[str, str, str | None]] = []

    def write(self, content: str, kind: str, style: str | None = None) -> str:
        self.calls.append((content, str(kind), style))
        return self.article


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    for name in ("AI_WRITER_CONFIG", "AI_WRITER_OUTPUT_DIR", "MODEL_PROVIDER"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


def _wordpress_publisher(_config) -> MultiPublisher:
    config = PublishersConfig(
        wordpress=WordPressConfig(site_url="https://blog.example", username="u", password="p")
    )
    return MultiPublisher(config, session=StubSession())


def test_publish_reports_ratio(workspace: Path, monkeypatch, capsys) -> None:
    article = workspace / "post.md"
    article.write_text("# My Title\n\nHello world", encoding="utf-8")
    monkeypatch.setattr(cli, "_build_publisher", _wordpress_publisher)

    exit_code = cli.main(["--log-plain", "publish", str(article)])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "Published 1/1" in out
    assert "[ok] WordPress https://x/1" in out


def test_publish_json_output(workspace: Path, monkeypatch, capsys) -> None:
    article = workspace / "post.md"
    article.write_text("# My Title\n\nHello world", encoding="utf-8")
    monkeypatch.setattr(cli, "_build_publisher", _wordpress_publisher)

    cli.main(["--log-plain", "publish", str(article), "--status", "publish", "--json"])

    data = json.loads(capsys.readouterr().out)
    assert data == [
        {
            "platform": "WordPress",
            "success": True,
            "url": "https://x/1",
            "id": 1,
            "message": "Article published to WordPress",
        }
    ]


def test_publish_unknown_platform_exits_with_two(workspace: Path, monkeypatch) -> None:
    article = workspace / "post.md"
    article.write_text("# T\n\nbody", encoding="utf-8")
    monkeypatch.setattr(cli, "_build_publisher", _wordpress_publisher)

    assert cli.main(["--log-plain", "publish", str(article), "--platform", "myspace"]) == 2


def test_publish_missing_file_fails(workspace: Path) -> None:
    assert cli.main(["--log-plain", "publish", str(workspace / "missing.md")]) == 1


def test_print_results_shows_copy_content(capsys) -> None:
    cli._print_results(
        [
            PublishResult.failed("Zhihu", error="HTTP 401", copy_content="Title\n\nBody"),
            PublishResult.manual("Xiaohongshu", copy_content="note text", message="copy it"),
        ]
    )
    out = capsys.readouterr().out
    assert "Published 1/2" in out
    assert "[FAILED] Zhihu - HTTP 401" in out
    assert "note text" in out


def test_print_results_without_platforms(capsys) -> None:
    cli._print_results([])
    assert "No platforms configured" in capsys.readouterr().out


def test_text_command_saves_markdown_and_html(workspace: Path, monkeypatch, capsys) -> None:
    writer = StubWriter("# Generated <Title>\n\nBody")
    monkeypatch.setattr(cli, "_build_writer", lambda _config: writer)

    exit_code = cli.main(["--log-plain", "text", "some", "loose", "notes"])

    assert exit_code == 0
    assert writer.calls == [("some loose notes", "default", None)]
    markdown_files = list((workspace / "output").glob("*-article.md"))
    html_files = list((workspace / "output").glob("*-article.html"))
    assert len(markdown_files) == 1
    assert "<title>Generated &lt;Title&gt;</title>" in html_files[0].read_text(encoding="utf-8")
    assert "# Generated <Title>" in capsys.readouterr().out


def test_batch_counts_successes(workspace: Path, monkeypatch, capsys) -> None:
    source = workspace / "notes"
    source.mkdir()
    (source / "a.txt").write_text("User: hi\nAI: hello", encoding="utf-8")
    (source / "b.md").write_text("plain notes", encoding="utf-8")
    (source / "skip.json").write_text("{}", encoding="utf-8")
    writer = StubWriter("# Article\n\nBody")
    monkeypatch.setattr(cli, "_build_writer", lambda _config: writer)

    assert cli.main(["--log-plain", "batch", str(source)]) == 0

    assert "2/2 succeeded" in capsys.readouterr().out
    assert [kind for _, kind, _ in writer.calls] == ["chat", "default"]
    assert (workspace / "output" / "a-article.html").exists()


def test_render_html_page_escapes_title() -> None:
    page = cli.render_html_page("Hello **there**", "A & B")
    assert "<title>A &amp; B</title>" in page
    assert "<strong>there</strong>" in page
