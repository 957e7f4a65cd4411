"""Tests for the command-line interface."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from builders import article_target, block, document, text
from richdoc.anchors import anchor
from richdoc.cli import load_categories, main
from richdoc.exceptions import ArticleNotFoundError
from richdoc.ingestion import render_payload

SAMPLE = document(
    block("heading-2", text("Intro")),
    block("embedded-entry-block", target=article_target()),
)


@pytest.fixture
def payload_file(tmp_path: Path) -> Path:
    path = tmp_path / "doc.json"
    path.write_text(json.dumps(SAMPLE), encoding="utf-8")
    return path


@pytest.fixture
def categories_file(tmp_path: Path) -> Path:
    path = tmp_path / "categories.json"
    path.write_text(
        json.dumps([{"id": "cat1", "path": "/tech", "title": "Tech", "linkedArticleCount": 2}]),
        encoding="utf-8",
    )
    return path


class TestMain:
    """Tests for the richdoc entry point."""

    def test_renders_local_file_as_markdown(
        self, payload_file: Path, categories_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """A local document renders to Markdown on stdout."""
        code = main(["--input", str(payload_file), "--categories", str(categories_file), "--title", "Doc"])

        out = capsys.readouterr().out
        assert code == 0
        assert out.startswith("# Doc\n")
        assert "(/tech/foo)" in out

    def test_html_format(self, payload_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """HTML output carries heading anchors."""
        assert main(["--input", str(payload_file), "-f", "html"]) == 0
        assert f'<h2 id="{anchor("Intro")}">Intro</h2>' in capsys.readouterr().out

    def test_json_format(self, payload_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """JSON output is the full render result."""
        assert main(["--input", str(payload_file), "-f", "json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["nodes"][0]["kind"] == "heading"
        assert data["nodes"][1]["attrs"]["href"] == "undefined/foo"

    def test_writes_output_file(self, payload_file: Path, tmp_path: Path) -> None:
        """Output goes to a file when requested."""
        target = tmp_path / "out.md"
        assert main(["--input", str(payload_file), "--no-toc", "-o", str(target)]) == 0
        content = target.read_text(encoding="utf-8")
        assert content.startswith("## Intro")
        assert content.endswith("\n")

    def test_requires_source(self) -> None:
        """Running without slugs or an input file is a usage error."""
        with pytest.raises(SystemExit) as excinfo:
            main([])
        assert excinfo.value.code == 2

    def test_invalid_document(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """A payload that is not a document exits with an error."""
        path = tmp_path / "bad.json"
        path.write_text('{"nodeType": "paragraph"}', encoding="utf-8")
        assert main(["--input", str(path)]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_not_found(self, capsys: pytest.CaptureFixture[str]) -> None:
        """A missing article exits with status 1."""
        with patch("richdoc.cli.render_article", AsyncMock(side_effect=ArticleNotFoundError("gone"))):
            assert main(["tech", "gone"]) == 1
        assert "Not found: gone" in capsys.readouterr().err

    def test_fetches_by_slugs(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Category and slug are passed through to the pipeline."""
        result = render_payload(SAMPLE, title="Fetched")
        with patch("richdoc.cli.render_article", AsyncMock(return_value=result)) as mock_render:
            assert main(["tech", "hello", "--no-cache"]) == 0

        args, kwargs = mock_render.call_args
        assert args == ("tech", "hello")
        assert kwargs["options"].use_cache is False
        assert capsys.readouterr().out.startswith("# Fetched")


class TestLoadCategories:
    """Tests for load_categories."""

    def test_list_form(self, categories_file: Path) -> None:
        """A JSON list is keyed by id."""
        links = load_categories(categories_file)
        assert links["cat1"].path == "/tech"
        assert links["cat1"].linked_article_count == 2

    def test_object_form(self, tmp_path: Path) -> None:
        """An object keyed by id is accepted too."""
        path = tmp_path / "categories.json"
        path.write_text(json.dumps({"x": {"id": "cat9", "path": "/x", "title": "X"}}), encoding="utf-8")
        assert list(load_categories(path)) == ["cat9"]
