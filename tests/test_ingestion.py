"""Tests for the end-to-end rendering pipeline."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import re

import pytest

from builders import article_target, block, document, text
from richdoc.anchors import anchor
from richdoc.document_parser import parse_document
from richdoc.exceptions import ArticleNotFoundError, DocumentParseError
from richdoc.ingestion import RenderOptions, render_article, render_article_entry, render_payload
from richdoc.renderer import RenderContext
from richdoc.schemas.article import Article
from richdoc.schemas.content import Asset, Category, CategoryLink
from richdoc.schemas.nodes import Document
from richdoc.schemas.output import OutputKind


def _article(contents: Document | None) -> Article:
    return Article(
        id="a1",
        title="Hello",
        slug="hello",
        created_at=datetime(2023, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        category=Category(id="cat1", name="Tech", slug="tech"),
        thumbnail=Asset(url="//images.example.net/thumb.png"),
        contents=contents,
    )


SAMPLE = document(
    block("heading-2", text("Intro")),
    block("paragraph", text("Hello")),
    block("heading-3", text("Details")),
    block("embedded-entry-block", target=article_target(category_id="missing")),
)


class TestRenderPayload:
    """Tests for render_payload."""

    def test_builds_all_outputs(self, categories: dict[str, CategoryLink]) -> None:
        """Nodes, table of contents, HTML and Markdown are produced together."""
        result = render_payload(SAMPLE, categories, title="Sample")

        assert [node.kind for node in result.nodes] == [
            OutputKind.HEADING,
            OutputKind.PROSE,
            OutputKind.HEADING,
            OutputKind.ARTICLE_CARD,
        ]
        assert result.toc[0].anchor == anchor("Intro")
        assert result.toc[0].children[0].text == "Details"
        assert f'id="{anchor("Intro")}"' in result.html
        assert result.markdown.startswith("# Sample\n\n## Contents\n")
        assert "- Intro\n  - Details" in result.markdown
        assert "undefined/foo" in result.markdown
        assert "Headings: 2" in result.summary

    def test_contents_links_resolve_with_anchors(self) -> None:
        """Every contents link points at an anchor present in the body."""
        result = render_payload(SAMPLE, options=RenderOptions(include_anchors=True))
        links = re.findall(r"\]\(#([0-9a-f]+)\)", result.markdown)
        targets = set(re.findall(r"\{#([0-9a-f]+)\}", result.markdown))
        assert links == [anchor("Intro"), anchor("Details")]
        assert set(links) <= targets

    def test_default_contents_has_no_dangling_links(self) -> None:
        """Without heading anchors the contents list carries no links."""
        result = render_payload(document(block("heading-2", text("Intro")), block("paragraph", text("Hi"))))
        assert result.markdown == "## Contents\n- Intro\n\n## Intro\n\nHi"
        assert "](#" not in result.markdown

    def test_toc_tree(self) -> None:
        """The plain-text heading tree is part of the result."""
        result = render_payload(SAMPLE)
        assert result.toc_tree == "Intro\n    Details"

    def test_without_toc(self) -> None:
        """The contents list can be left out."""
        result = render_payload(SAMPLE, options=RenderOptions(include_toc=False))
        assert "## Contents" not in result.markdown
        assert result.toc

    def test_anchors_in_markdown(self) -> None:
        """Headings keep their ids when anchors are requested."""
        result = render_payload(SAMPLE, options=RenderOptions(include_anchors=True))
        assert f"## Intro {{#{anchor('Intro')}}}" in result.markdown

    def test_rejects_non_document(self) -> None:
        """Non-document payloads raise DocumentParseError."""
        with pytest.raises(DocumentParseError):
            render_payload({"nodeType": "paragraph"})

    def test_empty_document(self) -> None:
        """An empty document renders to empty outputs."""
        result = render_payload(document())
        assert result.nodes == []
        assert result.html == ""
        assert result.markdown == ""


class TestRenderArticleEntry:
    """Tests for render_article_entry."""

    def test_page_data(self, categories: dict[str, CategoryLink]) -> None:
        """Path, date, breadcrumbs and thumbnail are assembled."""
        result = render_article_entry(
            _article(parse_document(SAMPLE)),
            categories,
            options=RenderOptions(site_title="Blog"),
        )
        assert result.title == "Hello"
        assert result.path == "/tech/hello"
        assert result.date == "2023年01月02日 12:04"
        assert result.thumbnail_src == "https://images.example.net/thumb.png"
        assert [(crumb.href, crumb.display_name) for crumb in result.breadcrumbs] == [
            ("/", "Blog"),
            ("/tech", "Tech"),
            ("/tech/hello", "Hello"),
        ]
        assert result.markdown.startswith("# Hello\n\n*2023年01月02日 12:04*")
        assert "Category: Tech" in result.summary

    def test_custom_context(self) -> None:
        """The render context drives date text and asset scheme."""
        context = RenderContext(date_formatter=lambda instant: "today", asset_scheme="http:")
        result = render_article_entry(_article(None), {}, options=RenderOptions(context=context))
        assert result.date == "today"
        assert result.thumbnail_src == "http://images.example.net/thumb.png"

    def test_article_without_contents(self) -> None:
        """Missing contents render as an empty body."""
        result = render_article_entry(_article(None), {})
        assert result.nodes == []
        assert result.toc == []


class TestRenderArticle:
    """Tests for render_article with an injected store."""

    @pytest.mark.asyncio
    async def test_fetches_and_renders(self, categories: dict[str, CategoryLink]) -> None:
        """Categories and article are fetched, then rendered."""
        store = MagicMock()
        store.fetch_category_links = AsyncMock(return_value=categories)
        store.fetch_article = AsyncMock(return_value=_article(parse_document(SAMPLE)))

        result = await render_article("tech", "hello", store=store)

        store.fetch_article.assert_awaited_once_with("tech", "hello")
        assert result.path == "/tech/hello"
        assert len(result.nodes) == 4

    @pytest.mark.asyncio
    async def test_not_found_propagates(self) -> None:
        """A missing article surfaces as ArticleNotFoundError."""
        store = MagicMock()
        store.fetch_category_links = AsyncMock(return_value={})
        store.fetch_article = AsyncMock(side_effect=ArticleNotFoundError("gone"))

        with pytest.raises(ArticleNotFoundError):
            await render_article("tech", "gone", store=store)

    @pytest.mark.asyncio
    async def test_not_found_cancels_category_fetch(self) -> None:
        """A failed article fetch cancels the concurrent category fetch."""

        class SlowCategoriesStore:
            def __init__(self) -> None:
                self.categories_cancelled = False

            async def fetch_category_links(self) -> dict[str, CategoryLink]:
                try:
                    await asyncio.sleep(10)
                except asyncio.CancelledError:
                    self.categories_cancelled = True
                    raise
                return {}

            async def fetch_article(self, category_slug: str, article_slug: str) -> Article:
                raise ArticleNotFoundError(article_slug)

        store = SlowCategoriesStore()
        with pytest.raises(ArticleNotFoundError):
            await render_article("tech", "gone", store=store)

        assert store.categories_cancelled
        pending = [task for task in asyncio.all_tasks() if task is not asyncio.current_task()]
        assert not any("fetch_category_links" in repr(task) for task in pending)
