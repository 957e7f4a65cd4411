"""Rendering pipeline: content store -> output tree, HTML and Markdown."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Mapping

from richdoc.config import RICHDOC_SITE_TITLE
from richdoc.content_store import ContentStore
from richdoc.document_parser import parse_document
from richdoc.html import render_html
from richdoc.markdown import convert_fragment_to_markdown
from richdoc.output_formatter import format_markdown, format_summary, render_toc_tree
from richdoc.renderer import RenderContext, render_document
from richdoc.schemas.article import Article
from richdoc.schemas.content import CategoryLink
from richdoc.schemas.nodes import Document
from richdoc.schemas.rendering import Breadcrumb, RenderResult
from richdoc.toc import DEFAULT_TOC_LEVELS, extract_toc
from richdoc.utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class RenderOptions:
    """Options for article rendering.

    Attributes:
        include_toc: If True, prepend a contents list to the Markdown output.
        toc_levels: Heading levels listed in the table of contents.
        include_anchors: If True, Markdown headings keep their ``{#anchor}`` and
            the contents list links to them; otherwise it is plain text.
        use_cache: Whether to reuse cached content store responses.
        site_title: Label of the first breadcrumb.
        context: Render-time collaborators (date formatter, asset scheme).
    """

    include_toc: bool = True
    toc_levels: tuple[int, ...] = DEFAULT_TOC_LEVELS
    include_anchors: bool = False
    use_cache: bool = True
    site_title: str = RICHDOC_SITE_TITLE
    context: RenderContext = field(default_factory=RenderContext)


async def render_article(
    category_slug: str,
    article_slug: str,
    *,
    options: RenderOptions | None = None,
    store: ContentStore | None = None,
) -> RenderResult:
    """Fetch an article and its category mapping, then render it.

    Args:
        category_slug: Slug of the article's category.
        article_slug: Slug of the article.
        options: Rendering options. Uses defaults if None.
        store: Content store to query. A store with the configured
            credentials is created if None.

    Raises:
        ArticleNotFoundError: If the article does not exist.
        FetchError: If the content store cannot be reached.
    """
    opts = options or RenderOptions()
    if store is not None:
        categories, article = await _fetch(store, category_slug, article_slug)
    else:
        async with ContentStore(use_cache=opts.use_cache) as own_store:
            categories, article = await _fetch(own_store, category_slug, article_slug)

    logger.info(
        "Rendering article",
        extra={"category": category_slug, "slug": article_slug, "categories": len(categories)},
    )
    return render_article_entry(article, categories, options=opts)


async def _fetch(
    store: ContentStore, category_slug: str, article_slug: str
) -> tuple[dict[str, CategoryLink], Article]:
    links_task = asyncio.ensure_future(store.fetch_category_links())
    article_task = asyncio.ensure_future(store.fetch_article(category_slug, article_slug))
    try:
        categories, article = await asyncio.gather(links_task, article_task)
    except BaseException:
        # The store may close its client right after this returns.
        for task in (links_task, article_task):
            task.cancel()
        await asyncio.gather(links_task, article_task, return_exceptions=True)
        raise
    return categories, article


def render_article_entry(
    article: Article,
    categories: Mapping[str, CategoryLink],
    *,
    options: RenderOptions | None = None,
) -> RenderResult:
    """Render an already fetched article."""
    opts = options or RenderOptions()
    path = f"/{article.category.slug}/{article.slug}"
    thumbnail_src = None
    if article.thumbnail is not None:
        thumbnail_src = article.thumbnail.url
        if thumbnail_src.startswith("//"):
            thumbnail_src = f"{opts.context.asset_scheme}{thumbnail_src}"

    breadcrumbs = [
        Breadcrumb(href="/", display_name=opts.site_title),
        Breadcrumb(href=f"/{article.category.slug}", display_name=article.category.name),
        Breadcrumb(href=path, display_name=article.title),
    ]
    return _render(
        article.contents,
        categories,
        title=article.title,
        path=path,
        date=opts.context.date_formatter(article.created_at),
        category=article.category.name,
        breadcrumbs=breadcrumbs,
        thumbnail_src=thumbnail_src,
        options=opts,
    )


def render_payload(
    payload: Any,
    categories: Mapping[str, CategoryLink] | None = None,
    *,
    title: str = "",
    path: str = "",
    options: RenderOptions | None = None,
) -> RenderResult:
    """Render a raw rich-text document payload without touching the content store.

    Raises:
        DocumentParseError: If the payload is not a rich-text document.
    """
    opts = options or RenderOptions()
    document = parse_document(payload)
    return _render(
        document,
        categories or {},
        title=title,
        path=path,
        date="",
        category=None,
        breadcrumbs=[],
        thumbnail_src=None,
        options=opts,
    )


def _render(
    document: Document | None,
    categories: Mapping[str, CategoryLink],
    *,
    title: str,
    path: str,
    date: str,
    category: str | None,
    breadcrumbs: list[Breadcrumb],
    thumbnail_src: str | None,
    options: RenderOptions,
) -> RenderResult:
    if document is None:
        document = Document()
    nodes = render_document(document, categories, options.context)
    toc = extract_toc(document, levels=options.toc_levels)
    html = render_html(nodes)
    body_markdown = convert_fragment_to_markdown(html, include_anchors=options.include_anchors) if html else ""

    markdown = format_markdown(
        title=title,
        date=date,
        toc=toc,
        body_markdown=body_markdown,
        include_toc=options.include_toc,
        link_toc=options.include_anchors,
    )
    summary = format_summary(
        title=title,
        path=path,
        date=date,
        category=category,
        toc=toc,
        body_markdown=body_markdown,
    )

    return RenderResult(
        title=title,
        path=path,
        date=date,
        summary=summary,
        breadcrumbs=breadcrumbs,
        thumbnail_src=thumbnail_src,
        toc=toc,
        toc_tree=render_toc_tree(toc),
        nodes=nodes,
        html=html,
        markdown=markdown,
    )

