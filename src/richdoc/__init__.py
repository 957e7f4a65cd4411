"""richdoc: render rich-text documents into presentation trees."""

from richdoc.anchors import anchor
from richdoc.exceptions import (
    ArticleNotFoundError,
    ConfigurationError,
    DocumentParseError,
    FetchError,
    RateLimitError,
    RichdocError,
)
from richdoc.ingestion import RenderOptions, render_article, render_payload
from richdoc.links import classify_link
from richdoc.references import resolve_category_path
from richdoc.renderer import RenderContext, render_document
from richdoc.schemas import CategoryLink, Document, OutputNode, RenderResult, TocEntry
from richdoc.toc import extract_toc

__all__ = [
    "ArticleNotFoundError",
    "CategoryLink",
    "ConfigurationError",
    "Document",
    "DocumentParseError",
    "FetchError",
    "OutputNode",
    "RateLimitError",
    "RenderContext",
    "RenderOptions",
    "RenderResult",
    "RichdocError",
    "TocEntry",
    "anchor",
    "classify_link",
    "extract_toc",
    "render_article",
    "render_document",
    "render_payload",
    "resolve_category_path",
]
