"""Shared schemas for richdoc."""

from richdoc.schemas.article import Article
from richdoc.schemas.content import ArticleSummary, Asset, Category, CategoryLink
from richdoc.schemas.nodes import (
    BlockNode,
    Document,
    EmbeddedAssetNode,
    EmbeddedEntryNode,
    GenericNode,
    HyperlinkNode,
    MarkType,
    Node,
    NodeType,
    TextNode,
)
from richdoc.schemas.output import OutputKind, OutputNode
from richdoc.schemas.rendering import Breadcrumb, RenderResult
from richdoc.schemas.toc import TocEntry

__all__ = [
    "Article",
    "ArticleSummary",
    "Asset",
    "BlockNode",
    "Breadcrumb",
    "Category",
    "CategoryLink",
    "Document",
    "EmbeddedAssetNode",
    "EmbeddedEntryNode",
    "GenericNode",
    "HyperlinkNode",
    "MarkType",
    "Node",
    "NodeType",
    "OutputKind",
    "OutputNode",
    "RenderResult",
    "TextNode",
    "TocEntry",
]
