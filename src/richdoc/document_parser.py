"""Parse rich-text JSON payloads into typed node models.

This is the only place raw payload shapes are inspected. Malformed nodes do
not raise: missing fields fall back to empty values, unresolved embed targets
become ``None``, and unknown node types become :class:`GenericNode`.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Mapping

from pydantic import ValidationError

from richdoc.exceptions import DocumentParseError
from richdoc.schemas.article import Article
from richdoc.schemas.content import ArticleSummary, Asset, Category
from richdoc.schemas.nodes import (
    BlockNode,
    Document,
    EmbeddedAssetNode,
    EmbeddedEntryNode,
    GenericNode,
    HyperlinkNode,
    Node,
    NodeType,
    TextNode,
)

logger = logging.getLogger(__name__)

_NODE_TYPES = {node_type.value: node_type for node_type in NodeType}


def parse_document(payload: Any) -> Document:
    """Validate a rich-text document payload.

    Raises:
        DocumentParseError: If the payload is not a mapping whose ``nodeType``
            is ``document``.
    """
    if not isinstance(payload, Mapping):
        raise DocumentParseError(f"Expected a JSON object, got {type(payload).__name__}")
    if payload.get("nodeType") != NodeType.DOCUMENT.value:
        raise DocumentParseError(f"Expected nodeType 'document', got {payload.get('nodeType')!r}")
    return Document(content=_parse_children(payload))


def parse_node(payload: Mapping[str, Any]) -> Node:
    """Parse one node and its subtree."""
    raw_type = payload.get("nodeType")
    node_type = _NODE_TYPES.get(raw_type) if isinstance(raw_type, str) else None
    data = payload.get("data")
    if not isinstance(data, Mapping):
        data = {}

    if node_type is None:
        logger.debug("Unknown node type %r kept as generic node", raw_type)
        return GenericNode(node_type=str(raw_type), data=dict(data), content=_parse_children(payload))

    if node_type is NodeType.TEXT:
        return _parse_text(payload)

    if node_type is NodeType.DOCUMENT:
        return Document(content=_parse_children(payload))

    if node_type is NodeType.EMBEDDED_ASSET:
        return EmbeddedAssetNode(
            asset=parse_asset(data.get("target")),
            content=_parse_children(payload),
        )

    if node_type in (NodeType.EMBEDDED_ENTRY, NodeType.EMBEDDED_ENTRY_INLINE):
        return EmbeddedEntryNode(
            node_type=node_type,
            entry=parse_article_summary(data.get("target")),
            content=_parse_children(payload),
        )

    if node_type is NodeType.HYPERLINK:
        uri = data.get("uri")
        return HyperlinkNode(
            uri=uri if isinstance(uri, str) else None,
            content=_parse_children(payload),
        )

    return BlockNode(node_type=node_type, content=_parse_children(payload))


def _parse_children(payload: Mapping[str, Any]) -> tuple[Node, ...]:
    content = payload.get("content")
    if not isinstance(content, list):
        return ()
    return tuple(parse_node(child) for child in content if isinstance(child, Mapping))


def _parse_text(payload: Mapping[str, Any]) -> TextNode:
    value = payload.get("value")
    marks: set[str] = set()
    for mark in payload.get("marks") or []:
        if isinstance(mark, Mapping) and isinstance(mark.get("type"), str):
            marks.add(mark["type"])
        elif isinstance(mark, str):
            marks.add(mark)
    return TextNode(value=value if isinstance(value, str) else "", marks=frozenset(marks))


def _fields(target: Any) -> Mapping[str, Any] | None:
    if not isinstance(target, Mapping):
        return None
    fields = target.get("fields")
    return fields if isinstance(fields, Mapping) else None


def _sys(target: Any) -> Mapping[str, Any]:
    if not isinstance(target, Mapping):
        return {}
    sys_data = target.get("sys")
    return sys_data if isinstance(sys_data, Mapping) else {}


def _link_id(value: Any) -> str | None:
    link_id = _sys(value).get("id")
    return link_id if isinstance(link_id, str) else None


def parse_asset(target: Any) -> Asset | None:
    """Build an :class:`Asset` from a resolved asset entry; None if unresolved."""
    fields = _fields(target)
    if fields is None:
        return None
    file_info = fields.get("file")
    if not isinstance(file_info, Mapping) or not isinstance(file_info.get("url"), str):
        return None

    details = file_info.get("details")
    image = details.get("image") if isinstance(details, Mapping) else None
    image = image if isinstance(image, Mapping) else {}
    title = fields.get("title")
    description = fields.get("description")
    try:
        return Asset(
            url=file_info["url"],
            width=image.get("width"),
            height=image.get("height"),
            title=title if isinstance(title, str) else "",
            description=description if isinstance(description, str) else "",
        )
    except ValidationError as exc:
        logger.debug("Embedded asset has an invalid shape: %s", exc)
        return None


def parse_article_summary(target: Any) -> ArticleSummary | None:
    """Build an :class:`ArticleSummary` from a resolved article entry; None if unresolved."""
    fields = _fields(target)
    if fields is None or not isinstance(fields.get("slug"), str):
        return None
    title = fields.get("title")
    try:
        return ArticleSummary(
            title=title if isinstance(title, str) else None,
            slug=fields["slug"],
            category_id=_link_id(fields.get("category")),
            created_at=_sys(target).get("createdAt"),
        )
    except ValidationError as exc:
        logger.debug("Embedded entry has an invalid shape: %s", exc)
        return None


def parse_category(entry: Mapping[str, Any]) -> Category:
    """Build a :class:`Category` from a category entry."""
    fields = _fields(entry) or {}
    return Category(
        id=_link_id(entry) or "",
        name=fields.get("name") or "",
        slug=fields.get("slug") or "",
    )


def parse_article(entry: Mapping[str, Any], *, category: Category | None = None) -> Article:
    """Build an :class:`Article` from an article entry with resolved links.

    Raises:
        DocumentParseError: If required article fields are missing.
    """
    fields = _fields(entry) or {}
    category_entry = fields.get("category")
    if category is None:
        category = parse_category(category_entry) if isinstance(category_entry, Mapping) else None
    if category is None:
        raise DocumentParseError("Article has no category")

    contents = fields.get("contents")
    try:
        return Article(
            id=_link_id(entry) or "",
            title=fields.get("title") or "",
            slug=fields.get("slug") or "",
            created_at=_sys(entry).get("createdAt") or datetime.fromtimestamp(0, tz=timezone.utc),
            category=category,
            thumbnail=parse_asset(fields.get("thumbnail")),
            contents=parse_document(contents) if contents is not None else None,
        )
    except ValidationError as exc:
        raise DocumentParseError(f"Invalid article entry: {exc}") from exc
