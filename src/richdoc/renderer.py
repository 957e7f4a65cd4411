"""Render rich-text documents into an output tree.

Each node type has one handler in :data:`NODE_RENDERERS`. A handler receives
the node, its already-rendered children, the category mapping, and the render
context, and returns the output nodes that replace it. Node types without a
handler keep their children nested under a ``fragment`` node.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Mapping

from richdoc.anchors import heading_anchor
from richdoc.dates import format_date
from richdoc.links import VideoLink, classify_link, video_embed_url
from richdoc.references import build_entry_href, resolve_category_path
from richdoc.schemas.content import CategoryLink
from richdoc.schemas.nodes import (
    HEADING_LEVELS,
    Document,
    MarkType,
    Node,
    NodeType,
    TextNode,
    first_child,
)
from richdoc.schemas.output import OutputKind, OutputNode

logger = logging.getLogger(__name__)

# Outermost mark first.
MARK_ORDER: tuple[MarkType, ...] = (
    MarkType.BOLD,
    MarkType.ITALIC,
    MarkType.UNDERLINE,
    MarkType.CODE,
    MarkType.SUPERSCRIPT,
    MarkType.SUBSCRIPT,
    MarkType.STRIKETHROUGH,
)

EXTERNAL_LINK_TARGET = "_blank"
EXTERNAL_LINK_REL = "noreferrer noopener"


@dataclass(frozen=True)
class RenderContext:
    """Render-time collaborators.

    Attributes:
        date_formatter: Turns an instant into display text.
        asset_scheme: Prefix added to scheme-relative asset URLs.
    """

    date_formatter: Callable = format_date
    asset_scheme: str = "https:"


Categories = Mapping[str, CategoryLink]
Handler = Callable[[Node, list[OutputNode], Categories, RenderContext], list[OutputNode]]


def render_document(
    document: Document,
    categories: Categories | None = None,
    context: RenderContext | None = None,
) -> list[OutputNode]:
    """Render a document and return its top-level output nodes."""
    categories = categories if categories is not None else {}
    context = context or RenderContext()
    return _render_children(document, categories, context)


def render_node(
    node: Node,
    categories: Categories | None = None,
    context: RenderContext | None = None,
) -> list[OutputNode]:
    """Render a single node and its subtree."""
    categories = categories if categories is not None else {}
    context = context or RenderContext()
    children = _render_children(node, categories, context)
    handler = NODE_RENDERERS.get(node.node_type, _render_passthrough)
    return handler(node, children, categories, context)


def _render_children(node: Node, categories: Categories, context: RenderContext) -> list[OutputNode]:
    rendered: list[OutputNode] = []
    for child in node.content:
        rendered.extend(render_node(child, categories, context))
    return rendered


def _render_heading(node: Node, children: list[OutputNode], categories: Categories, context: RenderContext) -> list[OutputNode]:
    level = HEADING_LEVELS[node.node_type]
    attrs: dict[str, str | int | None] = {"level": level, "variant": f"h{level}"}
    anchor_id = heading_anchor(node)
    if anchor_id is not None:
        attrs["id"] = anchor_id
    else:
        logger.debug("Heading without leading text run; rendering without anchor")
    return [OutputNode(kind=OutputKind.HEADING, attrs=attrs, children=children)]


def _render_paragraph(node: Node, children: list[OutputNode], categories: Categories, context: RenderContext) -> list[OutputNode]:
    lead = first_child(node)
    if isinstance(lead, TextNode) and lead.has_mark(MarkType.CODE):
        return [OutputNode(kind=OutputKind.CODE_BLOCK, children=children)]
    if isinstance(lead, TextNode):
        return [OutputNode(kind=OutputKind.PROSE, attrs={"variant": "body1"}, children=children)]
    return [OutputNode(kind=OutputKind.PARAGRAPH, children=children)]


def _render_embedded_asset(node: Node, children: list[OutputNode], categories: Categories, context: RenderContext) -> list[OutputNode]:
    asset = node.asset
    if asset is None:
        logger.debug("Skipping embedded asset with unresolved target")
        return []

    src = asset.url
    if src.startswith("//"):
        src = f"{context.asset_scheme}{src}"
    figure = [
        OutputNode(
            kind=OutputKind.IMAGE,
            attrs={"src": src, "width": asset.width, "height": asset.height, "alt": asset.title},
        )
    ]
    if asset.description != "":
        figure.append(
            OutputNode(
                kind=OutputKind.CAPTION,
                children=[OutputNode(kind=OutputKind.TEXT, text=asset.description)],
            )
        )
    return [OutputNode(kind=OutputKind.FIGURE, children=figure)]


def _render_embedded_entry(node: Node, children: list[OutputNode], categories: Categories, context: RenderContext) -> list[OutputNode]:
    entry = node.entry
    if entry is None:
        logger.debug("Skipping embedded entry with unresolved target")
        return []

    href = build_entry_href(entry, categories)
    if resolve_category_path(entry.category_id, categories) is None:
        logger.debug("Unresolved category for embedded entry", extra={"category_id": entry.category_id})
    return [
        OutputNode(
            kind=OutputKind.ARTICLE_CARD,
            attrs={
                "title": entry.title or "",
                "href": href,
                "date": context.date_formatter(entry.created_at),
            },
        )
    ]


def _render_inline_entry(node: Node, children: list[OutputNode], categories: Categories, context: RenderContext) -> list[OutputNode]:
    entry = node.entry
    if entry is None:
        logger.debug("Skipping inline entry with unresolved target")
        return []

    return [
        OutputNode(
            kind=OutputKind.LINK,
            attrs={"href": build_entry_href(entry, categories)},
            children=[OutputNode(kind=OutputKind.TEXT, text=entry.title or "")],
        )
    ]


def _render_hyperlink(node: Node, children: list[OutputNode], categories: Categories, context: RenderContext) -> list[OutputNode]:
    if node.uri is None:
        return _render_passthrough(node, children, categories, context)

    link = classify_link(node.uri)
    if isinstance(link, VideoLink):
        return [
            OutputNode(
                kind=OutputKind.VIDEO_EMBED,
                attrs={"video_id": link.video_id, "src": video_embed_url(link.video_id)},
            )
        ]

    lead = first_child(node)
    label = lead.value if isinstance(lead, TextNode) else node.uri
    return [
        OutputNode(
            kind=OutputKind.LINK,
            attrs={"href": node.uri, "target": EXTERNAL_LINK_TARGET, "rel": EXTERNAL_LINK_REL},
            children=[OutputNode(kind=OutputKind.TEXT, text=label)],
        )
    ]


def _render_text(node: Node, children: list[OutputNode], categories: Categories, context: RenderContext) -> list[OutputNode]:
    rendered = OutputNode(kind=OutputKind.TEXT, text=node.value)
    for mark in reversed(MARK_ORDER):
        if node.has_mark(mark):
            rendered = OutputNode(kind=OutputKind.MARK, attrs={"mark": mark.value}, children=[rendered])
    return [rendered]


def _render_passthrough(node: Node, children: list[OutputNode], categories: Categories, context: RenderContext) -> list[OutputNode]:
    node_type = node.node_type.value if isinstance(node.node_type, NodeType) else node.node_type
    return [OutputNode(kind=OutputKind.FRAGMENT, attrs={"node_type": node_type}, children=children)]


NODE_RENDERERS: dict[NodeType, Handler] = {
    NodeType.PARAGRAPH: _render_paragraph,
    NodeType.EMBEDDED_ASSET: _render_embedded_asset,
    NodeType.EMBEDDED_ENTRY: _render_embedded_entry,
    NodeType.EMBEDDED_ENTRY_INLINE: _render_inline_entry,
    NodeType.HYPERLINK: _render_hyperlink,
    NodeType.TEXT: _render_text,
}
NODE_RENDERERS.update(
    {node_type: _render_heading for node_type, level in HEADING_LEVELS.items() if level >= 2}
)
