"""Typed rich-text node models."""

from __future__ import annotations

from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict, Field

from richdoc.schemas.content import ArticleSummary, Asset


class NodeType(str, Enum):
    """Rich-text node types, named as they appear on the wire."""

    DOCUMENT = "document"
    HEADING_1 = "heading-1"
    HEADING_2 = "heading-2"
    HEADING_3 = "heading-3"
    HEADING_4 = "heading-4"
    HEADING_5 = "heading-5"
    HEADING_6 = "heading-6"
    PARAGRAPH = "paragraph"
    UL_LIST = "unordered-list"
    OL_LIST = "ordered-list"
    LIST_ITEM = "list-item"
    QUOTE = "blockquote"
    HR = "hr"
    TABLE = "table"
    TABLE_ROW = "table-row"
    TABLE_HEADER_CELL = "table-header-cell"
    TABLE_CELL = "table-cell"
    EMBEDDED_ASSET = "embedded-asset-block"
    EMBEDDED_ENTRY = "embedded-entry-block"
    EMBEDDED_ENTRY_INLINE = "embedded-entry-inline"
    HYPERLINK = "hyperlink"
    ENTRY_HYPERLINK = "entry-hyperlink"
    ASSET_HYPERLINK = "asset-hyperlink"
    RESOURCE_HYPERLINK = "resource-hyperlink"
    TEXT = "text"


HEADING_LEVELS: dict[NodeType, int] = {
    NodeType.HEADING_1: 1,
    NodeType.HEADING_2: 2,
    NodeType.HEADING_3: 3,
    NodeType.HEADING_4: 4,
    NodeType.HEADING_5: 5,
    NodeType.HEADING_6: 6,
}


class MarkType(str, Enum):
    """Style marks a text run can carry."""

    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    CODE = "code"
    SUPERSCRIPT = "superscript"
    SUBSCRIPT = "subscript"
    STRIKETHROUGH = "strikethrough"


class _NodeBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    content: tuple["Node", ...] = ()


class TextNode(BaseModel):
    """A run of literal text with style marks."""

    model_config = ConfigDict(frozen=True)

    node_type: NodeType = NodeType.TEXT
    value: str = ""
    marks: frozenset[str] = frozenset()

    @property
    def content(self) -> tuple["Node", ...]:
        return ()

    def has_mark(self, mark: MarkType | str) -> bool:
        name = mark.value if isinstance(mark, MarkType) else mark
        return name in self.marks


class BlockNode(_NodeBase):
    """Any node whose only data is its children (document, headings, paragraphs, lists...)."""

    node_type: NodeType


class EmbeddedAssetNode(_NodeBase):
    """Block-level embedded media. ``asset`` is None when the link did not resolve."""

    node_type: NodeType = NodeType.EMBEDDED_ASSET
    asset: Asset | None = None


class EmbeddedEntryNode(_NodeBase):
    """Block or inline reference to another article."""

    node_type: NodeType = NodeType.EMBEDDED_ENTRY
    entry: ArticleSummary | None = None


class HyperlinkNode(_NodeBase):
    """Inline link; ``uri`` is None when the payload carried none."""

    node_type: NodeType = NodeType.HYPERLINK
    uri: str | None = None


class GenericNode(_NodeBase):
    """A node whose ``nodeType`` is not in :class:`NodeType`."""

    node_type: str
    data: dict = Field(default_factory=dict)


Node = Union[TextNode, BlockNode, EmbeddedAssetNode, EmbeddedEntryNode, HyperlinkNode, GenericNode]


class Document(BlockNode):
    """Root of a rich-text tree."""

    node_type: NodeType = NodeType.DOCUMENT


for _model in (_NodeBase, BlockNode, EmbeddedAssetNode, EmbeddedEntryNode, HyperlinkNode, GenericNode, Document):
    _model.model_rebuild()


def text_of(node: Node) -> str:
    """Concatenate the text values below ``node``."""
    if isinstance(node, TextNode):
        return node.value
    return "".join(text_of(child) for child in node.content)


def first_child(node: Node) -> Node | None:
    children = node.content
    return children[0] if children else None
