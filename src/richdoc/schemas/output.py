"""Output tree models consumed by the presentation layer."""

from __future__ import annotations

from enum import Enum
from typing import Union

from pydantic import BaseModel, Field


class OutputKind(str, Enum):
    """Kinds of presentation nodes the renderer emits."""

    HEADING = "heading"
    PROSE = "prose"
    CODE_BLOCK = "code_block"
    PARAGRAPH = "paragraph"
    FIGURE = "figure"
    IMAGE = "image"
    CAPTION = "caption"
    ARTICLE_CARD = "article_card"
    LINK = "link"
    VIDEO_EMBED = "video_embed"
    MARK = "mark"
    TEXT = "text"
    FRAGMENT = "fragment"


AttrValue = Union[str, int, None]


class OutputNode(BaseModel):
    """A presentation node.

    ``text`` is set only on ``TEXT`` nodes; every other kind carries its
    content in ``children``.
    """

    kind: OutputKind
    attrs: dict[str, AttrValue] = Field(default_factory=dict)
    children: list["OutputNode"] = Field(default_factory=list)
    text: str | None = None

    def text_content(self) -> str:
        """Concatenate the text below this node."""
        if self.text is not None:
            return self.text
        return "".join(child.text_content() for child in self.children)

    def find_all(self, kind: OutputKind) -> list["OutputNode"]:
        """Return every node of ``kind`` in this subtree, depth first."""
        found: list[OutputNode] = [self] if self.kind == kind else []
        for child in self.children:
            found.extend(child.find_all(kind))
        return found
