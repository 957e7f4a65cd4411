"""Table-of-contents extraction from rich-text documents."""

from __future__ import annotations

from typing import Iterable, Iterator

from richdoc.anchors import heading_anchor
from richdoc.schemas.nodes import HEADING_LEVELS, Node, text_of
from richdoc.schemas.toc import TocEntry

DEFAULT_TOC_LEVELS: tuple[int, ...] = (2, 3, 4, 5, 6)


def extract_toc(node: Node, *, levels: Iterable[int] = DEFAULT_TOC_LEVELS) -> list[TocEntry]:
    """Collect headings into a nested table of contents.

    Headings that do not start with a text run have no anchor and are left out,
    matching the renderer, which emits them without an id.
    """
    wanted = frozenset(levels)
    entries: list[TocEntry] = []
    stack: list[TocEntry] = []

    for heading in _iter_headings(node):
        level = HEADING_LEVELS[heading.node_type]
        if level not in wanted:
            continue
        anchor_id = heading_anchor(heading)
        if anchor_id is None:
            continue

        entry = TocEntry(text=text_of(heading).strip(), level=level, anchor=anchor_id)

        while stack and stack[-1].level >= level:
            stack.pop()

        if stack:
            stack[-1].children.append(entry)
        else:
            entries.append(entry)

        stack.append(entry)

    return entries


def flatten_toc(entries: Iterable[TocEntry]) -> list[TocEntry]:
    """Return entries in document order without nesting."""
    flat: list[TocEntry] = []
    for entry in entries:
        flat.append(entry.model_copy(update={"children": []}))
        flat.extend(flatten_toc(entry.children))
    return flat


def count_entries(entries: Iterable[TocEntry]) -> int:
    """Count total entries in the tree."""
    total = 0
    for entry in entries:
        total += 1
        total += count_entries(entry.children)
    return total


def _iter_headings(node: Node) -> Iterator[Node]:
    if node.node_type in HEADING_LEVELS:
        yield node
        return
    for child in node.content:
        yield from _iter_headings(child)
