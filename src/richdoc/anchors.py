"""Heading anchor identifiers.

Anchors are the hex MD5 digest of a heading's first text run. The renderer
and the table-of-contents extractor both call :func:`anchor` with the raw
text value, so the same heading always gets the same id in both places.
Headings that start with the same text share an anchor.
"""

from __future__ import annotations

import hashlib

from richdoc.schemas.nodes import Node, TextNode, first_child


def anchor(text: str) -> str:
    """Return the anchor id for heading text."""
    return hashlib.md5(text.encode("utf-8")).hexdigest()


def heading_anchor(heading: Node) -> str | None:
    """Return the anchor for a heading node, or None if it does not start with text."""
    lead = first_child(heading)
    if isinstance(lead, TextNode):
        return anchor(lead.value)
    return None
