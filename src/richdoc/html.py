"""Serialize output trees to HTML."""

from __future__ import annotations

from typing import Iterable

try:
    from bs4 import BeautifulSoup
    from bs4.element import NavigableString, PageElement, Tag
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise RuntimeError(
        "BeautifulSoup4 is required for HTML output (pip install beautifulsoup4)."
    ) from exc

from richdoc.schemas.output import OutputKind, OutputNode

_MARK_TAGS = {
    "bold": "b",
    "italic": "i",
    "underline": "u",
    "code": "code",
    "superscript": "sup",
    "subscript": "sub",
    "strikethrough": "s",
}

# Tags for rich-text node types that render by identity.
_FRAGMENT_TAGS = {
    "heading-1": "h1",
    "unordered-list": "ul",
    "ordered-list": "ol",
    "list-item": "li",
    "blockquote": "blockquote",
    "hr": "hr",
    "table": "table",
    "table-row": "tr",
    "table-header-cell": "th",
    "table-cell": "td",
}


def render_html(nodes: Iterable[OutputNode]) -> str:
    """Serialize top-level output nodes into an HTML fragment."""
    soup = BeautifulSoup("", "html.parser")
    blocks: list[str] = []
    for node in nodes:
        for element in _build(soup, node):
            if isinstance(element, NavigableString):
                blocks.append(element.output_ready())
            else:
                blocks.append(element.decode())
    return "\n".join(block for block in blocks if block.strip())


def _build(soup: BeautifulSoup, node: OutputNode) -> list[PageElement]:
    if node.kind == OutputKind.TEXT:
        return [NavigableString(node.text or "")]

    if node.kind == OutputKind.FRAGMENT:
        tag_name = _FRAGMENT_TAGS.get(str(node.attrs.get("node_type")))
        if tag_name is None:
            return _build_children(soup, node)
        return [_tag(soup, tag_name, node)]

    if node.kind == OutputKind.HEADING:
        tag = _tag(soup, f"h{node.attrs['level']}", node)
        if node.attrs.get("id"):
            tag["id"] = node.attrs["id"]
        return [tag]

    if node.kind == OutputKind.PROSE:
        tag = _tag(soup, "p", node)
        tag["class"] = node.attrs.get("variant") or "body1"
        return [tag]

    if node.kind == OutputKind.PARAGRAPH:
        return [_tag(soup, "p", node)]

    if node.kind == OutputKind.CODE_BLOCK:
        wrapper = soup.new_tag("div")
        pre = soup.new_tag("pre")
        pre.append(_tag(soup, "code", node))
        wrapper.append(pre)
        return [wrapper]

    if node.kind == OutputKind.FIGURE:
        return [_tag(soup, "figure", node)]

    if node.kind == OutputKind.IMAGE:
        img = soup.new_tag("img")
        for name in ("src", "width", "height", "alt"):
            value = node.attrs.get(name)
            if value is not None:
                img[name] = str(value)
        return [img]

    if node.kind == OutputKind.CAPTION:
        return [_tag(soup, "figcaption", node)]

    if node.kind == OutputKind.ARTICLE_CARD:
        return [_article_card(soup, node)]

    if node.kind == OutputKind.LINK:
        tag = _tag(soup, "a", node)
        for name in ("href", "target", "rel"):
            value = node.attrs.get(name)
            if value is not None:
                tag[name] = str(value)
        return [tag]

    if node.kind == OutputKind.VIDEO_EMBED:
        wrapper = soup.new_tag("div", attrs={"class": "video-embed"})
        iframe = soup.new_tag(
            "iframe",
            attrs={
                "src": str(node.attrs.get("src", "")),
                "data-video-id": str(node.attrs.get("video_id", "")),
                "allowfullscreen": "",
            },
        )
        wrapper.append(iframe)
        return [wrapper]

    if node.kind == OutputKind.MARK:
        tag_name = _MARK_TAGS.get(str(node.attrs.get("mark")), "span")
        return [_tag(soup, tag_name, node)]

    return _build_children(soup, node)


def _tag(soup: BeautifulSoup, name: str, node: OutputNode) -> Tag:
    tag = soup.new_tag(name)
    for child in _build_children(soup, node):
        tag.append(child)
    return tag


def _build_children(soup: BeautifulSoup, node: OutputNode) -> list[PageElement]:
    elements: list[PageElement] = []
    for child in node.children:
        elements.extend(_build(soup, child))
    return elements


def _article_card(soup: BeautifulSoup, node: OutputNode) -> Tag:
    card = soup.new_tag("div", attrs={"class": "article-card"})
    link = soup.new_tag("a", attrs={"href": str(node.attrs.get("href", ""))})
    title = soup.new_tag("span", attrs={"class": "article-card__title"})
    title.string = str(node.attrs.get("title") or "")
    link.append(title)
    card.append(link)
    date = node.attrs.get("date")
    if date:
        time_tag = soup.new_tag("time", attrs={"class": "article-card__date"})
        time_tag.string = str(date)
        card.append(time_tag)
    return card
