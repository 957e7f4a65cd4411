"""Convert rendered HTML fragments to Markdown with a custom serializer."""

from __future__ import annotations

import re

try:
    from bs4 import BeautifulSoup
    from bs4.element import NavigableString, Tag
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise RuntimeError(
        "BeautifulSoup4 is required for HTML parsing (pip install beautifulsoup4)."
    ) from exc


_YOUTUBE_WATCH_URL = "https://youtu.be/{video_id}"


def convert_fragment_to_markdown(html: str, *, include_anchors: bool = False) -> str:
    """Convert a rendered HTML fragment into Markdown.

    Parameters
    ----------
    html : str
        The HTML fragment produced by :func:`richdoc.html.render_html`.
    include_anchors : bool
        If True, headings carry their anchor as a ``{#id}`` attribute so the
        table of contents links keep working.
    """
    soup = BeautifulSoup(html, "lxml")
    blocks = _serialize_children(soup, include_anchors=include_anchors)
    return "\n\n".join(block for block in blocks if block).strip()


def _serialize_children(container: Tag, *, include_anchors: bool = False) -> list[str]:
    blocks: list[str] = []
    for child in container.children:
        if isinstance(child, NavigableString):
            text = _normalize_text(str(child))
            if text:
                blocks.append(text)
            continue
        if not isinstance(child, Tag):
            continue
        blocks.extend(_serialize_block(child, include_anchors=include_anchors))
    return blocks


def _serialize_block(tag: Tag, *, include_anchors: bool = False) -> list[str]:
    if tag.name in {"html", "body", "section", "article", "span"}:
        return _serialize_children(tag, include_anchors=include_anchors)

    if tag.name == "div":
        classes = tag.get("class", [])
        if "article-card" in classes:
            card = _serialize_article_card(tag)
            return [card] if card else []
        if "video-embed" in classes:
            video = _serialize_video(tag)
            return [video] if video else []
        return _serialize_children(tag, include_anchors=include_anchors)

    if tag.name in {"h1", "h2", "h3", "h4", "h5", "h6"}:
        level = int(tag.name[1])
        heading = _normalize_text(_serialize_inline(tag))
        if not heading:
            return []
        anchor = tag.get("id")
        if include_anchors and anchor:
            return [f"{'#' * level} {heading} {{#{anchor}}}"]
        return [f"{'#' * level} {heading}"]

    if tag.name == "p":
        paragraph = _cleanup_inline_text(_serialize_inline(tag))
        return [paragraph] if paragraph else []

    if tag.name == "pre":
        code = tag.get_text()
        return [f"```\n{code.rstrip()}\n```"]

    if tag.name in {"ul", "ol"}:
        lines = _serialize_list(tag)
        return ["\n".join(lines)] if lines else []

    if tag.name == "figure":
        figure = _serialize_figure(tag)
        return [figure] if figure else []

    if tag.name == "table":
        table_md = _serialize_table(tag)
        return [table_md] if table_md else []

    if tag.name == "blockquote":
        content = _normalize_text(_serialize_inline(tag))
        if not content:
            return []
        return ["> " + content]

    if tag.name == "hr":
        return ["---"]

    if tag.name == "br":
        return []

    inline = _cleanup_inline_text(_serialize_inline(tag))
    return [inline] if inline else []


def _serialize_inline(node: Tag | NavigableString) -> str:
    if isinstance(node, NavigableString):
        return str(node)

    if node.name == "br":
        return "\n"

    if node.name in {"em", "i"}:
        return _wrap(node, "*")

    if node.name in {"strong", "b"}:
        return _wrap(node, "**")

    if node.name == "s":
        return _wrap(node, "~~")

    if node.name == "code":
        text = node.get_text()
        return f"`{text}`" if text else ""

    if node.name == "a":
        text = _serialize_children_inline(node).strip()
        href = node.get("href")
        if href:
            return f"[{text or href}]({href})"
        return text

    if node.name == "sup":
        text = _serialize_children_inline(node).strip()
        return f"^{text}" if text else ""

    if node.name == "sub":
        text = _serialize_children_inline(node).strip()
        return f"~{text}" if text else ""

    if node.name == "div" and "video-embed" in node.get("class", []):
        return _serialize_video(node)

    return _serialize_children_inline(node)


def _wrap(tag: Tag, marker: str) -> str:
    text = _serialize_children_inline(tag)
    return f"{marker}{text}{marker}" if text.strip() else text


def _serialize_children_inline(tag: Tag) -> str:
    return "".join(_serialize_inline(child) for child in tag.children)


def _cleanup_inline_text(text: str) -> str:
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r"\s*\n\s*", "\n", text)
    return text.strip()


def _serialize_list(list_tag: Tag, indent: int = 0) -> list[str]:
    lines: list[str] = []
    ordered = list_tag.name == "ol"
    for index, item in enumerate(list_tag.find_all("li", recursive=False), start=1):
        item_text_parts: list[str] = []
        nested_lists: list[Tag] = []
        for child in item.children:
            if isinstance(child, Tag) and child.name in {"ul", "ol"}:
                nested_lists.append(child)
            else:
                item_text_parts.append(_serialize_inline(child))
        item_text = _cleanup_inline_text("".join(item_text_parts))
        marker = f"{index}. " if ordered else "- "
        prefix = "  " * indent + marker
        lines.append(prefix + item_text if item_text else prefix.rstrip())
        for nested in nested_lists:
            lines.extend(_serialize_list(nested, indent + 1))
    return lines


def _serialize_table(table: Tag) -> str:
    rows = []
    for row in table.find_all("tr"):
        cells = row.find_all(["th", "td"], recursive=False)
        if not cells:
            continue
        values = []
        for cell in cells:
            cell_text = _cleanup_inline_text(_serialize_inline(cell)).replace("\n", "<br>")
            values.append(cell_text)
        rows.append(values)

    if not rows:
        return ""

    max_cols = max(len(row) for row in rows)
    normalized = [row + [""] * (max_cols - len(row)) for row in rows]
    header = normalized[0]
    lines = [
        "| " + " | ".join(header) + " |",
        "| " + " | ".join("---" for _ in header) + " |",
    ]
    for row in normalized[1:]:
        lines.append("| " + " | ".join(row) + " |")
    return "\n".join(lines)


def _serialize_figure(figure: Tag) -> str:
    caption_tag = figure.find("figcaption")
    caption = _normalize_text(_serialize_inline(caption_tag)) if caption_tag else ""
    img = figure.find("img")
    src = img.get("src") if img else None
    alt = img.get("alt") if img else None

    lines = []
    if src:
        lines.append(f"![{alt or ''}]({src})")
    if caption:
        lines.append(f"*{caption}*")
    return "\n".join(lines).strip()


def _serialize_article_card(card: Tag) -> str:
    link = card.find("a")
    if not link:
        return ""
    title = _normalize_text(link.get_text(" ", strip=True))
    href = link.get("href", "")
    date_tag = card.find("time")
    date = _normalize_text(date_tag.get_text()) if date_tag else ""
    line = f"> [{title or href}]({href})"
    return f"{line}  \n> {date}" if date else line


def _serialize_video(container: Tag) -> str:
    iframe = container.find("iframe")
    if not iframe:
        return ""
    video_id = iframe.get("data-video-id")
    if video_id:
        return f"[Video]({_YOUTUBE_WATCH_URL.format(video_id=video_id)})"
    src = iframe.get("src")
    return f"[Video]({src})" if src else ""


def _normalize_text(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()
