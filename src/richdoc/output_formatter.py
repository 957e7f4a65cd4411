"""Format rendered articles into summary, contents list, and Markdown body."""

from __future__ import annotations

try:
    import tiktoken
except ImportError:  # pragma: no cover - optional dependency
    tiktoken = None

from richdoc.schemas.toc import TocEntry
from richdoc.toc import count_entries


def format_summary(
    *,
    title: str,
    path: str,
    date: str,
    category: str | None,
    toc: list[TocEntry],
    body_markdown: str,
) -> str:
    """Create a short plain-text summary of a rendered article."""
    summary_lines = [f"Title: {title}", f"Path: {path}"]
    if category:
        summary_lines.append(f"Category: {category}")
    if date:
        summary_lines.append(f"Date: {date}")
    summary_lines.append(f"Headings: {count_entries(toc)}")

    token_estimate = _format_token_count(body_markdown)
    if token_estimate:
        summary_lines.append(f"Estimated tokens: {token_estimate}")

    return "\n".join(summary_lines)


def format_markdown(
    *,
    title: str,
    date: str,
    toc: list[TocEntry],
    body_markdown: str,
    include_toc: bool,
    link_toc: bool = True,
) -> str:
    """Assemble the full Markdown page: title, date, contents, body.

    With ``link_toc`` off the contents list is plain text, for bodies whose
    headings carry no ``{#anchor}`` to link to.
    """
    blocks: list[str] = [f"# {title}"] if title else []
    if date:
        blocks.append(f"*{date}*")
    if include_toc:
        contents = render_toc_markdown(toc, link=link_toc)
        if contents:
            blocks.append("## Contents\n" + contents)
    blocks.append(body_markdown)
    return "\n\n".join(block for block in blocks if block).strip()


def render_toc_markdown(entries: list[TocEntry], indent: int = 0, *, link: bool = True) -> str:
    """Render a nested bullet list, linking each entry to its heading anchor."""
    lines: list[str] = []
    for entry in entries:
        prefix = "  " * indent + "- "
        label = f"[{entry.text}](#{entry.anchor})" if link else entry.text
        lines.append(prefix + label)
        if entry.children:
            lines.append(render_toc_markdown(entry.children, indent + 1, link=link))
    return "\n".join(lines)


def render_toc_tree(entries: list[TocEntry], indent: int = 0) -> str:
    """Render headings as an indented plain-text tree."""
    lines: list[str] = []
    for entry in entries:
        lines.append(" " * (indent * 4) + entry.text)
        if entry.children:
            lines.append(render_toc_tree(entry.children, indent + 1))
    return "\n".join(lines)


def _format_token_count(text: str) -> str | None:
    if not tiktoken:
        return None
    try:
        encoding = tiktoken.get_encoding("o200k_base")
        total_tokens = len(encoding.encode(text, disallowed_special=()))
    except Exception:
        return None

    if total_tokens >= 1_000_000:
        return f"{total_tokens / 1_000_000:.1f}M"
    if total_tokens >= 1_000:
        return f"{total_tokens / 1_000:.1f}k"
    return str(total_tokens)
