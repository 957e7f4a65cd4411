"""Command-line interface for richdoc."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Sequence

from richdoc.exceptions import ArticleNotFoundError, RichdocError
from richdoc.ingestion import RenderOptions, render_article, render_payload
from richdoc.references import index_categories
from richdoc.schemas.content import CategoryLink
from richdoc.schemas.rendering import RenderResult
from richdoc.utils.logging_config import configure_logging, get_logger

logger = get_logger(__name__)

OUTPUT_FORMATS = ("markdown", "html", "json")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="richdoc",
        description="Render a rich-text article into Markdown, HTML, or a JSON output tree.",
    )
    parser.add_argument("category", nargs="?", help="Category slug of the article")
    parser.add_argument("slug", nargs="?", help="Article slug")
    parser.add_argument("--input", type=Path, help="Render a local rich-text JSON document instead of fetching")
    parser.add_argument("--categories", type=Path, help="JSON file with category links (used with --input)")
    parser.add_argument("--title", default="", help="Title for a document rendered with --input")
    parser.add_argument("-o", "--output", default="-", help="Output file, or '-' for stdout (default)")
    parser.add_argument("-f", "--format", choices=OUTPUT_FORMATS, default="markdown", help="Output format")
    parser.add_argument("--no-toc", action="store_true", help="Leave the contents list out of Markdown output")
    parser.add_argument("--anchors", action="store_true", help="Keep {#anchor} ids on Markdown headings")
    parser.add_argument("--no-cache", action="store_true", help="Bypass the local response cache")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level.upper())

    if args.input is None and not (args.category and args.slug):
        parser.error("Provide CATEGORY and SLUG, or --input PAYLOAD.json")

    options = RenderOptions(
        include_toc=not args.no_toc,
        include_anchors=args.anchors,
        use_cache=not args.no_cache,
    )

    try:
        if args.input is not None:
            payload = json.loads(args.input.read_text(encoding="utf-8"))
            categories = load_categories(args.categories) if args.categories else {}
            result = render_payload(payload, categories, title=args.title, options=options)
        else:
            result = asyncio.run(render_article(args.category, args.slug, options=options))
    except ArticleNotFoundError as exc:
        print(f"Not found: {exc}", file=sys.stderr)
        return 1
    except (RichdocError, OSError, ValueError) as exc:
        logger.error("Rendering failed", extra={"error": str(exc)})
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    write_output(format_result(result, args.format), args.output)
    return 0


def load_categories(path: Path) -> dict[str, CategoryLink]:
    """Load category links from a JSON list, or an object keyed by id."""
    raw: Any = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(raw, dict):
        raw = list(raw.values())
    return index_categories([CategoryLink.model_validate(item) for item in raw])


def format_result(result: RenderResult, output_format: str) -> str:
    if output_format == "html":
        return result.html
    if output_format == "json":
        return result.model_dump_json(indent=2)
    return result.markdown


def write_output(text: str, destination: str) -> None:
    if destination == "-":
        sys.stdout.write(text)
        if not text.endswith("\n"):
            sys.stdout.write("\n")
        return
    Path(destination).write_text(text + ("" if text.endswith("\n") else "\n"), encoding="utf-8")
