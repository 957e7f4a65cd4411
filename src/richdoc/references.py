"""Cross-document reference resolution."""

from __future__ import annotations

from typing import Mapping

from richdoc.schemas.content import ArticleSummary, CategoryLink

# Path segment used when an entry's category is not in the mapping.
UNRESOLVED_PATH = "undefined"


def resolve_category_path(
    category_id: str | None, categories: Mapping[str, CategoryLink]
) -> str | None:
    """Look up the path of a category; None when the id is unknown."""
    if category_id is None:
        return None
    link = categories.get(category_id)
    return link.path if link is not None else None


def build_entry_href(entry: ArticleSummary, categories: Mapping[str, CategoryLink]) -> str:
    """Build ``<category path>/<slug>`` for a referenced article.

    An unknown category yields ``undefined/<slug>``; the link is broken but
    rendering continues.
    """
    category_path = resolve_category_path(entry.category_id, categories)
    if category_path is None:
        category_path = UNRESOLVED_PATH
    return f"{category_path}/{entry.slug}"


def index_categories(categories: list[CategoryLink]) -> dict[str, CategoryLink]:
    """Key a list of category links by id, keeping list order."""
    return {category.id: category for category in categories}
