"""Article model: an entry from the content store with its rich-text body."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from richdoc.schemas.content import Asset, Category
from richdoc.schemas.nodes import Document


class Article(BaseModel):
    """A full article with its rich-text body.

    Attributes:
        id: Content store entry id.
        title: Article title.
        slug: URL slug, unique within the category.
        created_at: Publication instant.
        category: Category the article belongs to.
        thumbnail: Optional cover image.
        contents: Parsed rich-text body, or None when the article has no body.
    """

    id: str
    title: str
    slug: str
    created_at: datetime
    category: Category
    thumbnail: Asset | None = None
    contents: Document | None = None
