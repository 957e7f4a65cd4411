"""Content models resolved from the content store."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Asset(BaseModel):
    """An uploaded media file embedded in a document."""

    model_config = ConfigDict(frozen=True)

    url: str
    width: int | None = None
    height: int | None = None
    title: str = ""
    description: str = ""


class ArticleSummary(BaseModel):
    """Lightweight view of an article referenced from another document."""

    model_config = ConfigDict(frozen=True)

    title: str | None = None
    slug: str
    category_id: str | None = None
    created_at: datetime


class CategoryLink(BaseModel):
    """Category navigation entry, keyed by ``id`` in the caller's mapping."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    path: str
    title: str
    linked_article_count: int = Field(default=0, ge=0, alias="linkedArticleCount")


class Category(BaseModel):
    """Category entry as stored in the content store."""

    id: str
    name: str
    slug: str
