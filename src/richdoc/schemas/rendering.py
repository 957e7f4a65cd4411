"""Rendering output model."""

from __future__ import annotations

from pydantic import BaseModel, Field

from richdoc.schemas.output import OutputNode
from richdoc.schemas.toc import TocEntry


class Breadcrumb(BaseModel):
    """One step in the article's navigation trail."""

    href: str
    display_name: str


class RenderResult(BaseModel):
    """Final rendering output for one article."""

    title: str
    path: str
    date: str
    summary: str
    breadcrumbs: list[Breadcrumb] = Field(default_factory=list)
    thumbnail_src: str | None = None
    toc: list[TocEntry] = Field(default_factory=list)
    toc_tree: str = ""
    nodes: list[OutputNode] = Field(default_factory=list)
    html: str = ""
    markdown: str = ""
