"""Pydantic models for the render API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from richdoc.schemas.content import CategoryLink


class RenderRequest(BaseModel):
    """Request model for the /api/render endpoint.

    Attributes
    ----------
    document : dict
        A rich-text document payload (``nodeType: document``).
    categories : list[CategoryLink]
        Category links used to resolve embedded article references.
    title : str
        Optional title placed at the top of the Markdown output.
    include_toc : bool
        Prepend a contents list to the Markdown output.
    include_anchors : bool
        Keep ``{#anchor}`` ids on Markdown headings.

    """

    document: dict[str, Any] = Field(..., description="Rich-text document payload")
    categories: list[CategoryLink] = Field(default_factory=list, description="Category links keyed by id")
    title: str = Field(default="", description="Title for the Markdown output")
    include_toc: bool = Field(default=True, description="Include a contents list")
    include_anchors: bool = Field(default=False, description="Keep heading anchors in Markdown")

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        """Strip surrounding whitespace from ``title``."""
        return v.strip()


class ErrorResponse(BaseModel):
    """Error response body.

    Attributes
    ----------
    error : str
        Human-readable error message.

    """

    error: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
