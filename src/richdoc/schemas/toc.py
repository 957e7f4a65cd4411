"""Table-of-contents models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class TocEntry(BaseModel):
    """A heading in the table of contents."""

    text: str
    level: int = Field(..., ge=1, le=6)
    anchor: str
    children: list["TocEntry"] = Field(default_factory=list)
