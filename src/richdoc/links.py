"""Hyperlink target classification."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal, Union

_YOUTUBE_SHORT_RE = re.compile(r"/youtu\.be/([^?#]+)(?:[?#].*)?$")


@dataclass(frozen=True)
class VideoLink:
    """A short link to a hosted video."""

    video_id: str
    kind: Literal["video"] = "video"


@dataclass(frozen=True)
class GenericLink:
    """Any other link."""

    kind: Literal["generic"] = "generic"


LinkClass = Union[VideoLink, GenericLink]


def classify_link(uri: str) -> LinkClass:
    """Classify a hyperlink target as a video short link or a generic link."""
    matched = _YOUTUBE_SHORT_RE.search(uri)
    if matched:
        return VideoLink(video_id=matched.group(1))
    return GenericLink()


def video_embed_url(video_id: str) -> str:
    return f"https://www.youtube.com/embed/{video_id}"
