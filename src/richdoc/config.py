"""Local configuration for richdoc."""

from __future__ import annotations

import os
from pathlib import Path


DEFAULT_CACHE_DIR = ".richdoc_cache"
DEFAULT_CACHE_TTL_SECONDS = 10 * 60
DEFAULT_FETCH_TIMEOUT_S = 10.0
DEFAULT_FETCH_MAX_RETRIES = 2
DEFAULT_FETCH_BACKOFF_S = 0.5
DEFAULT_USER_AGENT = "richdoc/0.1"
DEFAULT_CDN_HOST = "cdn.contentful.com"
DEFAULT_ENVIRONMENT = "master"
DEFAULT_TIMEZONE = "Asia/Tokyo"
DEFAULT_DATE_FORMAT = "%Y年%m月%d日 %H:%M"
DEFAULT_SITE_TITLE = "richdoc"

CATEGORY_CONTENT_TYPE = "category"
ARTICLE_CONTENT_TYPE = "article"

# Content store credentials; empty values are rejected when a request is made.
RICHDOC_SPACE_ID = os.getenv("RICHDOC_SPACE_ID", "")
RICHDOC_ACCESS_TOKEN = os.getenv("RICHDOC_ACCESS_TOKEN", "")
RICHDOC_ENVIRONMENT = os.getenv("RICHDOC_ENVIRONMENT", DEFAULT_ENVIRONMENT)
RICHDOC_CDN_HOST = os.getenv("RICHDOC_CDN_HOST", DEFAULT_CDN_HOST)

# Local-only cache directory for content store responses.
RICHDOC_CACHE_PATH = Path(os.getenv("RICHDOC_CACHE_PATH", DEFAULT_CACHE_DIR)).expanduser().resolve()
RICHDOC_CACHE_TTL_SECONDS = int(os.getenv("RICHDOC_CACHE_TTL_SECONDS", str(DEFAULT_CACHE_TTL_SECONDS)))
RICHDOC_FETCH_TIMEOUT_S = float(os.getenv("RICHDOC_FETCH_TIMEOUT_S", str(DEFAULT_FETCH_TIMEOUT_S)))
RICHDOC_FETCH_MAX_RETRIES = int(os.getenv("RICHDOC_FETCH_MAX_RETRIES", str(DEFAULT_FETCH_MAX_RETRIES)))
RICHDOC_FETCH_BACKOFF_S = float(os.getenv("RICHDOC_FETCH_BACKOFF_S", str(DEFAULT_FETCH_BACKOFF_S)))
RICHDOC_USER_AGENT = os.getenv("RICHDOC_USER_AGENT", DEFAULT_USER_AGENT)

RICHDOC_TIMEZONE = os.getenv("RICHDOC_TIMEZONE", DEFAULT_TIMEZONE)
RICHDOC_DATE_FORMAT = os.getenv("RICHDOC_DATE_FORMAT", DEFAULT_DATE_FORMAT)
RICHDOC_SITE_TITLE = os.getenv("RICHDOC_SITE_TITLE", DEFAULT_SITE_TITLE)
