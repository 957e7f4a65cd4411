"""Fetch categories and articles from the Contentful Content Delivery API."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Mapping

import httpx

from richdoc.cache_utils import (
    cache_key_for,
    cache_path_for,
    is_cache_fresh,
    mkdir_async,
    read_text_async,
    write_text_async,
)
from richdoc.config import (
    ARTICLE_CONTENT_TYPE,
    CATEGORY_CONTENT_TYPE,
    RICHDOC_ACCESS_TOKEN,
    RICHDOC_CACHE_PATH,
    RICHDOC_CACHE_TTL_SECONDS,
    RICHDOC_CDN_HOST,
    RICHDOC_ENVIRONMENT,
    RICHDOC_SPACE_ID,
)
from richdoc.document_parser import parse_article, parse_category
from richdoc.exceptions import ArticleNotFoundError, ConfigurationError
from richdoc.http_utils import create_client, fetch_json_with_retries
from richdoc.schemas.article import Article
from richdoc.schemas.content import Category, CategoryLink

logger = logging.getLogger(__name__)

# How many levels of linked entries the API embeds in ``includes``.
INCLUDE_DEPTH = 2
_MAX_RESOLVE_DEPTH = 4


class ContentStore:
    """Async client for one space/environment of the content store.

    Use it as an async context manager to share one connection pool across
    requests::

        async with ContentStore() as store:
            categories = await store.fetch_category_links()
            article = await store.fetch_article("tech", "hello-world")
    """

    def __init__(
        self,
        *,
        space_id: str = RICHDOC_SPACE_ID,
        access_token: str = RICHDOC_ACCESS_TOKEN,
        environment: str = RICHDOC_ENVIRONMENT,
        host: str = RICHDOC_CDN_HOST,
        use_cache: bool = True,
        cache_path: Path = RICHDOC_CACHE_PATH,
        cache_ttl_seconds: int = RICHDOC_CACHE_TTL_SECONDS,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.space_id = space_id
        self.access_token = access_token
        self.environment = environment
        self.host = host
        self.use_cache = use_cache
        self.cache_path = cache_path
        self.cache_ttl_seconds = cache_ttl_seconds
        self._client = client
        self._owns_client = False

    async def __aenter__(self) -> "ContentStore":
        if self._client is None:
            self._client = create_client()
            self._owns_client = True
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
            self._owns_client = False

    @property
    def entries_url(self) -> str:
        return f"https://{self.host}/spaces/{self.space_id}/environments/{self.environment}/entries"

    async def get_entries(self, params: Mapping[str, Any]) -> dict[str, Any]:
        """Query entries and return the payload with links resolved.

        Raises:
            ConfigurationError: If the space id or access token is missing, or
                the space or environment does not exist.
            FetchError: If the request fails after retries.
        """
        if not self.space_id or not self.access_token:
            raise ConfigurationError(
                "RICHDOC_SPACE_ID and RICHDOC_ACCESS_TOKEN must be set to query the content store."
            )

        url = self.entries_url
        cache_file = cache_path_for(cache_key_for(url, params), self.cache_path)

        if self.use_cache and is_cache_fresh(cache_file, self.cache_ttl_seconds):
            logger.debug("Cache hit for %s", url, extra={"params": dict(params)})
            payload = json.loads(await read_text_async(cache_file))
        else:
            payload = await fetch_json_with_retries(
                url,
                params=params,
                headers={"Authorization": f"Bearer {self.access_token}"},
                client=self._client,
                on_404=ConfigurationError,
                on_404_message=(
                    f"Space '{self.space_id}' or environment '{self.environment}' does not exist"
                ),
            )
            if self.use_cache:
                await mkdir_async(cache_file.parent, parents=True, exist_ok=True)
                await write_text_async(cache_file, json.dumps(payload, ensure_ascii=False))

        return resolve_links(payload)

    async def fetch_categories(self) -> list[Category]:
        """Return all categories in display order."""
        payload = await self.get_entries(
            {"content_type": CATEGORY_CONTENT_TYPE, "order": "fields.order"}
        )
        return [parse_category(item) for item in payload.get("items", [])]

    async def count_linked_articles(self, category_id: str) -> int:
        """Count the articles that link to a category."""
        payload = await self.get_entries(
            {
                "content_type": ARTICLE_CONTENT_TYPE,
                "links_to_entry": category_id,
                "limit": 0,
            }
        )
        return int(payload.get("total", 0))

    async def fetch_category_links(self) -> dict[str, CategoryLink]:
        """Build the category mapping keyed by category id.

        Article counts for all categories are fetched concurrently.
        """
        categories = await self.fetch_categories()
        counts = await asyncio.gather(
            *(self.count_linked_articles(category.id) for category in categories)
        )
        return {
            category.id: CategoryLink(
                id=category.id,
                path=f"/{category.slug}",
                title=category.name,
                linked_article_count=count,
            )
            for category, count in zip(categories, counts)
        }

    async def fetch_article(self, category_slug: str, article_slug: str) -> Article:
        """Fetch one article by category slug and article slug.

        Raises:
            ArticleNotFoundError: If no article matches both slugs.
        """
        payload = await self.get_entries(
            {
                "content_type": ARTICLE_CONTENT_TYPE,
                "fields.slug": article_slug,
                "fields.category.sys.contentType.sys.id": CATEGORY_CONTENT_TYPE,
                "fields.category.fields.slug": category_slug,
                "limit": 1,
                "include": INCLUDE_DEPTH,
            }
        )
        items = payload.get("items") or []
        if not items:
            raise ArticleNotFoundError(f"No article '{article_slug}' in category '{category_slug}'")
        return parse_article(items[0])


def resolve_links(payload: dict[str, Any]) -> dict[str, Any]:
    """Replace ``Link`` stubs in ``items`` with the entries and assets they point to.

    Links are looked up among the response items and ``includes``. Links that
    cannot be found are left as stubs, which the document parser treats as
    unresolved.
    """
    index: dict[tuple[str, str], Any] = {}
    includes = payload.get("includes") or {}
    for link_type in ("Entry", "Asset"):
        for item in includes.get(link_type, []):
            _index_item(index, link_type, item)
    for item in payload.get("items", []):
        _index_item(index, "Entry", item)

    resolved = dict(payload)
    resolved["items"] = [_resolve(item, index, _MAX_RESOLVE_DEPTH) for item in payload.get("items", [])]
    return resolved


def _index_item(index: dict[tuple[str, str], Any], link_type: str, item: Any) -> None:
    if isinstance(item, Mapping):
        item_id = (item.get("sys") or {}).get("id")
        if isinstance(item_id, str):
            index[(link_type, item_id)] = item


def _resolve(value: Any, index: dict[tuple[str, str], Any], depth: int) -> Any:
    if isinstance(value, list):
        return [_resolve(item, index, depth) for item in value]
    if not isinstance(value, Mapping):
        return value

    sys_data = value.get("sys")
    if isinstance(sys_data, Mapping) and sys_data.get("type") == "Link":
        target = index.get((str(sys_data.get("linkType")), str(sys_data.get("id"))))
        if target is None or depth <= 0:
            return value
        return _resolve(target, index, depth - 1)

    return {key: _resolve(item, index, depth) for key, item in value.items()}


async def fetch_category_links(*, use_cache: bool = True) -> dict[str, CategoryLink]:
    """Fetch the category mapping with the configured credentials."""
    async with ContentStore(use_cache=use_cache) as store:
        return await store.fetch_category_links()


async def fetch_article(category_slug: str, article_slug: str, *, use_cache: bool = True) -> Article:
    """Fetch one article with the configured credentials."""
    async with ContentStore(use_cache=use_cache) as store:
        return await store.fetch_article(category_slug, article_slug)
