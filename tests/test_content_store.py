"""Tests for the content store client."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from builders import block, document, text
from richdoc.content_store import ContentStore, resolve_links
from richdoc.exceptions import ArticleNotFoundError, ConfigurationError


def _link(link_type: str, item_id: str) -> dict:
    return {"sys": {"type": "Link", "linkType": link_type, "id": item_id}}


CATEGORY_ENTRY = {"sys": {"id": "cat1", "type": "Entry"}, "fields": {"name": "Tech", "slug": "tech"}}

ARTICLE_PAYLOAD = {
    "total": 1,
    "items": [
        {
            "sys": {"id": "a1", "type": "Entry", "createdAt": "2023-01-02T03:04:05Z"},
            "fields": {
                "title": "Hello",
                "slug": "hello",
                "category": _link("Entry", "cat1"),
                "thumbnail": _link("Asset", "img1"),
                "contents": document(block("paragraph", text("Body"))),
            },
        }
    ],
    "includes": {
        "Entry": [CATEGORY_ENTRY],
        "Asset": [{"sys": {"id": "img1", "type": "Asset"}, "fields": {"file": {"url": "//img/x.png"}}}],
    },
}


def _store(**kwargs: Any) -> ContentStore:
    options: dict[str, Any] = {"space_id": "space", "access_token": "token", "use_cache": False}
    options.update(kwargs)
    return ContentStore(**options)


class TestResolveLinks:
    """Tests for resolve_links."""

    def test_replaces_links_from_includes(self) -> None:
        """Entry and asset links are replaced by the included objects."""
        resolved = resolve_links(ARTICLE_PAYLOAD)
        fields = resolved["items"][0]["fields"]
        assert fields["category"] == CATEGORY_ENTRY
        assert fields["thumbnail"]["fields"]["file"]["url"] == "//img/x.png"

    def test_does_not_mutate_payload(self) -> None:
        """The input payload keeps its link stubs."""
        resolve_links(ARTICLE_PAYLOAD)
        assert ARTICLE_PAYLOAD["items"][0]["fields"]["category"] == _link("Entry", "cat1")

    def test_resolves_links_inside_rich_text(self) -> None:
        """Embedded targets inside documents are resolved."""
        payload = {
            "items": [
                {
                    "sys": {"id": "a1"},
                    "fields": {"contents": document(block("embedded-entry-block", target=_link("Entry", "cat1")))},
                }
            ],
            "includes": {"Entry": [CATEGORY_ENTRY]},
        }
        resolved = resolve_links(payload)
        target = resolved["items"][0]["fields"]["contents"]["content"][0]["data"]["target"]
        assert target == CATEGORY_ENTRY

    def test_missing_link_stays_stub(self) -> None:
        """Links that are not included are left untouched."""
        payload = {"items": [{"sys": {"id": "a1"}, "fields": {"category": _link("Entry", "gone")}}]}
        resolved = resolve_links(payload)
        assert resolved["items"][0]["fields"]["category"] == _link("Entry", "gone")

    def test_cycles_terminate(self) -> None:
        """Entries that link to each other do not recurse forever."""
        payload = {
            "items": [{"sys": {"id": "a"}, "fields": {"next": _link("Entry", "b")}}],
            "includes": {"Entry": [{"sys": {"id": "b"}, "fields": {"next": _link("Entry", "a")}}]},
        }
        resolved = resolve_links(payload)
        assert resolved["items"][0]["fields"]["next"]["sys"]["id"] == "b"


class TestContentStore:
    """Tests for ContentStore queries."""

    def test_entries_url(self) -> None:
        """The entries endpoint is built from host, space and environment."""
        store = _store(host="cdn.example.com", environment="staging")
        assert store.entries_url == "https://cdn.example.com/spaces/space/environments/staging/entries"

    @pytest.mark.asyncio
    async def test_requires_credentials(self) -> None:
        """Queries without credentials raise ConfigurationError."""
        with pytest.raises(ConfigurationError):
            await _store(access_token="").get_entries({})

    @pytest.mark.asyncio
    async def test_fetch_article(self) -> None:
        """Articles are queried by both slugs and parsed with resolved links."""
        with patch(
            "richdoc.content_store.fetch_json_with_retries",
            AsyncMock(return_value=ARTICLE_PAYLOAD),
        ) as mock_fetch:
            article = await _store().fetch_article("tech", "hello")

        assert article.title == "Hello"
        assert article.category.slug == "tech"
        assert article.thumbnail is not None
        assert article.contents is not None

        params = mock_fetch.call_args.kwargs["params"]
        assert params["fields.slug"] == "hello"
        assert params["fields.category.fields.slug"] == "tech"
        assert params["content_type"] == "article"
        assert mock_fetch.call_args.kwargs["headers"] == {"Authorization": "Bearer token"}

    @pytest.mark.asyncio
    async def test_fetch_article_not_found(self) -> None:
        """An empty result raises ArticleNotFoundError."""
        with patch(
            "richdoc.content_store.fetch_json_with_retries",
            AsyncMock(return_value={"items": [], "total": 0}),
        ):
            with pytest.raises(ArticleNotFoundError, match="hello"):
                await _store().fetch_article("tech", "hello")

    @pytest.mark.asyncio
    async def test_fetch_category_links(self) -> None:
        """Categories are keyed by id with their path and article count."""

        async def fake_fetch(url: str, **kwargs: Any) -> dict:
            params = kwargs["params"]
            if params["content_type"] == "category":
                return {
                    "items": [
                        CATEGORY_ENTRY,
                        {"sys": {"id": "cat2"}, "fields": {"name": "Life", "slug": "life"}},
                    ]
                }
            return {"items": [], "total": 5 if params["links_to_entry"] == "cat1" else 0}

        with patch("richdoc.content_store.fetch_json_with_retries", side_effect=fake_fetch):
            links = await _store().fetch_category_links()

        assert list(links) == ["cat1", "cat2"]
        assert links["cat1"].path == "/tech"
        assert links["cat1"].title == "Tech"
        assert links["cat1"].linked_article_count == 5
        assert links["cat2"].linked_article_count == 0

    @pytest.mark.asyncio
    async def test_cache_reuses_response(self, tmp_path: Path) -> None:
        """A fresh cached response is served without another request."""
        store = _store(use_cache=True, cache_path=tmp_path, cache_ttl_seconds=600)
        with patch(
            "richdoc.content_store.fetch_json_with_retries",
            AsyncMock(return_value=ARTICLE_PAYLOAD),
        ) as mock_fetch:
            first = await store.fetch_article("tech", "hello")
            second = await store.fetch_article("tech", "hello")

        assert mock_fetch.call_count == 1
        assert first == second
        assert list(tmp_path.glob("*/*.json"))

    @pytest.mark.asyncio
    async def test_owns_and_closes_client(self) -> None:
        """A store without an injected client creates and closes its own."""
        mock_client = AsyncMock()
        with patch("richdoc.content_store.create_client", return_value=mock_client):
            async with _store() as store:
                assert store._client is mock_client

        mock_client.aclose.assert_awaited_once()
        assert store._client is None

    @pytest.mark.asyncio
    async def test_keeps_injected_client_open(self) -> None:
        """An injected client is left open on exit."""
        mock_client = AsyncMock()
        async with _store(client=mock_client):
            pass
        mock_client.aclose.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_space_is_configuration_error(self) -> None:
        """A 404 from the entries endpoint means the space or environment is wrong."""
        response = MagicMock()
        response.status_code = 404
        mock_client = AsyncMock()
        mock_client.get = AsyncMock(return_value=response)

        with pytest.raises(ConfigurationError, match="Space 'space' or environment 'master'"):
            await _store(client=mock_client, environment="master").get_entries({"content_type": "article"})
        assert mock_client.get.call_count == 1
