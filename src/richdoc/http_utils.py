"""HTTP utilities for fetching content with retry logic and connection pooling."""

from __future__ import annotations

import asyncio
from typing import Any, Final, Mapping

import httpx

from richdoc.config import (
    RICHDOC_FETCH_BACKOFF_S,
    RICHDOC_FETCH_MAX_RETRIES,
    RICHDOC_FETCH_TIMEOUT_S,
    RICHDOC_USER_AGENT,
)
from richdoc.exceptions import FetchError, RateLimitError

RETRY_STATUS_CODES: Final[frozenset[int]] = frozenset({429, 500, 502, 503, 504})

_MAX_REDIRECTS: Final[int] = 5


def create_client(*, headers: Mapping[str, str] | None = None) -> httpx.AsyncClient:
    """Create a pooled client with the package timeout and user agent."""
    merged = {"User-Agent": RICHDOC_USER_AGENT}
    merged.update(headers or {})
    return httpx.AsyncClient(
        timeout=httpx.Timeout(RICHDOC_FETCH_TIMEOUT_S),
        headers=merged,
        follow_redirects=True,
        max_redirects=_MAX_REDIRECTS,
    )


async def fetch_json_with_retries(
    url: str,
    *,
    params: Mapping[str, Any] | None = None,
    headers: Mapping[str, str] | None = None,
    client: httpx.AsyncClient | None = None,
    on_404: type[Exception] | None = None,
    on_404_message: str | None = None,
) -> Any:
    """Fetch a JSON document from a URL with retry logic for transient failures.

    Args:
        url: The URL to fetch.
        params: Query parameters for the request.
        headers: Extra request headers (e.g. authorization).
        client: Optional httpx.AsyncClient for connection pooling. If not
            provided, a new client is created for this request.
        on_404: Custom exception class to raise on 404. Defaults to FetchError.
        on_404_message: Custom error message for 404 responses. If None,
            a generic message is used.

    Returns:
        The decoded JSON body.

    Raises:
        RateLimitError: If every attempt was rate limited.
        FetchError (or custom on_404 exception): If the fetch fails after all
            retries, returns 404, or the body is not JSON.
    """
    last_exc: Exception | None = None
    not_found_exc_class = on_404 or FetchError

    async def do_fetch(http_client: httpx.AsyncClient) -> Any:
        nonlocal last_exc

        for attempt in range(RICHDOC_FETCH_MAX_RETRIES + 1):
            try:
                response = await http_client.get(url, params=params, headers=headers)

                if response.status_code == 404:
                    message = on_404_message or f"Resource not found at {url}"
                    raise not_found_exc_class(message)

                if response.status_code == 429:
                    last_exc = RateLimitError(f"HTTP 429 from {url}")
                elif response.status_code in RETRY_STATUS_CODES:
                    last_exc = FetchError(f"HTTP {response.status_code} from {url}")
                else:
                    response.raise_for_status()
                    try:
                        return response.json()
                    except ValueError as exc:
                        raise FetchError(f"Invalid JSON from {url}: {exc}") from exc
            except (httpx.RequestError, httpx.HTTPStatusError) as exc:
                last_exc = exc
            except not_found_exc_class:
                raise

            if attempt < RICHDOC_FETCH_MAX_RETRIES:
                backoff = RICHDOC_FETCH_BACKOFF_S * (2**attempt)
                await asyncio.sleep(backoff)

        if isinstance(last_exc, RateLimitError):
            raise last_exc
        raise FetchError(f"Failed to fetch {url}: {last_exc}")

    if client is not None:
        return await do_fetch(client)

    async with create_client() as new_client:
        return await do_fetch(new_client)
