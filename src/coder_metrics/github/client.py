"""GitHub REST API client."""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator

import httpx

from .rate_limit import MAX_ATTEMPTS, RateLimitMonitor, retry_with_backoff

logger = logging.getLogger(__name__)

BASE_URL = "https://api.github.com"
PER_PAGE = 100


def _next_link(response: httpx.Response) -> str | None:
    link_header = response.headers.get("Link", "")
    for part in link_header.split(","):
        if 'rel="next"' in part:
            return part.split(";")[0].strip().strip("<>")
    return None


class GitHubClient:
    """Async GitHub REST API client with pagination, retries and rate limit support.

    Requests are issued one at a time; every call shares one
    :class:`RateLimitMonitor` so the whole run respects a single reset clock.
    """

    def __init__(
        self,
        token: str,
        delay: float = 30.0,
        base_url: str | None = None,
        verify_ssl: bool = True,
        attempts: int = MAX_ATTEMPTS,
    ) -> None:
        headers = {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {token}",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        self._client = httpx.AsyncClient(
            base_url=base_url or BASE_URL,
            headers=headers,
            timeout=30.0,
            verify=verify_ssl,
        )
        self._rate_limit = RateLimitMonitor()
        self._delay = delay
        self._attempts = attempts

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def _get(
        self, url: str, params: dict[str, Any] | None = None
    ) -> httpx.Response:
        await self._rate_limit.wait_if_needed()
        response = await self._client.get(url, params=params)
        self._rate_limit.update(response)
        response.raise_for_status()
        return response

    async def _get_json(
        self, url: str, params: dict[str, Any] | None = None
    ) -> tuple[httpx.Response, Any]:
        response = await self._get(url, params)
        try:
            return response, response.json()
        except ValueError as exc:
            raise httpx.DecodingError(
                f"Malformed JSON from {url}: {exc}", request=response.request
            ) from exc

    async def _get_with_retry(
        self, url: str, params: dict[str, Any] | None = None
    ) -> tuple[httpx.Response, Any]:
        """GET and decode, retrying transport, status and decoding failures."""
        return await retry_with_backoff(
            lambda: self._get_json(url, params),
            attempts=self._attempts,
            buffer=self._delay,
        )

    async def iter_pages(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        items_key: str | None = None,
    ) -> AsyncIterator[list[dict[str, Any]]]:
        """Yield one list of items per page, following ``Link: rel="next"``."""
        params = dict(params or {})
        params.setdefault("per_page", PER_PAGE)
        next_url: str | None = url

        while next_url is not None:
            response, data = await self._get_with_retry(next_url, params)
            if items_key is not None:
                data = data.get(items_key, []) if isinstance(data, dict) else []
            yield data if isinstance(data, list) else [data]

            next_url = _next_link(response)
            params = {}  # URL already contains params

    def list_commits(
        self, owner: str, repo: str, author: str, since: str
    ) -> AsyncIterator[list[dict[str, Any]]]:
        """Pages of commits authored by ``author`` since ``since``."""
        return self.iter_pages(
            f"/repos/{owner}/{repo}/commits",
            params={"author": author, "since": since},
        )

    async def get_commit(self, owner: str, repo: str, sha: str) -> dict[str, Any]:
        """Single commit with per-file diff stats."""
        _, data = await self._get_with_retry(f"/repos/{owner}/{repo}/commits/{sha}")
        return data if isinstance(data, dict) else {}

    def list_issues(
        self,
        owner: str,
        repo: str,
        creator: str,
        since: str,
        state: str = "all",
    ) -> AsyncIterator[list[dict[str, Any]]]:
        """Pages of issues (pull requests included) opened by ``creator``."""
        return self.iter_pages(
            f"/repos/{owner}/{repo}/issues",
            params={"creator": creator, "state": state, "since": since},
        )

    def search_issues(self, query: str) -> AsyncIterator[list[dict[str, Any]]]:
        """Pages of issue/pull request search results for ``query``."""
        logger.debug("Searching: %s", query)
        return self.iter_pages(
            "/search/issues",
            params={"q": query, "sort": "created", "order": "desc"},
            items_key="items",
        )
