"""Candidate source that queries a JSON listings feed over HTTP."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from dealfinder.candidates.base import BaseCandidateSource, unwrap_listings
from dealfinder.config import SourcesConfig

logger = logging.getLogger(__name__)


class FeedCandidateSource(BaseCandidateSource):
    """GETs ``config.feed_url?q=<query>`` and returns the listed properties."""

    SOURCE_NAME = "feed"

    def __init__(self, config: SourcesConfig, client: httpx.AsyncClient | None = None):
        super().__init__(config)
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                headers={"Accept": "application/json"},
                timeout=self.config.timeout,
                follow_redirects=True,
            )
        return self._client

    async def fetch(self, query: str) -> list[dict[str, Any]]:
        if not self.config.feed_url:
            raise ValueError("No feed_url configured for the feed source")

        client = await self._get_client()
        resp = await client.get(self.config.feed_url, params={"q": query})
        resp.raise_for_status()
        listings = unwrap_listings(resp.json())
        logger.info("Feed returned %d candidate(s) for %r", len(listings), query)
        return listings

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
