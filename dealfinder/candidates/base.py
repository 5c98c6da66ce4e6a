"""Base candidate source interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from dealfinder.config import SourcesConfig


class BaseCandidateSource(ABC):
    """Abstract provider of raw candidate listings for a free-text query.

    Sources return listing attributes as plain dicts; validation and metric
    enrichment happen downstream in :class:`~dealfinder.analysis.engine.DealAnalyzer`.
    """

    SOURCE_NAME: str = "unknown"

    def __init__(self, config: SourcesConfig):
        self.config = config

    async def search(self, query: str) -> list[dict[str, Any]]:
        """Fetch candidates for ``query``; blank queries are rejected."""
        if not query or not query.strip():
            raise ValueError("Please enter a search query")
        return await self.fetch(query.strip())

    @abstractmethod
    async def fetch(self, query: str) -> list[dict[str, Any]]:
        """Return raw listing dicts. Must be implemented by subclasses."""
        ...

    async def close(self) -> None:
        return None


def unwrap_listings(payload: Any) -> list[dict[str, Any]]:
    """Accept either a bare list or a ``{"properties": [...]}`` envelope."""
    if isinstance(payload, dict):
        payload = payload.get("properties") or []
    if not isinstance(payload, list):
        raise ValueError(f"Expected a list of properties, got {type(payload).__name__}")
    return [item for item in payload if isinstance(item, dict)]
