"""Candidate source backed by a local JSON file."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from dealfinder.candidates.base import BaseCandidateSource, unwrap_listings

logger = logging.getLogger(__name__)


class FileCandidateSource(BaseCandidateSource):
    """Reads candidates from ``config.file_path``.

    The query narrows the file's listings to those whose address, city,
    state or zip code contains any word of the query; a query with no
    matching word returns every listing.
    """

    SOURCE_NAME = "file"

    async def fetch(self, query: str) -> list[dict[str, Any]]:
        path = Path(self.config.file_path)
        with open(path, encoding="utf-8") as f:
            listings = unwrap_listings(json.load(f))
        logger.debug("Loaded %d candidate(s) from %s", len(listings), path)

        words = [w.lower() for w in query.replace(",", " ").split()]
        matched = [item for item in listings if _mentions_any(item, words)]
        return matched or listings


def _mentions_any(item: dict[str, Any], words: list[str]) -> bool:
    haystack = " ".join(
        str(item.get(key) or "") for key in ("address", "city", "state", "zip_code")
    ).lower()
    return any(word in haystack for word in words)
