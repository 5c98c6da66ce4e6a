"""Providers of raw candidate listings."""

from dealfinder.candidates.base import BaseCandidateSource
from dealfinder.candidates.feed import FeedCandidateSource
from dealfinder.candidates.file import FileCandidateSource

SOURCES: dict[str, type[BaseCandidateSource]] = {
    "file": FileCandidateSource,
    "feed": FeedCandidateSource,
}


def get_source(name: str) -> type[BaseCandidateSource]:
    """Get a candidate source class by name."""
    if name not in SOURCES:
        raise ValueError(f"Unknown source: {name}. Available: {list(SOURCES.keys())}")
    return SOURCES[name]
