"""Filtering and ordering of property records.

Criteria bounds that are unset (None or 0) never exclude a record, matching
how the listing screens treat an untouched slider. Numeric fields a record
does not carry are compared as 0.
"""

from __future__ import annotations

import logging
from datetime import timezone
from typing import Callable, Iterable

from dealfinder.models import FilterCriteria, PropertyRecord, SortKey

logger = logging.getLogger(__name__)


def _num(value: float | None) -> float:
    return value or 0


def _matches_quick_search(record: PropertyRecord, term: str) -> bool:
    term = term.lower()
    return (
        term in record.address.lower()
        or term in record.city.lower()
        or term in record.state.lower()
        or record.zip_code.lower().startswith(term)
    )


def _matches_location(record: PropertyRecord, location: str) -> bool:
    location = location.lower()
    return (
        location in record.city.lower()
        or location in record.state.lower()
        or location in record.zip_code.lower()
    )


def matches_filters(
    record: PropertyRecord,
    criteria: FilterCriteria,
    quick_search: str | None = None,
) -> bool:
    """Return True if the record passes every criterion that is set."""
    if quick_search and not _matches_quick_search(record, quick_search):
        return False

    if criteria.location and not _matches_location(record, criteria.location):
        return False

    if criteria.min_price and record.price < criteria.min_price:
        return False
    if criteria.max_price and record.price > criteria.max_price:
        return False

    if criteria.property_types and record.property_type not in criteria.property_types:
        return False

    if criteria.min_units and _num(record.units) < criteria.min_units:
        return False
    if criteria.max_units and _num(record.units) > criteria.max_units:
        return False

    if criteria.min_cap_rate and _num(record.cap_rate) < criteria.min_cap_rate:
        return False
    if criteria.min_roi and _num(record.roi) < criteria.min_roi:
        return False
    if criteria.min_cash_flow and _num(record.cash_flow_monthly) < criteria.min_cash_flow:
        return False

    return True


def _created_timestamp(record: PropertyRecord) -> float:
    created = record.created_date
    if created is None:
        return float("-inf")
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return created.timestamp()


# key function and whether the order is descending
SORT_KEYS: dict[SortKey, tuple[Callable[[PropertyRecord], float], bool]] = {
    SortKey.INVESTMENT_SCORE: (lambda r: _num(r.investment_score), True),
    SortKey.PRICE_ASC: (lambda r: _num(r.price), False),
    SortKey.PRICE_DESC: (lambda r: _num(r.price), True),
    SortKey.CAP_RATE: (lambda r: _num(r.cap_rate), True),
    SortKey.CASH_FLOW: (lambda r: _num(r.cash_flow_monthly), True),
    SortKey.NEWEST: (_created_timestamp, True),
}


def sort_properties(
    records: Iterable[PropertyRecord],
    sort_key: SortKey | str = SortKey.INVESTMENT_SCORE,
) -> list[PropertyRecord]:
    """Stable sort; records with equal keys keep their input order."""
    key_func, descending = SORT_KEYS[SortKey(sort_key)]
    return sorted(records, key=key_func, reverse=descending)


def filter_and_sort(
    properties: Iterable[PropertyRecord],
    criteria: FilterCriteria,
    sort_key: SortKey | str = SortKey.INVESTMENT_SCORE,
    quick_search: str | None = None,
) -> list[PropertyRecord]:
    """Select the records matching ``criteria`` and order them by ``sort_key``."""
    properties = list(properties)
    selected = [p for p in properties if matches_filters(p, criteria, quick_search)]
    logger.debug("Filter kept %d of %d properties", len(selected), len(properties))
    return sort_properties(selected, sort_key)
