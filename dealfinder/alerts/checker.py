"""Match alert preferences against property records."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable

from dealfinder.models import AlertMatch, AlertPreference, PropertyRecord

logger = logging.getLogger(__name__)


def alert_matches(pref: AlertPreference, record: PropertyRecord) -> bool:
    """Return True if an active preference is satisfied by the record.

    A record must sit in one of the preference's locations (substring of
    city, state or zip, case-insensitive). Thresholds of 0 are ignored.
    """
    if not pref.is_active:
        return False

    fields = (record.city.lower(), record.state.lower(), record.zip_code.lower())
    if not any(loc.lower() in f for loc in pref.locations if loc for f in fields):
        logger.debug("%s is outside the locations of alert %r", record.full_address, pref.name)
        return False

    if pref.max_price and record.price > pref.max_price:
        return False
    if pref.property_types and record.property_type not in pref.property_types:
        return False
    if pref.min_cap_rate and (record.cap_rate or 0) < pref.min_cap_rate:
        return False
    if pref.min_roi and (record.roi or 0) < pref.min_roi:
        return False
    if pref.min_cash_flow and (record.cash_flow_monthly or 0) < pref.min_cash_flow:
        return False

    return True


class AlertChecker:
    """Runs every alert preference against a batch of records."""

    def check(
        self,
        prefs: Iterable[AlertPreference],
        records: Iterable[PropertyRecord],
    ) -> list[AlertMatch]:
        records = list(records)
        matches: list[AlertMatch] = []
        now = datetime.utcnow()

        for pref in prefs:
            if not pref.is_active:
                continue
            hits = [r for r in records if alert_matches(pref, r)]
            logger.info("Alert %r matched %d of %d properties", pref.name, len(hits), len(records))
            checked = pref.model_copy(update={"last_checked": now})
            matches.extend(AlertMatch(preference=checked, record=r) for r in hits)

        return matches
