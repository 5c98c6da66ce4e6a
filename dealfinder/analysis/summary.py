"""Dashboard aggregates over a set of property records."""

from __future__ import annotations

from dealfinder.models import PortfolioSummary, PropertyRecord


def summarize(
    records: list[PropertyRecord],
    top_deal_min_score: int = 70,
    top_deal_limit: int = 5,
) -> PortfolioSummary:
    """Averages (missing values count as 0) plus the first qualifying top deals."""
    total = len(records)
    if total == 0:
        return PortfolioSummary()

    top_deals = [r for r in records if (r.investment_score or 0) >= top_deal_min_score]

    return PortfolioSummary(
        total_properties=total,
        avg_cap_rate=sum(r.cap_rate or 0 for r in records) / total,
        avg_cash_flow=sum(r.cash_flow_monthly or 0 for r in records) / total,
        avg_score=sum(r.investment_score or 0 for r in records) / total,
        top_deals=top_deals[:top_deal_limit],
    )
