"""Heuristic 0-100 investment score."""

from __future__ import annotations

from dealfinder.models import MetricsResult

BASE_SCORE = 50
MIN_SCORE = 0
MAX_SCORE = 100

# (threshold, points) tiers, checked highest first with >=
CAP_RATE_TIERS = ((8.0, 15), (6.0, 10))
ROI_TIERS = ((15.0, 15), (10.0, 10))
CASH_FLOW_TIERS = ((500.0, 15), (200.0, 10))
MULTI_UNIT_THRESHOLD = 4
MULTI_UNIT_BONUS = 5

STRONG_SCORE = 80
FAIR_SCORE = 60


def _tier_points(value: float, tiers: tuple[tuple[float, int], ...]) -> int:
    for threshold, points in tiers:
        if value >= threshold:
            return points
    return 0


def score_investment(metrics: MetricsResult, unit_count: int | None) -> int:
    """Score a deal from its cap rate, ROI, monthly cash flow and unit count.

    The ROI tier looks at the cumulative five-year ROI, not an annual figure.
    """
    score = BASE_SCORE
    score += _tier_points(metrics.cap_rate_percent, CAP_RATE_TIERS)
    score += _tier_points(metrics.roi_5_year_percent, ROI_TIERS)
    score += _tier_points(metrics.monthly_cash_flow, CASH_FLOW_TIERS)
    if (unit_count or 0) >= MULTI_UNIT_THRESHOLD:
        score += MULTI_UNIT_BONUS
    return max(MIN_SCORE, min(MAX_SCORE, round(score)))


def score_band(score: int | None) -> str:
    """Display bucket for a score: strong, fair, weak, or unscored."""
    if not score:
        return "unscored"
    if score >= STRONG_SCORE:
        return "strong"
    if score >= FAIR_SCORE:
        return "fair"
    return "weak"
