"""Tests for the investment score heuristic."""

from dealfinder.models import MetricsResult
from dealfinder.analysis.scoring import score_band, score_investment


def _metrics(**overrides) -> MetricsResult:
    fields = {name: 0.0 for name in MetricsResult.model_fields}
    fields.update(overrides)
    return MetricsResult(**fields)


class TestScoreInvestment:
    def test_base_score(self):
        assert score_investment(_metrics(), 1) == 50

    def test_cap_rate_boundary_takes_higher_tier(self):
        assert score_investment(_metrics(cap_rate_percent=8.0), 1) == 65
        assert score_investment(_metrics(cap_rate_percent=7.999), 1) == 60
        assert score_investment(_metrics(cap_rate_percent=6.0), 1) == 60
        assert score_investment(_metrics(cap_rate_percent=5.999), 1) == 50

    def test_roi_tiers_use_five_year_roi(self):
        assert score_investment(_metrics(roi_5_year_percent=15.0), 1) == 65
        assert score_investment(_metrics(roi_5_year_percent=14.99), 1) == 60
        assert score_investment(_metrics(roi_5_year_percent=10.0), 1) == 60
        # Cash-on-cash alone does not earn the ROI bonus
        assert score_investment(_metrics(cash_on_cash_return_percent=20.0), 1) == 50

    def test_cash_flow_tiers(self):
        assert score_investment(_metrics(monthly_cash_flow=500), 1) == 65
        assert score_investment(_metrics(monthly_cash_flow=499.99), 1) == 60
        assert score_investment(_metrics(monthly_cash_flow=200), 1) == 60
        assert score_investment(_metrics(monthly_cash_flow=199.99), 1) == 50

    def test_unit_bonus(self):
        assert score_investment(_metrics(), 4) == 55
        assert score_investment(_metrics(), 3) == 50
        assert score_investment(_metrics(), None) == 50

    def test_maximum_is_100(self):
        m = _metrics(cap_rate_percent=12, roi_5_year_percent=80, monthly_cash_flow=2_000)
        assert score_investment(m, 20) == 100

    def test_poor_deal_never_below_base(self):
        m = _metrics(cap_rate_percent=-5, roi_5_year_percent=-40, monthly_cash_flow=-900)
        assert score_investment(m, 0) == 50

    def test_returns_int(self):
        assert isinstance(score_investment(_metrics(cap_rate_percent=9.5), 2), int)

    def test_monotonic_in_cap_rate(self):
        scores = [score_investment(_metrics(cap_rate_percent=c), 1) for c in (0, 5, 6, 7, 8, 10)]
        assert scores == sorted(scores)


class TestScoreBand:
    def test_bands(self):
        assert score_band(80) == "strong"
        assert score_band(79) == "fair"
        assert score_band(60) == "fair"
        assert score_band(59) == "weak"

    def test_unscored(self):
        assert score_band(None) == "unscored"
        assert score_band(0) == "unscored"
