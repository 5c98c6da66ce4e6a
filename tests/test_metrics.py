"""Tests for the investment metrics calculator."""

import math

import pytest
from pydantic import ValidationError

from dealfinder.models import FinancingAssumptions, PropertyInput
from dealfinder.analysis.metrics import compute_metrics, monthly_payment


def _make_property(**overrides) -> PropertyInput:
    defaults = {
        "purchase_price": 300_000,
        "monthly_rent": 2_000,
        "annual_taxes": 3_000,
        "annual_insurance": 1_200,
        "monthly_hoa": 0,
        "vacancy_rate_percent": 5,
        "units": 1,
    }
    defaults.update(overrides)
    return PropertyInput(**defaults)


def _make_financing(**overrides) -> FinancingAssumptions:
    defaults = {
        "down_payment_percent": 25,
        "interest_rate_percent": 7.0,
        "loan_term_years": 30,
        "closing_costs_percent": 3,
        "maintenance_percent": 10,
        "management_percent": 10,
    }
    defaults.update(overrides)
    return FinancingAssumptions(**defaults)


class TestMonthlyPayment:
    def test_standard_amortization(self):
        # 225k at 7% over 30 years
        assert monthly_payment(225_000, 7.0, 30) == pytest.approx(1496.93, abs=0.01)

    def test_zero_principal(self):
        assert monthly_payment(0, 7.0, 30) == 0.0

    def test_negative_principal(self):
        assert monthly_payment(-50_000, 7.0, 30) == 0.0

    def test_zero_rate_amortizes_linearly(self):
        # Deliberate deviation: the annuity formula divides by zero here
        assert monthly_payment(360_000, 0.0, 30) == pytest.approx(1_000.0)

    def test_zero_term_is_finite(self):
        assert monthly_payment(100_000, 7.0, 0) == 0.0
        assert monthly_payment(100_000, 0.0, 0) == 0.0

    @pytest.mark.parametrize("rate", [1e-15, 1e-12, 1e-9])
    def test_tiny_rate_is_near_linear(self, rate):
        payment = monthly_payment(225_000, rate, 30)
        assert math.isfinite(payment)
        assert payment == pytest.approx(225_000 / 360)

    def test_small_rate_keeps_precision(self):
        # 0.01%/yr: first-order expansion of the annuity payment
        r = 0.01 / 100 / 12
        expected = 225_000 / 360 * (1 + r * 361 / 2)
        assert monthly_payment(225_000, 0.01, 30) == pytest.approx(expected, rel=1e-5)

    def test_higher_rate_costs_more(self):
        assert monthly_payment(200_000, 8.0, 30) > monthly_payment(200_000, 6.0, 30)


class TestComputeMetrics:
    def test_financing_breakdown(self):
        m = compute_metrics(_make_property(), _make_financing())
        assert m.down_payment == pytest.approx(75_000)
        assert m.loan_amount == pytest.approx(225_000)
        assert m.closing_costs == pytest.approx(9_000)
        assert m.total_cash_needed == pytest.approx(84_000)
        assert m.monthly_mortgage == pytest.approx(1496.93, abs=0.01)
        assert m.annual_debt_service == pytest.approx(m.monthly_mortgage * 12)

    def test_cap_rate_reference(self):
        m = compute_metrics(_make_property(), _make_financing())
        assert m.gross_annual_rent == pytest.approx(24_000)
        assert m.effective_gross_income == pytest.approx(22_800)
        assert m.total_operating_expenses == pytest.approx(8_760)
        assert m.noi == pytest.approx(14_040)
        assert m.cap_rate_percent == pytest.approx(4.68, abs=0.01)

    def test_cash_flow(self):
        m = compute_metrics(_make_property(), _make_financing())
        assert m.annual_cash_flow == pytest.approx(m.noi - m.annual_debt_service)
        assert m.monthly_cash_flow == pytest.approx(m.annual_cash_flow / 12)
        assert m.monthly_cash_flow < 0

    def test_ratios(self):
        m = compute_metrics(_make_property(), _make_financing())
        assert m.dscr == pytest.approx(m.noi / m.annual_debt_service)
        assert m.grm == pytest.approx(12.5)
        assert m.cash_on_cash_return_percent == pytest.approx(
            m.annual_cash_flow / m.total_cash_needed * 100
        )

    def test_hoa_counts_as_operating_expense(self):
        base = compute_metrics(_make_property(), _make_financing())
        with_hoa = compute_metrics(_make_property(monthly_hoa=250), _make_financing())
        assert with_hoa.total_operating_expenses - base.total_operating_expenses == pytest.approx(3_000)

    def test_five_year_roi(self):
        prop = _make_property(
            purchase_price=100_000, monthly_rent=0, annual_taxes=0, annual_insurance=0
        )
        fin = _make_financing(down_payment_percent=100, closing_costs_percent=0)
        m = compute_metrics(prop, fin)
        # No cash flow, only 3%/yr appreciation on a cash purchase
        expected = (100_000 * 1.03**5 - 100_000) / 100_000 * 100
        assert m.roi_5_year_percent == pytest.approx(expected)
        assert m.roi_5_year_percent == pytest.approx(15.93, abs=0.01)

    def test_all_cash_purchase(self):
        m = compute_metrics(_make_property(), _make_financing(down_payment_percent=100))
        assert m.loan_amount == 0
        assert m.monthly_mortgage == 0
        assert m.annual_debt_service == 0
        assert m.dscr == 0
        assert m.total_cash_needed == pytest.approx(300_000 + 9_000)
        assert m.cash_on_cash_return_percent == pytest.approx(
            m.annual_cash_flow / m.total_cash_needed * 100
        )

    def test_zero_rate_loan(self):
        m = compute_metrics(_make_property(), _make_financing(interest_rate_percent=0))
        assert m.monthly_mortgage == pytest.approx(225_000 / 360)

    def test_zero_rent_and_price_stay_finite(self):
        m = compute_metrics(
            _make_property(purchase_price=0, monthly_rent=0),
            _make_financing(),
        )
        assert m.grm == 0
        assert m.cap_rate_percent == 0
        assert m.cash_on_cash_return_percent == 0
        assert m.roi_5_year_percent == 0
        for value in m.model_dump().values():
            assert math.isfinite(value)

    def test_zero_rent_grm(self):
        m = compute_metrics(_make_property(monthly_rent=0), _make_financing())
        assert m.grm == 0
        assert math.isfinite(m.cap_rate_percent)

    def test_out_of_range_inputs_do_not_raise(self):
        m = compute_metrics(
            _make_property(purchase_price=-100_000, vacancy_rate_percent=150),
            _make_financing(down_payment_percent=120),
        )
        assert m.cap_rate_percent == 0  # price not > 0
        assert m.loan_amount == pytest.approx(20_000)
        for value in m.model_dump().values():
            assert math.isfinite(value)

    def test_over_100_percent_down(self):
        m = compute_metrics(_make_property(), _make_financing(down_payment_percent=110))
        assert m.loan_amount < 0
        assert m.monthly_mortgage == 0

    def test_tiny_rate_does_not_raise(self):
        m = compute_metrics(_make_property(), _make_financing(interest_rate_percent=1e-15))
        assert m.monthly_mortgage == pytest.approx(225_000 / 360)
        for value in m.model_dump().values():
            assert math.isfinite(value)

    def test_large_prices_stay_finite(self):
        m = compute_metrics(
            _make_property(purchase_price=1e15, monthly_rent=1e10, annual_taxes=1e12),
            _make_financing(),
        )
        assert m.loan_amount == pytest.approx(7.5e14)
        for value in m.model_dump().values():
            assert math.isfinite(value)

    def test_missing_inputs_are_zero(self):
        prop = PropertyInput(purchase_price=None, monthly_rent=None, annual_taxes=None)
        fin = FinancingAssumptions(closing_costs_percent=None, maintenance_percent=None)
        m = compute_metrics(prop, fin)
        assert m.noi == 0
        assert m.closing_costs == 0

    def test_deterministic(self):
        prop, fin = _make_property(), _make_financing()
        assert compute_metrics(prop, fin) == compute_metrics(prop, fin)

    def test_result_is_immutable(self):
        m = compute_metrics(_make_property(), _make_financing())
        with pytest.raises(ValidationError):
            m.noi = 0
