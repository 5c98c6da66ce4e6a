"""Investment metrics for buy-and-hold rentals.

Turns a property's raw attributes and a set of financing assumptions into
the usual investor ratios: cap rate, cash flow, cash-on-cash return, DSCR,
GRM and a simplified five-year ROI. Everything here is pure arithmetic;
nothing is rounded, cached or validated, so callers decide how to display
the numbers and whether to clamp nonsensical inputs.
"""

from __future__ import annotations

import math

from dealfinder.models import FinancingAssumptions, MetricsResult, PropertyInput

APPRECIATION_RATE = 0.03
ROI_HORIZON_YEARS = 5


def monthly_payment(principal: float, annual_rate_percent: float, years: int) -> float:
    """Principal and interest payment for a fully amortizing loan.

    A zero rate amortizes linearly (``principal / num_payments``) instead of
    dividing by zero in the annuity formula. ``(1 + r) ** n - 1`` is taken
    through ``expm1``/``log1p`` so rates too small to move ``1 + r`` off 1.0
    fall back to the same linear payment.
    """
    if principal <= 0:
        return 0.0
    monthly_rate = annual_rate_percent / 100 / 12
    num_payments = years * 12
    if num_payments <= 0:
        return 0.0
    if monthly_rate == 0:
        return principal / num_payments
    try:
        if monthly_rate > -1:
            growth_minus_one = math.expm1(num_payments * math.log1p(monthly_rate))
        else:
            growth_minus_one = (1 + monthly_rate) ** num_payments - 1
    except OverflowError:
        # Interest-only limit of the annuity formula as the term grows
        return principal * monthly_rate
    if growth_minus_one == 0:
        return principal / num_payments
    return principal * monthly_rate * (growth_minus_one + 1) / growth_minus_one


def compute_metrics(property: PropertyInput, financing: FinancingAssumptions) -> MetricsResult:
    """Compute financing and return metrics for one property.

    Args:
        property: Purchase price, rent and fixed operating costs.
        financing: Down payment, loan terms and percentage-based expenses.

    Returns:
        MetricsResult with unrounded values. Ratios whose denominator is
        zero (cap rate, cash-on-cash, DSCR, GRM, ROI) are reported as 0.

    Results are finite for money amounts up to about 1e300; beyond that the
    percentage products themselves overflow to infinity. Real listings sit
    many orders of magnitude below that.
    """
    purchase_price = property.purchase_price

    # Financing
    down_payment = purchase_price * financing.down_payment_percent / 100
    loan_amount = purchase_price - down_payment
    closing_costs = purchase_price * financing.closing_costs_percent / 100
    total_cash_needed = down_payment + closing_costs
    monthly_mortgage = monthly_payment(
        loan_amount, financing.interest_rate_percent, financing.loan_term_years
    )

    # Income
    gross_annual_rent = property.monthly_rent * 12
    effective_gross_income = gross_annual_rent * (1 - property.vacancy_rate_percent / 100)

    # Operating expenses, percentages are of effective gross income
    maintenance = effective_gross_income * financing.maintenance_percent / 100
    management = effective_gross_income * financing.management_percent / 100
    total_operating_expenses = (
        property.annual_taxes
        + property.annual_insurance
        + property.monthly_hoa * 12
        + maintenance
        + management
    )

    noi = effective_gross_income - total_operating_expenses

    # Cash flow
    annual_debt_service = monthly_mortgage * 12
    annual_cash_flow = noi - annual_debt_service
    monthly_cash_flow = annual_cash_flow / 12

    # Ratios
    cap_rate = noi / purchase_price * 100 if purchase_price > 0 else 0.0
    cash_on_cash = annual_cash_flow / total_cash_needed * 100 if total_cash_needed > 0 else 0.0
    dscr = noi / annual_debt_service if annual_debt_service > 0 else 0.0
    grm = purchase_price / gross_annual_rent if property.monthly_rent > 0 else 0.0

    # Five-year ROI with a fixed appreciation assumption
    future_value = purchase_price * (1 + APPRECIATION_RATE) ** ROI_HORIZON_YEARS
    equity_gain = future_value - purchase_price
    total_return = annual_cash_flow * ROI_HORIZON_YEARS + equity_gain
    roi_5_year = total_return / total_cash_needed * 100 if total_cash_needed > 0 else 0.0

    return MetricsResult(
        down_payment=down_payment,
        loan_amount=loan_amount,
        closing_costs=closing_costs,
        total_cash_needed=total_cash_needed,
        monthly_mortgage=monthly_mortgage,
        gross_annual_rent=gross_annual_rent,
        effective_gross_income=effective_gross_income,
        total_operating_expenses=total_operating_expenses,
        noi=noi,
        annual_debt_service=annual_debt_service,
        annual_cash_flow=annual_cash_flow,
        monthly_cash_flow=monthly_cash_flow,
        cap_rate_percent=cap_rate,
        cash_on_cash_return_percent=cash_on_cash,
        dscr=dscr,
        grm=grm,
        roi_5_year_percent=roi_5_year,
    )
