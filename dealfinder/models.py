"""Data models for DealFinder."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PropertyType(str, Enum):
    SINGLE_FAMILY = "single_family"
    MULTI_FAMILY = "multi_family"
    APARTMENT = "apartment"
    COMMERCIAL = "commercial"
    MIXED_USE = "mixed_use"
    LAND = "land"


class ListingStatus(str, Enum):
    ACTIVE = "active"
    PENDING = "pending"
    SOLD = "sold"
    OFF_MARKET = "off_market"


class ListingSource(str, Enum):
    ZILLOW = "zillow"
    REDFIN = "redfin"
    REALTOR = "realtor"
    MLS = "mls"
    MANUAL = "manual"


class SortKey(str, Enum):
    INVESTMENT_SCORE = "investment_score"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    CAP_RATE = "cap_rate"
    CASH_FLOW = "cash_flow"
    NEWEST = "newest"


def _none_to_zero(value):
    return 0 if value is None else value


class PropertyInput(BaseModel):
    """Read-only facts about a listing that feed the metrics engine."""

    purchase_price: float = 0.0
    monthly_rent: float = 0.0
    annual_taxes: float = 0.0
    annual_insurance: float = 0.0
    monthly_hoa: float = 0.0
    vacancy_rate_percent: float = 0.0
    units: Optional[int] = None

    @field_validator(
        "purchase_price",
        "monthly_rent",
        "annual_taxes",
        "annual_insurance",
        "monthly_hoa",
        "vacancy_rate_percent",
        mode="before",
    )
    @classmethod
    def _missing_is_zero(cls, value):
        return _none_to_zero(value)


class FinancingAssumptions(BaseModel):
    """User-adjustable loan and operating assumptions.

    ``loan_term_years`` takes whole years only; a fractional term such as
    15.5 fails validation.
    """

    down_payment_percent: float = 25.0
    interest_rate_percent: float = 7.0
    loan_term_years: int = 30
    closing_costs_percent: float = 3.0
    maintenance_percent: float = 10.0  # of effective gross income
    management_percent: float = 10.0  # of effective gross income

    @field_validator(
        "down_payment_percent",
        "interest_rate_percent",
        "loan_term_years",
        "closing_costs_percent",
        "maintenance_percent",
        "management_percent",
        mode="before",
    )
    @classmethod
    def _missing_is_zero(cls, value):
        return _none_to_zero(value)


class MetricsResult(BaseModel):
    """Financing and return metrics derived from a property and its financing."""

    model_config = ConfigDict(frozen=True)

    down_payment: float
    loan_amount: float
    closing_costs: float
    total_cash_needed: float
    monthly_mortgage: float  # principal + interest
    gross_annual_rent: float
    effective_gross_income: float
    total_operating_expenses: float
    noi: float
    annual_debt_service: float
    annual_cash_flow: float
    monthly_cash_flow: float
    cap_rate_percent: float
    cash_on_cash_return_percent: float
    dscr: float  # debt service coverage ratio
    grm: float  # gross rent multiplier
    roi_5_year_percent: float


class PropertyRecord(BaseModel):
    """A listing as held by the listing store, with its cached metrics."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    address: str
    city: str
    state: str
    zip_code: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    price: float
    property_type: Optional[PropertyType] = None
    units: Optional[int] = None
    bedrooms: Optional[float] = None
    bathrooms: Optional[float] = None
    sqft: Optional[float] = None
    year_built: Optional[int] = None
    monthly_rent: Optional[float] = None
    annual_taxes: Optional[float] = None
    insurance_annual: Optional[float] = None
    hoa_monthly: Optional[float] = None
    vacancy_rate: Optional[float] = None
    maintenance_annual: Optional[float] = None
    cap_rate: Optional[float] = None
    cash_flow_monthly: Optional[float] = None
    roi: Optional[float] = None
    noi: Optional[float] = None
    investment_score: Optional[int] = None
    description: str = ""
    listing_source: Optional[ListingSource] = None
    listing_url: str = ""
    status: ListingStatus = ListingStatus.ACTIVE
    days_on_market: Optional[int] = None
    created_date: Optional[datetime] = None

    @field_validator("zip_code", "description", "listing_url", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else str(value)

    @field_validator("units", "year_built", "days_on_market", mode="before")
    @classmethod
    def _whole_number(cls, value):
        if isinstance(value, float):
            return int(value)
        return value

    @field_validator("investment_score", mode="before")
    @classmethod
    def _round_score(cls, value):
        if isinstance(value, float):
            return round(value)
        return value

    @property
    def full_address(self) -> str:
        return f"{self.address}, {self.city}, {self.state} {self.zip_code}".strip()

    def to_property_input(
        self,
        default_insurance: float = 1200.0,
        default_vacancy: float = 5.0,
    ) -> PropertyInput:
        """Map the stored listing onto calculator inputs.

        Insurance and vacancy fall back to the given defaults when missing or
        zero; everything else missing is treated as 0.
        """
        return PropertyInput(
            purchase_price=self.price,
            monthly_rent=self.monthly_rent,
            annual_taxes=self.annual_taxes,
            annual_insurance=self.insurance_annual or default_insurance,
            monthly_hoa=self.hoa_monthly,
            vacancy_rate_percent=self.vacancy_rate or default_vacancy,
            units=self.units,
        )


class FilterCriteria(BaseModel):
    """Optional filter bounds; an unset bound never excludes a record."""

    location: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    property_types: list[PropertyType] = Field(default_factory=list)
    min_units: Optional[int] = None
    max_units: Optional[int] = None
    min_cap_rate: Optional[float] = None
    min_roi: Optional[float] = None
    min_cash_flow: Optional[float] = None


class PropertyAnalysis(BaseModel):
    """Metrics and score computed for one property record."""

    record: PropertyRecord
    financing: FinancingAssumptions
    metrics: MetricsResult
    score: int
    band: str

    def summary(self) -> str:
        m = self.metrics
        parts = [
            f"Investment Analysis for {self.record.full_address}",
            f"Purchase: ${self.record.price:,.0f} | Cash Needed: ${m.total_cash_needed:,.0f}",
            f"Loan: ${m.loan_amount:,.0f} | Mortgage: ${m.monthly_mortgage:,.2f}/mo",
            f"NOI: ${m.noi:,.0f} | Monthly Cash Flow: ${m.monthly_cash_flow:,.0f}",
            f"Cap Rate: {m.cap_rate_percent:.2f}% | CoC Return: {m.cash_on_cash_return_percent:.2f}%"
            f" | DSCR: {m.dscr:.2f} | GRM: {m.grm:.2f}",
            f"5-Year ROI: {m.roi_5_year_percent:.1f}%",
            f"Investment Score: {self.score}/100 ({self.band})",
        ]
        return "\n".join(parts)


class PortfolioSummary(BaseModel):
    """Aggregates shown on the dashboard."""

    total_properties: int = 0
    avg_cap_rate: float = 0.0
    avg_cash_flow: float = 0.0
    avg_score: float = 0.0
    top_deals: list[PropertyRecord] = Field(default_factory=list)


class SavedSearch(BaseModel):
    """A named set of filters the user chose to keep."""

    search_name: str = ""
    filters: FilterCriteria = Field(default_factory=FilterCriteria)
    results_count: int = 0
    created_date: datetime = Field(default_factory=datetime.utcnow)


class Favorite(BaseModel):
    property_id: str
    notes: str = ""


class AlertPreference(BaseModel):
    """Criteria a user wants to be notified about."""

    name: str
    locations: list[str] = Field(min_length=1)
    min_cap_rate: Optional[float] = None
    min_roi: Optional[float] = None
    min_cash_flow: Optional[float] = None
    max_price: Optional[float] = None
    property_types: list[PropertyType] = Field(default_factory=list)
    is_active: bool = True
    last_checked: Optional[datetime] = None


class AlertMatch(BaseModel):
    """A property record that satisfied an alert preference."""

    preference: AlertPreference
    record: PropertyRecord
    channels_sent: list[str] = Field(default_factory=list)
    sent_at: Optional[datetime] = None
