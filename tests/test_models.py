"""Tests for data models."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from dealfinder.models import (
    FilterCriteria,
    FinancingAssumptions,
    ListingStatus,
    PropertyRecord,
    PropertyType,
    SavedSearch,
    SortKey,
)


def test_record_creation():
    record = PropertyRecord(
        address="123 Main St",
        city="Austin",
        state="TX",
        zip_code="78701",
        price=250_000,
        property_type="multi_family",
        units=3,
    )
    assert record.price == 250_000
    assert record.property_type == PropertyType.MULTI_FAMILY
    assert record.full_address == "123 Main St, Austin, TX 78701"


def test_record_defaults():
    record = PropertyRecord(address="456 Oak Ave", city="Dallas", state="TX", price=150_000)
    assert record.zip_code == ""
    assert record.status == ListingStatus.ACTIVE
    assert record.investment_score is None
    assert record.cap_rate is None


def test_record_requires_price():
    with pytest.raises(ValidationError):
        PropertyRecord(address="456 Oak Ave", city="Dallas", state="TX")


def test_record_rejects_unknown_type():
    with pytest.raises(ValidationError):
        PropertyRecord(address="1 A St", city="X", state="TX", price=1, property_type="castle")


def test_record_coerces_store_values():
    record = PropertyRecord(
        address="1 A St", city="X", state="TX", price=1,
        zip_code=None, units=4.0, investment_score=72.6,
        created_date="2024-05-01T12:00:00Z",
    )
    assert record.zip_code == ""
    assert record.units == 4
    assert record.investment_score == 73
    assert isinstance(record.created_date, datetime)


def test_to_property_input_defaults():
    record = PropertyRecord(address="1 A St", city="X", state="TX", price=200_000, monthly_rent=1_800)
    prop = record.to_property_input()
    assert prop.purchase_price == 200_000
    assert prop.monthly_rent == 1_800
    assert prop.annual_taxes == 0
    assert prop.annual_insurance == 1200
    assert prop.vacancy_rate_percent == 5


def test_to_property_input_keeps_values():
    record = PropertyRecord(
        address="1 A St", city="X", state="TX", price=200_000,
        insurance_annual=2_000, vacancy_rate=8, hoa_monthly=150,
    )
    prop = record.to_property_input(default_insurance=1500)
    assert prop.annual_insurance == 2_000
    assert prop.vacancy_rate_percent == 8
    assert prop.monthly_hoa == 150


def test_saved_search_round_trips_filters():
    saved = SavedSearch(
        search_name="Austin fourplexes",
        filters=FilterCriteria(location="Austin", property_types=["multi_family"], min_units=4),
        results_count=3,
    )
    restored = SavedSearch.model_validate_json(saved.model_dump_json())
    assert restored.filters.property_types == [PropertyType.MULTI_FAMILY]
    assert restored.filters.min_units == 4


def test_sort_key_values():
    assert {k.value for k in SortKey} == {
        "investment_score", "price_asc", "price_desc", "cap_rate", "cash_flow", "newest",
    }


def test_favorite_defaults():
    from dealfinder.models import Favorite

    fav = Favorite(property_id="p-42")
    assert fav.notes == ""


def test_financing_term_whole_years():
    assert FinancingAssumptions(loan_term_years=15).loan_term_years == 15
    assert FinancingAssumptions(loan_term_years=20.0).loan_term_years == 20
    with pytest.raises(ValidationError):
        FinancingAssumptions(loan_term_years=15.5)
