"""Tests for fixed asset depreciation."""

import pytest
from datetime import date
from decimal import Decimal

from bluebook.domain.depreciation import (
    MEMORANDUM_VALUE,
    accumulated_depreciation,
    depreciation_months,
    depreciation_rate,
    generate_depreciation_row,
    generate_depreciation_schedule,
    is_bulk_depreciation_asset,
    is_depreciable_asset,
    is_small_scale_asset,
    validate_fixed_asset,
)
from bluebook.domain.entities import (
    AssetCategory,
    AssetStatus,
    DepreciationMethod,
    FixedAsset,
)


def make_asset(**overrides):
    fields = dict(
        id=1,
        name="ノートPC",
        category=AssetCategory.EQUIPMENT,
        acquisition_date=date(2024, 4, 1),
        acquisition_cost=200000,
        useful_life=4,
        depreciation_method=DepreciationMethod.STRAIGHT_LINE,
        depreciation_rate=Decimal("0.250"),
    )
    fields.update(overrides)
    return FixedAsset(**fields)


class TestRates:
    def test_table_rates(self):
        assert depreciation_rate(DepreciationMethod.STRAIGHT_LINE, 4) == Decimal("0.250")
        assert depreciation_rate(DepreciationMethod.DECLINING_BALANCE, 5) == Decimal("0.400")

    def test_rates_outside_table(self):
        assert depreciation_rate(DepreciationMethod.STRAIGHT_LINE, 30) == Decimal("0.033")
        assert depreciation_rate(DepreciationMethod.DECLINING_BALANCE, 30) == Decimal("0.067")


class TestMonths:
    def test_first_year_counts_acquisition_month(self):
        assert depreciation_months(date(2024, 4, 1), 2024) == 9
        assert depreciation_months(date(2024, 12, 31), 2024) == 1

    def test_later_year(self):
        assert depreciation_months(date(2024, 4, 1), 2025) == 12

    def test_before_acquisition(self):
        assert depreciation_months(date(2024, 4, 1), 2023) == 0

    def test_disposal_year(self):
        months = depreciation_months(
            date(2022, 1, 1), 2024, AssetStatus.DISPOSED, date(2024, 6, 15)
        )
        assert months == 6

    def test_after_disposal(self):
        months = depreciation_months(date(2022, 1, 1), 2025, AssetStatus.SOLD, date(2024, 6, 15))
        assert months == 0


class TestStraightLine:
    def test_partial_first_year(self):
        """Test 200000 at 0.25 for nine months gives 37500."""
        row = generate_depreciation_row(make_asset(), 2024)

        assert row.months == 9
        assert row.current_year_depreciation == 37500
        assert row.depreciation_base == 200000
        assert row.accumulated_depreciation == 37500
        assert row.book_value == 162500

    def test_full_year(self):
        row = generate_depreciation_row(make_asset(), 2025)

        assert row.current_year_depreciation == 50000
        assert row.accumulated_depreciation == 87500
        assert row.book_value == 112500

    def test_memorandum_value_cap(self):
        """Test that the last year stops at a book value of one yen."""
        row = generate_depreciation_row(make_asset(), 2028)

        assert row.current_year_depreciation == 12499
        assert row.book_value == MEMORANDUM_VALUE

        after = generate_depreciation_row(make_asset(), 2029)
        assert after.current_year_depreciation == 0
        assert after.book_value == MEMORANDUM_VALUE

    def test_accumulated_never_exceeds_cost(self):
        asset = make_asset()
        for year in range(2024, 2035):
            assert accumulated_depreciation(asset, year) <= asset.acquisition_cost - MEMORANDUM_VALUE

    def test_business_ratio(self):
        row = generate_depreciation_row(make_asset(business_ratio=60), 2024)
        assert row.current_year_depreciation == 37500
        assert row.business_deduction == 22500

    def test_table_rate_when_not_stored(self):
        row = generate_depreciation_row(make_asset(depreciation_rate=None), 2024)
        assert row.depreciation_rate == Decimal("0.250")
        assert row.current_year_depreciation == 37500


class TestDecliningBalance:
    def test_schedule(self):
        asset = make_asset(
            acquisition_date=date(2024, 1, 10),
            acquisition_cost=1_000_000,
            useful_life=5,
            depreciation_method=DepreciationMethod.DECLINING_BALANCE,
            depreciation_rate=Decimal("0.400"),
        )

        amounts = [generate_depreciation_row(asset, year).current_year_depreciation for year in range(2024, 2027)]
        assert amounts == [400000, 240000, 144000]

        row = generate_depreciation_row(asset, 2026)
        assert row.depreciation_base == 360000

    def test_switch_to_revised_rate(self):
        """Test that the revised rate applies once the guaranteed amount is not reached."""
        asset = make_asset(
            acquisition_date=date(2024, 1, 10),
            acquisition_cost=1_000_000,
            useful_life=5,
            depreciation_method=DepreciationMethod.DECLINING_BALANCE,
            depreciation_rate=Decimal("0.400"),
        )
        row = generate_depreciation_row(asset, 2027)

        assert row.depreciation_base == 216000
        assert row.current_year_depreciation == 108000


class TestSchedule:
    def test_totals(self):
        assets = [make_asset(), make_asset(id=2, name="複合機", business_ratio=50)]
        schedule = generate_depreciation_schedule(assets, 2024)

        assert len(schedule.rows) == 2
        assert schedule.total_depreciation == 75000
        assert schedule.total_business_deduction == 37500 + 18750

    def test_disposed_asset_listed_through_disposal_year(self):
        asset = make_asset(
            acquisition_date=date(2022, 1, 1),
            status=AssetStatus.DISPOSED,
            disposal_date=date(2024, 6, 15),
        )

        schedule = generate_depreciation_schedule([asset], 2024)
        assert schedule.rows[0].months == 6
        assert schedule.rows[0].current_year_depreciation == 25000

        assert generate_depreciation_schedule([asset], 2025).rows == ()

    def test_future_asset_listed_with_zero(self):
        schedule = generate_depreciation_schedule([make_asset()], 2023)
        assert schedule.rows[0].current_year_depreciation == 0
        assert schedule.total_depreciation == 0


class TestValidation:
    def test_valid(self):
        assert validate_fixed_asset(make_asset()) == []

    def test_invalid_fields(self):
        asset = make_asset(
            name=" ",
            acquisition_cost=0,
            useful_life=0,
            business_ratio=120,
            depreciation_rate=Decimal("1.5"),
            disposal_date=date(2020, 1, 1),
        )
        errors = validate_fixed_asset(asset)

        assert "Asset name is required" in errors
        assert "Acquisition cost must be greater than zero" in errors
        assert "Useful life must be at least one year" in errors
        assert "Business ratio must be between 0 and 100" in errors
        assert "Depreciation rate must be greater than 0 and at most 1" in errors
        assert "Disposal date cannot be before the acquisition date" in errors


@pytest.mark.parametrize(
    "cost,small,bulk,depreciable",
    [
        (99_999, True, False, False),
        (100_000, True, True, True),
        (199_999, True, True, True),
        (250_000, True, False, True),
        (300_000, False, False, True),
    ],
)
def test_asset_thresholds(cost, small, bulk, depreciable):
    assert is_small_scale_asset(cost) is small
    assert is_bulk_depreciation_asset(cost) is bulk
    assert is_depreciable_asset(cost) is depreciable
