"""Depreciation of registered fixed assets.

Schedules are re-derived from the asset register on every call; accumulated
depreciation is never stored.
"""

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from bluebook.domain.entities import AssetStatus, DepreciationMethod, FixedAsset

# Book value kept on the register after an asset is fully depreciated
MEMORANDUM_VALUE = 1

SMALL_SCALE_LIMIT = 300_000
BULK_DEPRECIATION_FLOOR = 100_000
BULK_DEPRECIATION_LIMIT = 200_000


def _rates(table: dict[int, str]) -> dict[int, Decimal]:
    return {life: Decimal(rate) for life, rate in table.items()}


# Useful life in years -> rate, for assets acquired after April 2007
STRAIGHT_LINE_RATES = _rates(
    {
        2: "0.500", 3: "0.334", 4: "0.250", 5: "0.200", 6: "0.167", 7: "0.143",
        8: "0.125", 9: "0.112", 10: "0.100", 11: "0.091", 12: "0.084",
        13: "0.077", 14: "0.072", 15: "0.067", 20: "0.050",
    }
)

# 200% declining balance, for assets acquired after April 2012
DECLINING_BALANCE_RATES = _rates(
    {
        2: "1.000", 3: "0.667", 4: "0.500", 5: "0.400", 6: "0.333", 7: "0.286",
        8: "0.250", 9: "0.222", 10: "0.200", 11: "0.182", 12: "0.167",
        13: "0.154", 14: "0.143", 15: "0.133", 20: "0.100",
    }
)

GUARANTEE_RATES = _rates(
    {
        2: "0", 3: "0.11089", 4: "0.12499", 5: "0.10800", 6: "0.09911",
        7: "0.08680", 8: "0.07909", 9: "0.07126", 10: "0.06552", 11: "0.05992",
        12: "0.05566", 13: "0.05180", 14: "0.04854", 15: "0.04565", 20: "0.03486",
    }
)

REVISED_RATES = _rates(
    {
        2: "1.000", 3: "1.000", 4: "0.500", 5: "0.500", 6: "0.334", 7: "0.334",
        8: "0.334", 9: "0.250", 10: "0.250", 11: "0.200", 12: "0.200",
        13: "0.167", 14: "0.167", 15: "0.143", 20: "0.112",
    }
)

_RATE_PLACES = Decimal("0.001")


def _round_yen(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def depreciation_rate(method: DepreciationMethod, useful_life: int) -> Decimal:
    """Return the statutory rate for a method and useful life.

    Lives missing from the tables fall back to ``1 / life`` for straight-line
    and ``2 / life`` for declining balance, rounded to three places.
    """
    if DepreciationMethod(method) == DepreciationMethod.STRAIGHT_LINE:
        table, numerator = STRAIGHT_LINE_RATES, Decimal(1)
    else:
        table, numerator = DECLINING_BALANCE_RATES, Decimal(2)

    if useful_life in table:
        return table[useful_life]
    return (numerator / Decimal(useful_life)).quantize(_RATE_PLACES, rounding=ROUND_HALF_UP)


def effective_rate(asset: FixedAsset) -> Decimal:
    """Return the stored rate of an asset, or the table rate when none is stored."""
    if asset.depreciation_rate is not None:
        return Decimal(asset.depreciation_rate)
    return depreciation_rate(asset.depreciation_method, asset.useful_life)


def depreciation_months(
    acquisition_date: date,
    fiscal_year: int,
    status: AssetStatus = AssetStatus.ACTIVE,
    disposal_date: Optional[date] = None,
) -> int:
    """Count the months of depreciable use within a fiscal year.

    The acquisition month counts as the first month of use. A sold or
    disposed asset depreciates through its disposal month and not at all in
    later years.
    """
    if acquisition_date.year > fiscal_year:
        return 0

    start_month = acquisition_date.month if acquisition_date.year == fiscal_year else 1
    end_month = 12

    if AssetStatus(status) != AssetStatus.ACTIVE and disposal_date is not None:
        if disposal_date.year < fiscal_year:
            return 0
        if disposal_date.year == fiscal_year:
            end_month = disposal_date.month

    return max(0, end_month - start_month + 1)


def yearly_depreciation(
    acquisition_cost: int,
    book_value: int,
    method: DepreciationMethod,
    rate: Decimal,
    months: int,
    useful_life: int,
) -> int:
    """Compute one year's depreciation before the memorandum-value cap.

    Straight-line applies the rate to the acquisition cost. Declining balance
    applies it to the book value at the start of the year and switches to the
    revised rate once that falls below the guaranteed amount.
    """
    if months <= 0:
        return 0

    if DepreciationMethod(method) == DepreciationMethod.STRAIGHT_LINE:
        annual = Decimal(acquisition_cost) * rate
    else:
        guarantee_amount = Decimal(acquisition_cost) * GUARANTEE_RATES.get(useful_life, Decimal(0))
        annual = Decimal(book_value) * rate
        if annual < guarantee_amount:
            annual = Decimal(book_value) * REVISED_RATES.get(useful_life, rate)

    return _round_yen(annual * months / 12)


def _capped(amount: int, book_value: int) -> int:
    return max(0, min(amount, book_value - MEMORANDUM_VALUE))


def accumulated_depreciation(asset: FixedAsset, fiscal_year: int) -> int:
    """Return depreciation accumulated from acquisition through ``fiscal_year``."""
    rate = effective_rate(asset)
    accumulated = 0
    book_value = asset.acquisition_cost

    for year in range(asset.acquisition_date.year, fiscal_year + 1):
        months = depreciation_months(
            asset.acquisition_date, year, asset.status, asset.disposal_date
        )
        amount = yearly_depreciation(
            asset.acquisition_cost,
            book_value,
            asset.depreciation_method,
            rate,
            months,
            asset.useful_life,
        )
        amount = _capped(amount, book_value)
        accumulated += amount
        book_value -= amount

    return accumulated


@dataclass(frozen=True)
class DepreciationRow:
    asset_id: int
    asset_name: str
    acquisition_date: date
    acquisition_cost: int
    depreciation_method: DepreciationMethod
    useful_life: int
    depreciation_rate: Decimal
    months: int
    depreciation_base: int
    current_year_depreciation: int
    business_ratio: int
    business_deduction: int
    accumulated_depreciation: int
    book_value: int


@dataclass(frozen=True)
class DepreciationSchedule:
    fiscal_year: int
    rows: tuple[DepreciationRow, ...]
    total_depreciation: int
    total_business_deduction: int


def generate_depreciation_row(asset: FixedAsset, fiscal_year: int) -> DepreciationRow:
    """Compute one asset's line of the depreciation schedule."""
    rate = effective_rate(asset)
    months = depreciation_months(
        asset.acquisition_date, fiscal_year, asset.status, asset.disposal_date
    )

    previous = accumulated_depreciation(asset, fiscal_year - 1)
    opening_book_value = asset.acquisition_cost - previous

    amount = yearly_depreciation(
        asset.acquisition_cost,
        opening_book_value,
        asset.depreciation_method,
        rate,
        months,
        asset.useful_life,
    )
    amount = _capped(amount, opening_book_value)

    if asset.depreciation_method == DepreciationMethod.STRAIGHT_LINE:
        base = asset.acquisition_cost
    else:
        base = opening_book_value

    accumulated = previous + amount

    return DepreciationRow(
        asset_id=asset.id,
        asset_name=asset.name,
        acquisition_date=asset.acquisition_date,
        acquisition_cost=asset.acquisition_cost,
        depreciation_method=asset.depreciation_method,
        useful_life=asset.useful_life,
        depreciation_rate=rate,
        months=months,
        depreciation_base=base,
        current_year_depreciation=amount,
        business_ratio=asset.business_ratio,
        business_deduction=amount * asset.business_ratio // 100,
        accumulated_depreciation=accumulated,
        book_value=asset.acquisition_cost - accumulated,
    )


def _in_service(asset: FixedAsset, fiscal_year: int) -> bool:
    if asset.status == AssetStatus.ACTIVE:
        return True
    return asset.disposal_date is not None and asset.disposal_date.year >= fiscal_year


def generate_depreciation_schedule(
    assets: Iterable[FixedAsset], fiscal_year: int
) -> DepreciationSchedule:
    """Build the depreciation schedule of a fiscal year.

    Active assets are always listed, including ones acquired after the year
    (with zero depreciation). Sold or disposed assets are listed up to and
    including their disposal year.
    """
    rows = tuple(
        generate_depreciation_row(asset, fiscal_year)
        for asset in assets
        if _in_service(asset, fiscal_year)
    )
    return DepreciationSchedule(
        fiscal_year=fiscal_year,
        rows=rows,
        total_depreciation=sum(row.current_year_depreciation for row in rows),
        total_business_deduction=sum(row.business_deduction for row in rows),
    )


def validate_fixed_asset(asset: FixedAsset) -> list[str]:
    """Return a message for every invalid field of an asset; empty when valid."""
    errors = []

    if not asset.name or not asset.name.strip():
        errors.append("Asset name is required")
    if asset.acquisition_cost <= 0:
        errors.append("Acquisition cost must be greater than zero")
    if asset.useful_life <= 0:
        errors.append("Useful life must be at least one year")
    if not 0 <= asset.business_ratio <= 100:
        errors.append("Business ratio must be between 0 and 100")
    if asset.depreciation_rate is not None and not 0 < asset.depreciation_rate <= 1:
        errors.append("Depreciation rate must be greater than 0 and at most 1")
    if asset.disposal_date is not None and asset.disposal_date < asset.acquisition_date:
        errors.append("Disposal date cannot be before the acquisition date")

    return errors


def is_small_scale_asset(acquisition_cost: int) -> bool:
    """Return True if the cost qualifies for immediate expensing by blue-return filers."""
    return acquisition_cost < SMALL_SCALE_LIMIT


def is_bulk_depreciation_asset(acquisition_cost: int) -> bool:
    """Return True if the cost qualifies for three-year even depreciation."""
    return BULK_DEPRECIATION_FLOOR <= acquisition_cost < BULK_DEPRECIATION_LIMIT


def is_depreciable_asset(acquisition_cost: int) -> bool:
    return acquisition_cost >= BULK_DEPRECIATION_FLOOR
