"""Consumption tax calculations.

All stored amounts are tax-inclusive. Exclusive and tax amounts are derived
with truncation (floor), which is the legally required rounding.

The conversion divides by ``1 + rate / 100`` in binary floating point and then
floors, so the results match the figures the filing software has always
produced; e.g. 110000 at 10% yields 99999 exclusive and 10001 tax.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Optional

from bluebook.domain.entities import JournalLine, Side, TaxCategory

TAX_RATES: dict[TaxCategory, int] = {
    TaxCategory.SALES_10: 10,
    TaxCategory.SALES_8: 8,
    TaxCategory.PURCHASE_10: 10,
    TaxCategory.PURCHASE_8: 8,
    TaxCategory.EXEMPT: 0,
    TaxCategory.OUT_OF_SCOPE: 0,
    TaxCategory.NA: 0,
}

SALES_CATEGORIES = frozenset({TaxCategory.SALES_10, TaxCategory.SALES_8})
PURCHASE_CATEGORIES = frozenset({TaxCategory.PURCHASE_10, TaxCategory.PURCHASE_8})

EXEMPT_BUSINESS_THRESHOLD = 10_000_000
SIMPLIFIED_TAX_THRESHOLD = 50_000_000


def tax_rate(category: Optional[TaxCategory]) -> int:
    """Return the tax rate in percent for a category (0 when absent)."""
    if category is None:
        return 0
    return TAX_RATES[TaxCategory(category)]


def is_taxable(category: Optional[TaxCategory]) -> bool:
    return category is not None and (
        category in SALES_CATEGORIES or category in PURCHASE_CATEGORIES
    )


def is_sales_category(category: Optional[TaxCategory]) -> bool:
    return category is not None and category in SALES_CATEGORIES


def is_purchase_category(category: Optional[TaxCategory]) -> bool:
    return category is not None and category in PURCHASE_CATEGORIES


def tax_excluded(inclusive: int, rate: int) -> int:
    """Convert a tax-inclusive amount to its tax-exclusive amount."""
    if rate == 0:
        return inclusive
    return math.floor(inclusive / (1 + rate / 100))


def tax_amount(inclusive: int, rate: int) -> int:
    """Return the tax contained in a tax-inclusive amount."""
    if rate == 0:
        return 0
    return inclusive - tax_excluded(inclusive, rate)


def tax_included(exclusive: int, rate: int) -> int:
    """Convert a tax-exclusive amount to a tax-inclusive amount."""
    if rate == 0:
        return exclusive
    return math.floor(exclusive * (1 + rate / 100))


def _filtered(
    lines: Iterable[JournalLine],
    category_filter: Optional[Callable[[TaxCategory], bool]],
) -> list[JournalLine]:
    selected = []
    for line in lines:
        if line.tax_category is None:
            continue
        if category_filter is None:
            if is_taxable(line.tax_category):
                selected.append(line)
        elif category_filter(line.tax_category):
            selected.append(line)
    return selected


def total_tax_included(
    lines: Iterable[JournalLine],
    category_filter: Optional[Callable[[TaxCategory], bool]] = None,
) -> int:
    """Sum inclusive amounts of lines matching the filter (taxable lines by default)."""
    return sum(line.amount for line in _filtered(lines, category_filter))


def total_tax(
    lines: Iterable[JournalLine],
    category_filter: Optional[Callable[[TaxCategory], bool]] = None,
) -> int:
    """Sum per-line tax amounts of lines matching the filter."""
    return sum(
        tax_amount(line.amount, tax_rate(line.tax_category))
        for line in _filtered(lines, category_filter)
    )


@dataclass
class TaxBucket:
    """Inclusive, exclusive and tax subtotals of one category."""

    tax_included: int = 0
    tax_excluded: int = 0
    tax: int = 0

    def add(self, amount: int, rate: int) -> None:
        self.tax_included += amount
        self.tax_excluded += tax_excluded(amount, rate)
        self.tax += tax_amount(amount, rate)


@dataclass
class TaxSummary:
    """Per-category consumption tax totals over a set of lines."""

    sales_10: TaxBucket
    sales_8: TaxBucket
    purchase_10: TaxBucket
    purchase_8: TaxBucket
    exempt_sales: int = 0
    exempt_purchases: int = 0
    out_of_scope_sales: int = 0
    out_of_scope_purchases: int = 0

    @property
    def total_sales_tax(self) -> int:
        return self.sales_10.tax + self.sales_8.tax

    @property
    def total_purchase_tax(self) -> int:
        return self.purchase_10.tax + self.purchase_8.tax

    @property
    def net_tax_payable(self) -> int:
        return self.total_sales_tax - self.total_purchase_tax

    def bucket(self, category: TaxCategory) -> TaxBucket:
        """Return the bucket of a taxable category."""
        return {
            TaxCategory.SALES_10: self.sales_10,
            TaxCategory.SALES_8: self.sales_8,
            TaxCategory.PURCHASE_10: self.purchase_10,
            TaxCategory.PURCHASE_8: self.purchase_8,
        }[TaxCategory(category)]


def calculate_tax_summary(lines: Iterable[JournalLine]) -> TaxSummary:
    """Aggregate consumption tax per category across journal lines.

    Lines without a tax category are ignored. Exempt and out-of-scope lines are
    classified as sales when on the credit side and purchases otherwise; they
    never contribute to the net tax figure.
    """
    summary = TaxSummary(
        sales_10=TaxBucket(),
        sales_8=TaxBucket(),
        purchase_10=TaxBucket(),
        purchase_8=TaxBucket(),
    )

    for line in lines:
        category = line.tax_category
        if category is None:
            continue

        if is_taxable(category):
            summary.bucket(category).add(line.amount, tax_rate(category))
        elif category == TaxCategory.EXEMPT:
            if line.side == Side.CREDIT:
                summary.exempt_sales += line.amount
            else:
                summary.exempt_purchases += line.amount
        elif category == TaxCategory.OUT_OF_SCOPE:
            if line.side == Side.CREDIT:
                summary.out_of_scope_sales += line.amount
            else:
                summary.out_of_scope_purchases += line.amount

    return summary


class BusinessCategory(str, Enum):
    """Business classes of the simplified taxation system."""

    WHOLESALE = "wholesale"
    RETAIL = "retail"
    MANUFACTURING = "manufacturing"
    OTHER = "other"
    SERVICES = "services"
    REAL_ESTATE = "realestate"


DEEMED_PURCHASE_RATES: dict[BusinessCategory, int] = {
    BusinessCategory.WHOLESALE: 90,
    BusinessCategory.RETAIL: 80,
    BusinessCategory.MANUFACTURING: 70,
    BusinessCategory.OTHER: 60,
    BusinessCategory.SERVICES: 50,
    BusinessCategory.REAL_ESTATE: 40,
}


@dataclass(frozen=True)
class SimplifiedTax:
    sales_tax: int
    deemed_purchase_tax: int
    net_tax: int


def simplified_tax(
    sales_tax_included: int, business_category: BusinessCategory
) -> SimplifiedTax:
    """Compute tax payable under simplified taxation (standard rate sales)."""
    sales_tax = tax_amount(sales_tax_included, 10)
    deemed_rate = DEEMED_PURCHASE_RATES[BusinessCategory(business_category)]
    deemed_purchase_tax = sales_tax * deemed_rate // 100
    return SimplifiedTax(
        sales_tax=sales_tax,
        deemed_purchase_tax=deemed_purchase_tax,
        net_tax=sales_tax - deemed_purchase_tax,
    )


def is_exempt_business(taxable_sales: int) -> bool:
    """Return True if base-period taxable sales keep the business tax-exempt."""
    return taxable_sales <= EXEMPT_BUSINESS_THRESHOLD


def can_use_simplified_tax(taxable_sales: int) -> bool:
    return taxable_sales <= SIMPLIFIED_TAX_THRESHOLD
