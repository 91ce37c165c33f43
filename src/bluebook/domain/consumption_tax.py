"""Consumption tax summary report."""

from dataclasses import dataclass
from typing import Iterable

from bluebook.domain.entities import TAX_CATEGORY_LABELS, JournalEntry, TaxCategory
from bluebook.domain.tax import TaxSummary, calculate_tax_summary


@dataclass(frozen=True)
class ConsumptionTaxRow:
    tax_category: TaxCategory
    label: str
    taxable_amount: int
    tax_amount: int


@dataclass(frozen=True)
class ConsumptionTaxReport:
    fiscal_year: int
    sales_rows: tuple[ConsumptionTaxRow, ...]
    purchase_rows: tuple[ConsumptionTaxRow, ...]
    total_taxable_sales: int
    total_sales_tax: int
    total_taxable_purchases: int
    total_purchase_tax: int
    net_tax_payable: int
    exempt_sales: int
    out_of_scope_sales: int
    exempt_purchases: int
    out_of_scope_purchases: int


def _rows(summary: TaxSummary, categories: tuple[TaxCategory, ...]) -> tuple[ConsumptionTaxRow, ...]:
    rows = []
    for category in categories:
        bucket = summary.bucket(category)
        if bucket.tax_included <= 0:
            continue
        rows.append(
            ConsumptionTaxRow(
                tax_category=category,
                label=TAX_CATEGORY_LABELS[category],
                taxable_amount=bucket.tax_excluded,
                tax_amount=bucket.tax,
            )
        )
    return tuple(rows)


def generate_consumption_tax(
    entries: Iterable[JournalEntry], fiscal_year: int
) -> ConsumptionTaxReport:
    """Summarize consumption tax over every line of the given entries."""
    summary = calculate_tax_summary(line for entry in entries for line in entry.lines)

    return ConsumptionTaxReport(
        fiscal_year=fiscal_year,
        sales_rows=_rows(summary, (TaxCategory.SALES_10, TaxCategory.SALES_8)),
        purchase_rows=_rows(summary, (TaxCategory.PURCHASE_10, TaxCategory.PURCHASE_8)),
        total_taxable_sales=summary.sales_10.tax_excluded + summary.sales_8.tax_excluded,
        total_sales_tax=summary.total_sales_tax,
        total_taxable_purchases=summary.purchase_10.tax_excluded + summary.purchase_8.tax_excluded,
        total_purchase_tax=summary.total_purchase_tax,
        net_tax_payable=summary.net_tax_payable,
        exempt_sales=summary.exempt_sales,
        out_of_scope_sales=summary.out_of_scope_sales,
        exempt_purchases=summary.exempt_purchases,
        out_of_scope_purchases=summary.out_of_scope_purchases,
    )
