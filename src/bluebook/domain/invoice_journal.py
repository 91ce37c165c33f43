"""Invoice amounts and the journal entries an invoice produces.

Issuing an invoice books the receivable against sales, one sales line per
tax rate; collecting it moves the receivable to a bank account. Item
amounts and consumption tax are truncated to whole yen.
"""

import calendar
import math
import uuid
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Union

from bluebook.domain.account_codes import (
    ACCOUNTS_RECEIVABLE_CODE,
    ORDINARY_DEPOSIT_CODE,
    SALES_CODE,
)
from bluebook.domain.entities import EvidenceStatus, JournalDraft, JournalLine, Side, TaxCategory

_SALES_CATEGORY = {10: TaxCategory.SALES_10, 8: TaxCategory.SALES_8}


def calculate_item_amount(quantity: Union[int, Decimal], unit_price: int) -> int:
    """Amount of one invoice line, fractions of a yen truncated."""
    return math.floor(Decimal(quantity) * unit_price)


@dataclass(frozen=True)
class InvoiceItem:
    description: str
    quantity: Decimal
    unit_price: int
    tax_rate: int = 10
    # Free-form, e.g. "1月分" or "1/1〜1/31"
    period: str = ""

    @property
    def amount(self) -> int:
        return calculate_item_amount(self.quantity, self.unit_price)


@dataclass(frozen=True)
class TaxBreakdown:
    taxable_10: int = 0
    tax_10: int = 0
    taxable_8: int = 0
    tax_8: int = 0


@dataclass(frozen=True)
class InvoiceAmounts:
    subtotal: int
    tax_amount: int
    total: int
    breakdown: TaxBreakdown


def calculate_invoice_amounts(items: Iterable[InvoiceItem]) -> InvoiceAmounts:
    """Sum invoice lines per tax rate and compute the consumption tax.

    Tax is computed once per rate on the rate's tax-exclusive subtotal and
    truncated. Lines with a rate other than 10 or 8 are ignored.
    """
    taxable_10 = 0
    taxable_8 = 0
    for item in items:
        if item.tax_rate == 10:
            taxable_10 += item.amount
        elif item.tax_rate == 8:
            taxable_8 += item.amount

    tax_10 = taxable_10 * 10 // 100
    tax_8 = taxable_8 * 8 // 100

    subtotal = taxable_10 + taxable_8
    tax_amount = tax_10 + tax_8
    return InvoiceAmounts(
        subtotal=subtotal,
        tax_amount=tax_amount,
        total=subtotal + tax_amount,
        breakdown=TaxBreakdown(taxable_10=taxable_10, tax_10=tax_10, taxable_8=taxable_8, tax_8=tax_8),
    )


def month_end(day: date) -> date:
    """Last day of the month containing ``day``; the default payment due date."""
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


@dataclass(frozen=True)
class Invoice:
    invoice_number: str
    issue_date: date
    vendor: str
    items: tuple[InvoiceItem, ...]
    due_date: Optional[date] = None
    note: Optional[str] = None
    amounts: InvoiceAmounts = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "amounts", calculate_invoice_amounts(self.items))
        if self.due_date is None:
            object.__setattr__(self, "due_date", month_end(self.issue_date))


def _line(side: Side, account_code: str, amount: int, tax_category: TaxCategory) -> JournalLine:
    return JournalLine(
        id=str(uuid.uuid4()),
        side=side,
        account_code=account_code,
        amount=amount,
        tax_category=tax_category,
    )


def generate_sales_journal(invoice: Invoice) -> JournalDraft:
    """Book an issued invoice: debit receivables, credit sales per tax rate.

    The receivable is the tax-inclusive total. Each rate with a taxable
    amount gets its own tax-inclusive sales line.
    """
    amounts = invoice.amounts
    breakdown = amounts.breakdown
    lines = [_line(Side.DEBIT, ACCOUNTS_RECEIVABLE_CODE, amounts.total, TaxCategory.NA)]

    per_rate = (
        (10, breakdown.taxable_10, breakdown.tax_10),
        (8, breakdown.taxable_8, breakdown.tax_8),
    )
    for rate, taxable, tax in per_rate:
        if taxable > 0:
            lines.append(_line(Side.CREDIT, SALES_CODE, taxable + tax, _SALES_CATEGORY[rate]))

    return JournalDraft(
        date=invoice.issue_date,
        lines=tuple(lines),
        vendor=invoice.vendor,
        description=f"請求書 {invoice.invoice_number}",
        evidence_status=EvidenceStatus.DIGITAL,
    )


def generate_deposit_journal(
    invoice: Invoice,
    deposit_date: date,
    bank_account_code: str = ORDINARY_DEPOSIT_CODE,
) -> JournalDraft:
    """Book the payment of an invoice: debit the bank account, credit receivables."""
    total = invoice.amounts.total
    return JournalDraft(
        date=deposit_date,
        lines=(
            _line(Side.DEBIT, bank_account_code, total, TaxCategory.NA),
            _line(Side.CREDIT, ACCOUNTS_RECEIVABLE_CODE, total, TaxCategory.NA),
        ),
        vendor=invoice.vendor,
        description=f"入金 請求書 {invoice.invoice_number}",
        evidence_status=EvidenceStatus.NONE,
    )
