"""Month-bucketed totals for page 2 of the filing document."""

from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from bluebook.domain.account_codes import PURCHASES_CODE, SALES_CODE
from bluebook.domain.balances import account_map, signed_delta
from bluebook.domain.entities import Account, AccountType, JournalEntry

MISC_INCOME_CODES = frozenset({"4002", "4003"})  # miscellaneous income, interest received
RENT_CODES = frozenset({"5017"})
SALARY_CODES = frozenset({"5014"})

MONTHS = tuple(range(1, 13))

_PL_TYPES = (AccountType.REVENUE, AccountType.EXPENSE)


@dataclass(frozen=True)
class MonthlySales:
    month: int
    sales: int
    purchases: int


@dataclass(frozen=True)
class MonthlyTotals:
    month: int
    sales: int
    purchases: int
    expenses: int


@dataclass(frozen=True)
class AccountYearlyTotal:
    account_code: str
    account_name: str
    monthly_amounts: tuple[int, ...]
    total: int


@dataclass(frozen=True)
class RentDetail:
    """Rent payee details, entered by the filer rather than derived from entries."""

    property_type: str
    landlord_address: str
    landlord_name: str
    rent_amount: int
    business_ratio: int = 100
    deposit: int = 0


@dataclass(frozen=True)
class Page2:
    monthly_sales: tuple[MonthlySales, ...]
    monthly_sales_total: int
    monthly_purchases_total: int
    misc_income: int
    salary_total: int
    rent_total: int
    rent_details: tuple[RentDetail, ...] = field(default_factory=tuple)
    personal_consumption: int = 0


def _pl_deltas(entries: Iterable[JournalEntry], accounts: Sequence[Account]):
    """Yield (month, account, signed amount) for each revenue or expense line."""
    accounts_by_code = account_map(accounts)
    for entry in entries:
        for line in entry.lines:
            account = accounts_by_code.get(line.account_code)
            if account is None or account.type not in _PL_TYPES:
                continue
            yield entry.date.month, account, signed_delta(account.type, line.side, line.amount)


def monthly_sales(entries: Iterable[JournalEntry], accounts: Sequence[Account]) -> list[MonthlySales]:
    """Return sales and purchases for each calendar month, January first."""
    sales = dict.fromkeys(MONTHS, 0)
    purchases = dict.fromkeys(MONTHS, 0)

    for month, account, amount in _pl_deltas(entries, accounts):
        if account.code == SALES_CODE:
            sales[month] += amount
        elif account.code == PURCHASES_CODE:
            purchases[month] += amount

    return [
        MonthlySales(month=month, sales=abs(sales[month]), purchases=abs(purchases[month]))
        for month in MONTHS
    ]


def monthly_totals(entries: Iterable[JournalEntry], accounts: Sequence[Account]) -> list[MonthlyTotals]:
    """Return sales, purchases and all other expenses for each month."""
    buckets = {month: [0, 0, 0] for month in MONTHS}

    for month, account, amount in _pl_deltas(entries, accounts):
        if account.code == SALES_CODE:
            buckets[month][0] += amount
        elif account.code == PURCHASES_CODE:
            buckets[month][1] += amount
        elif account.type == AccountType.EXPENSE:
            buckets[month][2] += amount

    return [
        MonthlyTotals(
            month=month,
            sales=abs(buckets[month][0]),
            purchases=abs(buckets[month][1]),
            expenses=abs(buckets[month][2]),
        )
        for month in MONTHS
    ]


def account_yearly_totals(
    entries: Iterable[JournalEntry],
    accounts: Sequence[Account],
    account_type: Optional[AccountType] = None,
) -> list[AccountYearlyTotal]:
    """Return monthly amounts per revenue or expense account.

    Args:
        entries: Journal entries of the fiscal year
        accounts: Chart of accounts
        account_type: Restrict to revenue or expense accounts

    Returns:
        Totals sorted by account code; accounts netting to zero are omitted
    """
    monthly: dict[str, list[int]] = {}
    names: dict[str, str] = {}

    for month, account, amount in _pl_deltas(entries, accounts):
        if account_type is not None and account.type != account_type:
            continue
        amounts = monthly.setdefault(account.code, [0] * 12)
        amounts[month - 1] += amount
        names[account.code] = account.name

    totals = []
    for code in sorted(monthly):
        amounts = monthly[code]
        total = abs(sum(amounts))
        if total == 0:
            continue
        totals.append(
            AccountYearlyTotal(
                account_code=code,
                account_name=names[code],
                monthly_amounts=tuple(abs(amount) for amount in amounts),
                total=total,
            )
        )
    return totals


def total_for_codes(
    entries: Iterable[JournalEntry], accounts: Sequence[Account], codes: Iterable[str]
) -> int:
    """Return the absolute yearly balance of a group of revenue or expense accounts."""
    wanted = frozenset(codes)
    return abs(
        sum(amount for _, account, amount in _pl_deltas(entries, accounts) if account.code in wanted)
    )


def misc_income_total(entries: Iterable[JournalEntry], accounts: Sequence[Account]) -> int:
    return total_for_codes(entries, accounts, MISC_INCOME_CODES)


def rent_total(entries: Iterable[JournalEntry], accounts: Sequence[Account]) -> int:
    return total_for_codes(entries, accounts, RENT_CODES)


def salary_total(entries: Iterable[JournalEntry], accounts: Sequence[Account]) -> int:
    return total_for_codes(entries, accounts, SALARY_CODES)


def generate_page2(
    entries: Sequence[JournalEntry],
    accounts: Sequence[Account],
    rent_details: Iterable[RentDetail] = (),
) -> Page2:
    """Assemble page 2 of the filing document.

    Payee details for rent cannot be derived from entries and are passed in.
    """
    sales = monthly_sales(entries, accounts)
    return Page2(
        monthly_sales=tuple(sales),
        monthly_sales_total=sum(row.sales for row in sales),
        monthly_purchases_total=sum(row.purchases for row in sales),
        misc_income=misc_income_total(entries, accounts),
        salary_total=salary_total(entries, accounts),
        rent_total=rent_total(entries, accounts),
        rent_details=tuple(rent_details),
    )
