"""Blue-return financial statement (general use, four pages).

Page 1 is the profit and loss statement, page 2 the monthly detail, page 3
the depreciation schedule and page 4 the balance sheet.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from bluebook.domain.account_codes import OWNER_DEPOSIT_CODE, OWNER_WITHDRAWAL_CODE
from bluebook.domain.balance_sheet import BalanceSheet
from bluebook.domain.depreciation import DepreciationSchedule, generate_depreciation_schedule
from bluebook.domain.entities import Account, BusinessInfo, FixedAsset, JournalEntry, Side
from bluebook.domain.monthly_summary import Page2, RentDetail, generate_page2
from bluebook.domain.profit_loss import ProfitLoss, StatementRow

# Special deduction tiers in units of ten thousand yen
DEDUCTION_TIERS = (65, 55, 10)
DEFAULT_DEDUCTION_TIER = 65
_DEDUCTION_UNIT = 10_000

_OWNER_CODES = frozenset({OWNER_WITHDRAWAL_CODE, OWNER_DEPOSIT_CODE})


@dataclass(frozen=True)
class OwnerTransactions:
    withdrawal: int
    deposit: int


def owner_transactions(entries: Iterable[JournalEntry]) -> OwnerTransactions:
    """Sum owner withdrawals (debits to 3002) and owner deposits (credits to 3003)."""
    withdrawal = 0
    deposit = 0
    for entry in entries:
        for line in entry.lines:
            if line.account_code == OWNER_WITHDRAWAL_CODE and line.side == Side.DEBIT:
                withdrawal += line.amount
            elif line.account_code == OWNER_DEPOSIT_CODE and line.side == Side.CREDIT:
                deposit += line.amount
    return OwnerTransactions(withdrawal=withdrawal, deposit=deposit)


@dataclass(frozen=True)
class Page1:
    sales_revenue: int
    sales_total: int
    inventory_start: int
    purchases: int
    inventory_end: int
    cost_of_sales: int
    gross_profit: int
    expenses: tuple[StatementRow, ...]
    expenses_total: int
    operating_profit: int
    special_deduction: int
    income_before_deduction: int
    blue_return_deduction: int
    business_income: int


def generate_page1(
    profit_loss: ProfitLoss,
    inventory_start: int = 0,
    inventory_end: int = 0,
    special_deduction: int = 0,
    deduction_tier: int = DEFAULT_DEDUCTION_TIER,
) -> Page1:
    """Derive page 1 from the profit and loss statement.

    Args:
        profit_loss: Statement of the fiscal year
        inventory_start: Inventory at the start of the year
        inventory_end: Inventory at the end of the year
        special_deduction: Salaries paid to family employees
        deduction_tier: Blue-return special deduction in ten thousand yen
            (65, 55 or 10)

    Returns:
        Page1; business income is floored at zero
    """
    sales_total = profit_loss.total_sales_revenue + profit_loss.total_other_revenue
    purchases = profit_loss.total_cost_of_sales
    cost_of_sales = inventory_start + purchases - inventory_end
    gross_profit = sales_total - cost_of_sales
    expenses_total = profit_loss.total_operating_expenses
    operating_profit = gross_profit - expenses_total
    income_before_deduction = operating_profit - special_deduction
    blue_return_deduction = deduction_tier * _DEDUCTION_UNIT

    return Page1(
        sales_revenue=profit_loss.total_sales_revenue,
        sales_total=sales_total,
        inventory_start=inventory_start,
        purchases=purchases,
        inventory_end=inventory_end,
        cost_of_sales=cost_of_sales,
        gross_profit=gross_profit,
        expenses=profit_loss.operating_expenses,
        expenses_total=expenses_total,
        operating_profit=operating_profit,
        special_deduction=special_deduction,
        income_before_deduction=income_before_deduction,
        blue_return_deduction=blue_return_deduction,
        business_income=max(0, income_before_deduction - blue_return_deduction),
    )


@dataclass(frozen=True)
class BalanceDetailRow:
    account_code: str
    account_name: str
    beginning_balance: int
    ending_balance: int


@dataclass(frozen=True)
class Page4:
    fiscal_year: int
    current_assets: tuple[BalanceDetailRow, ...]
    fixed_assets: tuple[BalanceDetailRow, ...]
    current_liabilities: tuple[BalanceDetailRow, ...]
    fixed_liabilities: tuple[BalanceDetailRow, ...]
    owner_withdrawal: int
    owner_deposit: int
    assets_total_beginning: int
    assets_total_ending: int
    liabilities_total_beginning: int
    liabilities_total_ending: int
    capital_beginning: int
    capital_ending: int
    net_income: int

    @property
    def left_total(self) -> int:
        """Assets plus owner withdrawals."""
        return self.assets_total_ending + self.owner_withdrawal

    @property
    def right_total(self) -> int:
        """Liabilities, owner deposits, capital and income before the special deduction."""
        return (
            self.liabilities_total_ending
            + self.owner_deposit
            + self.capital_ending
            + self.net_income
        )

    @property
    def is_balanced(self) -> bool:
        return self.left_total == self.right_total


def _merge(
    beginning: Sequence[StatementRow], ending: Sequence[StatementRow]
) -> tuple[BalanceDetailRow, ...]:
    names: dict[str, str] = {}
    opening: dict[str, int] = {}
    closing: dict[str, int] = {}
    for row in beginning:
        names[row.account_code] = row.account_name
        opening[row.account_code] = row.amount
    for row in ending:
        names[row.account_code] = row.account_name
        closing[row.account_code] = row.amount

    return tuple(
        BalanceDetailRow(
            account_code=code,
            account_name=names[code],
            beginning_balance=opening.get(code, 0),
            ending_balance=closing.get(code, 0),
        )
        for code in sorted(names)
    )


def _capital(balance_sheet: BalanceSheet) -> int:
    # Owner accounts are reported on their own lines, not as capital
    return sum(row.amount for row in balance_sheet.equity if row.account_code not in _OWNER_CODES)


def generate_page4(
    balance_sheet: BalanceSheet,
    beginning_balance_sheet: Optional[BalanceSheet] = None,
    owner: Optional[OwnerTransactions] = None,
) -> Page4:
    """Derive page 4 from the year-end and, if known, the opening balance sheet.

    The statutory form balances as ``assets + owner withdrawals ==
    liabilities + owner deposits + capital + income``; owner accounts are
    shown as gross movements rather than as equity balances.
    """
    owner = owner or OwnerTransactions(withdrawal=0, deposit=0)
    opening = beginning_balance_sheet

    current_assets = _merge(opening.current_assets if opening else (), balance_sheet.current_assets)
    fixed_assets = _merge(opening.fixed_assets if opening else (), balance_sheet.fixed_assets)
    current_liabilities = _merge(
        opening.current_liabilities if opening else (), balance_sheet.current_liabilities
    )
    fixed_liabilities = _merge(
        opening.fixed_liabilities if opening else (), balance_sheet.fixed_liabilities
    )

    def total(rows: tuple[BalanceDetailRow, ...], ending: bool) -> int:
        return sum(row.ending_balance if ending else row.beginning_balance for row in rows)

    return Page4(
        fiscal_year=balance_sheet.fiscal_year,
        current_assets=current_assets,
        fixed_assets=fixed_assets,
        current_liabilities=current_liabilities,
        fixed_liabilities=fixed_liabilities,
        owner_withdrawal=owner.withdrawal,
        owner_deposit=owner.deposit,
        assets_total_beginning=total(current_assets, False) + total(fixed_assets, False),
        assets_total_ending=total(current_assets, True) + total(fixed_assets, True),
        liabilities_total_beginning=(
            total(current_liabilities, False) + total(fixed_liabilities, False)
        ),
        liabilities_total_ending=total(current_liabilities, True) + total(fixed_liabilities, True),
        capital_beginning=_capital(beginning_balance_sheet or balance_sheet),
        capital_ending=_capital(balance_sheet),
        net_income=balance_sheet.retained_earnings,
    )


@dataclass(frozen=True)
class BlueReturn:
    fiscal_year: int
    business_info: BusinessInfo
    page1: Page1
    page2: Page2
    page3: DepreciationSchedule
    page4: Page4


def compose_blue_return(
    fiscal_year: int,
    entries: Sequence[JournalEntry],
    accounts: Sequence[Account],
    profit_loss: ProfitLoss,
    balance_sheet: BalanceSheet,
    business_info: BusinessInfo,
    fixed_assets: Iterable[FixedAsset] = (),
    beginning_balance_sheet: Optional[BalanceSheet] = None,
    inventory_start: int = 0,
    inventory_end: int = 0,
    special_deduction: int = 0,
    deduction_tier: int = DEFAULT_DEDUCTION_TIER,
    rent_details: Iterable[RentDetail] = (),
) -> BlueReturn:
    """Assemble all four pages of the filing document."""
    return BlueReturn(
        fiscal_year=fiscal_year,
        business_info=business_info,
        page1=generate_page1(
            profit_loss,
            inventory_start=inventory_start,
            inventory_end=inventory_end,
            special_deduction=special_deduction,
            deduction_tier=deduction_tier,
        ),
        page2=generate_page2(entries, accounts, rent_details=rent_details),
        page3=generate_depreciation_schedule(fixed_assets, fiscal_year),
        page4=generate_page4(
            balance_sheet, beginning_balance_sheet, owner=owner_transactions(entries)
        ),
    )


def validate_blue_return(data: BlueReturn) -> list[str]:
    """Cross-check the pages of a composed document.

    Returns:
        One message per inconsistency; empty when the document is consistent
    """
    errors = []

    if data.page2.monthly_sales_total != data.page1.sales_revenue:
        errors.append(
            f"Monthly sales total ({data.page2.monthly_sales_total}) does not match "
            f"sales on the profit and loss statement ({data.page1.sales_revenue})"
        )

    if not data.page4.is_balanced:
        errors.append(
            f"Balance sheet does not balance: {data.page4.left_total} "
            f"against {data.page4.right_total}"
        )

    valid_deductions = [tier * _DEDUCTION_UNIT for tier in DEDUCTION_TIERS]
    if data.page1.blue_return_deduction not in valid_deductions:
        errors.append(
            f"Blue-return special deduction ({data.page1.blue_return_deduction}) "
            "must be 650000, 550000 or 100000"
        )

    if data.page1.inventory_start < 0 or data.page1.inventory_end < 0:
        errors.append("Inventory amounts cannot be negative")

    if data.page1.special_deduction < 0:
        errors.append("Family employee salaries cannot be negative")

    return errors
