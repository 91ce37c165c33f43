"""Profit and loss statement."""

from dataclasses import dataclass
from typing import Iterable, Sequence

from bluebook.domain.account_codes import PURCHASES_CODE, SALES_CODE
from bluebook.domain.balances import account_map, aggregate_balances
from bluebook.domain.entities import Account, AccountType, JournalEntry

SALES_REVENUE_CODES = frozenset({SALES_CODE})
COST_OF_SALES_CODES = frozenset({PURCHASES_CODE})


@dataclass(frozen=True)
class StatementRow:
    """One account line of a financial statement."""

    account_code: str
    account_name: str
    amount: int


@dataclass(frozen=True)
class ProfitLoss:
    fiscal_year: int
    sales_revenue: tuple[StatementRow, ...]
    other_revenue: tuple[StatementRow, ...]
    cost_of_sales: tuple[StatementRow, ...]
    operating_expenses: tuple[StatementRow, ...]
    total_sales_revenue: int
    total_other_revenue: int
    total_revenue: int
    total_cost_of_sales: int
    total_operating_expenses: int
    total_expenses: int
    gross_profit: int
    operating_income: int
    net_income: int


def sort_rows(rows: list[StatementRow]) -> tuple[StatementRow, ...]:
    return tuple(sorted(rows, key=lambda row: row.account_code))


def generate_profit_loss(
    entries: Iterable[JournalEntry], accounts: Sequence[Account], fiscal_year: int
) -> ProfitLoss:
    """Classify revenue and expense balances into a profit and loss statement.

    Amounts are the absolute value of each account's balance; accounts with
    a zero balance are dropped.
    """
    accounts_by_code = account_map(accounts)
    balances = aggregate_balances(
        entries, accounts, types=(AccountType.REVENUE, AccountType.EXPENSE)
    )

    sales_revenue: list[StatementRow] = []
    other_revenue: list[StatementRow] = []
    cost_of_sales: list[StatementRow] = []
    operating_expenses: list[StatementRow] = []

    for code, balance in balances.items():
        if balance == 0:
            continue
        account = accounts_by_code[code]
        row = StatementRow(account_code=code, account_name=account.name, amount=abs(balance))

        if account.type == AccountType.REVENUE:
            target = sales_revenue if code in SALES_REVENUE_CODES else other_revenue
        else:
            target = cost_of_sales if code in COST_OF_SALES_CODES else operating_expenses
        target.append(row)

    total_sales_revenue = sum(row.amount for row in sales_revenue)
    total_other_revenue = sum(row.amount for row in other_revenue)
    total_cost_of_sales = sum(row.amount for row in cost_of_sales)
    total_operating_expenses = sum(row.amount for row in operating_expenses)

    gross_profit = total_sales_revenue - total_cost_of_sales
    operating_income = gross_profit - total_operating_expenses

    return ProfitLoss(
        fiscal_year=fiscal_year,
        sales_revenue=sort_rows(sales_revenue),
        other_revenue=sort_rows(other_revenue),
        cost_of_sales=sort_rows(cost_of_sales),
        operating_expenses=sort_rows(operating_expenses),
        total_sales_revenue=total_sales_revenue,
        total_other_revenue=total_other_revenue,
        total_revenue=total_sales_revenue + total_other_revenue,
        total_cost_of_sales=total_cost_of_sales,
        total_operating_expenses=total_operating_expenses,
        total_expenses=total_cost_of_sales + total_operating_expenses,
        gross_profit=gross_profit,
        operating_income=operating_income,
        net_income=operating_income + total_other_revenue,
    )
