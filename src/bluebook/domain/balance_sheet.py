"""Balance sheet."""

from dataclasses import dataclass
from typing import Iterable, Sequence

from bluebook.domain.balances import account_map, aggregate_balances
from bluebook.domain.entities import Account, AccountType, JournalEntry
from bluebook.domain.profit_loss import StatementRow, sort_rows

FIXED_ASSET_CODES = frozenset(
    {
        "1014",  # buildings
        "1015",  # building fixtures
        "1016",  # machinery
        "1017",  # vehicles
        "1018",  # tools and equipment
        "1019",  # land
        "1020",  # software
        "1021",  # deposits and guarantees
    }
)

FIXED_LIABILITY_CODES = frozenset({"2003"})  # long-term borrowings


@dataclass(frozen=True)
class BalanceSheet:
    fiscal_year: int
    current_assets: tuple[StatementRow, ...]
    fixed_assets: tuple[StatementRow, ...]
    current_liabilities: tuple[StatementRow, ...]
    fixed_liabilities: tuple[StatementRow, ...]
    equity: tuple[StatementRow, ...]
    total_current_assets: int
    total_fixed_assets: int
    total_assets: int
    total_current_liabilities: int
    total_fixed_liabilities: int
    total_liabilities: int
    retained_earnings: int
    total_equity: int
    total_liabilities_and_equity: int

    @property
    def is_balanced(self) -> bool:
        return self.total_assets == self.total_liabilities_and_equity


def generate_balance_sheet(
    entries: Iterable[JournalEntry],
    accounts: Sequence[Account],
    fiscal_year: int,
    retained_earnings: int = 0,
) -> BalanceSheet:
    """Classify asset, liability and equity balances into a balance sheet.

    Balances keep their sign, so an overdrawn asset shows as negative.

    Args:
        entries: Journal entries of the fiscal year
        accounts: Chart of accounts
        fiscal_year: Year the statement is for
        retained_earnings: Net income of the year, usually taken from the
            profit and loss statement

    Returns:
        BalanceSheet; zero-balance accounts are omitted
    """
    accounts_by_code = account_map(accounts)
    balances = aggregate_balances(
        entries,
        accounts,
        types=(AccountType.ASSET, AccountType.LIABILITY, AccountType.EQUITY),
    )

    current_assets: list[StatementRow] = []
    fixed_assets: list[StatementRow] = []
    current_liabilities: list[StatementRow] = []
    fixed_liabilities: list[StatementRow] = []
    equity: list[StatementRow] = []

    for code, balance in balances.items():
        if balance == 0:
            continue
        account = accounts_by_code[code]
        row = StatementRow(account_code=code, account_name=account.name, amount=balance)

        if account.type == AccountType.ASSET:
            target = fixed_assets if code in FIXED_ASSET_CODES else current_assets
        elif account.type == AccountType.LIABILITY:
            target = fixed_liabilities if code in FIXED_LIABILITY_CODES else current_liabilities
        else:
            target = equity
        target.append(row)

    total_current_assets = sum(row.amount for row in current_assets)
    total_fixed_assets = sum(row.amount for row in fixed_assets)
    total_current_liabilities = sum(row.amount for row in current_liabilities)
    total_fixed_liabilities = sum(row.amount for row in fixed_liabilities)
    total_liabilities = total_current_liabilities + total_fixed_liabilities
    total_equity = sum(row.amount for row in equity) + retained_earnings

    return BalanceSheet(
        fiscal_year=fiscal_year,
        current_assets=sort_rows(current_assets),
        fixed_assets=sort_rows(fixed_assets),
        current_liabilities=sort_rows(current_liabilities),
        fixed_liabilities=sort_rows(fixed_liabilities),
        equity=sort_rows(equity),
        total_current_assets=total_current_assets,
        total_fixed_assets=total_fixed_assets,
        total_assets=total_current_assets + total_fixed_assets,
        total_current_liabilities=total_current_liabilities,
        total_fixed_liabilities=total_fixed_liabilities,
        total_liabilities=total_liabilities,
        retained_earnings=retained_earnings,
        total_equity=total_equity,
        total_liabilities_and_equity=total_liabilities + total_equity,
    )
