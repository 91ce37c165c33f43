"""Report domain service.

Loads one fiscal year of data through the database and hands it to the
pure report generators.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from bluebook.database.base import Database
from bluebook.domain.balance_sheet import BalanceSheet, generate_balance_sheet
from bluebook.domain.blue_return import (
    DEFAULT_DEDUCTION_TIER,
    BlueReturn,
    compose_blue_return,
)
from bluebook.domain.consumption_tax import ConsumptionTaxReport, generate_consumption_tax
from bluebook.domain.depreciation import DepreciationSchedule, generate_depreciation_schedule
from bluebook.domain.entities import Account, BusinessInfo, JournalEntry
from bluebook.domain.fiscal_year import fiscal_year_range
from bluebook.domain.ledger import Ledger, generate_ledger, used_accounts
from bluebook.domain.monthly_summary import (
    AccountYearlyTotal,
    MonthlySales,
    MonthlyTotals,
    RentDetail,
    account_yearly_totals,
    monthly_sales,
    monthly_totals,
)
from bluebook.domain.profit_loss import ProfitLoss, generate_profit_loss
from bluebook.domain.trial_balance import (
    GroupedTrialBalance,
    TrialBalance,
    generate_trial_balance,
    group_trial_balance,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonthlySummary:
    """Month-by-month view of a fiscal year."""

    fiscal_year: int
    monthly_sales: list[MonthlySales]
    monthly_totals: list[MonthlyTotals]
    account_totals: list[AccountYearlyTotal]


class ReportService:
    """Service that builds reports for a fiscal year."""

    def __init__(self, db: Database):
        """Initialize report service.

        Args:
            db: Database instance
        """
        self.db = db

    def _entries(self, fiscal_year: int) -> list[JournalEntry]:
        start, end = fiscal_year_range(fiscal_year)
        return self.db.list_journal_entries(start_date=start, end_date=end)

    def _accounts(self) -> list[Account]:
        return self.db.list_accounts()

    def trial_balance(self, fiscal_year: int) -> TrialBalance:
        """Build the trial balance of a fiscal year."""
        return generate_trial_balance(self._entries(fiscal_year), self._accounts())

    def grouped_trial_balance(self, fiscal_year: int) -> GroupedTrialBalance:
        """Build the trial balance of a fiscal year grouped by account type."""
        return group_trial_balance(self.trial_balance(fiscal_year))

    def ledger(self, fiscal_year: int, account_code: str) -> Ledger:
        """Build the general ledger of one account for a fiscal year.

        Raises:
            NotFoundError: If the account code is not in the chart of accounts
        """
        return generate_ledger(self._entries(fiscal_year), account_code, self._accounts())

    def ledger_accounts(self, fiscal_year: int) -> list[Account]:
        """Return the accounts used by entries of a fiscal year."""
        return used_accounts(self._entries(fiscal_year), self._accounts())

    def profit_loss(self, fiscal_year: int) -> ProfitLoss:
        """Build the profit and loss statement of a fiscal year."""
        return generate_profit_loss(self._entries(fiscal_year), self._accounts(), fiscal_year)

    def balance_sheet(self, fiscal_year: int) -> BalanceSheet:
        """Build the balance sheet of a fiscal year, carrying the year's net income."""
        entries = self._entries(fiscal_year)
        accounts = self._accounts()
        net_income = generate_profit_loss(entries, accounts, fiscal_year).net_income
        return generate_balance_sheet(entries, accounts, fiscal_year, retained_earnings=net_income)

    def consumption_tax(self, fiscal_year: int) -> ConsumptionTaxReport:
        """Summarize consumption tax of a fiscal year."""
        return generate_consumption_tax(self._entries(fiscal_year), fiscal_year)

    def depreciation(self, fiscal_year: int) -> DepreciationSchedule:
        """Build the depreciation schedule of a fiscal year."""
        return generate_depreciation_schedule(self.db.list_fixed_assets(), fiscal_year)

    def monthly_summary(self, fiscal_year: int) -> MonthlySummary:
        """Build month-bucketed totals of a fiscal year."""
        entries = self._entries(fiscal_year)
        accounts = self._accounts()
        return MonthlySummary(
            fiscal_year=fiscal_year,
            monthly_sales=monthly_sales(entries, accounts),
            monthly_totals=monthly_totals(entries, accounts),
            account_totals=account_yearly_totals(entries, accounts),
        )

    def blue_return(
        self,
        fiscal_year: int,
        business_info: BusinessInfo,
        inventory_start: int = 0,
        inventory_end: int = 0,
        special_deduction: int = 0,
        deduction_tier: int = DEFAULT_DEDUCTION_TIER,
        rent_details: Iterable[RentDetail] = (),
    ) -> BlueReturn:
        """Compose the four-page filing document of a fiscal year.

        The previous year's balance sheet supplies the beginning balances
        when that year has entries.
        """
        entries = self._entries(fiscal_year)
        accounts = self._accounts()

        beginning: Optional[BalanceSheet] = None
        if self._entries(fiscal_year - 1):
            beginning = self.balance_sheet(fiscal_year - 1)
        else:
            logger.debug("No entries for %d, beginning balances are empty", fiscal_year - 1)

        return compose_blue_return(
            fiscal_year=fiscal_year,
            entries=entries,
            accounts=accounts,
            profit_loss=self.profit_loss(fiscal_year),
            balance_sheet=self.balance_sheet(fiscal_year),
            business_info=business_info,
            fixed_assets=self.db.list_fixed_assets(),
            beginning_balance_sheet=beginning,
            inventory_start=inventory_start,
            inventory_end=inventory_end,
            special_deduction=special_deduction,
            deduction_tier=deduction_tier,
            rent_details=rent_details,
        )
