"""Trial balance generation."""

from dataclasses import dataclass
from typing import Iterable, Sequence

from bluebook.domain.balances import account_map
from bluebook.domain.entities import (
    ACCOUNT_TYPE_LABELS,
    Account,
    AccountType,
    JournalEntry,
    Side,
)

TYPE_ORDER: tuple[AccountType, ...] = (
    AccountType.ASSET,
    AccountType.LIABILITY,
    AccountType.EQUITY,
    AccountType.REVENUE,
    AccountType.EXPENSE,
)


@dataclass(frozen=True)
class TrialBalanceRow:
    account_code: str
    account_name: str
    account_type: AccountType
    debit_total: int
    credit_total: int
    debit_balance: int
    credit_balance: int


@dataclass(frozen=True)
class TrialBalance:
    rows: tuple[TrialBalanceRow, ...]
    total_debit: int
    total_credit: int
    total_debit_balance: int
    total_credit_balance: int

    @property
    def is_balanced(self) -> bool:
        return self.total_debit == self.total_credit


@dataclass(frozen=True)
class TrialBalanceGroup:
    type: AccountType
    label: str
    rows: tuple[TrialBalanceRow, ...]
    subtotal_debit: int
    subtotal_credit: int
    subtotal_debit_balance: int
    subtotal_credit_balance: int


@dataclass(frozen=True)
class GroupedTrialBalance:
    groups: tuple[TrialBalanceGroup, ...]
    total_debit: int
    total_credit: int
    total_debit_balance: int
    total_credit_balance: int
    is_balanced: bool


def generate_trial_balance(
    entries: Iterable[JournalEntry], accounts: Sequence[Account]
) -> TrialBalance:
    """Build a trial balance from journal entries.

    Debit and credit totals are accumulated separately per account; the net
    lands in exactly one of the two balance columns. Codes missing from the
    chart of accounts are left out.
    """
    accounts_by_code = account_map(accounts)
    totals: dict[str, list[int]] = {}

    for entry in entries:
        for line in entry.lines:
            current = totals.setdefault(line.account_code, [0, 0])
            if line.side == Side.DEBIT:
                current[0] += line.amount
            else:
                current[1] += line.amount

    rows = []
    for code, (debit, credit) in totals.items():
        account = accounts_by_code.get(code)
        if account is None:
            continue
        net = debit - credit
        rows.append(
            TrialBalanceRow(
                account_code=code,
                account_name=account.name,
                account_type=account.type,
                debit_total=debit,
                credit_total=credit,
                debit_balance=max(net, 0),
                credit_balance=max(-net, 0),
            )
        )

    rows.sort(key=lambda row: row.account_code)

    return TrialBalance(
        rows=tuple(rows),
        total_debit=sum(row.debit_total for row in rows),
        total_credit=sum(row.credit_total for row in rows),
        total_debit_balance=sum(row.debit_balance for row in rows),
        total_credit_balance=sum(row.credit_balance for row in rows),
    )


def group_trial_balance(trial_balance: TrialBalance) -> GroupedTrialBalance:
    """Bucket trial balance rows by account type, omitting empty groups."""
    groups = []
    for account_type in TYPE_ORDER:
        rows = tuple(row for row in trial_balance.rows if row.account_type == account_type)
        if not rows:
            continue
        groups.append(
            TrialBalanceGroup(
                type=account_type,
                label=ACCOUNT_TYPE_LABELS[account_type],
                rows=rows,
                subtotal_debit=sum(row.debit_total for row in rows),
                subtotal_credit=sum(row.credit_total for row in rows),
                subtotal_debit_balance=sum(row.debit_balance for row in rows),
                subtotal_credit_balance=sum(row.credit_balance for row in rows),
            )
        )

    return GroupedTrialBalance(
        groups=tuple(groups),
        total_debit=trial_balance.total_debit,
        total_credit=trial_balance.total_credit,
        total_debit_balance=trial_balance.total_debit_balance,
        total_credit_balance=trial_balance.total_credit_balance,
        is_balanced=trial_balance.is_balanced,
    )
