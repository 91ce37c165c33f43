"""General ledger for a single account."""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Iterable, Optional, Sequence

from bluebook.domain.balances import account_map, signed_delta
from bluebook.domain.entities import Account, AccountType, JournalEntry, Side
from bluebook.domain.errors import NotFoundError, account_not_found

# Counter-account label of a compound entry (more than one other account)
VARIOUS_ACCOUNTS = "諸口"
# Counter-account label when the entry only touches the ledger account
NO_COUNTER_ACCOUNT = "-"


@dataclass(frozen=True)
class LedgerRow:
    date: date
    journal_id: str
    description: str
    vendor: str
    counter_account: str
    debit: Optional[int]
    credit: Optional[int]
    balance: int


@dataclass(frozen=True)
class Ledger:
    account_code: str
    account_name: str
    account_type: AccountType
    rows: tuple[LedgerRow, ...]
    opening_balance: int
    total_debit: int
    total_credit: int
    closing_balance: int


def _sort_key(entry: JournalEntry) -> tuple[date, bool, datetime]:
    created_at = entry.created_at
    if created_at is not None and created_at.tzinfo is not None:
        # Imported timestamps are aware, stored ones are naive UTC
        created_at = created_at.astimezone(timezone.utc).replace(tzinfo=None)
    return (entry.date, created_at is not None, created_at or datetime.min)


def generate_ledger(
    entries: Iterable[JournalEntry],
    account_code: str,
    accounts: Sequence[Account],
    opening_balance: int = 0,
) -> Ledger:
    """Build the running-balance history of one account.

    Entries are ordered by date, then by creation time. Each entry that
    touches the account yields one row with the account's own debit and
    credit totals within that entry.

    Args:
        entries: Journal entries, in any order
        account_code: Code of the ledger account
        accounts: Chart of accounts
        opening_balance: Balance carried in before the first row

    Returns:
        Ledger with one row per matching entry

    Raises:
        NotFoundError: If account_code is not in the chart of accounts
    """
    accounts_by_code = account_map(accounts)
    account = accounts_by_code.get(account_code)
    if account is None:
        raise NotFoundError(account_not_found(account_code))

    rows = []
    balance = opening_balance
    total_debit = 0
    total_credit = 0

    for entry in sorted(entries, key=_sort_key):
        own_lines = [line for line in entry.lines if line.account_code == account_code]
        if not own_lines:
            continue

        debit = sum(line.amount for line in own_lines if line.side == Side.DEBIT)
        credit = sum(line.amount for line in own_lines if line.side == Side.CREDIT)

        balance += signed_delta(account.type, Side.DEBIT, debit)
        balance += signed_delta(account.type, Side.CREDIT, credit)
        total_debit += debit
        total_credit += credit

        rows.append(
            LedgerRow(
                date=entry.date,
                journal_id=entry.id,
                description=entry.description,
                vendor=entry.vendor,
                counter_account=_counter_account(entry, account_code, accounts_by_code),
                debit=debit or None,
                credit=credit or None,
                balance=balance,
            )
        )

    return Ledger(
        account_code=account_code,
        account_name=account.name,
        account_type=account.type,
        rows=tuple(rows),
        opening_balance=opening_balance,
        total_debit=total_debit,
        total_credit=total_credit,
        closing_balance=balance,
    )


def _counter_account(
    entry: JournalEntry, account_code: str, accounts_by_code: dict[str, Account]
) -> str:
    other_codes = []
    for line in entry.lines:
        if line.account_code != account_code and line.account_code not in other_codes:
            other_codes.append(line.account_code)

    if not other_codes:
        return NO_COUNTER_ACCOUNT
    if len(other_codes) > 1:
        return VARIOUS_ACCOUNTS

    counter = accounts_by_code.get(other_codes[0])
    return counter.name if counter is not None else other_codes[0]


def used_accounts(entries: Iterable[JournalEntry], accounts: Sequence[Account]) -> list[Account]:
    """Return the accounts referenced by any line, sorted by code."""
    used_codes = {line.account_code for entry in entries for line in entry.lines}
    return sorted(
        (account for account in accounts if account.code in used_codes),
        key=lambda account: account.code,
    )
