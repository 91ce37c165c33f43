"""Per-account balance aggregation.

Asset and expense accounts increase on the debit side; liability, equity and
revenue accounts increase on the credit side. Every report derives its
balances from the functions in this module.
"""

import logging
from typing import Iterable, Optional, Sequence

from bluebook.domain.entities import Account, AccountType, JournalEntry, Side

logger = logging.getLogger(__name__)

DEBIT_NORMAL_TYPES = frozenset({AccountType.ASSET, AccountType.EXPENSE})


def account_map(accounts: Iterable[Account]) -> dict[str, Account]:
    """Index accounts by code."""
    return {account.code: account for account in accounts}


def is_debit_normal(account_type: AccountType) -> bool:
    """Return True if debits increase balances of this account type."""
    return AccountType(account_type) in DEBIT_NORMAL_TYPES


def signed_delta(account_type: AccountType, side: Side, amount: int) -> int:
    """Return the balance change a line of ``amount`` on ``side`` causes."""
    increases = (side == Side.DEBIT) == is_debit_normal(account_type)
    return amount if increases else -amount


def aggregate_balances(
    entries: Iterable[JournalEntry],
    accounts: Sequence[Account],
    types: Optional[Iterable[AccountType]] = None,
) -> dict[str, int]:
    """Sum signed balances per account code.

    Lines whose account code is not in ``accounts`` are skipped. When
    ``types`` is given, only accounts of those types are aggregated.

    Returns:
        Mapping of account code to signed balance, in first-seen order
    """
    accounts_by_code = account_map(accounts)
    wanted = None if types is None else {AccountType(t) for t in types}
    balances: dict[str, int] = {}

    for entry in entries:
        for line in entry.lines:
            account = accounts_by_code.get(line.account_code)
            if account is None:
                logger.debug(
                    "Skipping line %s of entry %s: unknown account %s",
                    line.id,
                    entry.id,
                    line.account_code,
                )
                continue
            if wanted is not None and account.type not in wanted:
                continue
            balances[line.account_code] = balances.get(line.account_code, 0) + signed_delta(
                account.type, line.side, line.amount
            )

    return balances
