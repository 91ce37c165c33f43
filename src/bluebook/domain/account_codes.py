"""Account code scheme.

Codes are four digits:

- digit 1: account type (1 asset, 2 liability, 3 equity, 4 revenue, 5 expense)
- digit 2: provenance (0 system seed, 1 user-added)
- digits 3-4: sequence 00-99 within (type, provenance)
"""

from typing import Iterable, Optional

from bluebook.domain.entities import AccountType
from bluebook.domain.errors import ConflictError, account_code_range_exhausted

TYPE_PREFIX: dict[AccountType, int] = {
    AccountType.ASSET: 1,
    AccountType.LIABILITY: 2,
    AccountType.EQUITY: 3,
    AccountType.REVENUE: 4,
    AccountType.EXPENSE: 5,
}

USER_PROVENANCE_DIGIT = 1

# Well-known seed accounts referenced by the calculation modules
CASH_CODE = "1001"
ORDINARY_DEPOSIT_CODE = "1003"
ACCOUNTS_RECEIVABLE_CODE = "1005"
CAPITAL_CODE = "3001"
OWNER_WITHDRAWAL_CODE = "3002"
OWNER_DEPOSIT_CODE = "3003"
SALES_CODE = "4001"
PURCHASES_CODE = "5001"


def type_prefix(account_type: AccountType) -> int:
    """Return the leading digit for an account type."""
    return TYPE_PREFIX[AccountType(account_type)]


def is_system_account(code: str) -> bool:
    """Return True if the code belongs to the system seed range."""
    return len(code) == 4 and code[1] == "0"


def account_type_for_code(code: str) -> Optional[AccountType]:
    """Derive the account type from the first digit, or None if not a valid code."""
    if len(code) != 4 or not code.isdigit():
        return None
    for account_type, prefix in TYPE_PREFIX.items():
        if int(code[0]) == prefix:
            return account_type
    return None


def user_code_range(account_type: AccountType) -> tuple[int, int]:
    """Return the inclusive (floor, ceiling) numeric range for user-added codes."""
    base = type_prefix(account_type) * 1000 + USER_PROVENANCE_DIGIT * 100
    return base, base + 99


def generate_next_code(account_type: AccountType, existing_codes: Iterable[str]) -> str:
    """Return the lowest unused user-range code for an account type.

    Args:
        account_type: Type the new account will have
        existing_codes: Codes already present in the chart of accounts

    Returns:
        Four-digit code string

    Raises:
        ConflictError: If all 100 user codes for the type are taken
    """
    floor, ceiling = user_code_range(account_type)
    used = set()
    for code in existing_codes:
        if code.isdigit():
            used.add(int(code))

    for candidate in range(floor, ceiling + 1):
        if candidate not in used:
            return str(candidate)

    raise ConflictError(account_code_range_exhausted(AccountType(account_type).value))
