"""Journal entry validation.

This is the single gate for the double-entry invariant. It never raises;
callers decide whether an invalid result blocks a save.
"""

from dataclasses import dataclass
from typing import Sequence

from bluebook.domain.entities import JournalLine, NoApportionment, Side


@dataclass(frozen=True)
class JournalValidation:
    """Outcome of validating a candidate set of journal lines."""

    is_valid: bool
    debit_total: int
    credit_total: int
    has_empty_accounts: bool
    has_invalid_amounts: bool = False

    def error_messages(self) -> list[str]:
        """Describe every problem found, for presentation to a user."""
        messages = []
        if self.has_empty_accounts:
            messages.append("Some lines have no account selected")
        if self.has_invalid_amounts:
            messages.append("Every line amount must be greater than zero")
        if self.debit_total != self.credit_total:
            messages.append(
                f"Debit total ({self.debit_total}) does not equal credit total ({self.credit_total})"
            )
        return messages


def _amount_is_valid(line: JournalLine) -> bool:
    # Either half of a 0% or 100% split is kept at zero
    if not isinstance(line.apportionment, NoApportionment):
        return line.amount >= 0
    return line.amount > 0


def validate_lines(lines: Sequence[JournalLine]) -> JournalValidation:
    """Check balance and completeness of journal lines.

    Args:
        lines: Candidate lines of one entry

    Returns:
        JournalValidation with side totals and the overall verdict
    """
    debit_total = sum(line.amount for line in lines if line.side == Side.DEBIT)
    credit_total = sum(line.amount for line in lines if line.side == Side.CREDIT)
    has_empty_accounts = any(not line.account_code for line in lines)
    has_invalid_amounts = any(not _amount_is_valid(line) for line in lines)

    is_valid = (
        debit_total == credit_total
        and not has_invalid_amounts
        and not has_empty_accounts
    )

    return JournalValidation(
        is_valid=is_valid,
        debit_total=debit_total,
        credit_total=credit_total,
        has_empty_accounts=has_empty_accounts,
        has_invalid_amounts=has_invalid_amounts,
    )
