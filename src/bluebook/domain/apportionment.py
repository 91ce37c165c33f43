"""Business-ratio apportionment of mixed-use expense lines.

A debit line is split into the deductible business share, kept on the
original account, and a personal share moved to the owner-draw account.
"""

import uuid
from datetime import date
from dataclasses import dataclass, replace
from typing import Callable, Optional, Sequence

from bluebook.domain.account_codes import OWNER_WITHDRAWAL_CODE
from bluebook.domain.entities import (
    Account,
    AppliedSplit,
    EvidenceStatus,
    GeneratedCounterpart,
    JournalDraft,
    JournalEntry,
    JournalLine,
    Side,
    TaxCategory,
)


def new_line_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class ApportionmentResult:
    """Lines after a split, and the amounts the split produced."""

    lines: tuple[JournalLine, ...]
    business_amount: int
    personal_amount: int
    applied: bool


def apportionment_preview(amount: int, ratio: int) -> tuple[int, int]:
    """Return (business_amount, personal_amount) for splitting ``amount``.

    The personal share absorbs the rounding remainder, so the two always add
    up to ``amount``.
    """
    business_amount = amount * ratio // 100
    return business_amount, amount - business_amount


def apply_business_ratio(
    lines: Sequence[JournalLine],
    target_index: int,
    ratio: int,
    id_factory: Callable[[], str] = new_line_id,
) -> ApportionmentResult:
    """Split one debit line by a business-use ratio.

    The owner-draw line is inserted right after the target line even when its
    amount is zero, so later edits can recompute both halves in place.

    Args:
        lines: Lines of the entry
        target_index: Index of the debit line to split
        ratio: Business-use percentage, 0-100
        id_factory: Generates the id of the inserted line

    Returns:
        ApportionmentResult; unchanged lines and zero amounts when the target
        is not a debit line or the ratio is out of range
    """
    original = tuple(lines)
    if not 0 <= target_index < len(original) or not 0 <= ratio <= 100:
        return ApportionmentResult(original, 0, 0, applied=False)

    target = original[target_index]
    if target.side != Side.DEBIT:
        return ApportionmentResult(original, 0, 0, applied=False)

    business_amount, personal_amount = apportionment_preview(target.amount, ratio)

    business_line = replace(
        target,
        amount=business_amount,
        apportionment=AppliedSplit(original_amount=target.amount, ratio=ratio),
    )
    draw_line = JournalLine(
        id=id_factory(),
        side=Side.DEBIT,
        account_code=OWNER_WITHDRAWAL_CODE,
        amount=personal_amount,
        tax_category=TaxCategory.NA,
        apportionment=GeneratedCounterpart(),
    )

    result = (
        original[:target_index]
        + (business_line, draw_line)
        + original[target_index + 1 :]
    )
    return ApportionmentResult(result, business_amount, personal_amount, applied=True)


def remove_business_ratio(lines: Sequence[JournalLine]) -> tuple[JournalLine, ...]:
    """Undo every split: drop generated lines and restore original amounts."""
    result = []
    for line in lines:
        if isinstance(line.apportionment, GeneratedCounterpart):
            continue
        if isinstance(line.apportionment, AppliedSplit):
            result.append(
                replace(line.without_apportionment(), amount=line.apportionment.original_amount)
            )
        else:
            result.append(line)
    return tuple(result)


def recalculate_apportionment(
    lines: Sequence[JournalLine], index: int, original_amount: int
) -> tuple[JournalLine, ...]:
    """Re-split an applied line after its pre-split amount was edited.

    The generated line directly following the applied line receives the new
    personal share. Lines are returned unchanged if ``index`` is not an
    applied line.
    """
    updated = list(lines)
    if not 0 <= index < len(updated):
        return tuple(updated)

    target = updated[index]
    if not isinstance(target.apportionment, AppliedSplit):
        return tuple(updated)

    ratio = target.apportionment.ratio
    business_amount, personal_amount = apportionment_preview(original_amount, ratio)
    updated[index] = replace(
        target,
        amount=business_amount,
        apportionment=AppliedSplit(original_amount=original_amount, ratio=ratio),
    )

    next_index = index + 1
    if next_index < len(updated) and updated[next_index].is_generated:
        updated[next_index] = replace(updated[next_index], amount=personal_amount)

    return tuple(updated)


def has_business_ratio_applied(lines: Sequence[JournalLine]) -> bool:
    return any(isinstance(line.apportionment, AppliedSplit) for line in lines)


def applied_business_ratio(lines: Sequence[JournalLine]) -> Optional[int]:
    """Return the ratio of the first applied split, or None."""
    for line in lines:
        if isinstance(line.apportionment, AppliedSplit):
            return line.apportionment.ratio
    return None


def find_apportionment_target(
    lines: Sequence[JournalLine], accounts: Sequence[Account]
) -> Optional[tuple[int, JournalLine, Account]]:
    """Find the first debit line whose account has apportionment enabled."""
    accounts_by_code = {account.code: account for account in accounts}
    for index, line in enumerate(lines):
        if line.side != Side.DEBIT:
            continue
        account = accounts_by_code.get(line.account_code)
        if account is not None and account.business_ratio_enabled:
            return index, line, account
    return None


def clean_line_for_template(line: JournalLine, id_factory: Callable[[], str] = new_line_id) -> JournalLine:
    """Strip internal metadata from a line offered as a template for a new entry."""
    return replace(line.without_apportionment(), id=id_factory())


def copy_entry_for_new(
    entry: JournalEntry, today: date, id_factory: Callable[[], str] = new_line_id
) -> JournalDraft:
    """Build a new-entry template from an existing entry.

    Lines get fresh ids and lose their apportionment metadata, evidence is
    cleared and the date becomes ``today``.
    """
    return JournalDraft(
        date=today,
        lines=tuple(clean_line_for_template(line, id_factory) for line in entry.lines),
        vendor=entry.vendor,
        description=entry.description,
        evidence_status=EvidenceStatus.NONE,
    )
