"""Free-text search over journal entries.

A query is a whitespace-separated list of tokens. Each token is classified
as a date condition, an amount, an account or plain text:

- ``2024-03-15`` / ``2024/3/15``: exact date
- ``2024-03`` / ``2024/3``: year and month
- ``2024年`` / ``2024-``: year
- ``3月``: month of any year
- ``3/15`` / ``03-15``: month and day of any year
- ``11000`` / ``11,000``: exact line amount
- an account name, or a prefix of one: account code
- anything else: substring of the description or vendor, case-insensitive

Text conditions must all match; account and amount conditions match when
any of the given values appears on a line.
"""

import re
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Sequence

from bluebook.domain.entities import Account, JournalEntry

_FULL_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_SLASH_DATE = re.compile(r"^(\d{4})/(\d{1,2})/(\d{1,2})$")
_YEAR_MONTH = re.compile(r"^(\d{4})-(\d{2})$")
_SLASH_YEAR_MONTH = re.compile(r"^(\d{4})/(\d{1,2})$")
_YEAR = re.compile(r"^(\d{4})(?:年|-)$")
_MONTH = re.compile(r"^(\d{1,2})月$")
_MONTH_DAY = re.compile(r"^(\d{1,2})[/-](\d{1,2})$")
_AMOUNT = re.compile(r"^[\d,]+$")


@dataclass(frozen=True)
class SearchCriteria:
    text: tuple[str, ...] = ()
    account_codes: tuple[str, ...] = ()
    amounts: tuple[int, ...] = ()
    year: Optional[int] = None
    year_month: Optional[tuple[int, int]] = None
    month: Optional[int] = None
    on_date: Optional[date] = None
    month_day: Optional[tuple[int, int]] = None

    @property
    def is_empty(self) -> bool:
        return self == SearchCriteria()


def is_empty_query(query: str) -> bool:
    return not query.strip()


def _match_account(token: str, accounts: Sequence[Account]) -> Optional[str]:
    for account in accounts:
        if account.name == token:
            return account.code
    for account in accounts:
        if account.name.startswith(token) or token.startswith(account.name):
            return account.code
    return None


def parse_search_query(query: str, accounts: Sequence[Account]) -> SearchCriteria:
    """Turn a search query into criteria.

    Args:
        query: Space-separated tokens, e.g. ``"Amazon 12月 消耗品費"``
        accounts: Chart of accounts, used to resolve account names

    Returns:
        SearchCriteria; an empty query yields criteria that match everything
    """
    text: list[str] = []
    account_codes: list[str] = []
    amounts: list[int] = []
    fields: dict = {}

    for token in query.split():
        match = _FULL_DATE.match(token) or _SLASH_DATE.match(token)
        if match:
            try:
                fields["on_date"] = date(int(match[1]), int(match[2]), int(match[3]))
            except ValueError:
                # Not a calendar date, so no entry can match it
                fields["on_date"] = date.min
            continue

        match = _YEAR_MONTH.match(token) or _SLASH_YEAR_MONTH.match(token)
        if match:
            fields["year_month"] = (int(match[1]), int(match[2]))
            continue

        match = _YEAR.match(token)
        if match:
            fields["year"] = int(match[1])
            continue

        match = _MONTH.match(token)
        if match:
            month = int(match[1])
            if 1 <= month <= 12:
                fields["month"] = month
            continue

        match = _MONTH_DAY.match(token)
        if match:
            fields["month_day"] = (int(match[1]), int(match[2]))
            continue

        if _AMOUNT.match(token):
            digits = token.replace(",", "")
            if digits:
                amounts.append(int(digits))
            continue

        code = _match_account(token, accounts)
        if code is not None:
            account_codes.append(code)
            continue

        text.append(token.lower())

    return SearchCriteria(
        text=tuple(text),
        account_codes=tuple(account_codes),
        amounts=tuple(amounts),
        **fields,
    )


def matches(entry: JournalEntry, criteria: SearchCriteria) -> bool:
    """Return True if one entry satisfies every condition."""
    description = entry.description.lower()
    vendor = entry.vendor.lower()
    for text in criteria.text:
        if text not in description and text not in vendor:
            return False

    if criteria.account_codes:
        codes = {line.account_code for line in entry.lines}
        if not codes.intersection(criteria.account_codes):
            return False

    if criteria.amounts:
        line_amounts = {line.amount for line in entry.lines}
        if not line_amounts.intersection(criteria.amounts):
            return False

    entry_date = entry.date
    if criteria.year is not None and entry_date.year != criteria.year:
        return False
    if criteria.on_date is not None and entry_date != criteria.on_date:
        return False
    if criteria.year_month is not None and (entry_date.year, entry_date.month) != criteria.year_month:
        return False
    if criteria.month is not None and entry_date.month != criteria.month:
        return False
    if criteria.month_day is not None and (entry_date.month, entry_date.day) != criteria.month_day:
        return False

    return True


def filter_journals(entries: Iterable[JournalEntry], criteria: SearchCriteria) -> list[JournalEntry]:
    """Keep the entries matching ``criteria``, in their original order."""
    return [entry for entry in entries if matches(entry, criteria)]
