"""Fiscal year selection.

A fiscal year is a calendar year. Year values can come from imported data,
so malformed input falls back to the current year instead of raising.
"""

import logging
from datetime import date, datetime
from typing import Iterable, Optional, Union

from dateutil import parser as date_parser

from bluebook.domain.entities import JournalEntry

logger = logging.getLogger(__name__)

MIN_FISCAL_YEAR = 1900
MAX_FISCAL_YEAR = 2999


def fiscal_year_range(year: int) -> tuple[date, date]:
    """Return the first and last day of a fiscal year."""
    return date(year, 1, 1), date(year, 12, 31)


def _year_from(value: Union[date, str, int]) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (date, datetime)):
        return value.year
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            return int(text)
        try:
            return date_parser.isoparse(text).year
        except ValueError:
            return None
    return None


def fiscal_year_of(value: Union[date, str, int, None], today: Optional[date] = None) -> int:
    """Resolve the fiscal year a date, ISO date string or year number falls in.

    Args:
        value: Date, ISO 8601 date string, or year
        today: Reference date for the fallback (default: today)

    Returns:
        The fiscal year; the current year if ``value`` is malformed or outside
        1900-2999
    """
    current_year = (today or date.today()).year
    year = _year_from(value) if value is not None else None

    if year is None or not MIN_FISCAL_YEAR <= year <= MAX_FISCAL_YEAR:
        logger.warning(
            "Invalid fiscal year input %r, falling back to %d", value, current_year
        )
        return current_year
    return year


def entries_in_fiscal_year(entries: Iterable[JournalEntry], year: int) -> list[JournalEntry]:
    """Return the entries dated within a fiscal year."""
    start, end = fiscal_year_range(year)
    return [entry for entry in entries if start <= entry.date <= end]
