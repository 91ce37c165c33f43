"""Tests for fiscal year selection."""

import logging
from datetime import date

import pytest

from bluebook.domain.fiscal_year import entries_in_fiscal_year, fiscal_year_of, fiscal_year_range

from conftest import credit, debit, make_entry

TODAY = date(2025, 7, 1)


def test_fiscal_year_range():
    assert fiscal_year_range(2024) == (date(2024, 1, 1), date(2024, 12, 31))


@pytest.mark.parametrize(
    "value,expected",
    [
        (date(2024, 3, 15), 2024),
        ("2024-03-15", 2024),
        ("2023", 2023),
        (2022, 2022),
        (1900, 1900),
        (2999, 2999),
    ],
)
def test_fiscal_year_of(value, expected):
    assert fiscal_year_of(value, today=TODAY) == expected


@pytest.mark.parametrize("value", ["garbage", "", 1899, 3000, "1850-06-01", None, True])
def test_invalid_input_falls_back_to_current_year(value, caplog):
    """Test that malformed or out-of-range input falls back with a warning."""
    with caplog.at_level(logging.WARNING, logger="bluebook.domain.fiscal_year"):
        assert fiscal_year_of(value, today=TODAY) == 2025

    assert "falling back to 2025" in caplog.text


def test_entries_in_fiscal_year():
    entries = [
        make_entry(date(2023, 12, 31), debit("1001", 1), credit("4002", 1)),
        make_entry(date(2024, 1, 1), debit("1001", 2), credit("4002", 2)),
        make_entry(date(2024, 12, 31), debit("1001", 3), credit("4002", 3)),
        make_entry(date(2025, 1, 1), debit("1001", 4), credit("4002", 4)),
    ]
    selected = entries_in_fiscal_year(entries, 2024)
    assert [entry.date for entry in selected] == [date(2024, 1, 1), date(2024, 12, 31)]
