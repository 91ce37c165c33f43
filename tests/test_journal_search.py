"""Tests for journal search."""

import pytest
from datetime import date

from bluebook.cli.main import cli
from bluebook.domain.journal_search import (
    SearchCriteria,
    filter_journals,
    is_empty_query,
    parse_search_query,
)

from conftest import credit, debit, make_entry


class TestParseSearchQuery:
    def test_mixed_query(self, accounts):
        criteria = parse_search_query("Amazon 12月 消耗品費", accounts)

        assert criteria.text == ("amazon",)
        assert criteria.account_codes == ("5011",)
        assert criteria.month == 12
        assert criteria.amounts == ()

    @pytest.mark.parametrize(
        "token,field,expected",
        [
            ("2024-03-15", "on_date", date(2024, 3, 15)),
            ("2024/3/5", "on_date", date(2024, 3, 5)),
            ("2024-03", "year_month", (2024, 3)),
            ("2024/3", "year_month", (2024, 3)),
            ("2024年", "year", 2024),
            ("2024-", "year", 2024),
            ("3月", "month", 3),
            ("3/15", "month_day", (3, 15)),
            ("03-15", "month_day", (3, 15)),
        ],
    )
    def test_date_tokens(self, accounts, token, field, expected):
        criteria = parse_search_query(token, accounts)

        assert getattr(criteria, field) == expected
        assert criteria.text == ()

    def test_amounts(self, accounts):
        criteria = parse_search_query("11000 1,320,000 2024", accounts)
        assert criteria.amounts == (11000, 1320000, 2024)

    def test_out_of_range_month_is_dropped(self, accounts):
        criteria = parse_search_query("13月", accounts)
        assert criteria.is_empty

    def test_impossible_date_matches_nothing(self, accounts):
        criteria = parse_search_query("2024-02-30", accounts)
        entries = [make_entry(date(2024, 2, 28), debit("5011", 100), credit("1001", 100))]

        assert filter_journals(entries, criteria) == []

    def test_account_prefix_matches(self, accounts):
        assert parse_search_query("通信", accounts).account_codes == ("5006",)
        assert parse_search_query("現金払い", accounts).account_codes == ("1001",)

    def test_unknown_words_are_text(self, accounts):
        criteria = parse_search_query("株式会社A 携帯", accounts)
        assert criteria.text == ("株式会社a", "携帯")
        assert criteria.account_codes == ()

    def test_empty_query(self, accounts):
        assert is_empty_query("   ")
        assert not is_empty_query(" 3月 ")
        assert parse_search_query("  ", accounts) == SearchCriteria()


class TestFilterJournals:
    @pytest.fixture
    def entries(self):
        return [
            make_entry(date(2024, 3, 15), debit("1005", 110000), credit("4001", 110000),
                       vendor="Amazon Japan", description="3月分請求"),
            make_entry(date(2024, 6, 20), debit("5006", 11000), credit("1003", 11000),
                       vendor="通信会社", description="携帯料金"),
            make_entry(date(2025, 3, 15), debit("5011", 3300), credit("1001", 3300), description="文房具"),
        ]

    def test_text_is_case_insensitive(self, entries, accounts):
        found = filter_journals(entries, parse_search_query("AMAZON", accounts))
        assert [entry.vendor for entry in found] == ["Amazon Japan"]

    def test_every_text_must_match(self, entries, accounts):
        assert filter_journals(entries, parse_search_query("携帯 通信会社", accounts)) == [entries[1]]
        assert filter_journals(entries, parse_search_query("携帯 amazon", accounts)) == []

    def test_any_account_matches(self, entries, accounts):
        found = filter_journals(entries, parse_search_query("通信費 消耗品費", accounts))
        assert found == [entries[1], entries[2]]

    def test_any_amount_matches(self, entries, accounts):
        found = filter_journals(entries, parse_search_query("11,000 3300", accounts))
        assert found == [entries[1], entries[2]]

    def test_month_day_spans_years(self, entries, accounts):
        assert filter_journals(entries, parse_search_query("3/15", accounts)) == [entries[0], entries[2]]
        assert filter_journals(entries, parse_search_query("2025年 3/15", accounts)) == [entries[2]]

    def test_year_month(self, entries, accounts):
        assert filter_journals(entries, parse_search_query("2024-06", accounts)) == [entries[1]]

    def test_empty_criteria_keeps_everything(self, entries):
        assert filter_journals(entries, SearchCriteria()) == entries


class TestSearchEntries:
    def test_vendor(self, journal_service, sample_entries):
        found = journal_service.search_entries("株式会社A", fiscal_year=2024)
        assert [entry.id for entry in found] == [sample_entries["collection"], sample_entries["sale"]]

    def test_account_and_amount(self, journal_service, sample_entries):
        found = journal_service.search_entries("普通預金 110,000", fiscal_year=2024)
        assert [entry.id for entry in found] == [sample_entries["collection"]]

    def test_empty_query_lists_year(self, journal_service, sample_entries):
        assert len(journal_service.search_entries("", fiscal_year=2024)) == 5

    def test_limited_to_fiscal_year(self, journal_service, sample_entries):
        assert journal_service.search_entries("株式会社A", fiscal_year=2025) == []


def test_journal_list_search(cli_runner, seeded_db, sample_entries):
    result = cli_runner.invoke(
        cli,
        ["--db-path", seeded_db.database_path, "journal", "list", "--year", "2024", "--search", "通信会社 6月"],
    )

    assert result.exit_code == 0
    assert "携帯料金" in result.output
    assert "元入金" not in result.output


def test_journal_list_search_no_match(cli_runner, seeded_db, sample_entries):
    result = cli_runner.invoke(
        cli,
        ["--db-path", seeded_db.database_path, "journal", "list", "--year", "2024", "--search", "12月"],
    )

    assert result.exit_code == 0
    assert "No journal entries matching '12月' in 2024." in result.output
