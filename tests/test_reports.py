"""Tests for the report service and report commands."""

import csv
import io

import pytest
from datetime import date

from bluebook.cli.main import cli
from bluebook.domain.blue_return import validate_blue_return
from bluebook.domain.entities import AccountType, BusinessInfo
from bluebook.domain.errors import NotFoundError

from conftest import credit, debit


INFO = BusinessInfo(name="青木 一郎", address="東京都新宿区", business_type="ソフトウェア開発")


class TestReportService:
    def test_trial_balance(self, report_service, sample_entries):
        tb = report_service.trial_balance(2024)

        assert tb.total_debit == 1_281_000
        assert tb.total_credit == 1_281_000
        assert tb.total_debit_balance == 1_110_000
        assert tb.is_balanced

    def test_trial_balance_only_uses_the_year(self, report_service, journal_service, sample_entries):
        journal_service.create_entry(
            date=date(2025, 1, 10), lines=[debit("5011", 2000), credit("1001", 2000)]
        )
        assert report_service.trial_balance(2024).total_debit == 1_281_000
        assert report_service.trial_balance(2025).total_debit == 2000

    def test_grouped_trial_balance(self, report_service, sample_entries):
        grouped = report_service.grouped_trial_balance(2024)
        types = [group.type for group in grouped.groups]
        assert types == sorted(types, key=list(AccountType).index)
        assert grouped.is_balanced

    def test_ledger(self, report_service, sample_entries):
        ledger = report_service.ledger(2024, "1003")

        assert ledger.account_name == "普通預金"
        assert [row.date for row in ledger.rows] == [
            date(2024, 1, 4),
            date(2024, 4, 30),
            date(2024, 6, 20),
            date(2024, 8, 1),
        ]
        assert ledger.rows[0].counter_account == "元入金"
        assert ledger.rows[0].balance == 1_000_000
        assert ledger.closing_balance == 1_049_000
        assert ledger.total_credit == 61_000

    def test_ledger_unknown_account(self, report_service, sample_entries):
        with pytest.raises(NotFoundError):
            report_service.ledger(2024, "9999")

    def test_ledger_accounts(self, report_service, sample_entries):
        codes = [account.code for account in report_service.ledger_accounts(2024)]
        assert codes == ["1003", "1005", "3001", "3002", "4001", "5006"]

    def test_profit_loss(self, report_service, sample_entries):
        pl = report_service.profit_loss(2024)

        assert pl.total_sales_revenue == 110_000
        assert pl.total_operating_expenses == 11_000
        assert pl.net_income == 99_000

    def test_balance_sheet_balances(self, report_service, sample_entries):
        bs = report_service.balance_sheet(2024)

        assert bs.total_assets == 1_049_000
        assert bs.retained_earnings == 99_000
        assert {row.account_code: row.amount for row in bs.equity} == {
            "3001": 1_000_000,
            "3002": -50_000,
        }
        assert bs.total_liabilities_and_equity == 1_049_000
        assert bs.is_balanced

    def test_depreciation(self, report_service, fixed_asset_service):
        from bluebook.domain.entities import AssetCategory

        fixed_asset_service.register_asset(
            name="ノートPC",
            category=AssetCategory.EQUIPMENT,
            acquisition_date=date(2024, 4, 1),
            acquisition_cost=200000,
            useful_life=4,
        )
        schedule = report_service.depreciation(2024)
        assert schedule.total_depreciation == 37500

    def test_monthly_summary(self, report_service, sample_entries):
        summary = report_service.monthly_summary(2024)

        assert len(summary.monthly_sales) == 12
        assert summary.monthly_sales[2].sales == 110_000
        assert sum(month.sales for month in summary.monthly_sales) == 110_000


class TestBlueReturn:
    def test_without_previous_year(self, report_service, sample_entries):
        data = report_service.blue_return(2024, INFO, deduction_tier=10)

        assert data.page1.sales_total == 110_000
        assert data.page1.blue_return_deduction == 100_000
        assert data.page1.business_income == 0
        assert data.page4.owner_withdrawal == 50_000
        assert data.page4.assets_total_beginning == 0
        assert data.page4.assets_total_ending == 1_049_000
        assert data.page4.capital_ending == 1_000_000
        assert data.page4.net_income == 99_000
        assert data.page4.is_balanced
        assert validate_blue_return(data) == []

    def test_beginning_balances_from_previous_year(self, report_service, journal_service, sample_entries):
        journal_service.create_entry(
            date=date(2023, 12, 1), lines=[debit("1003", 300_000), credit("3001", 300_000)]
        )

        page4 = report_service.blue_return(2024, INFO).page4

        bank = next(row for row in page4.current_assets if row.account_code == "1003")
        assert bank.beginning_balance == 300_000
        assert bank.ending_balance == 1_049_000
        assert page4.assets_total_beginning == 300_000
        assert page4.capital_beginning == 300_000


def test_report_trial_balance_command(cli_runner, seeded_db, sample_entries):
    result = cli_runner.invoke(
        cli, ["--db-path", seeded_db.database_path, "report", "trial-balance", "--year", "2024"]
    )

    assert result.exit_code == 0
    assert "Trial balance 2024" in result.output
    assert "1,110,000" in result.output
    assert "Warning" not in result.output


def test_report_trial_balance_csv(cli_runner, seeded_db, sample_entries):
    result = cli_runner.invoke(
        cli,
        ["--db-path", seeded_db.database_path, "report", "trial-balance", "--year", "2024", "--csv"],
    )

    assert result.exit_code == 0
    rows = list(csv.reader(io.StringIO(result.output)))
    assert rows[0] == ["合計残高試算表", "2024年度"]
    assert ["貸借一致", "一致"] in rows


def test_report_ledger_command(cli_runner, seeded_db, sample_entries):
    result = cli_runner.invoke(
        cli, ["--db-path", seeded_db.database_path, "report", "ledger", "1003", "--year", "2024"]
    )

    assert result.exit_code == 0
    assert "Ledger 1003 普通預金 2024" in result.output
    assert "1,049,000" in result.output


def test_report_ledger_unknown_account(cli_runner, seeded_db):
    result = cli_runner.invoke(
        cli, ["--db-path", seeded_db.database_path, "report", "ledger", "9999", "--year", "2024"]
    )

    assert result.exit_code == 1
    assert "Error: Account 9999 not found" in result.output


def test_report_profit_loss_command(cli_runner, seeded_db, sample_entries):
    result = cli_runner.invoke(
        cli, ["--db-path", seeded_db.database_path, "report", "profit-loss", "--year", "2024"]
    )

    assert result.exit_code == 0
    assert "損益計算書 2024" in result.output
    assert "99,000" in result.output


def test_report_balance_sheet_csv(cli_runner, seeded_db, sample_entries):
    result = cli_runner.invoke(
        cli,
        ["--db-path", seeded_db.database_path, "report", "balance-sheet", "--year", "2024", "--csv"],
    )

    assert result.exit_code == 0
    rows = list(csv.reader(io.StringIO(result.output)))
    assert rows[0] == ["貸借対照表", "2024年度"]
    assert ["1003", "普通預金", "1,049,000"] in rows


def test_report_consumption_tax_command(cli_runner, seeded_db, sample_entries):
    result = cli_runner.invoke(
        cli, ["--db-path", seeded_db.database_path, "report", "consumption-tax", "--year", "2024"]
    )

    assert result.exit_code == 0
    assert "消費税集計 2024" in result.output
    assert "課税売上10%" in result.output


def test_report_depreciation_empty(cli_runner, seeded_db):
    result = cli_runner.invoke(
        cli, ["--db-path", seeded_db.database_path, "report", "depreciation", "--year", "2024"]
    )

    assert result.exit_code == 0
    assert "No fixed assets in service." in result.output


def test_report_monthly_csv(cli_runner, seeded_db, sample_entries):
    result = cli_runner.invoke(
        cli, ["--db-path", seeded_db.database_path, "report", "monthly", "--year", "2024", "--csv"]
    )

    assert result.exit_code == 0
    rows = list(csv.reader(io.StringIO(result.output)))
    assert ["3月", "110,000", "0"] in rows
    assert ["合計", "110,000", "0"] in rows


def test_report_filing_command(cli_runner, seeded_db, sample_entries):
    result = cli_runner.invoke(
        cli,
        [
            "--db-path", seeded_db.database_path,
            "report", "filing", "--year", "2024",
            "--name", "青木 一郎", "--deduction-tier", "10",
        ],
    )

    assert result.exit_code == 0
    assert "青色申告決算書 2024" in result.output
    assert "100,000" in result.output
    assert "Warning" not in result.output


def test_report_filing_csv(cli_runner, seeded_db, sample_entries):
    result = cli_runner.invoke(
        cli,
        ["--db-path", seeded_db.database_path, "report", "filing", "--year", "2024", "--csv", "--name", "青木 一郎"],
    )

    assert result.exit_code == 0
    rows = list(csv.reader(io.StringIO(result.output)))
    assert ["氏名", "青木 一郎"] in rows
    assert ["貸借バランス", "一致"] in rows


def test_report_filing_invalid_inventory(cli_runner, seeded_db):
    result = cli_runner.invoke(
        cli,
        ["--db-path", seeded_db.database_path, "report", "filing", "--year", "2024", "--inventory-end", "abc"],
    )

    assert result.exit_code == 1
    assert "Error:" in result.output
