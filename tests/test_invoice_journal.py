"""Tests for invoice amounts and invoice journal entries."""

import pytest
from datetime import date
from decimal import Decimal

from bluebook.cli.main import cli
from bluebook.cli.commands.journal import parse_invoice_item
from bluebook.domain.entities import EvidenceStatus, Side, TaxCategory
from bluebook.domain.errors import ValidationError
from bluebook.domain.invoice_journal import (
    Invoice,
    InvoiceItem,
    calculate_invoice_amounts,
    calculate_item_amount,
    generate_deposit_journal,
    generate_sales_journal,
    month_end,
)
from bluebook.domain.validation import validate_lines


def item(description, quantity, unit_price, tax_rate=10):
    return InvoiceItem(description=description, quantity=Decimal(quantity), unit_price=unit_price, tax_rate=tax_rate)


@pytest.fixture
def invoice():
    """One standard-rate and one reduced-rate item."""
    return Invoice(
        invoice_number="INV-001",
        issue_date=date(2024, 3, 15),
        vendor="株式会社A",
        items=(item("Web制作", "1", 100000), item("菓子", "3", 1234, tax_rate=8)),
    )


def summary(lines):
    return [(line.side, line.account_code, line.amount, line.tax_category) for line in lines]


class TestInvoiceAmounts:
    def test_item_amount_truncates(self):
        assert calculate_item_amount(Decimal("1.5"), 333) == 499
        assert calculate_item_amount(3, 1234) == 3702

    def test_breakdown_per_rate(self, invoice):
        amounts = invoice.amounts

        assert amounts.breakdown.taxable_10 == 100000
        assert amounts.breakdown.tax_10 == 10000
        assert amounts.breakdown.taxable_8 == 3702
        assert amounts.breakdown.tax_8 == 296
        assert amounts.subtotal == 103702
        assert amounts.tax_amount == 10296
        assert amounts.total == 113998

    def test_tax_truncated_once_per_rate(self):
        amounts = calculate_invoice_amounts([item("a", "1", 999), item("b", "1", 999)])
        assert amounts.breakdown.tax_10 == 199
        assert amounts.total == 2197

    def test_unknown_rate_ignored(self):
        amounts = calculate_invoice_amounts([item("a", "1", 1000, tax_rate=5)])
        assert amounts.total == 0

    def test_due_date_defaults_to_month_end(self):
        invoice = Invoice(invoice_number="1", issue_date=date(2024, 2, 10), vendor="A", items=())
        assert invoice.due_date == date(2024, 2, 29)
        assert month_end(date(2024, 12, 1)) == date(2024, 12, 31)

        explicit = Invoice(
            invoice_number="2", issue_date=date(2024, 2, 10), vendor="A", items=(), due_date=date(2024, 4, 30)
        )
        assert explicit.due_date == date(2024, 4, 30)


class TestInvoiceJournals:
    def test_sales_journal(self, invoice):
        draft = generate_sales_journal(invoice)

        assert summary(draft.lines) == [
            (Side.DEBIT, "1005", 113998, TaxCategory.NA),
            (Side.CREDIT, "4001", 110000, TaxCategory.SALES_10),
            (Side.CREDIT, "4001", 3998, TaxCategory.SALES_8),
        ]
        assert draft.date == date(2024, 3, 15)
        assert draft.vendor == "株式会社A"
        assert draft.description == "請求書 INV-001"
        assert draft.evidence_status == EvidenceStatus.DIGITAL
        assert validate_lines(draft.lines).is_valid

    def test_sales_journal_single_rate(self):
        invoice = Invoice(
            invoice_number="INV-002", issue_date=date(2024, 4, 1), vendor="B", items=(item("米", "2", 5000, 8),)
        )
        draft = generate_sales_journal(invoice)

        assert summary(draft.lines) == [
            (Side.DEBIT, "1005", 10800, TaxCategory.NA),
            (Side.CREDIT, "4001", 10800, TaxCategory.SALES_8),
        ]

    def test_deposit_journal(self, invoice):
        draft = generate_deposit_journal(invoice, date(2024, 4, 30))

        assert summary(draft.lines) == [
            (Side.DEBIT, "1003", 113998, TaxCategory.NA),
            (Side.CREDIT, "1005", 113998, TaxCategory.NA),
        ]
        assert draft.date == date(2024, 4, 30)
        assert draft.description == "入金 請求書 INV-001"
        assert draft.evidence_status == EvidenceStatus.NONE

    def test_deposit_to_other_account(self, invoice):
        draft = generate_deposit_journal(invoice, date(2024, 4, 30), bank_account_code="1002")
        assert draft.lines[0].account_code == "1002"

    def test_line_ids_are_unique(self, invoice):
        lines = generate_sales_journal(invoice).lines + generate_deposit_journal(invoice, date(2024, 4, 30)).lines
        assert len({line.id for line in lines}) == len(lines)


class TestRecordInvoice:
    def test_record_invoice_and_payment(self, journal_service, seeded_db, invoice):
        entry_id = journal_service.record_invoice(invoice)
        payment_id = journal_service.record_invoice_payment(invoice, date(2024, 4, 30))

        entry = journal_service.get_entry(entry_id)
        assert entry.lines[0].amount == 113998
        assert entry.evidence_status == EvidenceStatus.DIGITAL
        assert journal_service.get_entry(payment_id).date == date(2024, 4, 30)
        assert journal_service.list_vendors() == ["株式会社A"]

    def test_empty_invoice_rejected(self, journal_service, seeded_db):
        invoice = Invoice(invoice_number="INV-0", issue_date=date(2024, 1, 1), vendor="A", items=())

        with pytest.raises(ValidationError, match="Invoice INV-0 has no billable amount"):
            journal_service.record_invoice(invoice)
        with pytest.raises(ValidationError):
            journal_service.record_invoice_payment(invoice, date(2024, 1, 31))


class TestParseInvoiceItem:
    def test_default_rate(self):
        parsed = parse_invoice_item("Design:1:5,000")
        assert parsed == item("Design", "1", 5000)

    def test_reduced_rate(self):
        parsed = parse_invoice_item("菓子:10:500:8")
        assert parsed.tax_rate == 8
        assert parsed.amount == 5000

    def test_description_with_colon(self):
        parsed = parse_invoice_item("保守:1月分:2:3000")
        assert parsed.description == "保守:1月分"
        assert parsed.quantity == Decimal("2")
        assert parsed.tax_rate == 10

    @pytest.mark.parametrize("spec", ["x:abc:100", "x:0:100", "x:1", ":1:100", "x:1:inf", "x:nan:100"])
    def test_invalid(self, spec):
        with pytest.raises(ValidationError):
            parse_invoice_item(spec)


def test_journal_invoice_command(cli_runner, seeded_db, journal_service):
    result = cli_runner.invoke(
        cli,
        [
            "--db-path", seeded_db.database_path,
            "journal", "invoice",
            "--number", "INV-7",
            "--vendor", "株式会社B",
            "--date", "2024-05-10",
            "--item", "保守:3:20000",
            "--item", "菓子:10:500:8",
            "--paid-on", "2024-05-31",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "for invoice INV-7 (total 71,400, tax 6,400)" in result.output
    assert "for the payment on 2024-05-31" in result.output

    entries = journal_service.list_entries(fiscal_year=2024)
    assert [entry.description for entry in entries] == ["入金 請求書 INV-7", "請求書 INV-7"]


def test_journal_invoice_invalid_item(cli_runner, seeded_db):
    result = cli_runner.invoke(
        cli,
        [
            "--db-path", seeded_db.database_path,
            "journal", "invoice", "--number", "INV-8", "--vendor", "A", "--item", "保守",
        ],
    )

    assert result.exit_code == 1
    assert "Error: Invalid item '保守'" in result.output
