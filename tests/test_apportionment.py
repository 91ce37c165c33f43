"""Tests for business-ratio apportionment."""

import pytest
from datetime import date

from bluebook.domain.apportionment import (
    applied_business_ratio,
    apply_business_ratio,
    apportionment_preview,
    copy_entry_for_new,
    find_apportionment_target,
    has_business_ratio_applied,
    recalculate_apportionment,
    remove_business_ratio,
)
from bluebook.domain.entities import (
    Account,
    AccountType,
    AppliedSplit,
    Attachment,
    EvidenceStatus,
    GeneratedCounterpart,
    NO_APPORTIONMENT,
    Side,
    TaxCategory,
)

from conftest import credit, debit, make_entry


def rent_lines(amount=100000):
    return (debit("5017", amount, TaxCategory.PURCHASE_10), credit("1003", amount))


def fixed_ids():
    counter = iter(range(1, 100))
    return lambda: f"generated-{next(counter)}"


class TestPreview:
    @pytest.mark.parametrize(
        "amount,ratio,expected",
        [(100000, 30, (30000, 70000)), (100000, 100, (100000, 0)), (100000, 0, (0, 100000)), (999, 33, (329, 670))],
    )
    def test_preview(self, amount, ratio, expected):
        assert apportionment_preview(amount, ratio) == expected

    def test_parts_add_up(self):
        """Test that business and personal amounts always sum to the original amount."""
        for amount in (1, 7, 999, 12345, 100000):
            for ratio in range(0, 101, 7):
                business, personal = apportionment_preview(amount, ratio)
                assert business + personal == amount
                assert business >= 0 and personal >= 0


class TestApply:
    def test_split_thirty_percent(self):
        """Test splitting 100000 at 30% into 30000 business and 70000 personal."""
        lines = rent_lines()
        result = apply_business_ratio(lines, 0, 30, id_factory=fixed_ids())

        assert result.applied
        assert result.business_amount == 30000
        assert result.personal_amount == 70000
        assert len(result.lines) == 3

        business, draw, bank = result.lines
        assert business.account_code == "5017"
        assert business.amount == 30000
        assert business.apportionment == AppliedSplit(original_amount=100000, ratio=30)
        assert business.id == lines[0].id
        assert draw.id == "generated-1"
        assert draw.side == Side.DEBIT
        assert draw.account_code == "3002"
        assert draw.amount == 70000
        assert draw.tax_category == TaxCategory.NA
        assert isinstance(draw.apportionment, GeneratedCounterpart)
        assert bank == lines[1]

    def test_split_full_business_keeps_zero_draw_line(self):
        result = apply_business_ratio(rent_lines(), 0, 100)

        assert result.lines[0].amount == 100000
        assert result.lines[1].account_code == "3002"
        assert result.lines[1].amount == 0

    def test_split_full_personal(self):
        result = apply_business_ratio(rent_lines(), 0, 0)

        assert result.lines[0].amount == 0
        assert result.lines[1].amount == 100000

    def test_split_keeps_entry_balanced(self):
        result = apply_business_ratio(rent_lines(12345), 0, 37)
        debits = sum(line.amount for line in result.lines if line.side == Side.DEBIT)
        credits = sum(line.amount for line in result.lines if line.side == Side.CREDIT)
        assert debits == credits == 12345

    def test_credit_line_is_not_split(self):
        """Test that targeting a credit line leaves the lines unchanged."""
        lines = rent_lines()
        result = apply_business_ratio(lines, 1, 30)

        assert not result.applied
        assert result.lines == lines
        assert result.business_amount == 0
        assert result.personal_amount == 0

    @pytest.mark.parametrize("index,ratio", [(5, 30), (-1, 30), (0, 101), (0, -1)])
    def test_invalid_input_is_ignored(self, index, ratio):
        lines = rent_lines()
        result = apply_business_ratio(lines, index, ratio)
        assert not result.applied
        assert result.lines == lines

    def test_draw_line_inserted_after_target(self):
        lines = (
            debit("5004", 8000),
            debit("5017", 100000),
            credit("1003", 108000),
        )
        result = apply_business_ratio(lines, 1, 50)
        assert [line.account_code for line in result.lines] == ["5004", "5017", "3002", "1003"]


class TestRemove:
    def test_round_trip(self):
        """Test that removing a split restores amounts and accounts."""
        lines = rent_lines()
        split = apply_business_ratio(lines, 0, 30).lines
        restored = remove_business_ratio(split)

        assert [(l.account_code, l.side, l.amount) for l in restored] == [
            (l.account_code, l.side, l.amount) for l in lines
        ]
        assert all(line.apportionment == NO_APPORTIONMENT for line in restored)

    def test_round_trip_many_ratios(self):
        for ratio in (0, 1, 50, 99, 100):
            lines = rent_lines(54321)
            restored = remove_business_ratio(apply_business_ratio(lines, 0, ratio).lines)
            assert [l.amount for l in restored] == [54321, 54321]

    def test_unsplit_lines_unchanged(self):
        lines = rent_lines()
        assert remove_business_ratio(lines) == lines

    def test_split_status(self):
        lines = rent_lines()
        split = apply_business_ratio(lines, 0, 40).lines

        assert not has_business_ratio_applied(lines)
        assert has_business_ratio_applied(split)
        assert applied_business_ratio(split) == 40
        assert applied_business_ratio(lines) is None


class TestRecalculate:
    def test_recalculate_after_amount_change(self):
        split = apply_business_ratio(rent_lines(), 0, 30).lines
        updated = recalculate_apportionment(split, 0, 200000)

        assert updated[0].amount == 60000
        assert updated[0].apportionment == AppliedSplit(original_amount=200000, ratio=30)
        assert updated[1].amount == 140000

    def test_recalculate_non_applied_line(self):
        lines = rent_lines()
        assert recalculate_apportionment(lines, 0, 5000) == lines
        assert recalculate_apportionment(lines, 9, 5000) == lines


class TestTarget:
    def test_first_enabled_debit_line(self):
        accounts = [
            Account(code="5004", name="水道光熱費", type=AccountType.EXPENSE),
            Account(
                code="5017",
                name="地代家賃",
                type=AccountType.EXPENSE,
                business_ratio_enabled=True,
                default_business_ratio=30,
            ),
        ]
        lines = (debit("5004", 8000), debit("5017", 100000), credit("1003", 108000))

        index, line, account = find_apportionment_target(lines, accounts)
        assert index == 1
        assert line.account_code == "5017"
        assert account.default_business_ratio == 30

    def test_no_target(self):
        accounts = [Account(code="5017", name="地代家賃", type=AccountType.EXPENSE)]
        assert find_apportionment_target(rent_lines(), accounts) is None


class TestCopyForNew:
    def test_copy_strips_metadata(self):
        """Test that a copied entry gets fresh ids, today's date and no evidence."""
        split = apply_business_ratio(rent_lines(), 0, 30).lines
        entry = make_entry(
            date(2024, 5, 1),
            *split,
            vendor="大家",
            description="5月分家賃",
            evidence_status=EvidenceStatus.DIGITAL,
            attachments=(
                Attachment(
                    id="a1",
                    original_name="receipt.pdf",
                    generated_name="2024-05-01_receipt.pdf",
                    mime_type="application/pdf",
                    size=1024,
                ),
            ),
        )

        draft = copy_entry_for_new(entry, date(2024, 6, 1), id_factory=fixed_ids())

        assert draft.date == date(2024, 6, 1)
        assert draft.vendor == "大家"
        assert draft.description == "5月分家賃"
        assert draft.evidence_status == EvidenceStatus.NONE
        assert [line.id for line in draft.lines] == ["generated-1", "generated-2", "generated-3"]
        assert [line.amount for line in draft.lines] == [30000, 70000, 100000]
        assert all(line.apportionment == NO_APPORTIONMENT for line in draft.lines)
