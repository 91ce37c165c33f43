"""Tests for consumption tax calculations."""

import pytest

from bluebook.domain.entities import TaxCategory
from bluebook.domain.tax import (
    BusinessCategory,
    calculate_tax_summary,
    can_use_simplified_tax,
    is_exempt_business,
    is_purchase_category,
    is_sales_category,
    is_taxable,
    simplified_tax,
    tax_amount,
    tax_excluded,
    tax_included,
    tax_rate,
    total_tax,
    total_tax_included,
)

from conftest import credit, debit


class TestRates:
    def test_tax_rate(self):
        assert tax_rate(TaxCategory.SALES_10) == 10
        assert tax_rate(TaxCategory.PURCHASE_8) == 8
        assert tax_rate(TaxCategory.EXEMPT) == 0
        assert tax_rate(None) == 0

    def test_category_predicates(self):
        assert is_taxable(TaxCategory.SALES_8)
        assert not is_taxable(TaxCategory.OUT_OF_SCOPE)
        assert not is_taxable(None)
        assert is_sales_category(TaxCategory.SALES_10)
        assert not is_sales_category(TaxCategory.PURCHASE_10)
        assert is_purchase_category(TaxCategory.PURCHASE_8)


class TestConversion:
    def test_standard_rate(self):
        """Test 110000 at 10% truncates to 99999 exclusive and 10001 tax."""
        assert tax_excluded(110000, 10) == 99999
        assert tax_amount(110000, 10) == 10001

    def test_reduced_rate(self):
        """Test 10800 at 8% gives 10000 exclusive and 800 tax."""
        assert tax_excluded(10800, 8) == 10000
        assert tax_amount(10800, 8) == 800

    def test_zero_rate(self):
        assert tax_excluded(5000, 0) == 5000
        assert tax_amount(5000, 0) == 0

    def test_small_amounts(self):
        assert tax_excluded(108, 8) == 100
        assert tax_excluded(11000, 10) == 10000
        assert tax_amount(1, 10) == 1
        assert tax_excluded(0, 10) == 0

    def test_tax_included(self):
        assert tax_included(1000, 8) == 1080
        assert tax_included(1000, 0) == 1000

    @pytest.mark.parametrize("rate", [0, 8, 10])
    @pytest.mark.parametrize("inclusive", [0, 1, 99, 108, 110, 1000, 10800, 110000, 1234567])
    def test_parts_add_up(self, inclusive, rate):
        """Test that exclusive amount plus tax is always the inclusive amount."""
        assert tax_excluded(inclusive, rate) + tax_amount(inclusive, rate) == inclusive


class TestTotals:
    def test_total_of_taxable_lines(self):
        lines = [
            debit("5006", 11000, TaxCategory.PURCHASE_10),
            debit("5021", 10800, TaxCategory.PURCHASE_8),
            debit("5020", 500, TaxCategory.NA),
            credit("1001", 22300),
        ]
        assert total_tax_included(lines) == 21800
        assert total_tax(lines) == 1000 + 800

    def test_total_with_filter(self):
        lines = [
            credit("4001", 11000, TaxCategory.SALES_10),
            debit("5006", 11000, TaxCategory.PURCHASE_10),
        ]
        assert total_tax_included(lines, is_sales_category) == 11000
        assert total_tax(lines, is_purchase_category) == 1000


class TestTaxSummary:
    def test_summary_buckets(self):
        lines = [
            credit("4001", 110000, TaxCategory.SALES_10),
            credit("4001", 10800, TaxCategory.SALES_8),
            debit("5006", 11000, TaxCategory.PURCHASE_10),
            debit("1005", 120800),
            credit("1003", 11000),
        ]
        summary = calculate_tax_summary(lines)

        assert summary.sales_10.tax_included == 110000
        assert summary.sales_10.tax_excluded == 99999
        assert summary.sales_10.tax == 10001
        assert summary.sales_8.tax == 800
        assert summary.purchase_10.tax == 1000
        assert summary.total_sales_tax == 10801
        assert summary.total_purchase_tax == 1000
        assert summary.net_tax_payable == 9801

    def test_exempt_and_out_of_scope_by_side(self):
        """Test that non-taxable lines are split into sales and purchases by side."""
        lines = [
            credit("4003", 300, TaxCategory.EXEMPT),
            debit("5009", 20000, TaxCategory.EXEMPT),
            credit("4002", 5000, TaxCategory.OUT_OF_SCOPE),
            debit("5002", 7000, TaxCategory.OUT_OF_SCOPE),
        ]
        summary = calculate_tax_summary(lines)

        assert summary.exempt_sales == 300
        assert summary.exempt_purchases == 20000
        assert summary.out_of_scope_sales == 5000
        assert summary.out_of_scope_purchases == 7000
        assert summary.net_tax_payable == 0

    def test_lines_without_category_ignored(self):
        summary = calculate_tax_summary([debit("1003", 5000), credit("3001", 5000)])
        assert summary.total_sales_tax == 0
        assert summary.exempt_sales == 0


class TestSimplifiedTax:
    def test_services(self):
        result = simplified_tax(1_320_000, BusinessCategory.SERVICES)
        assert result.sales_tax == 120_000
        assert result.deemed_purchase_tax == 60_000
        assert result.net_tax == 60_000

    def test_thresholds(self):
        assert is_exempt_business(10_000_000)
        assert not is_exempt_business(10_000_001)
        assert can_use_simplified_tax(50_000_000)
        assert not can_use_simplified_tax(50_000_001)
