"""CSV renderings of the reports.

Line items are ``code,name,amount``; subtotal rows leave the first column
empty. Sections start with a ``【...】`` header row and are separated by
blank lines.

Amounts are rendered by ``format_amount``: comma-grouped, ``0`` for zero and
a ``△`` prefix for negatives. Any amount of magnitude 1,000 or more contains
a comma and is quoted by the csv writer, e.g. ``4001,売上高,"1,320,000"`` and
``,当期純利益,"△1,500"``. Readers should parse the files with a CSV parser
rather than splitting on commas.
"""

import csv
import io
from typing import Iterable, Optional, Sequence

from bluebook.domain.balance_sheet import BalanceSheet
from bluebook.domain.blue_return import BlueReturn
from bluebook.domain.consumption_tax import ConsumptionTaxReport
from bluebook.domain.depreciation import DepreciationSchedule
from bluebook.domain.entities import ACCOUNT_TYPE_LABELS, DepreciationMethod
from bluebook.domain.ledger import Ledger
from bluebook.domain.monthly_summary import AccountYearlyTotal, MonthlySales
from bluebook.domain.profit_loss import ProfitLoss, StatementRow
from bluebook.domain.trial_balance import TrialBalance, group_trial_balance

MONTH_LABELS = tuple(f"{month}月" for month in range(1, 13))

METHOD_LABELS = {
    DepreciationMethod.STRAIGHT_LINE: "定額",
    DepreciationMethod.DECLINING_BALANCE: "定率",
}


def format_amount(amount: Optional[int]) -> str:
    """Format yen with thousands separators and a triangle for negatives.

    >>> format_amount(-1500)
    '△1,500'
    """
    if not amount:
        return "0"
    if amount < 0:
        return f"△{-amount:,}"
    return f"{amount:,}"


class _Sheet:
    """Accumulates CSV rows."""

    def __init__(self) -> None:
        self._buffer = io.StringIO()
        self._writer = csv.writer(self._buffer, lineterminator="\n")

    def row(self, *cells: object) -> None:
        self._writer.writerow(cells)

    def blank(self) -> None:
        self._writer.writerow(())

    def items(self, rows: Iterable[StatementRow]) -> None:
        for item in rows:
            self.row(item.account_code, item.account_name, format_amount(item.amount))

    def subtotal(self, label: str, amount: int) -> None:
        self.row("", label, format_amount(amount))

    def text(self) -> str:
        return self._buffer.getvalue()


def profit_loss_to_csv(data: ProfitLoss) -> str:
    sheet = _Sheet()
    sheet.row("損益計算書", f"{data.fiscal_year}年度")
    sheet.blank()

    sheet.row("【売上高】")
    sheet.items(data.sales_revenue)
    sheet.subtotal("売上高 合計", data.total_sales_revenue)
    sheet.blank()

    sheet.row("【売上原価】")
    sheet.items(data.cost_of_sales)
    sheet.subtotal("売上原価 合計", data.total_cost_of_sales)
    sheet.blank()

    sheet.subtotal("売上総利益", data.gross_profit)
    sheet.blank()

    sheet.row("【販売費及び一般管理費】")
    sheet.items(data.operating_expenses)
    sheet.subtotal("販管費 合計", data.total_operating_expenses)
    sheet.blank()

    sheet.subtotal("営業利益", data.operating_income)
    sheet.blank()

    sheet.row("【営業外収益】")
    sheet.items(data.other_revenue)
    sheet.subtotal("営業外収益 合計", data.total_other_revenue)
    sheet.blank()

    sheet.subtotal("当期純利益", data.net_income)
    return sheet.text()


def balance_sheet_to_csv(data: BalanceSheet) -> str:
    sheet = _Sheet()
    sheet.row("貸借対照表", f"{data.fiscal_year}年度")
    sheet.blank()

    sheet.row("【資産の部】")
    sheet.blank()
    sheet.row("＜流動資産＞")
    sheet.items(data.current_assets)
    sheet.subtotal("流動資産 合計", data.total_current_assets)
    sheet.blank()
    sheet.row("＜固定資産＞")
    sheet.items(data.fixed_assets)
    sheet.subtotal("固定資産 合計", data.total_fixed_assets)
    sheet.blank()
    sheet.subtotal("資産合計", data.total_assets)
    sheet.blank()

    sheet.row("【負債の部】")
    sheet.blank()
    sheet.row("＜流動負債＞")
    sheet.items(data.current_liabilities)
    sheet.subtotal("流動負債 合計", data.total_current_liabilities)
    sheet.blank()
    sheet.row("＜固定負債＞")
    sheet.items(data.fixed_liabilities)
    sheet.subtotal("固定負債 合計", data.total_fixed_liabilities)
    sheet.blank()
    sheet.subtotal("負債合計", data.total_liabilities)
    sheet.blank()

    sheet.row("【純資産の部】")
    sheet.items(data.equity)
    if data.retained_earnings:
        sheet.subtotal("繰越利益（当期純利益）", data.retained_earnings)
    sheet.subtotal("純資産合計", data.total_equity)
    sheet.blank()

    sheet.subtotal("負債・純資産合計", data.total_liabilities_and_equity)
    return sheet.text()


def trial_balance_to_csv(data: TrialBalance, fiscal_year: int) -> str:
    sheet = _Sheet()
    sheet.row("合計残高試算表", f"{fiscal_year}年度")
    sheet.blank()

    for group in group_trial_balance(data).groups:
        sheet.row(f"【{group.label}】")
        sheet.row("コード", "勘定科目", "借方合計", "貸方合計", "借方残高", "貸方残高")
        for item in group.rows:
            sheet.row(
                item.account_code,
                item.account_name,
                format_amount(item.debit_total),
                format_amount(item.credit_total),
                format_amount(item.debit_balance),
                format_amount(item.credit_balance),
            )
        sheet.row(
            "",
            f"{ACCOUNT_TYPE_LABELS[group.type]} 小計",
            format_amount(group.subtotal_debit),
            format_amount(group.subtotal_credit),
            format_amount(group.subtotal_debit_balance),
            format_amount(group.subtotal_credit_balance),
        )
        sheet.blank()

    sheet.row(
        "",
        "合計",
        format_amount(data.total_debit),
        format_amount(data.total_credit),
        format_amount(data.total_debit_balance),
        format_amount(data.total_credit_balance),
    )
    sheet.row("貸借一致", "一致" if data.is_balanced else "不一致")
    return sheet.text()


def ledger_to_csv(data: Ledger) -> str:
    sheet = _Sheet()
    sheet.row("総勘定元帳", data.account_code, data.account_name)
    sheet.blank()
    sheet.row("日付", "摘要", "取引先", "相手科目", "借方", "貸方", "残高")
    sheet.row("", "前期繰越", "", "", "", "", format_amount(data.opening_balance))

    for item in data.rows:
        sheet.row(
            item.date.isoformat(),
            item.description,
            item.vendor,
            item.counter_account,
            format_amount(item.debit) if item.debit is not None else "",
            format_amount(item.credit) if item.credit is not None else "",
            format_amount(item.balance),
        )

    sheet.row(
        "",
        "合計",
        "",
        "",
        format_amount(data.total_debit),
        format_amount(data.total_credit),
        format_amount(data.closing_balance),
    )
    return sheet.text()


def consumption_tax_to_csv(data: ConsumptionTaxReport) -> str:
    sheet = _Sheet()
    sheet.row("消費税集計表", f"{data.fiscal_year}年度")
    sheet.blank()

    sheet.row("【課税売上】")
    sheet.row("区分", "税抜金額", "消費税額")
    for item in data.sales_rows:
        sheet.row(item.label, format_amount(item.taxable_amount), format_amount(item.tax_amount))
    sheet.row("課税売上 合計", format_amount(data.total_taxable_sales), format_amount(data.total_sales_tax))
    sheet.blank()

    sheet.row("【課税仕入】")
    sheet.row("区分", "税抜金額", "消費税額")
    for item in data.purchase_rows:
        sheet.row(item.label, format_amount(item.taxable_amount), format_amount(item.tax_amount))
    sheet.row(
        "課税仕入 合計",
        format_amount(data.total_taxable_purchases),
        format_amount(data.total_purchase_tax),
    )
    sheet.blank()

    sheet.row("【納付税額】")
    sheet.row("売上に係る消費税額", "", format_amount(data.total_sales_tax))
    sheet.row("仕入に係る消費税額", "", format_amount(data.total_purchase_tax))
    sheet.row("納付すべき消費税額", "", format_amount(data.net_tax_payable))
    sheet.blank()

    sheet.row("【参考：非課税・不課税】")
    sheet.row("非課税売上", format_amount(data.exempt_sales), "")
    sheet.row("不課税売上", format_amount(data.out_of_scope_sales), "")
    sheet.row("非課税仕入", format_amount(data.exempt_purchases), "")
    sheet.row("不課税仕入", format_amount(data.out_of_scope_purchases), "")
    return sheet.text()


def depreciation_to_csv(data: DepreciationSchedule) -> str:
    sheet = _Sheet()
    sheet.row("減価償却費の計算", f"{data.fiscal_year}年分")
    sheet.blank()
    sheet.row(
        "資産の名称",
        "取得年月",
        "取得価額",
        "償却方法",
        "耐用年数",
        "償却率",
        "本年中の償却期間",
        "償却の基礎となる金額",
        "本年分の償却費",
        "事業専用割合",
        "本年分の必要経費算入額",
        "期末償却累計額",
        "期末未償却残高",
    )

    for item in data.rows:
        sheet.row(
            item.asset_name,
            item.acquisition_date.strftime("%Y-%m"),
            format_amount(item.acquisition_cost),
            METHOD_LABELS[item.depreciation_method],
            item.useful_life,
            str(item.depreciation_rate),
            f"{item.months}ヶ月",
            format_amount(item.depreciation_base),
            format_amount(item.current_year_depreciation),
            f"{item.business_ratio}%",
            format_amount(item.business_deduction),
            format_amount(item.accumulated_depreciation),
            format_amount(item.book_value),
        )

    sheet.blank()
    sheet.row(
        "本年分の償却費合計",
        *([""] * 7),
        format_amount(data.total_depreciation),
        "",
        format_amount(data.total_business_deduction),
        "",
        "",
    )
    return sheet.text()


def monthly_sales_to_csv(data: Sequence[MonthlySales], fiscal_year: int) -> str:
    sheet = _Sheet()
    sheet.row("月別売上（収入）金額及び仕入金額", f"{fiscal_year}年")
    sheet.blank()
    sheet.row("月", "売上（収入）金額", "仕入金額")
    for item in data:
        sheet.row(MONTH_LABELS[item.month - 1], format_amount(item.sales), format_amount(item.purchases))
    sheet.row(
        "合計",
        format_amount(sum(item.sales for item in data)),
        format_amount(sum(item.purchases for item in data)),
    )
    return sheet.text()


def account_yearly_totals_to_csv(data: Sequence[AccountYearlyTotal], fiscal_year: int) -> str:
    sheet = _Sheet()
    sheet.row("科目別月次集計", f"{fiscal_year}年")
    sheet.blank()
    sheet.row("コード", "勘定科目", *MONTH_LABELS, "合計")
    for item in data:
        sheet.row(
            item.account_code,
            item.account_name,
            *(format_amount(amount) for amount in item.monthly_amounts),
            format_amount(item.total),
        )
    return sheet.text()


def blue_return_summary_to_csv(data: BlueReturn) -> str:
    info = data.business_info
    page1, page2, page3, page4 = data.page1, data.page2, data.page3, data.page4

    sheet = _Sheet()
    sheet.row("青色申告決算書（一般用）", f"{data.fiscal_year}年分")
    sheet.blank()

    sheet.row("【事業者情報】")
    sheet.row("氏名", info.name)
    if info.trade_name:
        sheet.row("屋号", info.trade_name)
    sheet.row("住所", info.address)
    sheet.row("事業の種類", info.business_type)
    sheet.blank()

    sheet.row("【1ページ目: 損益計算書】")
    sheet.row("売上（収入）金額", format_amount(page1.sales_total))
    sheet.row("売上原価", format_amount(page1.cost_of_sales))
    sheet.row("売上総利益", format_amount(page1.gross_profit))
    sheet.row("経費合計", format_amount(page1.expenses_total))
    sheet.row("差引金額", format_amount(page1.operating_profit))
    sheet.row("青色申告特別控除", format_amount(page1.blue_return_deduction))
    sheet.row("所得金額", format_amount(page1.business_income))
    sheet.blank()

    sheet.row("【2ページ目: 月別売上・仕入】")
    sheet.row("年間売上合計", format_amount(page2.monthly_sales_total))
    sheet.row("年間仕入合計", format_amount(page2.monthly_purchases_total))
    sheet.row("雑収入", format_amount(page2.misc_income))
    sheet.row("給与賃金合計", format_amount(page2.salary_total))
    sheet.row("地代家賃合計", format_amount(page2.rent_total))
    sheet.blank()

    sheet.row("【3ページ目: 減価償却費】")
    sheet.row("償却資産数", len(page3.rows))
    sheet.row("本年分の償却費合計", format_amount(page3.total_depreciation))
    sheet.row("必要経費算入額合計", format_amount(page3.total_business_deduction))
    sheet.blank()

    sheet.row("【4ページ目: 貸借対照表】")
    sheet.blank()
    sheet.row("資産の部")
    sheet.row("資産合計（期首）", format_amount(page4.assets_total_beginning))
    sheet.row("事業主貸", format_amount(page4.owner_withdrawal))
    sheet.row("資産合計（期末）", format_amount(page4.assets_total_ending))
    sheet.blank()
    sheet.row("負債・資本の部")
    sheet.row("負債合計（期首）", format_amount(page4.liabilities_total_beginning))
    sheet.row("負債合計（期末）", format_amount(page4.liabilities_total_ending))
    sheet.row("事業主借", format_amount(page4.owner_deposit))
    sheet.row("元入金（期首）", format_amount(page4.capital_beginning))
    sheet.row("元入金（期末）", format_amount(page4.capital_ending))
    sheet.row("青色申告特別控除前の所得金額", format_amount(page4.net_income))
    sheet.blank()
    sheet.row("貸借バランス", "一致" if page4.is_balanced else "不一致")
    return sheet.text()
