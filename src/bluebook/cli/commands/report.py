"""Report commands."""

import click
from bluebook.cli.error_handling import handle_domain_error
from bluebook.cli.options import year_option
from bluebook.domain.blue_return import DEDUCTION_TIERS, DEFAULT_DEDUCTION_TIER, validate_blue_return
from bluebook.domain.entities import BusinessInfo
from bluebook.domain.errors import DomainError
from bluebook.domain.report_csv import (
    account_yearly_totals_to_csv,
    balance_sheet_to_csv,
    blue_return_summary_to_csv,
    consumption_tax_to_csv,
    depreciation_to_csv,
    format_amount,
    ledger_to_csv,
    monthly_sales_to_csv,
    profit_loss_to_csv,
    trial_balance_to_csv,
)
from bluebook.domain.reports import ReportService
from bluebook.domain.trial_balance import group_trial_balance
from bluebook.utils.amount_parser import parse_amount

WIDTH = 60


def csv_option(f):
    return click.option("--csv", "as_csv", is_flag=True, help="Print CSV instead of a text report")(f)


def _title(text: str) -> None:
    click.echo(f"\n{text}")
    click.echo("=" * WIDTH)


def _section(text: str) -> None:
    click.echo(f"\n【{text}】")


def _amount_line(label: str, amount: int, indent: int = 2) -> None:
    width = WIDTH - indent - 14
    click.echo(f"{' ' * indent}{label:<{width}s}{format_amount(amount):>14s}")


def _rows(rows) -> None:
    for row in rows:
        _amount_line(f"{row.account_code} {row.account_name}", row.amount)


@click.group()
def report_group():
    """Produce reports for a fiscal year."""
    pass


@report_group.command("trial-balance")
@year_option
@csv_option
@click.pass_context
def trial_balance(ctx, year: int, as_csv: bool):
    """Show the trial balance grouped by account type."""
    service = ReportService(ctx.obj["db"])
    data = service.trial_balance(year)

    if as_csv:
        click.echo(trial_balance_to_csv(data, year), nl=False)
        return

    _title(f"Trial balance {year}")
    click.echo(f"  {'Account':<26s}{'Debit':>16s}{'Credit':>16s}")
    for group in group_trial_balance(data).groups:
        _section(group.label)
        for row in group.rows:
            click.echo(
                f"  {row.account_code} {row.account_name:<21s}"
                f"{format_amount(row.debit_balance):>16s}{format_amount(row.credit_balance):>16s}"
            )
    click.echo("-" * WIDTH)
    click.echo(
        f"  {'Total':<26s}{format_amount(data.total_debit_balance):>16s}"
        f"{format_amount(data.total_credit_balance):>16s}"
    )
    if not data.is_balanced:
        click.echo("Warning: debit and credit totals do not match", err=True)


@report_group.command("ledger")
@click.argument("account_code", metavar="CODE")
@year_option
@csv_option
@click.pass_context
def ledger(ctx, account_code: str, year: int, as_csv: bool):
    """Show the general ledger of one account."""
    service = ReportService(ctx.obj["db"])
    try:
        data = service.ledger(year, account_code)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if as_csv:
        click.echo(ledger_to_csv(data), nl=False)
        return

    _title(f"Ledger {data.account_code} {data.account_name} {year}")
    for row in data.rows:
        debit = format_amount(row.debit) if row.debit is not None else ""
        credit = format_amount(row.credit) if row.credit is not None else ""
        click.echo(
            f"  {row.date.isoformat()} {row.counter_account:<12s} {row.description[:16]:<16s}"
            f"{debit:>12s}{credit:>12s}{format_amount(row.balance):>14s}"
        )
    click.echo("-" * WIDTH)
    _amount_line("Debit total", data.total_debit)
    _amount_line("Credit total", data.total_credit)
    _amount_line("Closing balance", data.closing_balance)


@report_group.command("profit-loss")
@year_option
@csv_option
@click.pass_context
def profit_loss(ctx, year: int, as_csv: bool):
    """Show the profit and loss statement."""
    data = ReportService(ctx.obj["db"]).profit_loss(year)

    if as_csv:
        click.echo(profit_loss_to_csv(data), nl=False)
        return

    _title(f"損益計算書 {year}")
    _section("売上高")
    _rows(data.sales_revenue)
    _section("売上原価")
    _rows(data.cost_of_sales)
    _amount_line("売上総利益", data.gross_profit, indent=0)
    _section("販売費及び一般管理費")
    _rows(data.operating_expenses)
    _amount_line("営業利益", data.operating_income, indent=0)
    if data.other_revenue:
        _section("営業外収益")
        _rows(data.other_revenue)
    click.echo("-" * WIDTH)
    _amount_line("当期純利益", data.net_income, indent=0)


@report_group.command("balance-sheet")
@year_option
@csv_option
@click.pass_context
def balance_sheet(ctx, year: int, as_csv: bool):
    """Show the balance sheet at the end of the fiscal year."""
    data = ReportService(ctx.obj["db"]).balance_sheet(year)

    if as_csv:
        click.echo(balance_sheet_to_csv(data), nl=False)
        return

    _title(f"貸借対照表 {year}")
    _section("流動資産")
    _rows(data.current_assets)
    _section("固定資産")
    _rows(data.fixed_assets)
    _amount_line("資産合計", data.total_assets, indent=0)
    _section("流動負債")
    _rows(data.current_liabilities)
    _section("固定負債")
    _rows(data.fixed_liabilities)
    _amount_line("負債合計", data.total_liabilities, indent=0)
    _section("純資産")
    _rows(data.equity)
    _amount_line("繰越利益（当期純利益）", data.retained_earnings)
    _amount_line("純資産合計", data.total_equity, indent=0)
    click.echo("-" * WIDTH)
    _amount_line("負債・純資産合計", data.total_liabilities_and_equity, indent=0)
    if not data.is_balanced:
        click.echo("Warning: assets do not equal liabilities and equity", err=True)


@report_group.command("consumption-tax")
@year_option
@csv_option
@click.pass_context
def consumption_tax(ctx, year: int, as_csv: bool):
    """Summarize consumption tax on sales and purchases."""
    data = ReportService(ctx.obj["db"]).consumption_tax(year)

    if as_csv:
        click.echo(consumption_tax_to_csv(data), nl=False)
        return

    _title(f"消費税集計 {year}")
    _section("課税売上")
    for row in data.sales_rows:
        _amount_line(f"{row.label} 税込 {format_amount(row.taxable_amount)}", row.tax_amount)
    _section("課税仕入")
    for row in data.purchase_rows:
        _amount_line(f"{row.label} 税込 {format_amount(row.taxable_amount)}", row.tax_amount)
    click.echo("-" * WIDTH)
    _amount_line("売上に係る消費税", data.total_sales_tax, indent=0)
    _amount_line("仕入に係る消費税", data.total_purchase_tax, indent=0)
    _amount_line("差引納付税額", data.net_tax_payable, indent=0)


@report_group.command("depreciation")
@year_option
@csv_option
@click.pass_context
def depreciation(ctx, year: int, as_csv: bool):
    """Show the depreciation schedule."""
    data = ReportService(ctx.obj["db"]).depreciation(year)

    if as_csv:
        click.echo(depreciation_to_csv(data), nl=False)
        return

    _title(f"減価償却費の計算 {year}")
    if not data.rows:
        click.echo("No fixed assets in service.")
        return
    for row in data.rows:
        click.echo(
            f"  {row.asset_name:<16s} {row.months:2d}か月 "
            f"償却費 {format_amount(row.current_year_depreciation):>10s} "
            f"必要経費 {format_amount(row.business_deduction):>10s} "
            f"未償却残高 {format_amount(row.book_value):>10s}"
        )
    click.echo("-" * WIDTH)
    _amount_line("償却費合計", data.total_depreciation, indent=0)
    _amount_line("必要経費算入額合計", data.total_business_deduction, indent=0)


@report_group.command("monthly")
@year_option
@csv_option
@click.pass_context
def monthly(ctx, year: int, as_csv: bool):
    """Show monthly sales, purchases and per-account totals."""
    data = ReportService(ctx.obj["db"]).monthly_summary(year)

    if as_csv:
        click.echo(monthly_sales_to_csv(data.monthly_sales, year), nl=False)
        click.echo()
        click.echo(account_yearly_totals_to_csv(data.account_totals, year), nl=False)
        return

    _title(f"月別集計 {year}")
    click.echo(f"  {'月':<6s}{'売上':>16s}{'仕入':>16s}{'経費':>16s}")
    for month in data.monthly_totals:
        click.echo(
            f"  {month.month:>2d}月  {format_amount(month.sales):>16s}"
            f"{format_amount(month.purchases):>16s}{format_amount(month.expenses):>16s}"
        )


@report_group.command("filing")
@year_option
@csv_option
@click.option("--name", default="", help="Filer name")
@click.option("--address", default="", help="Business address")
@click.option("--business-type", default="", help="Type of business")
@click.option("--trade-name", help="Trade name")
@click.option("--phone", help="Phone number")
@click.option("--inventory-start", default="0", help="Inventory at the start of the year")
@click.option("--inventory-end", default="0", help="Inventory at the end of the year")
@click.option("--family-deduction", default="0", help="Family employee and similar deductions")
@click.option(
    "--deduction-tier",
    type=click.Choice([str(tier) for tier in DEDUCTION_TIERS]),
    default=str(DEFAULT_DEDUCTION_TIER),
    show_default=True,
    help="Blue-return special deduction in ten-thousand yen",
)
@click.pass_context
def filing(ctx, year, as_csv, name, address, business_type, trade_name, phone,
           inventory_start, inventory_end, family_deduction, deduction_tier):
    """Compose the blue-return filing document (青色申告決算書)."""
    service = ReportService(ctx.obj["db"])
    info = BusinessInfo(
        name=name,
        address=address,
        business_type=business_type,
        trade_name=trade_name,
        phone_number=phone,
    )

    try:
        data = service.blue_return(
            year,
            info,
            inventory_start=parse_amount(inventory_start),
            inventory_end=parse_amount(inventory_end),
            special_deduction=parse_amount(family_deduction),
            deduction_tier=int(deduction_tier),
        )
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
        return

    if as_csv:
        click.echo(blue_return_summary_to_csv(data), nl=False)
    else:
        page1 = data.page1
        _title(f"青色申告決算書 {year}")
        _amount_line("売上（収入）金額", page1.sales_total, indent=0)
        _amount_line("売上原価", page1.cost_of_sales, indent=0)
        _amount_line("差引金額", page1.gross_profit, indent=0)
        _section("経費")
        _rows(page1.expenses)
        _amount_line("経費計", page1.expenses_total, indent=0)
        _amount_line("差引金額", page1.operating_profit, indent=0)
        _amount_line("青色申告特別控除前の所得金額", page1.income_before_deduction, indent=0)
        _amount_line("青色申告特別控除額", page1.blue_return_deduction, indent=0)
        click.echo("-" * WIDTH)
        _amount_line("所得金額", page1.business_income, indent=0)
        _section("貸借対照表（期末）")
        _amount_line("資産合計", data.page4.assets_total_ending)
        _amount_line("事業主貸", data.page4.owner_withdrawal)
        _amount_line("負債合計", data.page4.liabilities_total_ending)
        _amount_line("事業主借", data.page4.owner_deposit)
        _amount_line("元入金", data.page4.capital_ending)

    for message in validate_blue_return(data):
        click.echo(f"Warning: {message}", err=True)


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
