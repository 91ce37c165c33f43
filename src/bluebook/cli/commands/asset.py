"""Fixed asset commands."""

from datetime import date
from decimal import Decimal, InvalidOperation

import click
from bluebook.cli.error_handling import handle_domain_error
from bluebook.cli.options import DATE, RATIO, year_option
from bluebook.domain.depreciation import generate_depreciation_row, is_small_scale_asset
from bluebook.domain.entities import AssetCategory, AssetStatus, DepreciationMethod
from bluebook.domain.errors import DomainError, ValidationError
from bluebook.domain.fixed_asset import FixedAssetService
from bluebook.domain.report_csv import format_amount
from bluebook.utils.amount_parser import parse_amount


@click.group()
def asset_group():
    """Manage the fixed asset register."""
    pass


@asset_group.command("add")
@click.argument("name", metavar="NAME")
@click.option("--category", type=click.Choice([c.value for c in AssetCategory]), default="equipment", show_default=True)
@click.option("--date", "acquisition_date", type=DATE, required=True, help="Acquisition date")
@click.option("--cost", required=True, help="Acquisition cost in yen")
@click.option("--life", type=click.IntRange(min=1), required=True, help="Useful life in years")
@click.option(
    "--method",
    type=click.Choice([m.value for m in DepreciationMethod]),
    default=DepreciationMethod.STRAIGHT_LINE.value,
    show_default=True,
)
@click.option("--rate", help="Depreciation rate override, e.g. 0.250")
@click.option("--business-ratio", type=RATIO, default=100, show_default=True)
@click.option("--memo", help="Memo")
@click.pass_context
def add_asset(ctx, name, category, acquisition_date, cost, life, method, rate, business_ratio, memo):
    """Register a fixed asset.

    Examples:
        bluebook asset add "ノートPC" --date 2024-04-10 --cost 240000 --life 4
        bluebook asset add "軽自動車" --category vehicle --date 2023-07-01 --cost 1500000 --life 4 --method declining-balance --business-ratio 70
    """
    db = ctx.obj["db"]
    service = FixedAssetService(db)

    try:
        acquisition_cost = parse_amount(cost)
        rate_value = None
        if rate is not None:
            try:
                rate_value = Decimal(rate)
            except InvalidOperation as e:
                raise ValidationError(f"Could not parse rate '{rate}'") from e

        asset_id = service.register_asset(
            name=name,
            category=AssetCategory(category),
            acquisition_date=acquisition_date,
            acquisition_cost=acquisition_cost,
            useful_life=life,
            depreciation_method=DepreciationMethod(method),
            depreciation_rate_value=rate_value,
            business_ratio=business_ratio,
            memo=memo,
        )
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Registered asset '{name}' (ID: {asset_id})")
    if is_small_scale_asset(acquisition_cost):
        click.echo("Note: cost is below 300,000 yen and may be expensed in full in the acquisition year.")


@asset_group.command("list")
@year_option
@click.option("--active", is_flag=True, help="Only list active assets")
@click.pass_context
def list_assets(ctx, year: int, active: bool):
    """List fixed assets with their book value at the end of a fiscal year."""
    db = ctx.obj["db"]
    service = FixedAssetService(db)

    assets = service.list_assets(include_retired=not active)
    if not assets:
        click.echo("No fixed assets found.")
        return

    click.echo(f"\nFixed assets (book value at end of {year}):")
    click.echo("-" * 80)
    for asset in assets:
        row = generate_depreciation_row(asset, year)
        status = "" if asset.status == AssetStatus.ACTIVE else f" [{asset.status.value} {asset.disposal_date}]"
        click.echo(
            f"ID: {asset.id:3d} | {asset.acquisition_date} | {asset.name:20s} | "
            f"cost {format_amount(asset.acquisition_cost):>12s} | "
            f"book {format_amount(row.book_value):>12s}{status}"
        )


@asset_group.command("dispose")
@click.argument("asset_id", type=int)
@click.option("--date", "disposal_date", type=DATE, default="today", help="Disposal date (default: today)")
@click.option("--sold", is_flag=True, help="Record the asset as sold instead of disposed")
@click.pass_context
def dispose_asset(ctx, asset_id: int, disposal_date: date, sold: bool):
    """Mark a fixed asset as sold or disposed."""
    db = ctx.obj["db"]
    service = FixedAssetService(db)

    status = AssetStatus.SOLD if sold else AssetStatus.DISPOSED
    try:
        service.dispose_asset(asset_id, disposal_date, status=status)
        click.echo(f"Marked asset {asset_id} as {status.value} on {disposal_date}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register fixed asset commands with main CLI."""
    cli.add_command(asset_group, name="asset")
