"""Account management commands."""

import click
from bluebook.cli.error_handling import handle_domain_error
from bluebook.cli.options import RATIO
from bluebook.domain.account import AccountService
from bluebook.domain.entities import ACCOUNT_TYPE_LABELS, AccountType, TaxCategory
from bluebook.domain.errors import DomainError

ACCOUNT_TYPES = [t.value for t in AccountType]
TAX_CATEGORIES = [t.value for t in TaxCategory]


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("list")
@click.option("--type", "account_type", type=click.Choice(ACCOUNT_TYPES), help="Only list accounts of this type")
@click.pass_context
def list_accounts(ctx, account_type: str | None):
    """List accounts ordered by code."""
    db = ctx.obj["db"]
    service = AccountService(db)

    accounts = service.list_accounts(AccountType(account_type) if account_type else None)
    if not accounts:
        click.echo("No accounts found. Run 'bluebook init' to create the default chart of accounts.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 60)
    for acc in accounts:
        flags = []
        if acc.is_system:
            flags.append("system")
        if acc.business_ratio_enabled:
            ratio = acc.default_business_ratio if acc.default_business_ratio is not None else 100
            flags.append(f"apportion {ratio}%")
        suffix = f" ({', '.join(flags)})" if flags else ""
        click.echo(f"{acc.code} | {ACCOUNT_TYPE_LABELS[acc.type]:4s} | {acc.name}{suffix}")


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--type", "account_type", type=click.Choice(ACCOUNT_TYPES), required=True, help="Account type")
@click.option("--tax-category", type=click.Choice(TAX_CATEGORIES), help="Default tax category for new lines")
@click.option("--business-ratio", type=RATIO, help="Enable apportionment with this default ratio")
@click.pass_context
def create_account(ctx, name: str, account_type: str, tax_category: str | None, business_ratio: int | None):
    """Create a user account. The code is assigned automatically.

    Examples:
        bluebook account create "サーバー費" --type expense --tax-category purchase_10
        bluebook account create "家賃（自宅兼事務所）" --type expense --business-ratio 30
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    try:
        code = service.create_account(
            name=name,
            account_type=AccountType(account_type),
            default_tax_category=TaxCategory(tax_category) if tax_category else None,
            business_ratio_enabled=business_ratio is not None,
            default_business_ratio=business_ratio,
        )
        click.echo(f"Created account '{name}' (code: {code})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("rename")
@click.argument("code", metavar="CODE")
@click.argument("new_name", metavar="NEW_NAME")
@click.pass_context
def rename_account(ctx, code: str, new_name: str) -> None:
    """Rename a user account. System accounts cannot be renamed.

    Examples:
        bluebook account rename 5101 "クラウド利用料"
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    try:
        service.rename_account(code, new_name)
        click.echo(f"Renamed account {code} to '{new_name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("settings")
@click.argument("code", metavar="CODE")
@click.option("--tax-category", type=click.Choice(TAX_CATEGORIES), help="Default tax category")
@click.option("--business-ratio", type=RATIO, help="Enable apportionment with this default ratio")
@click.option("--no-business-ratio", is_flag=True, help="Disable apportionment")
@click.pass_context
def account_settings(ctx, code: str, tax_category: str | None, business_ratio: int | None, no_business_ratio: bool):
    """Change tax and apportionment defaults of any account."""
    db = ctx.obj["db"]
    service = AccountService(db)

    enabled = None
    if no_business_ratio:
        enabled = False
    elif business_ratio is not None:
        enabled = True

    try:
        service.update_settings(
            code,
            default_tax_category=TaxCategory(tax_category) if tax_category else None,
            business_ratio_enabled=enabled,
            default_business_ratio=business_ratio,
        )
        click.echo(f"Updated settings of account {code}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("delete")
@click.argument("code", metavar="CODE")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, code: str, yes: bool) -> None:
    """Delete a user account.

    The account can only be deleted if no journal line uses it.

    Examples:
        bluebook account delete 5101
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    account_obj = service.get_account(code)
    if account_obj is None:
        click.echo(f"Error: Account {code} not found", err=True)
        ctx.exit(1)

    # Confirm deletion
    if not yes and not click.confirm(f"Are you sure you want to delete account '{account_obj.name}' ({code})?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(code)
        click.echo(f"Deleted account '{account_obj.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
