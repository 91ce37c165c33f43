"""Initialize the chart of accounts."""

import click
from bluebook.domain.account import AccountService


@click.command("init")
@click.pass_context
def init(ctx):
    """Initialize database with the default chart of accounts.

    Safe to run again: accounts that already exist are left untouched.
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    created = service.seed_default_accounts()
    if created:
        click.echo(f"Created {created} default accounts.")
    else:
        click.echo("Default accounts already present.")


def register_commands(cli):
    """Register init command with main CLI."""
    cli.add_command(init)
