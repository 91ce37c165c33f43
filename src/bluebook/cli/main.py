"""Main CLI entry point."""

import click
from bluebook.database.factories import create_sqlite_database
from bluebook.logging_config import setup_logging

# Import and register all commands at module level
from bluebook.cli.commands import (
    account,
    asset,
    init,
    journal,
    report,
    transfer,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides BLUEBOOK_DB_PATH environment variable)",
    envvar="BLUEBOOK_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default="WARNING",
    envvar="BLUEBOOK_LOG_LEVEL",
    show_default=True,
    help="Log level for messages written to stderr",
)
@click.option(
    "--log-json",
    is_flag=True,
    envvar="BLUEBOOK_LOG_JSON",
    help="Write log messages as JSON lines",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str, log_json: bool):
    """Bluebook - Double-entry bookkeeping for sole proprietors.

    Keep a journal against a Japanese chart of accounts and produce the
    trial balance, ledgers, financial statements and blue-return filing
    document for a fiscal year.
    """
    ctx.ensure_object(dict)
    setup_logging(log_level, json_format=log_json)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
init.register_commands(cli)
account.register_commands(cli)
journal.register_commands(cli)
asset.register_commands(cli)
report.register_commands(cli)
transfer.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
