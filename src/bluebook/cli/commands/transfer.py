"""Export and import commands."""

from pathlib import Path

import click
from bluebook.cli.error_handling import handle_domain_error
from bluebook.cli.options import year_option
from bluebook.domain.data_transfer import IMPORT_MODES, DataTransferService
from bluebook.domain.errors import DomainError


@click.command("export")
@year_option
@click.option("--output", "-o", type=click.Path(dir_okay=False, writable=True), help="Write to this file instead of stdout")
@click.pass_context
def export_data(ctx, year: int, output: str | None):
    """Export a fiscal year's entries, accounts and vendors as JSON.

    Examples:
        bluebook export --year 2024 -o bluebook-2024.json
    """
    service = DataTransferService(ctx.obj["db"])
    text = service.export_json(year)

    if output is None:
        click.echo(text)
        return

    Path(output).write_text(text + "\n", encoding="utf-8")
    click.echo(f"Exported fiscal year {year} to {output}")


@click.command("import")
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--mode",
    type=click.Choice(IMPORT_MODES),
    default="merge",
    show_default=True,
    help="merge keeps existing records; overwrite replaces the fiscal year's entries",
)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation in overwrite mode")
@click.pass_context
def import_data(ctx, file_path: str, mode: str, yes: bool):
    """Import a JSON export file.

    Examples:
        bluebook import bluebook-2024.json
        bluebook import bluebook-2024.json --mode overwrite
    """
    service = DataTransferService(ctx.obj["db"])
    text = Path(file_path).read_text(encoding="utf-8")

    if mode == "overwrite" and not yes:
        if not click.confirm("Overwrite replaces every journal entry of the exported fiscal year. Continue?"):
            click.echo("Import cancelled.")
            return

    try:
        result = service.import_json(text, mode=mode)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(
        f"Imported {result.journals_imported} journal entries, "
        f"{result.accounts_imported} accounts, {result.vendors_imported} vendors"
    )
    for message in result.errors:
        click.echo(f"Skipped: {message}", err=True)


def register_commands(cli):
    """Register export and import commands with main CLI."""
    cli.add_command(export_data)
    cli.add_command(import_data)
