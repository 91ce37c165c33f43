"""Journal entry commands."""

import uuid
from decimal import Decimal, InvalidOperation

import click
from bluebook.cli.error_handling import handle_domain_error
from bluebook.cli.options import DATE, RATIO, year_option
from bluebook.domain.account_codes import ORDINARY_DEPOSIT_CODE
from bluebook.domain.entities import (
    AppliedSplit,
    EvidenceStatus,
    JournalEntry,
    JournalLine,
    Side,
    TaxCategory,
)
from bluebook.domain.errors import DomainError, NotFoundError, ValidationError
from bluebook.domain.invoice_journal import Invoice, InvoiceItem
from bluebook.domain.journal import JournalService
from bluebook.domain.report_csv import format_amount
from bluebook.utils.amount_parser import parse_amount


def parse_line_spec(spec: str, side: Side) -> JournalLine:
    """Parse ``CODE:AMOUNT[:TAX_CATEGORY]`` into a journal line.

    Raises:
        ValidationError: If the line text is malformed
    """
    parts = spec.split(":")
    if len(parts) not in (2, 3):
        raise ValidationError(f"Invalid line '{spec}', expected CODE:AMOUNT[:TAX_CATEGORY]")

    code = parts[0].strip()
    try:
        amount = parse_amount(parts[1])
    except ValueError as e:
        raise ValidationError(str(e)) from e

    tax_category = None
    if len(parts) == 3 and parts[2].strip():
        try:
            tax_category = TaxCategory(parts[2].strip())
        except ValueError as e:
            raise ValidationError(f"Unknown tax category '{parts[2].strip()}'") from e

    return JournalLine(
        id=str(uuid.uuid4()),
        side=side,
        account_code=code,
        amount=amount,
        tax_category=tax_category,
    )


def parse_invoice_item(spec: str) -> InvoiceItem:
    """Parse ``DESCRIPTION:QUANTITY:UNIT_PRICE[:RATE]`` into an invoice item.

    The description may itself contain colons; fields are taken from the
    right. RATE is 10 (default) or 8.

    Raises:
        ValidationError: If the item text is malformed
    """
    parts = spec.rsplit(":", 3)
    rate = 10
    if len(parts) == 4 and parts[3].strip().rstrip("%") in ("10", "8"):
        rate = int(parts[3].strip().rstrip("%"))
        parts = parts[:3]
    elif len(parts) == 4:
        parts = [f"{parts[0]}:{parts[1]}", parts[2], parts[3]]
    if len(parts) != 3 or not parts[0].strip():
        raise ValidationError(f"Invalid item '{spec}', expected DESCRIPTION:QUANTITY:UNIT_PRICE[:RATE]")

    try:
        quantity = Decimal(parts[1].strip())
    except InvalidOperation as e:
        raise ValidationError(f"Could not parse quantity '{parts[1].strip()}'") from e
    if not quantity.is_finite() or quantity <= 0:
        raise ValidationError(f"Quantity must be a positive number, got '{parts[1].strip()}'")

    try:
        unit_price = parse_amount(parts[2])
    except ValueError as e:
        raise ValidationError(str(e)) from e

    return InvoiceItem(description=parts[0].strip(), quantity=quantity, unit_price=unit_price, tax_rate=rate)


def resolve_entry_id(service: JournalService, entry_ref: str) -> str:
    """Resolve a full entry ID or a unique ID prefix.

    Raises:
        NotFoundError: If no entry matches
        ValidationError: If the prefix matches more than one entry
    """
    if service.get_entry(entry_ref) is not None:
        return entry_ref

    matches = [entry.id for entry in service.list_entries() if entry.id.startswith(entry_ref)]
    if not matches:
        raise NotFoundError(f"Journal entry {entry_ref} not found")
    if len(matches) > 1:
        raise ValidationError(f"Journal entry prefix '{entry_ref}' is ambiguous ({len(matches)} matches)")
    return matches[0]


def _line_label(line: JournalLine) -> str:
    label = f"{line.account_code} {format_amount(line.amount):>12s}"
    if line.tax_category is not None:
        label += f" [{line.tax_category.value}]"
    if isinstance(line.apportionment, AppliedSplit):
        label += f" (business {line.apportionment.ratio}% of {format_amount(line.apportionment.original_amount)})"
    elif line.is_generated:
        label += " (personal share)"
    return label


def _echo_entry(entry: JournalEntry) -> None:
    header = f"{entry.date.isoformat()} | {entry.id[:8]} | {entry.description}"
    if entry.vendor:
        header += f" | {entry.vendor}"
    click.echo(header)
    for line in entry.lines:
        side = "Dr" if line.side == Side.DEBIT else "Cr"
        click.echo(f"    {side} {_line_label(line)}")


@click.group()
def journal_group():
    """Record and manage journal entries."""
    pass


@journal_group.command("add")
@click.option("--date", "entry_date", type=DATE, default="today", help="Entry date (default: today)")
@click.option("--debit", "debits", multiple=True, required=True, help="Debit line CODE:AMOUNT[:TAX_CATEGORY]")
@click.option("--credit", "credits", multiple=True, required=True, help="Credit line CODE:AMOUNT[:TAX_CATEGORY]")
@click.option("--description", default="", help="Description")
@click.option("--vendor", default="", help="Vendor name")
@click.option(
    "--evidence",
    type=click.Choice([s.value for s in EvidenceStatus]),
    default=EvidenceStatus.NONE.value,
    help="Where the evidence is kept",
)
@click.pass_context
def add_entry(ctx, entry_date, debits, credits, description: str, vendor: str, evidence: str):
    """Add a journal entry. Debit and credit totals must match.

    Examples:
        bluebook journal add --date 2024-01-15 --debit 5006:1100:purchase_10 --credit 1001:1100 --description "携帯料金"
        bluebook journal add --debit 1005:110000:sales_10 --credit 4001:110000 --vendor "株式会社A"
    """
    db = ctx.obj["db"]
    service = JournalService(db)

    try:
        lines = [parse_line_spec(spec, Side.DEBIT) for spec in debits]
        lines += [parse_line_spec(spec, Side.CREDIT) for spec in credits]
        entry_id = service.create_entry(
            date=entry_date,
            lines=lines,
            vendor=vendor,
            description=description,
            evidence_status=EvidenceStatus(evidence),
        )
        click.echo(f"Created journal entry {entry_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@journal_group.command("list")
@year_option
@click.option("--search", "query", default="", help="Search words: text, account name, amount, 3月, 2024-03, 3/15")
@click.pass_context
def list_entries(ctx, year: int, query: str):
    """List the journal entries of a fiscal year, newest first.

    Examples:
        bluebook journal list --year 2024
        bluebook journal list --search "通信会社 6月"
        bluebook journal list --search "消耗品費 11,000"
    """
    db = ctx.obj["db"]
    service = JournalService(db)

    entries = service.search_entries(query, fiscal_year=year)
    if not entries:
        if query.strip():
            click.echo(f"No journal entries matching '{query.strip()}' in {year}.")
        else:
            click.echo(f"No journal entries for {year}.")
        return

    click.echo(f"\nJournal entries for {year}:")
    click.echo("-" * 60)
    for entry in entries:
        _echo_entry(entry)


@journal_group.command("show")
@click.argument("entry_ref", metavar="ENTRY_ID")
@click.pass_context
def show_entry(ctx, entry_ref: str):
    """Show one journal entry. A unique ID prefix is enough."""
    db = ctx.obj["db"]
    service = JournalService(db)

    try:
        entry = service.get_entry(resolve_entry_id(service, entry_ref))
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    _echo_entry(entry)


@journal_group.command("apportion")
@click.argument("entry_ref", metavar="ENTRY_ID")
@click.option("--line", "line_number", type=click.IntRange(min=1), help="Line number to split (1-based, as shown)")
@click.option("--ratio", type=RATIO, help="Business-use percentage")
@click.pass_context
def apportion_entry(ctx, entry_ref: str, line_number: int | None, ratio: int | None):
    """Split an expense line between business and personal use.

    Without --line, the first debit line on an account with apportionment
    enabled is split; without --ratio, that account's default ratio is used.

    Examples:
        bluebook journal apportion 3f2a --ratio 60
        bluebook journal apportion 3f2a --line 1 --ratio 30
    """
    db = ctx.obj["db"]
    service = JournalService(db)

    try:
        entry_id = resolve_entry_id(service, entry_ref)
        line_index = line_number - 1 if line_number is not None else None
        result = service.apply_business_ratio(entry_id, line_index=line_index, ratio=ratio)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not result.applied:
        click.echo("Error: No debit line to apportion. Use --line and --ratio to choose one.", err=True)
        ctx.exit(1)

    click.echo(
        f"Split entry {entry_id[:8]}: business {format_amount(result.business_amount)}, "
        f"personal {format_amount(result.personal_amount)}"
    )


@journal_group.command("unapportion")
@click.argument("entry_ref", metavar="ENTRY_ID")
@click.pass_context
def unapportion_entry(ctx, entry_ref: str):
    """Undo the business-use split of an entry."""
    db = ctx.obj["db"]
    service = JournalService(db)

    try:
        entry = service.remove_business_ratio(resolve_entry_id(service, entry_ref))
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Removed business-use split from entry {entry.id[:8]}")


@journal_group.command("invoice")
@click.option("--number", "invoice_number", required=True, help="Invoice number")
@click.option("--vendor", required=True, help="Customer the invoice is addressed to")
@click.option("--date", "issue_date", type=DATE, default="today", help="Issue date (default: today)")
@click.option(
    "--item",
    "items",
    multiple=True,
    required=True,
    help="Invoice line DESCRIPTION:QUANTITY:UNIT_PRICE[:RATE], prices tax-exclusive",
)
@click.option("--paid-on", type=DATE, help="Also book the payment received on this date")
@click.option("--bank", "bank_account_code", default=ORDINARY_DEPOSIT_CODE, show_default=True, help="Account receiving the payment")
@click.pass_context
def record_invoice(ctx, invoice_number: str, vendor: str, issue_date, items, paid_on, bank_account_code: str):
    """Book an issued invoice as accounts receivable against sales.

    Consumption tax is added per rate and truncated to whole yen.

    Examples:
        bluebook journal invoice --number INV-001 --vendor "株式会社A" --item "Web制作:1:100000"
        bluebook journal invoice --number INV-002 --vendor "株式会社B" --item "保守:3:20000" --item "菓子:10:500:8" --paid-on 2024-05-31
    """
    db = ctx.obj["db"]
    service = JournalService(db)

    try:
        invoice = Invoice(
            invoice_number=invoice_number.strip(),
            issue_date=issue_date,
            vendor=vendor.strip(),
            items=tuple(parse_invoice_item(spec) for spec in items),
        )
        entry_id = service.record_invoice(invoice)
        click.echo(
            f"Created journal entry {entry_id} for invoice {invoice.invoice_number} "
            f"(total {format_amount(invoice.amounts.total)}, tax {format_amount(invoice.amounts.tax_amount)})"
        )
        if paid_on is not None:
            payment_id = service.record_invoice_payment(invoice, paid_on, bank_account_code)
            click.echo(f"Created journal entry {payment_id} for the payment on {paid_on.isoformat()}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@journal_group.command("delete")
@click.argument("entry_ref", metavar="ENTRY_ID")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_entry(ctx, entry_ref: str, yes: bool):
    """Delete a journal entry."""
    db = ctx.obj["db"]
    service = JournalService(db)

    try:
        entry_id = resolve_entry_id(service, entry_ref)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not yes and not click.confirm(f"Are you sure you want to delete journal entry {entry_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_entry(entry_id)
        click.echo(f"Deleted journal entry {entry_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register journal commands with main CLI."""
    cli.add_command(journal_group, name="journal")
