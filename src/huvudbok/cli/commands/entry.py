"""Journal entry (verification) commands."""

import click
from huvudbok.cli.account_resolution import resolve_account_or_exit
from huvudbok.cli.date_filters import parse_date_or_exit
from huvudbok.cli.error_handling import handle_domain_error
from huvudbok.domain.account import AccountService
from huvudbok.domain.entities import EntryStatus, JournalEntry, JournalLine
from huvudbok.domain.errors import DomainError
from huvudbok.domain.journal import JournalService, compute_totals, validate_for_post
from huvudbok.utils.line_parser import parse_line_spec


def _build_lines(ctx, account_service: AccountService, line_specs: tuple[str, ...]) -> list[JournalLine]:
    lines = []
    for order, spec in enumerate(line_specs):
        try:
            parsed = parse_line_spec(spec)
        except ValueError as e:
            handle_domain_error(ctx, e)
        account_id = resolve_account_or_exit(ctx, account_service, parsed.account)
        lines.append(
            JournalLine(
                account_id=account_id,
                debit_amount=parsed.debit,
                credit_amount=parsed.credit,
                line_order=order,
                vat_rate=parsed.vat_rate,
                vat_base=parsed.vat_base,
                vat_amount=parsed.vat_amount,
            )
        )
    return lines


def _echo_entry(entry: JournalEntry, account_service: AccountService) -> None:
    number = entry.verification_number if entry.verification_number is not None else "-"
    click.echo(
        f"Verification {number} | ID: {entry.id} | {entry.entry_date or 'no date'} | "
        f"{entry.status.value} | {entry.description}"
    )
    for line in entry.lines:
        account = account_service.get_account(line.account_id) if line.account_id else None
        label = account.account_number if account else "????"
        vat = f" | VAT {line.vat_rate}%: {line.vat_amount}" if line.vat_rate is not None else ""
        click.echo(f"    {label} | D {line.debit_amount:>12,.2f} | C {line.credit_amount:>12,.2f}{vat}")
    totals = compute_totals(entry.lines)
    click.echo(
        f"    Total     D {totals.total_debit:>12,.2f} | C {totals.total_credit:>12,.2f} | "
        f"difference {totals.difference:,.2f}"
    )


@click.group()
def entry_group():
    """Draft, post and void journal entries."""
    pass


@entry_group.command("create")
@click.option("--date", "entry_date", help="Entry date (YYYY-MM-DD)")
@click.option("--description", default="", help="Entry description")
@click.option(
    "--line",
    "line_specs",
    multiple=True,
    help="ACCOUNT:DEBIT:CREDIT[:VAT_RATE:VAT_BASE:VAT_AMOUNT]; repeat for each line",
)
@click.option("--fiscal-year", "fiscal_year_id", type=int, help="Fiscal year ID (default: by date)")
@click.option("--post", "post_now", is_flag=True, help="Post the entry immediately")
@click.pass_context
def create_entry(ctx, entry_date, description, line_specs, fiscal_year_id, post_now):
    """Create a draft entry, optionally posting it.

    Examples:
        huvudbok entry create --date 2024-03-15 --description "Faktura 1001" \\
            --line 1930:1000: --line 3011::1000:25:800:200 --post
    """
    db = ctx.obj["db"]
    organization_id = ctx.obj["organization_id"]
    account_service = AccountService(db, organization_id)
    service = JournalService(db, organization_id)

    day = parse_date_or_exit(ctx, entry_date, "entry date")
    lines = _build_lines(ctx, account_service, line_specs)

    try:
        entry_id = service.create_draft(
            entry_date=day,
            lines=lines,
            description=description,
            fiscal_year_id=fiscal_year_id,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created draft journal entry (ID: {entry_id})")

    if post_now:
        try:
            entry = service.post(entry_id)
        except DomainError as e:
            handle_domain_error(ctx, e)
        click.echo(f"Posted as verification {entry.verification_number}")


@entry_group.command("post")
@click.argument("entry_id", type=int)
@click.pass_context
def post_entry(ctx, entry_id: int):
    """Post a draft entry."""
    service = JournalService(ctx.obj["db"], ctx.obj["organization_id"])

    try:
        entry = service.post(entry_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Posted journal entry {entry_id} as verification {entry.verification_number}")


@entry_group.command("void")
@click.argument("entry_id", type=int)
@click.option("--reason", help="Why the entry is voided")
@click.pass_context
def void_entry(ctx, entry_id: int, reason: str | None):
    """Void a posted entry."""
    service = JournalService(ctx.obj["db"], ctx.obj["organization_id"])

    try:
        entry = service.void(entry_id, reason)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Voided verification {entry.verification_number} (ID: {entry_id})")


@entry_group.command("show")
@click.argument("entry_id", type=int)
@click.pass_context
def show_entry(ctx, entry_id: int):
    """Show an entry with its totals and whether it can be posted."""
    db = ctx.obj["db"]
    organization_id = ctx.obj["organization_id"]
    service = JournalService(db, organization_id)

    try:
        entry = service.require_entry(entry_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    _echo_entry(entry, AccountService(db, organization_id))
    if entry.status == EntryStatus.DRAFT:
        result = validate_for_post(entry)
        if result.is_valid:
            click.echo("Ready to post")
        else:
            click.echo(f"Cannot post: {result.message} [{result.reason.value}]")


@entry_group.command("list")
@click.option("--fiscal-year", "fiscal_year_id", type=int, help="Only this fiscal year")
@click.option(
    "--status",
    type=click.Choice([status.value for status in EntryStatus]),
    help="Only entries with this status",
)
@click.pass_context
def list_entries(ctx, fiscal_year_id: int | None, status: str | None):
    """List journal entries."""
    db = ctx.obj["db"]
    organization_id = ctx.obj["organization_id"]
    service = JournalService(db, organization_id)

    entries = service.list_entries(
        fiscal_year_id=fiscal_year_id,
        status=EntryStatus(status) if status else None,
    )
    if not entries:
        click.echo("No journal entries found.")
        return

    account_service = AccountService(db, organization_id)
    for entry in entries:
        _echo_entry(entry, account_service)


def register_commands(cli):
    """Register journal entry commands with main CLI."""
    cli.add_command(entry_group, name="entry")
