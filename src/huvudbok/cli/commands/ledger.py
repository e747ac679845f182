"""General ledger (huvudbok) commands."""

import click
from huvudbok.cli.account_resolution import resolve_account_or_exit
from huvudbok.cli.date_filters import period_flags, period_options, resolve_cli_date_range
from huvudbok.cli.error_handling import handle_domain_error
from huvudbok.domain.account import AccountService
from huvudbok.domain.entities import AccountLedger
from huvudbok.domain.errors import DomainError
from huvudbok.domain.ledger import LedgerService


def _echo_ledger(ledger: AccountLedger) -> None:
    account = ledger.account
    click.echo(f"\n{account.account_number} {account.name}")
    click.echo("-" * 90)
    click.echo(f"{'Opening balance':<56} {ledger.opening_balance:>14,.2f}")
    for row in ledger.entries:
        text = row.line_description or row.entry_description
        click.echo(
            f"{row.entry_date} {row.verification_number or '':>5} {text[:30]:<30} "
            f"{row.debit:>12,.2f} {row.credit:>12,.2f} {row.running_balance:>14,.2f}"
        )
    click.echo(
        f"{'Totals':<46} {ledger.total_debit:>12,.2f} {ledger.total_credit:>12,.2f}"
    )
    click.echo(f"{'Closing balance':<56} {ledger.closing_balance:>14,.2f}")


@click.command("ledger")
@click.argument("account", required=False)
@click.option("--all", "show_all", is_flag=True, help="Show every account with activity")
@click.option("--start-date", help="Start date (YYYY-MM-DD)")
@click.option("--end-date", help="End date (YYYY-MM-DD)")
@period_options
@click.option("--fiscal-year", "fiscal_year_id", type=int, help="Restrict to a fiscal year")
@click.pass_context
def ledger(ctx, account, show_all, start_date, end_date, fiscal_year_id, **kwargs):
    """Show the general ledger for ACCOUNT, or for all accounts with --all.

    ACCOUNT is a BAS account number or account name.

    Examples:
        huvudbok ledger 1930 --this-year
        huvudbok ledger --all --fiscal-year 1
    """
    if (account is None) == (not show_all):
        click.echo("Error: Give either ACCOUNT or --all.", err=True)
        ctx.exit(1)

    db = ctx.obj["db"]
    organization_id = ctx.obj["organization_id"]
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags(kwargs),
    )
    service = LedgerService(db, organization_id)

    try:
        if show_all:
            ledgers = service.get_general_ledger(start, end, fiscal_year_id)
        else:
            account_id = resolve_account_or_exit(ctx, AccountService(db, organization_id), account)
            ledgers = [service.get_account_ledger(account_id, start, end, fiscal_year_id)]
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not ledgers:
        click.echo("No posted entries found.")
        return

    for account_ledger in ledgers:
        _echo_ledger(account_ledger)


def register_commands(cli):
    """Register ledger command with main CLI."""
    cli.add_command(ledger)
