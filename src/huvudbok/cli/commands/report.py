"""Financial statement commands."""

from datetime import date

import click
from huvudbok.cli.date_filters import (
    parse_date_or_exit,
    period_flags,
    period_options,
    resolve_cli_date_range,
)
from huvudbok.cli.error_handling import handle_domain_error
from huvudbok.domain.errors import DomainError
from huvudbok.domain.reports import (
    ASSETS,
    EQUITY_AND_LIABILITIES,
    FinancialReportService,
    StatementGroup,
)


def _echo_group(group: StatementGroup, comparative: bool) -> None:
    if not group.lines:
        return
    click.echo(f"\n  {group.name}")
    for line in group.lines:
        row = f"    {line.account.account_number} {line.account.name[:36]:<36} {line.amount:>14,.2f}"
        if comparative:
            row += f" {line.comparative_amount:>14,.2f}"
        click.echo(row)
    total = f"  {'Summa ' + group.name.lower():<41} {group.total:>14,.2f}"
    if comparative:
        total += f" {group.comparative_total:>14,.2f}"
    click.echo(total)


def _echo_total(label: str, amount, comparative_amount=None) -> None:
    row = f"{label:<43} {amount:>14,.2f}"
    if comparative_amount is not None:
        row += f" {comparative_amount:>14,.2f}"
    click.echo(row)


@click.group()
def report_group():
    """Financial statements."""
    pass


@report_group.command("balances")
@click.option("--start-date", help="Start date (YYYY-MM-DD)")
@click.option("--end-date", help="End date (YYYY-MM-DD)")
@period_options
@click.option("--fiscal-year", "fiscal_year_id", type=int, help="Restrict to a fiscal year")
@click.pass_context
def balances(ctx, start_date, end_date, fiscal_year_id, **kwargs):
    """Show debit, credit and balance per account."""
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags(kwargs),
    )
    service = FinancialReportService(ctx.obj["db"], ctx.obj["organization_id"])
    try:
        account_balances = service.get_account_balances(start, end, fiscal_year_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not account_balances:
        click.echo("No posted entries found.")
        return

    for item in account_balances:
        click.echo(
            f"{item.account.account_number} {item.account.name[:30]:<30} "
            f"{item.total_debit:>14,.2f} {item.total_credit:>14,.2f} {item.balance:>14,.2f}"
        )


@report_group.command("balance-sheet")
@click.option("--as-of", "as_of", help="Balance date (default: today)")
@click.option("--compare-to", help="Comparative balance date")
@click.option("--fiscal-year", "fiscal_year_id", type=int, help="Restrict to a fiscal year")
@click.pass_context
def balance_sheet(ctx, as_of, compare_to, fiscal_year_id):
    """Show the balance sheet (balansräkning).

    Examples:
        huvudbok report balance-sheet --as-of 2024-12-31 --compare-to 2023-12-31
    """
    as_of_date = parse_date_or_exit(ctx, as_of, "balance date") or date.today()
    comparative_date = parse_date_or_exit(ctx, compare_to, "comparative date")

    service = FinancialReportService(ctx.obj["db"], ctx.obj["organization_id"])
    try:
        sheet = service.get_balance_sheet(as_of_date, comparative_date, fiscal_year_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    comparative = comparative_date is not None
    click.echo(f"Balance sheet as of {sheet.as_of_date}")

    click.echo("\nTILLGÅNGAR")
    for group in sheet.section(ASSETS):
        _echo_group(group, comparative)
    _echo_total(
        "SUMMA TILLGÅNGAR",
        sheet.total_assets,
        sheet.comparative_total_assets if comparative else None,
    )

    click.echo("\nEGET KAPITAL OCH SKULDER")
    for group in sheet.section(EQUITY_AND_LIABILITIES):
        _echo_group(group, comparative)
    _echo_total(
        "  Årets resultat",
        sheet.result_for_period,
        sheet.comparative_result_for_period if comparative else None,
    )
    _echo_total(
        "SUMMA EGET KAPITAL OCH SKULDER",
        sheet.total_equity_and_liabilities,
        sheet.comparative_total_equity_and_liabilities if comparative else None,
    )

    if not sheet.is_balanced:
        click.echo("\nWarning: the balance sheet does not balance.", err=True)


@report_group.command("income-statement")
@click.option("--start-date", help="Start date (YYYY-MM-DD)")
@click.option("--end-date", help="End date (YYYY-MM-DD)")
@period_options
@click.option("--compare-start", help="Comparative period start date")
@click.option("--compare-end", help="Comparative period end date")
@click.option("--fiscal-year", "fiscal_year_id", type=int, help="Restrict to a fiscal year")
@click.pass_context
def income_statement(ctx, start_date, end_date, compare_start, compare_end, fiscal_year_id, **kwargs):
    """Show the income statement (resultaträkning).

    Examples:
        huvudbok report income-statement --last-year
        huvudbok report income-statement --start-date 2024-01-01 --end-date 2024-12-31 \\
            --compare-start 2023-01-01 --compare-end 2023-12-31
    """
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags(kwargs),
    )
    if start is None or end is None:
        click.echo("Error: Give a period or both --start-date and --end-date.", err=True)
        ctx.exit(1)
    comparative_start = parse_date_or_exit(ctx, compare_start, "comparative start date")
    comparative_end = parse_date_or_exit(ctx, compare_end, "comparative end date")
    comparative = comparative_start is not None and comparative_end is not None

    service = FinancialReportService(ctx.obj["db"], ctx.obj["organization_id"])
    try:
        statement = service.get_income_statement(
            start, end, comparative_start, comparative_end, fiscal_year_id
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Income statement {statement.start_date} - {statement.end_date}")
    for group in statement.groups:
        _echo_group(group, comparative)
    click.echo()
    _echo_total("Rörelseresultat", statement.operating_result)
    _echo_total("Resultat efter finansiella poster", statement.result_after_financial_items)
    _echo_total("Resultat före skatt", statement.result_before_tax)
    _echo_total(
        "ÅRETS RESULTAT",
        statement.net_result,
        statement.comparative_net_result if comparative else None,
    )


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
