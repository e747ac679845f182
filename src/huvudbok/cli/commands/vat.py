"""VAT report (momsrapport) command."""

import click
from huvudbok.cli.date_filters import period_flags, period_options, resolve_cli_date_range
from huvudbok.cli.error_handling import handle_domain_error
from huvudbok.domain.entities import VatSection
from huvudbok.domain.errors import DomainError
from huvudbok.domain.vat import VatService
from huvudbok.utils.date_parser import get_date_range


def _echo_section(title: str, section: VatSection) -> None:
    click.echo(f"\n{title}")
    click.echo("-" * 60)
    if not section.rate_groups:
        click.echo("  (none)")
    for group in section.rate_groups:
        click.echo(
            f"  {group.rate:>6}% | base {group.tax_base:>14,.2f} | VAT {group.vat_amount:>12,.2f} "
            f"| {group.transaction_count} lines"
        )
    click.echo(f"  {'Total':<30} {section.total:>26,.2f}")


@click.command("vat-report")
@click.option("--start-date", help="Start date (YYYY-MM-DD)")
@click.option("--end-date", help="End date (YYYY-MM-DD)")
@period_options
@click.option("--fiscal-year", "fiscal_year_id", type=int, help="Restrict to a fiscal year")
@click.pass_context
def vat_report(ctx, start_date, end_date, fiscal_year_id, **kwargs):
    """Show output and input VAT by rate for a period.

    Defaults to the current quarter.

    Examples:
        huvudbok vat-report --last-quarter
        huvudbok vat-report --start-date 2024-01-01 --end-date 2024-03-31
    """
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags(kwargs),
        default_range=get_date_range("this-quarter"),
    )
    if start is None or end is None:
        click.echo("Error: Both --start-date and --end-date are required.", err=True)
        ctx.exit(1)

    service = VatService(ctx.obj["db"], ctx.obj["organization_id"])
    try:
        report = service.get_vat_report(start, end, fiscal_year_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"VAT report {report.start_date} - {report.end_date}")
    _echo_section("Output VAT (utgående moms)", report.output_vat)
    _echo_section("Input VAT (ingående moms)", report.input_vat)
    label = "VAT payable" if report.is_payable else "VAT refundable"
    click.echo(f"\n{label}: {abs(report.net_vat):,.2f}")


def register_commands(cli):
    """Register VAT command with main CLI."""
    cli.add_command(vat_report)
