"""Fiscal year commands."""

import click
from huvudbok.cli.error_handling import handle_domain_error
from huvudbok.domain.errors import DomainError
from huvudbok.domain.fiscal_year import FiscalYearManager, select_default
from huvudbok.utils.date_parser import parse_date


@click.group()
def fiscal_year_group():
    """Manage fiscal years (räkenskapsår)."""
    pass


@fiscal_year_group.command("create")
@click.argument("name")
@click.argument("start_date")
@click.argument("end_date")
@click.pass_context
def create_fiscal_year(ctx, name: str, start_date: str, end_date: str):
    """Create an open fiscal year.

    Examples:
        huvudbok fiscal-year create 2024 2024-01-01 2024-12-31
        huvudbok fiscal-year create 2024/2025 2024-07-01 2025-06-30
    """
    manager = FiscalYearManager(ctx.obj["db"], ctx.obj["organization_id"])

    try:
        start = parse_date(start_date)
        end = parse_date(end_date)
        fiscal_year_id = manager.create_fiscal_year(name, start, end)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created fiscal year '{name}' {start} - {end} (ID: {fiscal_year_id})")


@fiscal_year_group.command("list")
@click.pass_context
def list_fiscal_years(ctx):
    """List fiscal years; the default selection is marked with *."""
    manager = FiscalYearManager(ctx.obj["db"], ctx.obj["organization_id"])

    fiscal_years = manager.list_fiscal_years()
    if not fiscal_years:
        click.echo("No fiscal years found.")
        return

    default_id = select_default(fiscal_years)
    click.echo("\nFiscal years:")
    click.echo("-" * 60)
    for fy in fiscal_years:
        marker = "*" if fy.id == default_id else " "
        status = "closed" if fy.is_closed else "open"
        click.echo(
            f"{marker} ID: {fy.id:3d} | {fy.name:12s} | {fy.start_date} - {fy.end_date} | {status}"
        )


@fiscal_year_group.command("close")
@click.argument("fiscal_year_id", type=int)
@click.pass_context
def close_fiscal_year(ctx, fiscal_year_id: int):
    """Close a fiscal year so nothing more can be posted into it."""
    manager = FiscalYearManager(ctx.obj["db"], ctx.obj["organization_id"])

    try:
        manager.close(fiscal_year_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Closed fiscal year {fiscal_year_id}")


@fiscal_year_group.command("reopen")
@click.argument("fiscal_year_id", type=int)
@click.pass_context
def reopen_fiscal_year(ctx, fiscal_year_id: int):
    """Reopen a closed fiscal year."""
    manager = FiscalYearManager(ctx.obj["db"], ctx.obj["organization_id"])

    try:
        manager.reopen(fiscal_year_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Reopened fiscal year {fiscal_year_id}")


def register_commands(cli):
    """Register fiscal year commands with main CLI."""
    cli.add_command(fiscal_year_group, name="fiscal-year")
