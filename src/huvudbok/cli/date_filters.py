"""CLI helpers for date range resolution."""

from datetime import date

import click

from huvudbok.utils.date_parser import get_date_range, parse_date

PERIODS = ("this-month", "last-month", "this-quarter", "last-quarter", "this-year", "last-year")


def period_options(command):
    """Add --this-month ... --last-year flags to a command."""
    for period in reversed(PERIODS):
        command = click.option(
            f"--{period}",
            period.replace("-", "_"),
            is_flag=True,
            help=f"Limit to {period.replace('-', ' ')}",
        )(command)
    return command


def period_flags(kwargs: dict) -> dict[str, bool]:
    """Pop the period flags added by period_options from command kwargs."""
    return {period: kwargs.pop(period.replace("-", "_"), False) for period in PERIODS}


def parse_date_or_exit(ctx: click.Context, value: str | None, label: str) -> date | None:
    if not value:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    default_range: tuple[date, date] | None = None,
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from period flags or explicit dates."""
    selected = [period for period, is_set in period_flags.items() if is_set]

    if len(selected) > 1:
        click.echo("Error: Only one period option can be specified at a time.", err=True)
        ctx.exit(1)

    if selected and (start_date or end_date):
        click.echo(
            "Error: Period options cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if selected:
        return get_date_range(selected[0])

    start = parse_date_or_exit(ctx, start_date, "start date")
    end = parse_date_or_exit(ctx, end_date, "end date")
    if start is None and end is None and default_range is not None:
        start, end = default_range

    if start is not None and end is not None and start > end:
        click.echo(f"Error: Start date {start} is after end date {end}.", err=True)
        ctx.exit(1)
    return start, end
