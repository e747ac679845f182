"""CLI error handling helpers."""

import click

from huvudbok.domain.errors import DomainError, ValidationError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure.

    Validation errors also show their reason code.
    """
    if isinstance(error, ValidationError):
        click.echo(f"Error: {error} [{error.reason.value}]", err=True)
    else:
        click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
