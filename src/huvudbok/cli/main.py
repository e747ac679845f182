"""Main CLI entry point."""

import click
from huvudbok.database.factories import create_sqlite_database
from huvudbok.logging_config import configure_logging

# Import and register all commands at module level
from huvudbok.cli.commands import (
    account,
    fiscal_year,
    entry,
    ledger,
    vat,
    report,
    sie_import,
    template,
)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides HUVUDBOK_DB_PATH environment variable)",
    envvar="HUVUDBOK_DB_PATH",
)
@click.option(
    "--organization",
    default="default",
    show_default=True,
    help="Organization whose books are used",
    envvar="HUVUDBOK_ORGANIZATION",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Log level for diagnostics on stderr",
    envvar="HUVUDBOK_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, organization: str, log_level: str):
    """Huvudbok - double-entry bookkeeping.

    Keep a BAS chart of accounts, post balanced verifications into fiscal
    years and produce the general ledger, VAT report and financial
    statements.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["organization_id"] = organization
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
fiscal_year.register_commands(cli)
entry.register_commands(cli)
ledger.register_commands(cli)
vat.register_commands(cli)
report.register_commands(cli)
sie_import.register_commands(cli)
template.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
