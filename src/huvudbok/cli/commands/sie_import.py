"""SIE import command."""

import click
from huvudbok.domain.sie_import import SieImportService, read_sie_file, validate_sie


@click.command("import-sie")
@click.argument("sie_file", type=click.Path(exists=True))
@click.option("--no-opening-balances", is_flag=True, help="Skip #IB opening balances")
@click.option("--no-vouchers", is_flag=True, help="Skip #VER vouchers")
@click.option("--dry-run", is_flag=True, help="Only parse and validate the file")
@click.pass_context
def import_sie(ctx, sie_file: str, no_opening_balances: bool, no_vouchers: bool, dry_run: bool):
    """Import a SIE4 file (.se) into the current organization.

    Examples:
        huvudbok import-sie bokslut2024.se
        huvudbok import-sie bokslut2024.se --dry-run
    """
    document = read_sie_file(sie_file)

    validation = validate_sie(document)
    for warning in validation.warnings:
        click.echo(f"Warning: {warning}", err=True)
    if not validation.is_valid:
        for error in validation.errors:
            click.echo(f"Error: {error}", err=True)
        ctx.exit(1)

    click.echo(
        f"{document.company_name or 'Unknown company'}: {len(document.accounts)} accounts, "
        f"{len(document.fiscal_years)} fiscal years, {len(document.vouchers)} vouchers"
    )
    if dry_run:
        return

    service = SieImportService(ctx.obj["db"], ctx.obj["organization_id"])
    result = service.import_document(
        document,
        import_opening_balances=not no_opening_balances,
        import_vouchers=not no_vouchers,
    )

    click.echo(f"Accounts: {result.accounts_created} created, {result.accounts_skipped} skipped")
    click.echo(
        f"Fiscal years: {result.fiscal_years_created} created, "
        f"{result.fiscal_years_skipped} skipped"
    )
    if result.opening_balance_entry_id is not None:
        click.echo(f"Opening balances posted (entry ID: {result.opening_balance_entry_id})")
    click.echo(f"Vouchers: {result.vouchers_imported} imported, {result.vouchers_failed} failed")
    for error in result.errors:
        click.echo(f"Error: {error}", err=True)


def register_commands(cli):
    """Register import-sie command with main CLI."""
    cli.add_command(import_sie)
