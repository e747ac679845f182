"""Chart-of-accounts commands."""

import click
from huvudbok.cli.error_handling import handle_domain_error
from huvudbok.domain.account import AccountService
from huvudbok.domain.errors import DomainError


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("add")
@click.argument("account_number", metavar="NUMBER")
@click.argument("name", metavar="NAME")
@click.option("--name-en", help="English account name")
@click.pass_context
def add_account(ctx, account_number: str, name: str, name_en: str | None):
    """Add an account to the chart.

    NUMBER is a 4-digit BAS account number; the account class follows from it.

    Examples:
        huvudbok account add 1930 "Företagskonto"
        huvudbok account add 3011 "Försäljning tjänster 25 %" --name-en "Sales of services"
    """
    service = AccountService(ctx.obj["db"], ctx.obj["organization_id"])

    try:
        account_id = service.create_account(account_number, name, name_en=name_en)
    except DomainError as e:
        handle_domain_error(ctx, e)

    account = service.require_account(account_id)
    click.echo(
        f"Created account {account.account_number} '{account.name}' "
        f"({account.account_class.value}, ID: {account_id})"
    )


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List the chart of accounts."""
    service = AccountService(ctx.obj["db"], ctx.obj["organization_id"])

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 60)
    for acc in accounts:
        click.echo(f"{acc.account_number} | {acc.name:35s} | {acc.account_class.value}")


@account_group.command("seed-bas")
@click.pass_context
def seed_bas(ctx):
    """Add the BAS starter chart.

    Accounts that already exist are kept as they are.
    """
    service = AccountService(ctx.obj["db"], ctx.obj["organization_id"])

    try:
        created, skipped = service.seed_bas_accounts()
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Seeded BAS chart: {created} accounts created, {skipped} already present")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
