"""Journal entry template commands."""

import click
from huvudbok.cli.commands.entry import _build_lines
from huvudbok.cli.date_filters import parse_date_or_exit
from huvudbok.cli.error_handling import handle_domain_error
from huvudbok.domain.account import AccountService
from huvudbok.domain.errors import DomainError
from huvudbok.domain.journal import JournalService
from huvudbok.domain.template import DraftOverrides, TemplateService


@click.group()
def template_group():
    """Manage templates for recurring journal entries."""
    pass


@template_group.command("create")
@click.argument("name")
@click.option(
    "--line",
    "line_specs",
    multiple=True,
    required=True,
    help="ACCOUNT:DEBIT:CREDIT[:VAT_RATE:VAT_BASE:VAT_AMOUNT]; amounts may be left empty",
)
@click.option("--description", default="", help="When to use the template")
@click.option("--default-description", help="Description given to entries created from it")
@click.pass_context
def create_template(ctx, name, line_specs, description, default_description):
    """Save a template.

    Examples:
        huvudbok template create "Hyra" --line 5010:: --line 1930:: \\
            --default-description "Lokalhyra"
        huvudbok template create "Bankavgift" --line 6570:50: --line 1930::50
    """
    db = ctx.obj["db"]
    organization_id = ctx.obj["organization_id"]
    service = TemplateService(db, organization_id)

    lines = _build_lines(ctx, AccountService(db, organization_id), line_specs)

    try:
        template_id = service.create_template(
            name,
            lines,
            description=description,
            default_description=default_description,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created template '{name.strip()}' (ID: {template_id})")


@template_group.command("list")
@click.pass_context
def list_templates(ctx):
    """List templates, most used first."""
    service = TemplateService(ctx.obj["db"], ctx.obj["organization_id"])

    templates = service.list_templates()
    if not templates:
        click.echo("No templates found.")
        return

    click.echo("\nTemplates:")
    click.echo("-" * 60)
    for template in templates:
        click.echo(
            f"{template.id:4d} | {template.name:30s} | {len(template.lines)} lines | "
            f"used {template.use_count}x"
        )


@template_group.command("show")
@click.argument("template_id", type=int)
@click.pass_context
def show_template(ctx, template_id: int):
    """Show a template and its lines."""
    db = ctx.obj["db"]
    organization_id = ctx.obj["organization_id"]
    service = TemplateService(db, organization_id)

    try:
        template = service.require_template(template_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    account_service = AccountService(db, organization_id)
    click.echo(f"Template {template.id} | {template.name} | used {template.use_count}x")
    if template.description:
        click.echo(f"    {template.description}")
    if template.default_description:
        click.echo(f"    Entry description: {template.default_description}")
    for line in template.lines:
        account = account_service.get_account(line.account_id)
        label = f"{account.account_number} {account.name}" if account else "????"
        click.echo(f"    {label:40s} | D {line.debit_amount:>12,.2f} | C {line.credit_amount:>12,.2f}")


@template_group.command("delete")
@click.argument("template_id", type=int)
@click.pass_context
def delete_template(ctx, template_id: int):
    """Delete a template."""
    service = TemplateService(ctx.obj["db"], ctx.obj["organization_id"])

    try:
        service.delete_template(template_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deleted template {template_id}")


@template_group.command("use")
@click.argument("template_id", type=int)
@click.option("--date", "entry_date", help="Entry date (default: today)")
@click.option("--description", help="Entry description (default: from the template)")
@click.option("--fiscal-year", "fiscal_year_id", type=int, help="Fiscal year ID (default: by date)")
@click.option("--post", "post_now", is_flag=True, help="Post the entry immediately")
@click.pass_context
def use_template(ctx, template_id, entry_date, description, fiscal_year_id, post_now):
    """Create a draft entry from a template, optionally posting it.

    Posting only succeeds when the template's amounts already balance.
    """
    db = ctx.obj["db"]
    organization_id = ctx.obj["organization_id"]
    service = TemplateService(db, organization_id)

    overrides = DraftOverrides(
        entry_date=parse_date_or_exit(ctx, entry_date, "entry date"),
        description=description,
        fiscal_year_id=fiscal_year_id,
    )

    try:
        entry_id = service.to_draft(template_id, overrides)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created draft journal entry (ID: {entry_id})")

    if post_now:
        try:
            entry = JournalService(db, organization_id).post(entry_id)
        except DomainError as e:
            handle_domain_error(ctx, e)
        click.echo(f"Posted as verification {entry.verification_number}")


def register_commands(cli):
    """Register template commands with main CLI."""
    cli.add_command(template_group, name="template")
