"""Journal entry templates for recurring bookkeeping."""

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Iterable, Optional, Sequence

from huvudbok.database.base import Database
from huvudbok.domain.entities import JournalLine, JournalTemplate
from huvudbok.domain.errors import (
    NotFoundError,
    ValidationError,
    ValidationReason,
    account_not_found,
    template_not_found,
)
from huvudbok.domain.journal import JournalService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DraftOverrides:
    """Values that replace a template's defaults on the created draft."""

    entry_date: Optional[date] = None
    description: Optional[str] = None
    fiscal_year_id: Optional[int] = None


def template_lines(lines: Iterable[JournalLine]) -> list[JournalLine]:
    """Keep lines that name an account and renumber them in order.

    Unlike postable lines, zero-amount lines are kept: a template often only
    fixes the accounts and leaves the amounts to be filled in on the draft.

    Raises:
        ValidationError: If a line has a negative amount or both sides set
    """
    kept = []
    for line in lines:
        if line.account_id is None:
            continue
        if line.debit_amount < 0 or line.credit_amount < 0:
            raise ValidationError(
                ValidationReason.NEGATIVE_AMOUNT,
                f"Template line for account {line.account_id} has a negative amount",
            )
        if line.debit_amount > 0 and line.credit_amount > 0:
            raise ValidationError(
                ValidationReason.BOTH_SIDES,
                f"Template line for account {line.account_id} has both debit and credit",
            )
        kept.append(replace(line, line_order=len(kept)))
    return kept


def draft_description(template: JournalTemplate, overrides: DraftOverrides) -> str:
    """Description for a draft: override, then the template default, then its name."""
    return overrides.description or template.default_description or template.name


def draft_lines(template: JournalTemplate) -> list[JournalLine]:
    """Copy the template's lines for a new draft."""
    return [replace(line, line_order=index) for index, line in enumerate(template.lines)]


class TemplateService:
    """Service for journal entry templates."""

    def __init__(self, db: Database, organization_id: str):
        """Initialize template service.

        Args:
            db: Database instance
            organization_id: Organization the templates belong to
        """
        self.db = db
        self.organization_id = organization_id
        self.journal_service = JournalService(db, organization_id)

    def _check_name(self, name: str) -> str:
        name = name.strip()
        if not name:
            raise ValidationError(ValidationReason.INVALID_TEMPLATE, "Template name is required")
        return name

    def _check_lines(self, lines: Sequence[JournalLine]) -> list[JournalLine]:
        kept = template_lines(lines)
        if not kept:
            raise ValidationError(
                ValidationReason.INVALID_TEMPLATE,
                "Template needs at least one line with an account",
            )
        for line in kept:
            account = self.db.get_account(line.account_id)
            if account is None or account.organization_id != self.organization_id:
                raise NotFoundError(account_not_found(line.account_id))
        return kept

    def create_template(
        self,
        name: str,
        lines: Sequence[JournalLine],
        description: str = "",
        default_description: Optional[str] = None,
    ) -> int:
        """Save a new template.

        Lines without an account are dropped and the rest renumbered.

        Args:
            name: Template name, unique within the organization
            lines: Template lines; amounts may be zero
            description: Free text describing when to use the template
            default_description: Description given to drafts created from it

        Returns:
            Template ID

        Raises:
            ValidationError: If the name is empty, no line names an account,
                or a line has an invalid amount
            NotFoundError: If a line names an unknown account
            ConflictError: If the name is already used
        """
        name = self._check_name(name)
        kept = self._check_lines(lines)
        template_id = self.db.create_template(
            organization_id=self.organization_id,
            name=name,
            description=description,
            default_description=default_description,
            lines=kept,
        )
        logger.info("Created template '%s' (ID %s) with %d lines", name, template_id, len(kept))
        return template_id

    def get_template(self, template_id: int) -> Optional[JournalTemplate]:
        """Get template by ID, or None if it is not in this organization."""
        template = self.db.get_template(template_id)
        if template is None or template.organization_id != self.organization_id:
            return None
        return template

    def require_template(self, template_id: int) -> JournalTemplate:
        """Get template by ID.

        Raises:
            NotFoundError: If the template does not exist in this organization
        """
        template = self.get_template(template_id)
        if template is None:
            raise NotFoundError(template_not_found(template_id))
        return template

    def get_template_by_name(self, name: str) -> Optional[JournalTemplate]:
        """Find a template by name, ignoring case."""
        wanted = name.strip().lower()
        for template in self.list_templates():
            if template.name.lower() == wanted:
                return template
        return None

    def list_templates(self) -> list[JournalTemplate]:
        """List templates, most used first."""
        return self.db.list_templates(self.organization_id)

    def update_template(
        self,
        template_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
        default_description: Optional[str] = None,
        lines: Optional[Sequence[JournalLine]] = None,
    ) -> JournalTemplate:
        """Change a template. Fields left as None keep their current value.

        Returns:
            The updated template

        Raises:
            NotFoundError: If the template or a line's account does not exist
            ValidationError: If the new name or lines are invalid
            ConflictError: If the new name is already used
        """
        template = self.require_template(template_id)
        self.db.update_template(
            template_id,
            name=self._check_name(name) if name is not None else template.name,
            description=description if description is not None else template.description,
            default_description=(
                default_description
                if default_description is not None
                else template.default_description
            ),
            lines=self._check_lines(lines) if lines is not None else None,
        )
        return self.require_template(template_id)

    def delete_template(self, template_id: int) -> None:
        """Delete a template. Drafts created from it are not affected.

        Raises:
            NotFoundError: If the template does not exist
        """
        template = self.require_template(template_id)
        self.db.delete_template(template_id)
        logger.info("Deleted template '%s' (ID %s)", template.name, template_id)

    def record_usage(self, template_id: int) -> None:
        self.require_template(template_id)
        self.db.record_template_usage(template_id)

    def to_draft(self, template_id: int, overrides: Optional[DraftOverrides] = None) -> int:
        """Create a draft journal entry from a template and count the use.

        The draft is dated today unless overridden. Its description is the
        override, else the template's default description, else its name.

        Returns:
            Journal entry ID of the new draft

        Raises:
            NotFoundError: If the template or the fiscal year override does
                not exist
        """
        overrides = overrides or DraftOverrides()
        template = self.require_template(template_id)
        entry_id = self.journal_service.create_draft(
            entry_date=overrides.entry_date or date.today(),
            lines=draft_lines(template),
            description=draft_description(template, overrides),
            fiscal_year_id=overrides.fiscal_year_id,
        )
        self.db.record_template_usage(template_id)
        logger.debug("Created draft %s from template %s", entry_id, template_id)
        return entry_id
