"""Tests for Database interface returning domain models."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from huvudbok.domain import entities
from huvudbok.domain.errors import ConflictError, NotFoundError


def _lines(debit_account, credit_account, amount="100.00"):
    return [
        entities.JournalLine(account_id=debit_account, debit_amount=Decimal(amount)),
        entities.JournalLine(account_id=credit_account, credit_amount=Decimal(amount), line_order=1),
    ]


class TestDatabaseInterface:
    """Tests to verify Database interface returns domain models."""

    def test_get_account_returns_domain_model(self, temp_db):
        account_id = temp_db.create_account(
            "org", "1930", "Företagskonto", entities.AccountClass.ASSET, name_en="Bank"
        )

        account = temp_db.get_account(account_id)

        assert isinstance(account, entities.Account)
        assert account.account_number == "1930"
        assert account.account_class == entities.AccountClass.ASSET
        assert account.name_en == "Bank"

    def test_get_account_by_number_scoped_to_organization(self, temp_db):
        temp_db.create_account("org", "1930", "Bank", entities.AccountClass.ASSET)
        assert temp_db.get_account_by_number("org", "1930") is not None
        assert temp_db.get_account_by_number("other", "1930") is None

    def test_duplicate_account_number(self, temp_db):
        temp_db.create_account("org", "1930", "Bank", entities.AccountClass.ASSET)
        with pytest.raises(ConflictError):
            temp_db.create_account("org", "1930", "Bank 2", entities.AccountClass.ASSET)
        # Same number in another organization is allowed
        temp_db.create_account("other", "1930", "Bank", entities.AccountClass.ASSET)

    def test_list_accounts_ordered_by_number(self, temp_db):
        temp_db.create_account("org", "3011", "Försäljning", entities.AccountClass.REVENUE)
        temp_db.create_account("org", "1930", "Bank", entities.AccountClass.ASSET)
        numbers = [account.account_number for account in temp_db.list_accounts("org")]
        assert numbers == ["1930", "3011"]

    def test_fiscal_year_round_trip(self, temp_db):
        fiscal_year_id = temp_db.create_fiscal_year(
            "org", "2024", date(2024, 1, 1), date(2024, 12, 31)
        )
        fiscal_year = temp_db.get_fiscal_year(fiscal_year_id)
        assert isinstance(fiscal_year, entities.FiscalYear)
        assert not fiscal_year.is_closed
        assert isinstance(fiscal_year.created_at, datetime)

        temp_db.set_fiscal_year_closed(fiscal_year_id, True)
        assert temp_db.get_fiscal_year(fiscal_year_id).is_closed

    def test_journal_entry_round_trip(self, temp_db):
        bank = temp_db.create_account("org", "1930", "Bank", entities.AccountClass.ASSET)
        sales = temp_db.create_account("org", "3011", "Försäljning", entities.AccountClass.REVENUE)
        lines = _lines(bank, sales, "1000")
        lines[1] = entities.JournalLine(
            account_id=sales,
            credit_amount=Decimal("1000"),
            line_order=1,
            vat_rate=Decimal("25"),
            vat_base=Decimal("800"),
            vat_amount=Decimal("200"),
            vat_direction=entities.VatDirection.OUTPUT,
        )

        entry_id = temp_db.create_journal_entry("org", None, date(2024, 3, 15), "Faktura", lines)
        entry = temp_db.get_journal_entry(entry_id)

        assert entry.status == entities.EntryStatus.DRAFT
        assert entry.verification_number is None
        assert [line.account_id for line in entry.lines] == [bank, sales]
        assert entry.lines[0].debit_amount == Decimal("1000.00")
        assert entry.lines[1].vat_rate == Decimal("25.00")
        assert entry.lines[1].vat_direction == entities.VatDirection.OUTPUT

    def test_update_replaces_lines(self, temp_db):
        bank = temp_db.create_account("org", "1930", "Bank", entities.AccountClass.ASSET)
        sales = temp_db.create_account("org", "3011", "Försäljning", entities.AccountClass.REVENUE)
        entry_id = temp_db.create_journal_entry("org", None, None, "", _lines(bank, sales))

        temp_db.update_journal_entry(entry_id, None, date(2024, 1, 2), "Ny", _lines(sales, bank, "5"))
        entry = temp_db.get_journal_entry(entry_id)
        assert entry.description == "Ny"
        assert len(entry.lines) == 2
        assert entry.lines[0].account_id == sales

    def test_post_assigns_numbers_per_organization(self, temp_db):
        bank = temp_db.create_account("org", "1930", "Bank", entities.AccountClass.ASSET)
        sales = temp_db.create_account("org", "3011", "Försäljning", entities.AccountClass.REVENUE)
        first = temp_db.create_journal_entry("org", None, date(2024, 1, 1), "", _lines(bank, sales))
        second = temp_db.create_journal_entry("org", None, date(2024, 1, 2), "", _lines(bank, sales))
        other = temp_db.create_journal_entry("other", None, date(2024, 1, 2), "", _lines(bank, sales))

        assert temp_db.post_journal_entry(first) == 1
        assert temp_db.post_journal_entry(second) == 2
        assert temp_db.post_journal_entry(other) == 1

    def test_list_journal_entries_filters(self, temp_db):
        bank = temp_db.create_account("org", "1930", "Bank", entities.AccountClass.ASSET)
        sales = temp_db.create_account("org", "3011", "Försäljning", entities.AccountClass.REVENUE)
        posted = temp_db.create_journal_entry("org", None, date(2024, 2, 1), "", _lines(bank, sales))
        temp_db.create_journal_entry("org", None, date(2024, 1, 1), "", _lines(bank, sales))
        temp_db.post_journal_entry(posted)

        assert len(temp_db.list_journal_entries("org")) == 2
        only_posted = temp_db.list_journal_entries("org", status=entities.EntryStatus.POSTED)
        assert [entry.id for entry in only_posted] == [posted]
        in_january = temp_db.list_journal_entries(
            "org", start_date=date(2024, 1, 1), end_date=date(2024, 1, 31)
        )
        assert len(in_january) == 1

    def test_void(self, temp_db):
        bank = temp_db.create_account("org", "1930", "Bank", entities.AccountClass.ASSET)
        sales = temp_db.create_account("org", "3011", "Försäljning", entities.AccountClass.REVENUE)
        entry_id = temp_db.create_journal_entry("org", None, date(2024, 2, 1), "", _lines(bank, sales))
        temp_db.post_journal_entry(entry_id)
        temp_db.void_journal_entry(entry_id, "Dubblett")

        entry = temp_db.get_journal_entry(entry_id)
        assert entry.status == entities.EntryStatus.VOIDED
        assert entry.void_reason == "Dubblett"
        assert entry.voided_at is not None

    def test_missing_rows_return_none(self, temp_db):
        assert temp_db.get_account(1) is None
        assert temp_db.get_fiscal_year(1) is None
        assert temp_db.get_journal_entry(1) is None
        assert temp_db.get_template(1) is None

    def test_template_round_trip(self, temp_db):
        bank = temp_db.create_account("org", "1930", "Bank", entities.AccountClass.ASSET)
        fee = temp_db.create_account("org", "6570", "Bankkostnader", entities.AccountClass.EXPENSE)
        template_id = temp_db.create_template(
            "org", "Bankavgift", "Månadsavgift", None, _lines(fee, bank, "50")
        )

        template = temp_db.get_template(template_id)
        assert isinstance(template, entities.JournalTemplate)
        assert template.name == "Bankavgift"
        assert template.default_description is None
        assert [line.account_id for line in template.lines] == [fee, bank]
        assert template.lines[1].credit_amount == Decimal("50.00")

        with pytest.raises(ConflictError):
            temp_db.create_template("org", "Bankavgift", "", None, [])
        assert temp_db.create_template("other", "Bankavgift", "", None, []) is not None

    def test_template_update_usage_and_delete(self, temp_db):
        bank = temp_db.create_account("org", "1930", "Bank", entities.AccountClass.ASSET)
        fee = temp_db.create_account("org", "6570", "Bankkostnader", entities.AccountClass.EXPENSE)
        template_id = temp_db.create_template("org", "Avgift", "", None, _lines(fee, bank))

        temp_db.update_template(template_id, "Bankavgift", "", "Avgift bank")
        temp_db.record_template_usage(template_id)
        template = temp_db.get_template(template_id)
        assert template.name == "Bankavgift"
        assert len(template.lines) == 2
        assert template.use_count == 1
        assert template.last_used_at is not None

        temp_db.update_template(template_id, "Bankavgift", "", None, lines=[])
        assert temp_db.get_template(template_id).lines == ()

        temp_db.delete_template(template_id)
        assert temp_db.get_template(template_id) is None
        with pytest.raises(NotFoundError):
            temp_db.record_template_usage(template_id)
