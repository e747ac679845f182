"""Tests for journal entry validation and posting."""

import pytest
from datetime import date
from decimal import Decimal

from huvudbok.cli.main import cli
from huvudbok.domain.entities import EntryStatus, JournalEntry, JournalLine
from huvudbok.domain.errors import ConflictError, NotFoundError, ValidationError, ValidationReason
from huvudbok.domain.journal import (
    compute_totals,
    edit_line,
    postable_lines,
    validate_for_post,
)


def _entry(*lines, entry_date=date(2024, 3, 15), status=EntryStatus.DRAFT):
    return JournalEntry(
        id=1,
        organization_id="org",
        fiscal_year_id=1,
        entry_date=entry_date,
        status=status,
        lines=tuple(lines),
    )


def _line(account_id, debit="0", credit="0"):
    return JournalLine(
        account_id=account_id, debit_amount=Decimal(debit), credit_amount=Decimal(credit)
    )


class TestComputeTotals:
    """Tests for live entry totals."""

    def test_difference_is_debit_minus_credit(self):
        totals = compute_totals([_line(1, debit="150.25"), _line(2, credit="100.00")])
        assert totals.total_debit == Decimal("150.25")
        assert totals.total_credit == Decimal("100.00")
        assert totals.difference == totals.total_debit - totals.total_credit
        assert not totals.is_balanced

    def test_balanced_entry(self):
        totals = compute_totals([_line(1, debit="1000"), _line(2, credit="1000")])
        assert totals.is_balanced
        assert totals.difference == Decimal("0.00")

    def test_one_ore_difference_is_unbalanced(self):
        totals = compute_totals([_line(1, debit="500.01"), _line(2, credit="500.00")])
        assert totals.difference == Decimal("0.01")
        assert not totals.is_balanced

    def test_empty_lines(self):
        totals = compute_totals([])
        assert totals.total_debit == Decimal("0.00")
        assert totals.is_balanced


class TestValidateForPost:
    """Tests for the posting checks."""

    def test_valid_entry(self):
        result = validate_for_post(_entry(_line(1, debit="1000"), _line(2, credit="1000")))
        assert result.is_valid
        assert result.reason is None

    def test_missing_date(self):
        result = validate_for_post(
            _entry(_line(1, debit="100"), _line(2, credit="100"), entry_date=None)
        )
        assert result.reason == ValidationReason.MISSING_DATE

    def test_negative_amount(self):
        result = validate_for_post(_entry(_line(1, debit="-100"), _line(2, credit="-100")))
        assert result.reason == ValidationReason.NEGATIVE_AMOUNT

    def test_both_sides_on_one_line(self):
        result = validate_for_post(
            _entry(_line(1, debit="100", credit="100"), _line(2, credit="100"))
        )
        assert result.reason == ValidationReason.BOTH_SIDES

    @pytest.mark.parametrize(
        "lines",
        [
            (),
            (_line(1, debit="100"),),
            (_line(1, debit="100"), _line(2)),
            (_line(1, debit="100"), _line(None, credit="100")),
        ],
    )
    def test_fewer_than_two_qualifying_lines_rejected(self, lines):
        result = validate_for_post(_entry(*lines))
        assert not result.is_valid
        assert result.reason == ValidationReason.INSUFFICIENT_LINES

    def test_unbalanced_by_one_ore(self):
        result = validate_for_post(_entry(_line(1, debit="500.01"), _line(2, credit="500.00")))
        assert result.reason == ValidationReason.UNBALANCED
        assert "Difference: 0.01" in result.message

    def test_already_posted(self):
        result = validate_for_post(
            _entry(_line(1, debit="100"), _line(2, credit="100"), status=EntryStatus.POSTED)
        )
        assert result.reason == ValidationReason.NOT_DRAFT

    def test_empty_lines_are_ignored(self):
        result = validate_for_post(
            _entry(_line(1, debit="100"), _line(None), _line(3), _line(2, credit="100"))
        )
        assert result.is_valid

    def test_amount_without_account_rejected(self):
        result = validate_for_post(
            _entry(_line(1, debit="1000"), _line(2, credit="500"), _line(None, credit="500"))
        )
        assert not result.is_valid
        assert result.reason == ValidationReason.MISSING_ACCOUNT
        assert result.totals.is_balanced


class TestLineEditing:
    """Tests for draft line helpers."""

    def test_entering_debit_clears_credit(self):
        line = edit_line(_line(1, credit="200"), "debit_amount", Decimal("300"))
        assert line.debit_amount == Decimal("300")
        assert line.credit_amount == Decimal("0.00")

    def test_entering_credit_clears_debit(self):
        line = edit_line(_line(1, debit="300"), "credit_amount", Decimal("50"))
        assert line.debit_amount == Decimal("0.00")
        assert line.credit_amount == Decimal("50")

    def test_zero_does_not_clear_other_side(self):
        line = edit_line(_line(1, credit="200"), "debit_amount", Decimal("0"))
        assert line.credit_amount == Decimal("200")

    def test_other_fields_untouched(self):
        line = edit_line(_line(1, debit="300"), "description", "Hyra")
        assert line.description == "Hyra"
        assert line.debit_amount == Decimal("300")

    def test_postable_lines_renumbered(self):
        lines = postable_lines([_line(1, debit="10"), _line(None), _line(2, credit="10")])
        assert [line.line_order for line in lines] == [0, 1]
        assert [line.account_id for line in lines] == [1, 2]


class TestJournalService:
    """Tests for drafting, posting and voiding."""

    def test_post_assigns_sequential_verification_numbers(
        self, journal_service, fiscal_year_2024, make_line
    ):
        first = journal_service.create_and_post(
            date(2024, 2, 1), [make_line("1930", debit="100"), make_line("3011", credit="100")]
        )
        second = journal_service.create_and_post(
            date(2024, 1, 15), [make_line("5010", debit="50"), make_line("1930", credit="50")]
        )
        assert first.status == EntryStatus.POSTED
        assert first.verification_number == 1
        assert second.verification_number == 2
        assert first.posted_at is not None

    def test_draft_may_be_unbalanced(self, journal_service, fiscal_year_2024, make_line):
        entry_id = journal_service.create_draft(
            date(2024, 3, 1), [make_line("1930", debit="100")]
        )
        entry = journal_service.require_entry(entry_id)
        assert entry.status == EntryStatus.DRAFT
        assert entry.verification_number is None
        assert entry.fiscal_year_id == fiscal_year_2024.id

    def test_post_unbalanced_keeps_draft(self, journal_service, fiscal_year_2024, make_line):
        entry_id = journal_service.create_draft(
            date(2024, 3, 1), [make_line("1930", debit="500.01"), make_line("3011", credit="500")]
        )
        with pytest.raises(ValidationError) as excinfo:
            journal_service.post(entry_id)
        assert excinfo.value.reason == ValidationReason.UNBALANCED
        assert journal_service.require_entry(entry_id).status == EntryStatus.DRAFT

    def test_post_day_before_fiscal_year_rejected(
        self, journal_service, fiscal_year_2024, make_line
    ):
        entry_id = journal_service.create_draft(
            date(2023, 12, 31),
            [make_line("1930", debit="100"), make_line("3011", credit="100")],
            fiscal_year_id=fiscal_year_2024.id,
        )
        with pytest.raises(ValidationError) as excinfo:
            journal_service.post(entry_id)
        assert excinfo.value.reason == ValidationReason.OUTSIDE_FISCAL_YEAR

    def test_post_without_any_fiscal_year(self, journal_service, accounts, make_line):
        with pytest.raises(ValidationError) as excinfo:
            journal_service.create_and_post(
                date(2024, 3, 1), [make_line("1930", debit="100"), make_line("3011", credit="100")]
            )
        assert excinfo.value.reason == ValidationReason.OUTSIDE_FISCAL_YEAR

    def test_post_into_closed_fiscal_year(
        self, journal_service, fiscal_year_manager, fiscal_year_2024, make_line
    ):
        fiscal_year_manager.close(fiscal_year_2024.id)
        with pytest.raises(ValidationError) as excinfo:
            journal_service.create_and_post(
                date(2024, 3, 1), [make_line("1930", debit="100"), make_line("3011", credit="100")]
            )
        assert excinfo.value.reason == ValidationReason.FISCAL_YEAR_CLOSED

    def test_post_drops_empty_lines(self, journal_service, fiscal_year_2024, make_line, accounts):
        entry = journal_service.create_and_post(
            date(2024, 3, 1),
            [
                make_line("1930", debit="100"),
                JournalLine(account_id=accounts["2440"]),
                make_line("3011", credit="100"),
            ],
        )
        assert len(entry.lines) == 2

    def test_post_amount_without_account_keeps_draft(
        self, journal_service, fiscal_year_2024, make_line
    ):
        entry_id = journal_service.create_draft(
            date(2024, 3, 1),
            [
                make_line("1930", debit="1000"),
                make_line("3011", credit="500"),
                JournalLine(account_id=None, credit_amount=Decimal("500")),
            ],
        )
        with pytest.raises(ValidationError) as excinfo:
            journal_service.post(entry_id)
        assert excinfo.value.reason == ValidationReason.MISSING_ACCOUNT
        entry = journal_service.require_entry(entry_id)
        assert entry.status == EntryStatus.DRAFT
        assert entry.verification_number is None

    def test_post_validates_before_fiscal_year(self, journal_service, fiscal_year_2024, make_line):
        entry_id = journal_service.create_draft(
            date(2023, 12, 31),
            [make_line("1930", debit="100"), make_line("3011", credit="99")],
            fiscal_year_id=fiscal_year_2024.id,
        )
        with pytest.raises(ValidationError) as excinfo:
            journal_service.post(entry_id)
        assert excinfo.value.reason == ValidationReason.UNBALANCED

    def test_post_checks_fiscal_year_before_accounts(
        self, journal_service, fiscal_year_2024, make_line
    ):
        lines = [
            make_line("1930", debit="100"),
            JournalLine(account_id=9999, credit_amount=Decimal("100")),
        ]
        outside = journal_service.create_draft(
            date(2023, 12, 31), lines, fiscal_year_id=fiscal_year_2024.id
        )
        with pytest.raises(ValidationError) as excinfo:
            journal_service.post(outside)
        assert excinfo.value.reason == ValidationReason.OUTSIDE_FISCAL_YEAR

        inside = journal_service.create_draft(date(2024, 3, 1), lines)
        with pytest.raises(NotFoundError):
            journal_service.post(inside)

    def test_post_twice_rejected(self, journal_service, fiscal_year_2024, make_line):
        entry = journal_service.create_and_post(
            date(2024, 3, 1), [make_line("1930", debit="100"), make_line("3011", credit="100")]
        )
        with pytest.raises(ValidationError) as excinfo:
            journal_service.post(entry.id)
        assert excinfo.value.reason == ValidationReason.NOT_DRAFT

    def test_update_draft(self, journal_service, fiscal_year_2024, make_line):
        entry_id = journal_service.create_draft(date(2024, 3, 1), [make_line("1930", debit="100")])
        journal_service.update_draft(
            entry_id,
            date(2024, 3, 2),
            [make_line("1930", debit="100"), make_line("3011", credit="100")],
            description="Faktura 7",
        )
        entry = journal_service.require_entry(entry_id)
        assert entry.entry_date == date(2024, 3, 2)
        assert entry.description == "Faktura 7"
        assert len(entry.lines) == 2

    def test_void_posted_entry(self, journal_service, fiscal_year_2024, make_line):
        entry = journal_service.create_and_post(
            date(2024, 3, 1), [make_line("1930", debit="100"), make_line("3011", credit="100")]
        )
        voided = journal_service.void(entry.id, "Felbokning")
        assert voided.status == EntryStatus.VOIDED
        assert voided.void_reason == "Felbokning"
        assert voided.verification_number == entry.verification_number

        with pytest.raises(ValidationError) as excinfo:
            journal_service.post(entry.id)
        assert excinfo.value.reason == ValidationReason.NOT_DRAFT

    def test_void_draft_rejected(self, journal_service, fiscal_year_2024, make_line):
        entry_id = journal_service.create_draft(date(2024, 3, 1), [make_line("1930", debit="100")])
        with pytest.raises(ValidationError) as excinfo:
            journal_service.void(entry_id)
        assert excinfo.value.reason == ValidationReason.NOT_POSTED

    def test_unknown_entry(self, journal_service):
        with pytest.raises(NotFoundError):
            journal_service.post(999)

    def test_duplicate_verification_number_propagates(
        self, temp_db, journal_service, fiscal_year_2024, make_line
    ):
        first = journal_service.create_and_post(
            date(2024, 3, 1), [make_line("1930", debit="100"), make_line("3011", credit="100")]
        )
        entry_id = journal_service.create_draft(
            date(2024, 3, 2), [make_line("1930", debit="10"), make_line("3011", credit="10")]
        )
        with pytest.raises(ConflictError):
            temp_db.post_journal_entry(entry_id, verification_number=first.verification_number)
        assert journal_service.require_entry(entry_id).status == EntryStatus.DRAFT

    def test_entries_scoped_to_organization(self, temp_db, journal_service, fiscal_year_2024, make_line):
        from huvudbok.domain.journal import JournalService

        entry = journal_service.create_and_post(
            date(2024, 3, 1), [make_line("1930", debit="100"), make_line("3011", credit="100")]
        )
        other = JournalService(temp_db, "other-org")
        assert other.get_entry(entry.id) is None
        assert other.list_entries() == []


class TestEntryCommands:
    """Tests for entry CLI commands."""

    def _setup(self, cli_runner, db_path):
        base = ["--db-path", db_path, "--organization", "cli-org"]
        for number, name in [("1930", "Bank"), ("3011", "Försäljning"), ("2611", "Utgående moms")]:
            cli_runner.invoke(cli, base + ["account", "add", number, name])
        cli_runner.invoke(cli, base + ["fiscal-year", "create", "2024", "2024-01-01", "2024-12-31"])
        return base

    def test_create_and_post(self, cli_runner, temp_db):
        base = self._setup(cli_runner, temp_db.database_path)
        result = cli_runner.invoke(
            cli,
            base
            + [
                "entry", "create",
                "--date", "2024-03-15",
                "--description", "Faktura 1001",
                "--line", "1930:1250:",
                "--line", "3011::1000",
                "--line", "2611::250",
                "--post",
            ],
        )
        assert result.exit_code == 0
        assert "Posted as verification 1" in result.output

        result = cli_runner.invoke(cli, base + ["entry", "list", "--status", "posted"])
        assert result.exit_code == 0
        assert "Faktura 1001" in result.output

    def test_post_unbalanced_fails(self, cli_runner, temp_db):
        base = self._setup(cli_runner, temp_db.database_path)
        result = cli_runner.invoke(
            cli,
            base + ["entry", "create", "--date", "2024-03-15", "--line", "1930:500.01:", "--line", "3011::500"],
        )
        assert result.exit_code == 0
        assert "Created draft journal entry (ID: 1)" in result.output

        result = cli_runner.invoke(cli, base + ["entry", "post", "1"])
        assert result.exit_code == 1
        assert "unbalanced" in result.output

        result = cli_runner.invoke(cli, base + ["entry", "show", "1"])
        assert "Cannot post" in result.output

    def test_unknown_account(self, cli_runner, temp_db):
        base = self._setup(cli_runner, temp_db.database_path)
        result = cli_runner.invoke(
            cli, base + ["entry", "create", "--date", "2024-03-15", "--line", "9999:1:"]
        )
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_void(self, cli_runner, temp_db):
        base = self._setup(cli_runner, temp_db.database_path)
        cli_runner.invoke(
            cli,
            base + ["entry", "create", "--date", "2024-03-15", "--line", "1930:10:", "--line", "3011::10", "--post"],
        )
        result = cli_runner.invoke(cli, base + ["entry", "void", "1", "--reason", "Fel"])
        assert result.exit_code == 0
        assert "Voided verification 1" in result.output
