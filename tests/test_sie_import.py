"""Tests for SIE4 parsing and import."""

from datetime import date
from decimal import Decimal

from huvudbok.cli.main import cli
from huvudbok.domain.entities import EntryStatus
from huvudbok.domain.sie_import import (
    SieImportService,
    parse_sie4,
    read_sie_file,
    tokenize,
    validate_sie,
)

ORGANIZATION = "test-org"


class TestParser:
    """Tests for the SIE4 parser."""

    def test_tokenize(self):
        assert tokenize('1930 {} 100.00 20240101 "Text med \\"citat\\""') == [
            "1930",
            "{}",
            "100.00",
            "20240101",
            'Text med "citat"',
        ]
        assert tokenize('3011 {1 "100"} -5') == ["3011", '{1 "100"}', "-5"]

    def test_parse_fixture(self, fixtures_dir):
        document = read_sie_file(str(fixtures_dir / "sample.se"))

        assert document.errors == []
        assert document.flag == 0
        assert document.program == "Testprogram 1.0"
        assert document.company_name == "Exempel AB"
        assert document.organization_number == "556677-8899"
        assert [fy.index for fy in document.fiscal_years] == [0, -1]
        assert document.fiscal_year(0).start_date == date(2024, 1, 1)
        assert document.fiscal_year(0).name == "2024"
        assert [account.account_number for account in document.accounts] == [
            "1930",
            "2081",
            "2611",
            "3011",
        ]
        assert document.opening_balances[1].amount == Decimal("-25000.00")
        assert len(document.closing_balances) == 2
        assert document.result_balances[0].account_number == "3011"

        voucher = document.vouchers[0]
        assert voucher.series == "A"
        assert voucher.number == 1
        assert voucher.voucher_date == date(2024, 3, 15)
        assert voucher.text == "Faktura 1"
        assert [t.amount for t in voucher.transactions] == [
            Decimal("1250.00"),
            Decimal("-1000.00"),
            Decimal("-250.00"),
        ]
        assert voucher.transactions[1].description == "Forsaljning"

    def test_cp437_names(self, tmp_path):
        path = tmp_path / "pc8.se"
        path.write_bytes('#FLAGGA 0\n#KONTO 1930 "Företagskonto"\n'.encode("cp437"))
        document = read_sie_file(str(path))
        assert document.accounts[0].name == "Företagskonto"

    def test_errors_collected_and_parsing_continues(self):
        document = parse_sie4(
            "#RAR 0 2024XX01 20241231\n"
            "#TRANS 1930 {} 100\n"
            "#IB 0 1930\n"
            '#KONTO 1930 "Bank"\n'
        )
        assert len(document.errors) == 3
        assert document.errors[0].startswith("Line 1: #RAR")
        assert [account.account_number for account in document.accounts] == ["1930"]

    def test_fiscal_year_name_spanning_years(self):
        document = parse_sie4("#RAR 0 20240701 20250630\n")
        assert document.fiscal_year(0).name == "2024/2025"


class TestValidation:
    """Tests for validate_sie."""

    def test_valid_fixture(self, fixtures_dir):
        validation = validate_sie(read_sie_file(str(fixtures_dir / "sample.se")))
        assert validation.is_valid
        assert validation.warnings == []

    def test_no_accounts_is_error(self):
        validation = validate_sie(parse_sie4("#FLAGGA 0\n"))
        assert not validation.is_valid
        assert "No accounts found in file" in validation.errors
        assert "Company name not found in file" in validation.warnings

    def test_duplicate_and_malformed_numbers_warn(self):
        document = parse_sie4(
            '#FNAMN "AB"\n#KONTO 1930 "Bank"\n#KONTO 1930 "Bank"\n#KONTO 19A "Fel"\n'
        )
        validation = validate_sie(document)
        assert validation.is_valid
        assert "Duplicate account number: 1930" in validation.warnings
        assert "Invalid account number format: 19A" in validation.warnings


class TestSieImportService:
    """Tests for importing a parsed document."""

    def test_import_fixture(self, temp_db, fixtures_dir, journal_service, ledger_service, account_service):
        document = read_sie_file(str(fixtures_dir / "sample.se"))
        result = SieImportService(temp_db, ORGANIZATION).import_document(document)

        assert result.errors == []
        assert result.accounts_created == 4
        assert result.fiscal_years_created == 2
        assert result.opening_balance_entry_id is not None
        assert result.vouchers_imported == 1

        entries = journal_service.list_entries(status=EntryStatus.POSTED)
        assert [entry.verification_number for entry in entries] == [1, 2]
        assert entries[0].entry_date == date(2024, 1, 1)

        bank = account_service.require_account_by_number("1930")
        ledger = ledger_service.get_account_ledger(bank.id)
        assert ledger.closing_balance == Decimal("26250.00")

    def test_reimport_skips_existing(self, temp_db, fixtures_dir):
        document = read_sie_file(str(fixtures_dir / "sample.se"))
        service = SieImportService(temp_db, ORGANIZATION)
        service.import_document(document, import_opening_balances=False, import_vouchers=False)

        result = service.import_document(document, import_opening_balances=False, import_vouchers=False)
        assert result.accounts_created == 0
        assert result.accounts_skipped == 4
        assert result.fiscal_years_skipped == 2

    def test_unbalanced_voucher_reported(self, temp_db):
        document = parse_sie4(
            "#RAR 0 20240101 20241231\n"
            '#KONTO 1930 "Bank"\n'
            '#KONTO 3011 "Försäljning"\n'
            '#VER "A" 1 20240301 "Fel"\n'
            "{\n"
            "#TRANS 1930 {} 100.00\n"
            "#TRANS 3011 {} -99.00\n"
            "}\n"
            '#VER "A" 2 20240302 "Rätt"\n'
            "{\n"
            "#TRANS 1930 {} 100.00\n"
            "#TRANS 3011 {} -100.00\n"
            "}\n"
        )
        result = SieImportService(temp_db, ORGANIZATION).import_document(document)
        assert result.vouchers_failed == 1
        assert result.vouchers_imported == 1
        assert result.errors[0].startswith("Voucher A1:")

    def test_unknown_account_in_voucher(self, temp_db):
        document = parse_sie4(
            "#RAR 0 20240101 20241231\n"
            '#KONTO 1930 "Bank"\n'
            '#VER "A" 1 20240301 "X"\n'
            "{\n"
            "#TRANS 1930 {} 100.00\n"
            "#TRANS 3011 {} -100.00\n"
            "}\n"
        )
        result = SieImportService(temp_db, ORGANIZATION).import_document(document)
        assert result.vouchers_failed == 1
        assert "3011" in result.errors[0]


class TestImportCommand:
    """Tests for the import-sie CLI command."""

    def test_import(self, cli_runner, temp_db, fixtures_dir):
        result = cli_runner.invoke(
            cli,
            ["--db-path", temp_db.database_path, "import-sie", str(fixtures_dir / "sample.se")],
        )
        assert result.exit_code == 0
        assert "Exempel AB: 4 accounts" in result.output
        assert "Vouchers: 1 imported, 0 failed" in result.output

    def test_dry_run(self, cli_runner, temp_db, fixtures_dir):
        result = cli_runner.invoke(
            cli,
            ["--db-path", temp_db.database_path, "import-sie", str(fixtures_dir / "sample.se"), "--dry-run"],
        )
        assert result.exit_code == 0
        assert "Accounts:" not in result.output

    def test_invalid_file(self, cli_runner, temp_db, tmp_path):
        path = tmp_path / "empty.se"
        path.write_text("#FLAGGA 0\n", encoding="cp437")
        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "import-sie", str(path)])
        assert result.exit_code == 1
        assert "No accounts found" in result.output
