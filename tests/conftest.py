"""Shared pytest fixtures for huvudbok tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
from pathlib import Path
import pytest

from huvudbok.database.factories import create_sqlite_database
from huvudbok.domain.account import AccountService
from huvudbok.domain.entities import JournalLine
from huvudbok.domain.fiscal_year import FiscalYearManager
from huvudbok.domain.journal import JournalService
from huvudbok.domain.ledger import LedgerService
from huvudbok.domain.reports import FinancialReportService
from huvudbok.domain.vat import VatService

ORGANIZATION = "test-org"

SAMPLE_CHART = [
    ("1510", "Kundfordringar"),
    ("1930", "Företagskonto"),
    ("2081", "Aktiekapital"),
    ("2440", "Leverantörsskulder"),
    ("2611", "Utgående moms 25 %"),
    ("2621", "Utgående moms 12 %"),
    ("2641", "Ingående moms"),
    ("3011", "Försäljning tjänster 25 %"),
    ("3012", "Försäljning varor 12 %"),
    ("4010", "Inköp material och varor"),
    ("5010", "Lokalhyra"),
    ("7010", "Löner"),
    ("8310", "Ränteintäkter"),
    ("8410", "Räntekostnader"),
    ("8910", "Skatt på årets resultat"),
]


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for CLI tests
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db, ORGANIZATION)


@pytest.fixture
def fiscal_year_manager(temp_db):
    """Create a FiscalYearManager with a temporary database."""
    return FiscalYearManager(temp_db, ORGANIZATION)


@pytest.fixture
def journal_service(temp_db):
    """Create a JournalService with a temporary database."""
    return JournalService(temp_db, ORGANIZATION)


@pytest.fixture
def ledger_service(temp_db):
    """Create a LedgerService with a temporary database."""
    return LedgerService(temp_db, ORGANIZATION)


@pytest.fixture
def vat_service(temp_db):
    """Create a VatService with a temporary database."""
    return VatService(temp_db, ORGANIZATION)


@pytest.fixture
def report_service(temp_db):
    """Create a FinancialReportService with a temporary database."""
    return FinancialReportService(temp_db, ORGANIZATION)


@pytest.fixture
def accounts(account_service):
    """Create the sample chart of accounts; returns account IDs by number."""
    return {
        number: account_service.create_account(number, name) for number, name in SAMPLE_CHART
    }


@pytest.fixture
def fiscal_year_2024(fiscal_year_manager):
    """Create an open calendar fiscal year 2024."""
    fiscal_year_id = fiscal_year_manager.create_fiscal_year(
        "2024", date(2024, 1, 1), date(2024, 12, 31)
    )
    return fiscal_year_manager.get_fiscal_year(fiscal_year_id)


@pytest.fixture
def make_line(accounts):
    """Build journal lines by account number."""

    def _make_line(number, debit="0", credit="0", **vat):
        return JournalLine(
            account_id=accounts[number],
            debit_amount=Decimal(debit),
            credit_amount=Decimal(credit),
            **{key: Decimal(value) for key, value in vat.items()},
        )

    return _make_line


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
