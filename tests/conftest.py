"""Shared pytest fixtures for bluebook tests."""

import logging
import tempfile
import os
import uuid
from datetime import date
import pytest

from bluebook.database.factories import create_sqlite_database
from bluebook.domain.account import AccountService
from bluebook.domain.data_transfer import DataTransferService
from bluebook.domain.entities import JournalEntry, JournalLine, Side, TaxCategory
from bluebook.domain.fixed_asset import FixedAssetService
from bluebook.domain.journal import JournalService
from bluebook.domain.reports import ReportService


def make_line(side, account_code, amount, tax_category=None, **kwargs):
    """Build a journal line with a fresh id."""
    return JournalLine(
        id=str(uuid.uuid4()),
        side=Side(side),
        account_code=account_code,
        amount=amount,
        tax_category=tax_category,
        **kwargs,
    )


def debit(account_code, amount, tax_category=None, **kwargs):
    return make_line(Side.DEBIT, account_code, amount, tax_category, **kwargs)


def credit(account_code, amount, tax_category=None, **kwargs):
    return make_line(Side.CREDIT, account_code, amount, tax_category, **kwargs)


def make_entry(entry_date, *lines, entry_id=None, **kwargs):
    """Build an unsaved journal entry."""
    return JournalEntry(
        id=entry_id or str(uuid.uuid4()),
        date=entry_date,
        lines=tuple(lines),
        **kwargs,
    )


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo setup_logging so records propagate to caplog again."""
    yield
    logger = logging.getLogger("bluebook")
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def journal_service(temp_db):
    """Create a JournalService with a temporary database."""
    return JournalService(temp_db)


@pytest.fixture
def fixed_asset_service(temp_db):
    """Create a FixedAssetService with a temporary database."""
    return FixedAssetService(temp_db)


@pytest.fixture
def report_service(temp_db):
    """Create a ReportService with a temporary database."""
    return ReportService(temp_db)


@pytest.fixture
def data_transfer_service(temp_db):
    """Create a DataTransferService with a temporary database."""
    return DataTransferService(temp_db)


@pytest.fixture
def seeded_db(temp_db, account_service):
    """Temporary database holding the default chart of accounts."""
    account_service.seed_default_accounts()
    return temp_db


@pytest.fixture
def accounts(seeded_db):
    """The default chart of accounts."""
    return seeded_db.list_accounts()


@pytest.fixture
def sample_entries(seeded_db, journal_service):
    """Record a small year of business for 2024 and return the entry IDs."""
    ids = {}
    ids["capital"] = journal_service.create_entry(
        date=date(2024, 1, 4),
        lines=[debit("1003", 1_000_000), credit("3001", 1_000_000)],
        description="元入金",
    )
    ids["sale"] = journal_service.create_entry(
        date=date(2024, 3, 15),
        lines=[debit("1005", 110_000), credit("4001", 110_000, TaxCategory.SALES_10)],
        vendor="株式会社A",
        description="3月分請求",
    )
    ids["collection"] = journal_service.create_entry(
        date=date(2024, 4, 30),
        lines=[debit("1003", 110_000), credit("1005", 110_000)],
        vendor="株式会社A",
        description="入金",
    )
    ids["phone"] = journal_service.create_entry(
        date=date(2024, 6, 20),
        lines=[debit("5006", 11_000, TaxCategory.PURCHASE_10), credit("1003", 11_000)],
        vendor="通信会社",
        description="携帯料金",
    )
    ids["drawing"] = journal_service.create_entry(
        date=date(2024, 8, 1),
        lines=[debit("3002", 50_000), credit("1003", 50_000)],
        description="生活費",
    )
    return ids


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
