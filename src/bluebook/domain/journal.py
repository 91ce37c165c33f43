"""Journal domain service."""

import logging
import uuid
from dataclasses import replace
from datetime import date
from typing import Optional, Sequence

from bluebook.database.base import Database
from bluebook.domain.account_codes import ORDINARY_DEPOSIT_CODE
from bluebook.domain.apportionment import (
    ApportionmentResult,
    apply_business_ratio,
    copy_entry_for_new,
    find_apportionment_target,
    remove_business_ratio,
)
from bluebook.domain.entities import (
    Attachment,
    EvidenceStatus,
    JournalDraft,
    JournalEntry as JournalEntryEntity,
    JournalLine,
)
from bluebook.domain.errors import NotFoundError, ValidationError, journal_not_found
from bluebook.domain.fiscal_year import fiscal_year_range
from bluebook.domain.invoice_journal import Invoice, generate_deposit_journal, generate_sales_journal
from bluebook.domain.journal_search import filter_journals, is_empty_query, parse_search_query
from bluebook.domain.validation import validate_lines

logger = logging.getLogger(__name__)


def _check_lines(lines: Sequence[JournalLine]) -> None:
    if len(lines) < 2:
        raise ValidationError("A journal entry needs at least two lines")
    result = validate_lines(lines)
    if not result.is_valid:
        raise ValidationError("; ".join(result.error_messages()))


class JournalService:
    """Service for managing journal entries."""

    def __init__(self, db: Database):
        """Initialize journal service.

        Args:
            db: Database instance
        """
        self.db = db

    def _register_vendor(self, vendor: str) -> None:
        name = vendor.strip()
        if name and self.db.get_vendor_by_name(name) is None:
            self.db.create_vendor(name)
            logger.debug("Registered vendor %r", name)

    def _require(self, entry_id: str) -> JournalEntryEntity:
        entry = self.db.get_journal_entry(entry_id)
        if entry is None:
            raise NotFoundError(journal_not_found(entry_id))
        return entry

    def create_entry(
        self,
        date: date,
        lines: Sequence[JournalLine],
        vendor: str = "",
        description: str = "",
        evidence_status: EvidenceStatus = EvidenceStatus.NONE,
        attachments: Sequence[Attachment] = (),
    ) -> str:
        """Create a journal entry.

        Args:
            date: Entry date
            lines: Debit and credit lines, at least two
            vendor: Vendor name; new names are added to the vendor registry
            description: Free-text description
            evidence_status: Where the supporting evidence is kept
            attachments: Evidence metadata

        Returns:
            Entry ID

        Raises:
            ValidationError: If the lines do not form a valid balanced entry
        """
        _check_lines(lines)

        entry = JournalEntryEntity(
            id=str(uuid.uuid4()),
            date=date,
            lines=tuple(lines),
            vendor=vendor.strip(),
            description=description,
            evidence_status=evidence_status,
            attachments=tuple(attachments),
        )
        entry_id = self.db.create_journal_entry(entry)
        self._register_vendor(vendor)
        return entry_id

    def get_entry(self, entry_id: str) -> Optional[JournalEntryEntity]:
        """Get journal entry by ID.

        Args:
            entry_id: Entry ID

        Returns:
            Journal entry or None if not found
        """
        return self.db.get_journal_entry(entry_id)

    def list_entries(self, fiscal_year: Optional[int] = None) -> list[JournalEntryEntity]:
        """List entries, newest date first, optionally limited to a fiscal year."""
        if fiscal_year is None:
            return self.db.list_journal_entries()
        start, end = fiscal_year_range(fiscal_year)
        return self.db.list_journal_entries(start_date=start, end_date=end)

    def available_years(self, today: Optional[date] = None) -> list[int]:
        """Return the years that have entries plus the current year, newest first."""
        current_year = (today or date.today()).year
        years = set(self.db.list_journal_years())
        years.add(current_year)
        return sorted(years, reverse=True)

    def update_entry(self, entry: JournalEntryEntity) -> None:
        """Replace a stored entry's content.

        Raises:
            NotFoundError: If the entry does not exist
            ValidationError: If the new lines do not form a valid balanced entry
        """
        existing = self._require(entry.id)
        _check_lines(entry.lines)

        self.db.update_journal_entry(
            replace(entry, vendor=entry.vendor.strip(), created_at=existing.created_at, updated_at=None)
        )
        self._register_vendor(entry.vendor)

    def delete_entry(self, entry_id: str) -> None:
        """Delete a journal entry.

        Raises:
            NotFoundError: If the entry does not exist
        """
        self.db.delete_journal_entry(entry_id)

    def apply_business_ratio(
        self,
        entry_id: str,
        line_index: Optional[int] = None,
        ratio: Optional[int] = None,
    ) -> ApportionmentResult:
        """Split a debit line of a stored entry by a business-use ratio.

        Any split already on the entry is undone first, and ``line_index``
        refers to the lines after that undo. Without ``line_index`` the first
        debit line on an apportionment-enabled account is used, and without
        ``ratio`` that account's default ratio.

        Returns:
            ApportionmentResult; the entry is only saved when ``applied`` is True
        """
        entry = self._require(entry_id)
        lines = remove_business_ratio(entry.lines)

        if line_index is None or ratio is None:
            target = find_apportionment_target(lines, self.db.list_accounts())
            if target is None:
                return ApportionmentResult(lines, 0, 0, applied=False)
            index, _, account = target
            if line_index is None:
                line_index = index
            if ratio is None:
                ratio = account.default_business_ratio if account.default_business_ratio is not None else 100

        result = apply_business_ratio(lines, line_index, ratio)
        if result.applied:
            self.db.update_journal_entry(replace(entry, lines=result.lines, updated_at=None))
            logger.info(
                "Applied %d%% business ratio to entry %s: business %d, personal %d",
                ratio,
                entry_id,
                result.business_amount,
                result.personal_amount,
            )
        return result

    def remove_business_ratio(self, entry_id: str) -> JournalEntryEntity:
        """Undo every business-ratio split on a stored entry.

        Returns:
            The updated entry
        """
        entry = self._require(entry_id)
        updated = replace(entry, lines=remove_business_ratio(entry.lines), updated_at=None)
        self.db.update_journal_entry(updated)
        return updated

    def copy_for_new(self, entry_id: str, today: Optional[date] = None) -> JournalDraft:
        """Build a template for a new entry from a stored one."""
        return copy_entry_for_new(self._require(entry_id), today or date.today())

    def list_vendors(self) -> list[str]:
        """Return registered vendor names ordered by name."""
        return [vendor.name for vendor in self.db.list_vendors()]

    def search_entries(self, query: str, fiscal_year: Optional[int] = None) -> list[JournalEntryEntity]:
        """List entries matching a search query such as ``"Amazon 12月 消耗品費"``.

        An empty query returns the same entries as ``list_entries``.
        """
        entries = self.list_entries(fiscal_year=fiscal_year)
        if is_empty_query(query):
            return entries
        criteria = parse_search_query(query, self.db.list_accounts())
        logger.debug("Search %r parsed as %s", query, criteria)
        return filter_journals(entries, criteria)

    def _create_from_draft(self, draft: JournalDraft) -> str:
        return self.create_entry(
            date=draft.date,
            lines=draft.lines,
            vendor=draft.vendor,
            description=draft.description,
            evidence_status=draft.evidence_status,
        )

    def record_invoice(self, invoice: Invoice) -> str:
        """Book an issued invoice as a receivable against sales.

        Returns:
            Entry ID

        Raises:
            ValidationError: If the invoice has no taxable amount
        """
        if invoice.amounts.subtotal <= 0:
            raise ValidationError(f"Invoice {invoice.invoice_number} has no billable amount")
        entry_id = self._create_from_draft(generate_sales_journal(invoice))
        logger.info("Booked invoice %s as entry %s (total %d)", invoice.invoice_number, entry_id, invoice.amounts.total)
        return entry_id

    def record_invoice_payment(
        self,
        invoice: Invoice,
        deposit_date: date,
        bank_account_code: str = ORDINARY_DEPOSIT_CODE,
    ) -> str:
        """Book the collection of an invoice into a bank account.

        Raises:
            ValidationError: If the invoice has no billable amount
        """
        if invoice.amounts.subtotal <= 0:
            raise ValidationError(f"Invoice {invoice.invoice_number} has no billable amount")
        return self._create_from_draft(generate_deposit_journal(invoice, deposit_date, bank_account_code))
