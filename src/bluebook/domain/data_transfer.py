"""JSON export and import of a fiscal year's bookkeeping data.

The export file is a single JSON object::

    {"version": "1.0.0", "exported_at": "...", "fiscal_year": 2024,
     "journals": [...], "accounts": [...], "vendors": [...]}

Apportionment metadata travels with each line as a tagged object, so a split
survives a round trip unchanged.
"""

import json
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, UTC
from typing import Any, Optional

from dateutil import parser as date_parser

from bluebook.database.base import Database
from bluebook.domain.account_codes import account_type_for_code, is_system_account
from bluebook.domain.entities import (
    Account,
    AccountType,
    AppliedSplit,
    Apportionment,
    Attachment,
    EvidenceStatus,
    GeneratedCounterpart,
    JournalEntry,
    JournalLine,
    NO_APPORTIONMENT,
    Side,
    TaxCategory,
    Vendor,
)
from bluebook.domain.errors import ValidationError
from bluebook.domain.fiscal_year import fiscal_year_range
from bluebook.domain.validation import validate_lines

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0.0"
IMPORT_MODES = ("merge", "overwrite")


@dataclass(frozen=True)
class ExportData:
    """Everything exported for one fiscal year."""

    version: str
    exported_at: datetime
    fiscal_year: int
    journals: tuple[JournalEntry, ...]
    accounts: tuple[Account, ...]
    vendors: tuple[Vendor, ...]


@dataclass
class ImportResult:
    """Counts of imported records and messages for rejected ones."""

    journals_imported: int = 0
    accounts_imported: int = 0
    vendors_imported: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ImportPreview:
    fiscal_year: int
    journal_count: int
    new_journal_count: int
    account_count: int
    new_account_count: int
    vendor_count: int
    new_vendor_count: int


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _line_to_dict(line: JournalLine) -> dict[str, Any]:
    apportionment: dict[str, Any] = {"kind": line.apportionment.kind}
    if isinstance(line.apportionment, AppliedSplit):
        apportionment["original_amount"] = line.apportionment.original_amount
        apportionment["ratio"] = line.apportionment.ratio
    return {
        "id": line.id,
        "side": line.side.value,
        "account_code": line.account_code,
        "amount": line.amount,
        "tax_category": line.tax_category.value if line.tax_category is not None else None,
        "memo": line.memo,
        "apportionment": apportionment,
    }


def _attachment_to_dict(attachment: Attachment) -> dict[str, Any]:
    return {
        "id": attachment.id,
        "original_name": attachment.original_name,
        "generated_name": attachment.generated_name,
        "mime_type": attachment.mime_type,
        "size": attachment.size,
        "document_date": (
            attachment.document_date.isoformat() if attachment.document_date is not None else None
        ),
        "created_at": _isoformat(attachment.created_at),
    }


def _journal_to_dict(entry: JournalEntry) -> dict[str, Any]:
    return {
        "id": entry.id,
        "date": entry.date.isoformat(),
        "vendor": entry.vendor,
        "description": entry.description,
        "evidence_status": entry.evidence_status.value,
        "lines": [_line_to_dict(line) for line in entry.lines],
        "attachments": [_attachment_to_dict(att) for att in entry.attachments],
        "created_at": _isoformat(entry.created_at),
        "updated_at": _isoformat(entry.updated_at),
    }


def _account_to_dict(account: Account) -> dict[str, Any]:
    return {
        "code": account.code,
        "name": account.name,
        "type": account.type.value,
        "is_system": account.is_system,
        "default_tax_category": (
            account.default_tax_category.value if account.default_tax_category is not None else None
        ),
        "business_ratio_enabled": account.business_ratio_enabled,
        "default_business_ratio": account.default_business_ratio,
        "created_at": _isoformat(account.created_at),
    }


def export_to_dict(data: ExportData) -> dict[str, Any]:
    """Convert export data to a JSON-ready dict."""
    return {
        "version": data.version,
        "exported_at": data.exported_at.isoformat(),
        "fiscal_year": data.fiscal_year,
        "journals": [_journal_to_dict(entry) for entry in data.journals],
        "accounts": [_account_to_dict(account) for account in data.accounts],
        "vendors": [
            {"name": vendor.name, "created_at": _isoformat(vendor.created_at)}
            for vendor in data.vendors
        ],
    }


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return date_parser.isoparse(value)


def _optional_tax(value: Optional[str]) -> Optional[TaxCategory]:
    return TaxCategory(value) if value is not None else None


def _apportionment_from_dict(raw: dict[str, Any]) -> Apportionment:
    kind = raw.get("kind", "none")
    if kind == "applied_split":
        return AppliedSplit(original_amount=int(raw["original_amount"]), ratio=int(raw["ratio"]))
    if kind == "generated_counterpart":
        return GeneratedCounterpart()
    if kind != "none":
        raise ValueError(f"unknown apportionment kind {kind!r}")
    return NO_APPORTIONMENT


def _line_from_dict(raw: dict[str, Any]) -> JournalLine:
    return JournalLine(
        id=str(raw["id"]),
        side=Side(raw["side"]),
        account_code=str(raw["account_code"]),
        amount=int(raw["amount"]),
        tax_category=_optional_tax(raw.get("tax_category")),
        memo=raw.get("memo"),
        apportionment=_apportionment_from_dict(raw.get("apportionment") or {}),
    )


def _attachment_from_dict(raw: dict[str, Any]) -> Attachment:
    document_date = raw.get("document_date")
    return Attachment(
        id=str(raw["id"]),
        original_name=raw["original_name"],
        generated_name=raw["generated_name"],
        mime_type=raw["mime_type"],
        size=int(raw["size"]),
        document_date=date_parser.isoparse(document_date).date() if document_date else None,
        created_at=_parse_datetime(raw.get("created_at")),
    )


def journal_from_dict(raw: dict[str, Any]) -> JournalEntry:
    """Rebuild a journal entry from its exported form.

    Raises:
        KeyError, TypeError, ValueError: If the record is malformed
    """
    return JournalEntry(
        id=str(raw["id"]),
        date=date_parser.isoparse(raw["date"]).date(),
        lines=tuple(_line_from_dict(line) for line in raw["lines"]),
        vendor=raw.get("vendor") or "",
        description=raw.get("description") or "",
        evidence_status=EvidenceStatus(raw.get("evidence_status") or "none"),
        attachments=tuple(_attachment_from_dict(att) for att in raw.get("attachments") or ()),
        created_at=_parse_datetime(raw.get("created_at")),
        updated_at=_parse_datetime(raw.get("updated_at")),
    )


def account_from_dict(raw: dict[str, Any]) -> Account:
    """Rebuild an account from its exported form.

    Raises:
        KeyError, TypeError, ValueError: If the record is malformed
    """
    return Account(
        code=str(raw["code"]),
        name=raw["name"],
        type=AccountType(raw["type"]),
        created_at=_parse_datetime(raw.get("created_at")),
        default_tax_category=_optional_tax(raw.get("default_tax_category")),
        business_ratio_enabled=bool(raw.get("business_ratio_enabled", False)),
        default_business_ratio=raw.get("default_business_ratio"),
    )


def export_from_dict(payload: Any) -> tuple[ExportData, list[str]]:
    """Parse an exported dict.

    Malformed journal, account or vendor records are skipped and described in
    the returned message list.

    Raises:
        ValidationError: If the top-level structure is not an export file
    """
    if not isinstance(payload, dict):
        raise ValidationError("Import data must be a JSON object")
    if not isinstance(payload.get("version"), str):
        raise ValidationError("Import data has no version")
    if not isinstance(payload.get("exported_at"), str):
        raise ValidationError("Import data has no export timestamp")
    fiscal_year = payload.get("fiscal_year")
    if not isinstance(fiscal_year, int) or isinstance(fiscal_year, bool):
        raise ValidationError("Import data has no fiscal year")
    for key in ("journals", "accounts", "vendors"):
        if not isinstance(payload.get(key), list):
            raise ValidationError(f"Import data field '{key}' must be a list")

    try:
        exported_at = date_parser.isoparse(payload["exported_at"])
    except ValueError as e:
        raise ValidationError(f"Invalid export timestamp: {e}") from e

    rejected: list[str] = []

    journals = []
    for index, raw in enumerate(payload["journals"]):
        try:
            journals.append(journal_from_dict(raw))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            rejected.append(f"Journal #{index + 1}: malformed record ({e})")

    accounts = []
    for index, raw in enumerate(payload["accounts"]):
        try:
            accounts.append(account_from_dict(raw))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            rejected.append(f"Account #{index + 1}: malformed record ({e})")

    vendors = []
    for index, raw in enumerate(payload["vendors"]):
        if isinstance(raw, dict) and isinstance(raw.get("name"), str) and raw["name"].strip():
            vendors.append(Vendor(id=0, name=raw["name"].strip()))
        else:
            rejected.append(f"Vendor #{index + 1}: malformed record")

    data = ExportData(
        version=payload["version"],
        exported_at=exported_at,
        fiscal_year=fiscal_year,
        journals=tuple(journals),
        accounts=tuple(accounts),
        vendors=tuple(vendors),
    )
    return data, rejected


class DataTransferService:
    """Service for exporting and importing a fiscal year as JSON."""

    def __init__(self, db: Database):
        """Initialize data transfer service.

        Args:
            db: Database instance
        """
        self.db = db

    def export_data(self, fiscal_year: int, now: Optional[datetime] = None) -> ExportData:
        """Collect the entries of a fiscal year with the full chart of accounts and vendors."""
        start, end = fiscal_year_range(fiscal_year)
        return ExportData(
            version=EXPORT_VERSION,
            exported_at=now or datetime.now(UTC),
            fiscal_year=fiscal_year,
            journals=tuple(self.db.list_journal_entries(start_date=start, end_date=end)),
            accounts=tuple(self.db.list_accounts()),
            vendors=tuple(self.db.list_vendors()),
        )

    def export_json(self, fiscal_year: int, now: Optional[datetime] = None) -> str:
        """Export a fiscal year as a JSON document."""
        payload = export_to_dict(self.export_data(fiscal_year, now=now))
        return json.dumps(payload, ensure_ascii=False, indent=2)

    def import_preview(self, data: ExportData) -> ImportPreview:
        """Count how many records an import would add."""
        existing_journal_ids = {entry.id for entry in self.db.list_journal_entries()}
        existing_codes = {account.code for account in self.db.list_accounts()}
        existing_vendors = {vendor.name for vendor in self.db.list_vendors()}

        user_accounts = [acc for acc in data.accounts if not is_system_account(acc.code)]
        return ImportPreview(
            fiscal_year=data.fiscal_year,
            journal_count=len(data.journals),
            new_journal_count=sum(1 for j in data.journals if j.id not in existing_journal_ids),
            account_count=len(user_accounts),
            new_account_count=sum(1 for a in user_accounts if a.code not in existing_codes),
            vendor_count=len(data.vendors),
            new_vendor_count=sum(1 for v in data.vendors if v.name not in existing_vendors),
        )

    def import_json(self, text: str, mode: str = "merge") -> ImportResult:
        """Parse and import a JSON export document.

        Raises:
            ValidationError: If the text is not a valid export document or the mode is unknown
        """
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON: {e}") from e

        data, rejected = export_from_dict(payload)
        for message in rejected:
            logger.warning("Import rejected: %s", message)

        result = self.import_data(data, mode=mode)
        result.errors[:0] = rejected
        return result

    def import_data(self, data: ExportData, mode: str = "merge") -> ImportResult:
        """Import export data.

        In ``merge`` mode existing records are kept and only new ones are
        added. In ``overwrite`` mode the target year's entries are deleted
        first and existing user accounts and entries are replaced. System
        accounts only take over their tax and apportionment settings.

        Raises:
            ValidationError: If the mode is unknown
        """
        if mode not in IMPORT_MODES:
            raise ValidationError(f"Unknown import mode '{mode}', expected merge or overwrite")

        result = ImportResult()

        if mode == "overwrite":
            start, end = fiscal_year_range(data.fiscal_year)
            for entry in self.db.list_journal_entries(start_date=start, end_date=end):
                self.db.delete_journal_entry(entry.id)

        self._import_accounts(data.accounts, mode, result)
        self._import_vendors(data.vendors, result)
        self._import_journals(data.journals, mode, result)

        logger.info(
            "Imported %d journals, %d accounts, %d vendors (%s, %d rejected)",
            result.journals_imported,
            result.accounts_imported,
            result.vendors_imported,
            mode,
            len(result.errors),
        )
        return result

    def _import_accounts(self, accounts, mode: str, result: ImportResult) -> None:
        for account in accounts:
            existing = self.db.get_account(account.code)

            if is_system_account(account.code):
                if existing is not None:
                    self.db.update_account(
                        replace(
                            existing,
                            default_tax_category=account.default_tax_category,
                            business_ratio_enabled=account.business_ratio_enabled,
                            default_business_ratio=account.default_business_ratio,
                        )
                    )
                continue

            if account_type_for_code(account.code) != account.type:
                self._reject(result, f"Account {account.code}: code does not match type {account.type.value}")
                continue

            if existing is None:
                self.db.create_account(
                    code=account.code,
                    name=account.name,
                    account_type=account.type,
                    default_tax_category=account.default_tax_category,
                    business_ratio_enabled=account.business_ratio_enabled,
                    default_business_ratio=account.default_business_ratio,
                )
                result.accounts_imported += 1
            elif mode == "overwrite":
                self.db.update_account(account)
                result.accounts_imported += 1

    def _import_vendors(self, vendors, result: ImportResult) -> None:
        for vendor in vendors:
            if self.db.get_vendor_by_name(vendor.name) is None:
                self.db.create_vendor(vendor.name)
                result.vendors_imported += 1

    def _import_journals(self, journals, mode: str, result: ImportResult) -> None:
        for entry in journals:
            validation = validate_lines(entry.lines)
            if len(entry.lines) < 2 or not validation.is_valid:
                messages = validation.error_messages() or ["fewer than two lines"]
                self._reject(result, f"Journal {entry.id}: {'; '.join(messages)}")
                continue

            existing = self.db.get_journal_entry(entry.id)
            if existing is None:
                self.db.create_journal_entry(entry)
                result.journals_imported += 1
            elif mode == "overwrite":
                self.db.update_journal_entry(entry)
                result.journals_imported += 1

    def _reject(self, result: ImportResult, message: str) -> None:
        logger.warning("Import rejected: %s", message)
        result.errors.append(message)
