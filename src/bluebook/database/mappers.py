"""Mapper functions to convert between domain models and SQLAlchemy models.

Apportionment metadata is a tagged value in the domain and three flat
columns in the schema; the conversion in both directions lives here.
"""

from datetime import datetime, UTC
from decimal import Decimal
from typing import Any, Optional

from bluebook.domain import entities as domain
from bluebook.database.models import (
    Account as ORMAccount,
    Attachment as ORMAttachment,
    FixedAsset as ORMFixedAsset,
    JournalEntry as ORMJournalEntry,
    JournalLine as ORMJournalLine,
    Vendor as ORMVendor,
)


def _optional_enum(enum_type: Any, value: Optional[str]) -> Any:
    return enum_type(value) if value is not None else None


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        code=orm_account.code,
        name=orm_account.name,
        type=domain.AccountType(orm_account.type),
        created_at=orm_account.created_at,
        default_tax_category=_optional_enum(domain.TaxCategory, orm_account.default_tax_category),
        business_ratio_enabled=orm_account.business_ratio_enabled,
        default_business_ratio=orm_account.default_business_ratio,
    )


def apportionment_to_domain(
    kind: str, original_amount: Optional[int], ratio: Optional[int]
) -> domain.Apportionment:
    """Rebuild the tagged apportionment value from its stored columns."""
    if kind == "applied_split":
        return domain.AppliedSplit(original_amount=original_amount or 0, ratio=ratio or 0)
    if kind == "generated_counterpart":
        return domain.GeneratedCounterpart()
    return domain.NO_APPORTIONMENT


def apportionment_to_columns(apportionment: domain.Apportionment) -> dict[str, Any]:
    """Flatten a tagged apportionment value into column values."""
    if isinstance(apportionment, domain.AppliedSplit):
        return {
            "apportionment_kind": apportionment.kind,
            "original_amount": apportionment.original_amount,
            "business_ratio": apportionment.ratio,
        }
    return {
        "apportionment_kind": apportionment.kind,
        "original_amount": None,
        "business_ratio": None,
    }


def journal_line_to_domain(orm_line: ORMJournalLine) -> domain.JournalLine:
    """Convert SQLAlchemy JournalLine model to domain JournalLine entity."""
    return domain.JournalLine(
        id=orm_line.line_id,
        side=domain.Side(orm_line.side),
        account_code=orm_line.account_code,
        amount=orm_line.amount,
        tax_category=_optional_enum(domain.TaxCategory, orm_line.tax_category),
        memo=orm_line.memo,
        apportionment=apportionment_to_domain(
            orm_line.apportionment_kind, orm_line.original_amount, orm_line.business_ratio
        ),
    )


def journal_line_to_orm(line: domain.JournalLine, position: int) -> ORMJournalLine:
    """Convert a domain JournalLine into a new SQLAlchemy JournalLine row."""
    return ORMJournalLine(
        line_id=line.id,
        position=position,
        side=domain.Side(line.side).value,
        account_code=line.account_code,
        amount=line.amount,
        tax_category=line.tax_category.value if line.tax_category is not None else None,
        memo=line.memo,
        **apportionment_to_columns(line.apportionment),
    )


def attachment_to_domain(orm_attachment: ORMAttachment) -> domain.Attachment:
    """Convert SQLAlchemy Attachment model to domain Attachment entity."""
    return domain.Attachment(
        id=orm_attachment.id,
        original_name=orm_attachment.original_name,
        generated_name=orm_attachment.generated_name,
        mime_type=orm_attachment.mime_type,
        size=orm_attachment.size,
        document_date=orm_attachment.document_date,
        created_at=orm_attachment.created_at,
    )


def attachment_to_orm(attachment: domain.Attachment) -> ORMAttachment:
    """Convert a domain Attachment into a new SQLAlchemy Attachment row."""
    return ORMAttachment(
        id=attachment.id,
        original_name=attachment.original_name,
        generated_name=attachment.generated_name,
        mime_type=attachment.mime_type,
        size=attachment.size,
        document_date=attachment.document_date,
        created_at=attachment.created_at or datetime.now(UTC),
    )


def journal_entry_to_domain(orm_entry: ORMJournalEntry) -> domain.JournalEntry:
    """Convert SQLAlchemy JournalEntry model to domain JournalEntry entity."""
    return domain.JournalEntry(
        id=orm_entry.id,
        date=orm_entry.date,
        lines=tuple(journal_line_to_domain(line) for line in orm_entry.lines),
        vendor=orm_entry.vendor,
        description=orm_entry.description,
        evidence_status=domain.EvidenceStatus(orm_entry.evidence_status),
        attachments=tuple(attachment_to_domain(att) for att in orm_entry.attachments),
        created_at=orm_entry.created_at,
        updated_at=orm_entry.updated_at,
    )


def vendor_to_domain(orm_vendor: ORMVendor) -> domain.Vendor:
    """Convert SQLAlchemy Vendor model to domain Vendor entity."""
    return domain.Vendor(
        id=orm_vendor.id,
        name=orm_vendor.name,
        created_at=orm_vendor.created_at,
    )


def fixed_asset_to_domain(orm_asset: ORMFixedAsset) -> domain.FixedAsset:
    """Convert SQLAlchemy FixedAsset model to domain FixedAsset entity."""
    rate = orm_asset.depreciation_rate
    return domain.FixedAsset(
        id=orm_asset.id,
        name=orm_asset.name,
        category=domain.AssetCategory(orm_asset.category),
        acquisition_date=orm_asset.acquisition_date,
        acquisition_cost=orm_asset.acquisition_cost,
        useful_life=orm_asset.useful_life,
        depreciation_method=domain.DepreciationMethod(orm_asset.depreciation_method),
        depreciation_rate=Decimal(rate).normalize() if rate is not None else None,
        business_ratio=orm_asset.business_ratio,
        status=domain.AssetStatus(orm_asset.status),
        disposal_date=orm_asset.disposal_date,
        memo=orm_asset.memo,
        created_at=orm_asset.created_at,
        updated_at=orm_asset.updated_at,
    )
