"""Domain model entities for bluebook.

These are pure data classes representing bookkeeping concepts, independent of
database schema. Amounts are integers in yen and always tax-inclusive.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional, Union


class AccountType(str, Enum):
    """The five account categories."""

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSE = "expense"


ACCOUNT_TYPE_LABELS: dict[AccountType, str] = {
    AccountType.ASSET: "資産",
    AccountType.LIABILITY: "負債",
    AccountType.EQUITY: "純資産",
    AccountType.REVENUE: "収益",
    AccountType.EXPENSE: "費用",
}


class Side(str, Enum):
    """Side of a journal line."""

    DEBIT = "debit"
    CREDIT = "credit"


class TaxCategory(str, Enum):
    """Consumption tax category of a journal line."""

    SALES_10 = "sales_10"
    SALES_8 = "sales_8"
    PURCHASE_10 = "purchase_10"
    PURCHASE_8 = "purchase_8"
    EXEMPT = "exempt"
    OUT_OF_SCOPE = "out_of_scope"
    NA = "na"


TAX_CATEGORY_LABELS: dict[TaxCategory, str] = {
    TaxCategory.SALES_10: "課税売上10%",
    TaxCategory.SALES_8: "課税売上8%（軽減）",
    TaxCategory.PURCHASE_10: "課税仕入10%",
    TaxCategory.PURCHASE_8: "課税仕入8%（軽減）",
    TaxCategory.EXEMPT: "非課税",
    TaxCategory.OUT_OF_SCOPE: "不課税",
    TaxCategory.NA: "対象外",
}


class EvidenceStatus(str, Enum):
    """Whether supporting evidence exists for an entry."""

    NONE = "none"
    PAPER = "paper"
    DIGITAL = "digital"


class DepreciationMethod(str, Enum):
    STRAIGHT_LINE = "straight-line"
    DECLINING_BALANCE = "declining-balance"


class AssetStatus(str, Enum):
    ACTIVE = "active"
    SOLD = "sold"
    DISPOSED = "disposed"


class AssetCategory(str, Enum):
    BUILDING = "building"
    STRUCTURE = "structure"
    MACHINERY = "machinery"
    VEHICLE = "vehicle"
    EQUIPMENT = "equipment"
    OTHER = "other"


@dataclass(frozen=True)
class Account:
    """Chart-of-accounts entry.

    Whether an account is a system seed is derived from the code shape and
    never stored separately.
    """

    code: str
    name: str
    type: AccountType
    created_at: Optional[datetime] = None
    default_tax_category: Optional[TaxCategory] = None
    business_ratio_enabled: bool = False
    default_business_ratio: Optional[int] = None

    @property
    def is_system(self) -> bool:
        # Import lazily to avoid circular import with account_codes
        from bluebook.domain.account_codes import is_system_account

        return is_system_account(self.code)


@dataclass(frozen=True)
class NoApportionment:
    """Line is not part of a business-ratio split."""

    kind: str = field(default="none", init=False)


@dataclass(frozen=True)
class AppliedSplit:
    """Line amount was reduced to its business share of ``original_amount``."""

    original_amount: int
    ratio: int
    kind: str = field(default="applied_split", init=False)


@dataclass(frozen=True)
class GeneratedCounterpart:
    """Line was generated as the owner-draw half of a split."""

    kind: str = field(default="generated_counterpart", init=False)


Apportionment = Union[NoApportionment, AppliedSplit, GeneratedCounterpart]

NO_APPORTIONMENT = NoApportionment()


@dataclass(frozen=True)
class JournalLine:
    """One debit or credit line of a journal entry."""

    id: str
    side: Side
    account_code: str
    amount: int
    tax_category: Optional[TaxCategory] = None
    memo: Optional[str] = None
    apportionment: Apportionment = NO_APPORTIONMENT

    @property
    def is_debit(self) -> bool:
        return self.side == Side.DEBIT

    @property
    def is_generated(self) -> bool:
        return isinstance(self.apportionment, GeneratedCounterpart)

    def without_apportionment(self) -> "JournalLine":
        """Return a copy of this line with apportionment metadata cleared."""
        return replace(self, apportionment=NO_APPORTIONMENT)


@dataclass(frozen=True)
class Attachment:
    """Evidence record attached to a journal entry (metadata only)."""

    id: str
    original_name: str
    generated_name: str
    mime_type: str
    size: int
    document_date: Optional[date] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class JournalEntry:
    """Journal entry with two or more lines.

    ``vendor`` is a display name copied at entry time, not a reference into
    the vendor registry.
    """

    id: str
    date: date
    lines: tuple[JournalLine, ...]
    vendor: str = ""
    description: str = ""
    evidence_status: EvidenceStatus = EvidenceStatus.NONE
    attachments: tuple[Attachment, ...] = ()
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class JournalDraft:
    """Unsaved journal entry content, e.g. a template copied from another entry."""

    date: date
    lines: tuple[JournalLine, ...]
    vendor: str = ""
    description: str = ""
    evidence_status: EvidenceStatus = EvidenceStatus.NONE


@dataclass(frozen=True)
class Vendor:
    """Vendor registry entry used for input suggestions."""

    id: int
    name: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class FixedAsset:
    """Fixed asset register entry."""

    id: int
    name: str
    category: AssetCategory
    acquisition_date: date
    acquisition_cost: int
    useful_life: int
    depreciation_method: DepreciationMethod
    depreciation_rate: Optional[Decimal] = None
    business_ratio: int = 100
    status: AssetStatus = AssetStatus.ACTIVE
    disposal_date: Optional[date] = None
    memo: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class BusinessInfo:
    """Filer details printed on the statutory document."""

    name: str
    address: str
    business_type: str
    trade_name: Optional[str] = None
    phone_number: Optional[str] = None
