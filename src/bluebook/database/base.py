"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date

# Import entities directly; services are loaded lazily by bluebook.domain
from bluebook.domain.entities import (
    Account,
    AccountType,
    FixedAsset,
    JournalEntry,
    TaxCategory,
    Vendor,
)


class Database(ABC):
    """Abstract database interface for bluebook."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        code: str,
        name: str,
        account_type: AccountType,
        default_tax_category: Optional[TaxCategory] = None,
        business_ratio_enabled: bool = False,
        default_business_ratio: Optional[int] = None,
    ) -> str:
        """Create a new account. Returns the account code."""
        pass

    @abstractmethod
    def get_account(self, code: str) -> Optional[Account]:
        """Get account by code."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all accounts ordered by code."""
        pass

    @abstractmethod
    def update_account(self, account: Account) -> None:
        """Replace the name and settings of a stored account, matched by code."""
        pass

    @abstractmethod
    def delete_account(self, code: str) -> None:
        """Delete an account."""
        pass

    @abstractmethod
    def get_account_line_count(self, code: str) -> int:
        """Get count of journal lines referencing an account code."""
        pass

    # Journal operations
    @abstractmethod
    def create_journal_entry(self, entry: JournalEntry) -> str:
        """Store a new journal entry with its lines and attachments. Returns the entry ID."""
        pass

    @abstractmethod
    def get_journal_entry(self, entry_id: str) -> Optional[JournalEntry]:
        """Get journal entry by ID."""
        pass

    @abstractmethod
    def list_journal_entries(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[JournalEntry]:
        """List journal entries, newest date first, then newest created first."""
        pass

    @abstractmethod
    def update_journal_entry(self, entry: JournalEntry) -> None:
        """Replace a stored journal entry, including its lines and attachments."""
        pass

    @abstractmethod
    def delete_journal_entry(self, entry_id: str) -> None:
        """Delete a journal entry and its lines."""
        pass

    @abstractmethod
    def list_journal_years(self) -> list[int]:
        """List the distinct years journal entries are dated in."""
        pass

    # Vendor operations
    @abstractmethod
    def create_vendor(self, name: str) -> int:
        """Create a vendor. Returns vendor ID."""
        pass

    @abstractmethod
    def get_vendor_by_name(self, name: str) -> Optional[Vendor]:
        """Get vendor by exact name."""
        pass

    @abstractmethod
    def list_vendors(self) -> list[Vendor]:
        """List vendors ordered by name."""
        pass

    # Fixed asset operations
    @abstractmethod
    def create_fixed_asset(self, asset: FixedAsset) -> int:
        """Register a fixed asset. The asset's id is ignored. Returns the new ID."""
        pass

    @abstractmethod
    def get_fixed_asset(self, asset_id: int) -> Optional[FixedAsset]:
        """Get fixed asset by ID."""
        pass

    @abstractmethod
    def list_fixed_assets(self) -> list[FixedAsset]:
        """List fixed assets ordered by acquisition date."""
        pass

    @abstractmethod
    def update_fixed_asset(self, asset: FixedAsset) -> None:
        """Replace a stored fixed asset."""
        pass
