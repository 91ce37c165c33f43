"""Account domain service."""

import logging
from dataclasses import replace
from typing import Optional

from bluebook.database.base import Database
from bluebook.domain.account_codes import generate_next_code, is_system_account
from bluebook.domain.entities import Account as AccountEntity, AccountType, TaxCategory
from bluebook.domain.errors import (
    DependencyError,
    NotFoundError,
    ValidationError,
    account_delete_blocked,
    account_not_found,
    system_account_locked,
)

logger = logging.getLogger(__name__)


def _check_ratio(ratio: Optional[int]) -> None:
    if ratio is not None and not 0 <= ratio <= 100:
        raise ValidationError(f"Business ratio must be between 0 and 100, got {ratio}")


class AccountService:
    """Service for managing the chart of accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def seed_default_accounts(self) -> int:
        """Add any missing accounts from the default chart of accounts.

        Returns:
            Number of accounts created
        """
        # Imported here so the domain layer only needs the seed when seeding
        from bluebook.database.seed import DEFAULT_ACCOUNTS

        existing = {account.code for account in self.db.list_accounts()}
        created = 0
        for code, name, account_type in DEFAULT_ACCOUNTS:
            if code in existing:
                continue
            self.db.create_account(code=code, name=name, account_type=account_type)
            created += 1

        if created:
            logger.info("Seeded %d default accounts", created)
        return created

    def create_account(
        self,
        name: str,
        account_type: AccountType,
        default_tax_category: Optional[TaxCategory] = None,
        business_ratio_enabled: bool = False,
        default_business_ratio: Optional[int] = None,
    ) -> str:
        """Create a user account with the next free code for its type.

        Args:
            name: Account name
            account_type: Account type, which fixes the code prefix
            default_tax_category: Tax category proposed for new lines
            business_ratio_enabled: Whether lines on this account may be apportioned
            default_business_ratio: Ratio proposed when apportioning (0-100)

        Returns:
            Generated account code

        Raises:
            ValidationError: If the name is empty, already used or the ratio is out of range
            ConflictError: If all user codes for the type are taken
        """
        name = name.strip()
        if not name:
            raise ValidationError("Account name cannot be empty")
        _check_ratio(default_business_ratio)

        accounts = self.db.list_accounts()
        for acc in accounts:
            if acc.name == name:
                raise ValidationError(f"Account with name '{name}' already exists")

        code = generate_next_code(account_type, [acc.code for acc in accounts])
        return self.db.create_account(
            code=code,
            name=name,
            account_type=account_type,
            default_tax_category=default_tax_category,
            business_ratio_enabled=business_ratio_enabled,
            default_business_ratio=default_business_ratio,
        )

    def get_account(self, code: str) -> Optional[AccountEntity]:
        """Get account by code.

        Args:
            code: Four-digit account code

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(code)

    def list_accounts(self, account_type: Optional[AccountType] = None) -> list[AccountEntity]:
        """List accounts ordered by code, optionally of one type."""
        accounts = self.db.list_accounts()
        if account_type is not None:
            accounts = [acc for acc in accounts if acc.type == account_type]
        return accounts

    def _require(self, code: str) -> AccountEntity:
        account = self.db.get_account(code)
        if account is None:
            raise NotFoundError(account_not_found(code))
        return account

    def rename_account(self, code: str, name: str) -> None:
        """Rename a user account.

        Raises:
            NotFoundError: If the account does not exist
            DependencyError: If the account is a system account
            ValidationError: If the name is empty or used by another account
        """
        account = self._require(code)
        if account.is_system:
            raise DependencyError(system_account_locked(code, "rename"))

        name = name.strip()
        if not name:
            raise ValidationError("Account name cannot be empty")
        for acc in self.db.list_accounts():
            if acc.code != code and acc.name == name:
                raise ValidationError(f"Account with name '{name}' already exists")

        self.db.update_account(replace(account, name=name))

    def update_settings(
        self,
        code: str,
        default_tax_category: Optional[TaxCategory] = None,
        business_ratio_enabled: Optional[bool] = None,
        default_business_ratio: Optional[int] = None,
    ) -> None:
        """Update tax and apportionment defaults. Allowed on system accounts too.

        Arguments left as None keep their stored value.
        """
        account = self._require(code)
        _check_ratio(default_business_ratio)

        updated = account
        if default_tax_category is not None:
            updated = replace(updated, default_tax_category=default_tax_category)
        if business_ratio_enabled is not None:
            updated = replace(updated, business_ratio_enabled=business_ratio_enabled)
        if default_business_ratio is not None:
            updated = replace(updated, default_business_ratio=default_business_ratio)
        self.db.update_account(updated)

    def delete_account(self, code: str) -> None:
        """Delete a user account.

        Raises:
            NotFoundError: If the account does not exist
            DependencyError: If the account is a system account or is used by journal lines
        """
        self._require(code)
        if is_system_account(code):
            raise DependencyError(system_account_locked(code, "delete"))

        line_count = self.db.get_account_line_count(code)
        if line_count > 0:
            raise DependencyError(account_delete_blocked(code, line_count))

        self.db.delete_account(code)
