"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations or exhausted code ranges."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


def account_not_found(code: str) -> str:
    """Return message for missing account."""
    return f"Account {code} not found"


def journal_not_found(entry_id: str) -> str:
    """Return message for missing journal entry."""
    return f"Journal entry {entry_id} not found"


def fixed_asset_not_found(asset_id: int) -> str:
    """Return message for missing fixed asset."""
    return f"Fixed asset {asset_id} not found"


def account_code_range_exhausted(account_type: str) -> str:
    """Return message when no user-range code is left for a type."""
    return f"No free account code left for {account_type} accounts (limit is 100)"


def system_account_locked(code: str, action: str) -> str:
    """Return message when a system account would be modified."""
    return f"Cannot {action} system account {code}"


def account_delete_blocked(code: str, line_count: int) -> str:
    """Return message when an account is referenced by journal lines."""
    return (
        f"Cannot delete account {code}: it is used by {line_count} "
        f"journal line{'s' if line_count != 1 else ''}. "
        "Please reassign or delete them first."
    )


def unbalanced_entry(debit_total: int, credit_total: int) -> str:
    """Return message for an entry whose sides do not balance."""
    return f"Debit total ({debit_total}) does not equal credit total ({credit_total})"
