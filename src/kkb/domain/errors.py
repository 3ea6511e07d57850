"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or a violated ledger invariant."""


def account_not_found(account_id: str) -> str:
    """Return message for missing account."""
    return f"Account not found: {account_id}"


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing transaction."""
    return f"Transaction not found: {transaction_id}"


def parent_not_found(parent_id: str) -> str:
    """Return message for a parent reference that does not resolve."""
    return f"Parent account not found: {parent_id}"


def parent_type_mismatch(child_type: str, parent_type: str) -> str:
    """Return message when a child account type differs from its parent."""
    return f"Child account type ({child_type}) must match parent type ({parent_type})"


def transaction_not_balanced(total_debit, total_credit) -> str:
    """Return message for a transaction whose debits and credits differ."""
    return f"Transaction not balanced: debits ({total_debit}) != credits ({total_credit})"


def unknown_entry_account(account_id: str) -> str:
    """Return message when an entry references a missing account."""
    return f"Transaction references non-existent account: {account_id}"


def account_delete_blocked(account_id: str, active_children: int) -> str:
    """Return message when an account still has active child accounts."""
    return (
        f"Cannot delete account {account_id}: it has {active_children} active "
        f"child account{'s' if active_children != 1 else ''}. Deactivate children first."
    )
