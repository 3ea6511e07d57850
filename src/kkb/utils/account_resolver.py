"""Utility for resolving account and transaction references to IDs."""

from kkb.domain.ledger import LedgerStore

MIN_PREFIX_LENGTH = 4


def _match_prefix(kind: str, ids: list[str], reference: str) -> str:
    if len(reference) < MIN_PREFIX_LENGTH:
        raise ValueError(f"{kind} '{reference}' not found")
    matches = [item_id for item_id in ids if item_id.startswith(reference)]
    if not matches:
        raise ValueError(f"{kind} '{reference}' not found")
    if len(matches) > 1:
        raise ValueError(f"{kind} ID prefix '{reference}' is ambiguous ({len(matches)} matches)")
    return matches[0]


def resolve_account(store: LedgerStore, account: str) -> str:
    """Resolve an account ID, ID prefix or name to an account ID.

    Exact IDs win, then exact names (active accounts before archived ones),
    then unique ID prefixes of at least four characters.

    Raises:
        ValueError: If the account is not found or the reference is ambiguous
    """
    account = account.strip()
    if store.get_account(account) is not None:
        return account

    named = [acc for acc in store.get_accounts() if acc.name == account]
    active = [acc for acc in named if acc.is_active]
    candidates = active or named
    if len(candidates) == 1:
        return candidates[0].id
    if len(candidates) > 1:
        raise ValueError(f"Account name '{account}' is ambiguous; use the account ID")

    return _match_prefix("Account", [acc.id for acc in store.get_accounts()], account)


def resolve_transaction(store: LedgerStore, transaction: str) -> str:
    """Resolve a transaction ID or unique ID prefix to a transaction ID.

    Raises:
        ValueError: If the transaction is not found or the prefix is ambiguous
    """
    transaction = transaction.strip()
    if store.get_transaction(transaction) is not None:
        return transaction
    return _match_prefix("Transaction", [txn.id for txn in store.get_transactions()], transaction)
