"""Queries over the account hierarchy (the chart of accounts forest)."""

from typing import Iterable, Optional, Sequence

from kkb.domain.entities import Account, AccountTreeNode, AccountType

UNKNOWN_ACCOUNT_NAME = "Unknown account"


def _index(accounts: Iterable[Account]) -> dict[str, Account]:
    return {account.id: account for account in accounts}


def ancestor_ids(accounts: Sequence[Account], account_id: str) -> list[str]:
    """Return the parent chain of an account, nearest parent first.

    Walks ``parent_id`` links until a root or an unknown parent is reached.
    The walk is bounded by the number of accounts so that a malformed forest
    can never loop forever.
    """
    by_id = _index(accounts)
    chain: list[str] = []
    current = by_id.get(account_id)
    while current is not None and current.parent_id is not None:
        if current.parent_id in chain or len(chain) > len(by_id):
            break
        chain.append(current.parent_id)
        current = by_id.get(current.parent_id)
    return chain


def is_descendant(accounts: Sequence[Account], account_id: str, ancestor_id: str) -> bool:
    """Return True if ``ancestor_id`` appears in the parent chain of ``account_id``."""
    return ancestor_id in ancestor_ids(accounts, account_id)


def descendant_ids(accounts: Sequence[Account], account_id: str) -> set[str]:
    """Return ids of every account below ``account_id`` (excluding itself)."""
    children_map: dict[str, list[str]] = {}
    for account in accounts:
        if account.parent_id is not None:
            children_map.setdefault(account.parent_id, []).append(account.id)

    found: set[str] = set()
    pending = list(children_map.get(account_id, []))
    while pending:
        child_id = pending.pop()
        if child_id in found or child_id == account_id:
            continue
        found.add(child_id)
        pending.extend(children_map.get(child_id, []))
    return found


def children(accounts: Sequence[Account], account_id: str, active_only: bool = False) -> list[Account]:
    """Return direct children of an account in insertion order."""
    return [
        account
        for account in accounts
        if account.parent_id == account_id and (account.is_active or not active_only)
    ]


def parent_candidates(
    accounts: Sequence[Account],
    account_type: AccountType,
    account_id: Optional[str] = None,
) -> list[Account]:
    """Return accounts that may be chosen as parent.

    Candidates are active accounts of the same type. When ``account_id`` is
    given (editing an existing account), the account itself and all of its
    descendants are excluded, since choosing them would create a cycle.
    """
    excluded: set[str] = set()
    if account_id is not None:
        excluded = descendant_ids(accounts, account_id) | {account_id}

    return [
        account
        for account in accounts
        if account.type == account_type and account.is_active and account.id not in excluded
    ]


def account_name(accounts: Sequence[Account], account_id: str) -> str:
    """Return the account name, or a fallback label when it does not exist."""
    account = _index(accounts).get(account_id)
    return account.name if account is not None else UNKNOWN_ACCOUNT_NAME


def account_path(accounts: Sequence[Account], account_id: str) -> str:
    """Get full path for an account.

    Returns:
        Path such as "Expenses > Food > Groceries", or "" if the account is unknown
    """
    by_id = _index(accounts)
    account = by_id.get(account_id)
    if account is None:
        return ""

    path_parts = [account.name]
    for parent_id in ancestor_ids(accounts, account_id):
        parent = by_id.get(parent_id)
        if parent is None:
            break
        path_parts.append(parent.name)

    return " > ".join(reversed(path_parts))


def build_account_tree(accounts: Sequence[Account], active_only: bool = False) -> list[AccountTreeNode]:
    """Build the nested account forest.

    Roots are accounts without a parent (or whose parent is filtered out).
    Siblings are sorted by name.
    """
    visible = sorted(
        (account for account in accounts if account.is_active or not active_only),
        key=lambda account: account.name,
    )
    visible_ids = {account.id for account in visible}

    def build(parent_id: Optional[str], seen: frozenset[str]) -> tuple[AccountTreeNode, ...]:
        nodes = []
        for account in visible:
            if account.id in seen:
                continue
            is_root = account.parent_id is None or account.parent_id not in visible_ids
            if (parent_id is None and is_root) or (parent_id is not None and account.parent_id == parent_id):
                nodes.append(
                    AccountTreeNode(
                        account=account,
                        children=build(account.id, seen | {account.id}),
                    )
                )
        return tuple(nodes)

    return list(build(None, frozenset()))
