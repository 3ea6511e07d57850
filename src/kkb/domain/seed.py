"""Default chart of accounts for a household ledger."""

import logging

from kkb.domain.entities import Account, AccountType, DEFAULT_CURRENCY
from kkb.domain.ledger import LedgerStore

logger = logging.getLogger(__name__)

# (name, type); all accounts are created at root level
INITIAL_ACCOUNTS = [
    ("Cash", AccountType.ASSET),
    ("Savings Account", AccountType.ASSET),
    ("Credit Card", AccountType.LIABILITY),
    ("Opening Balance", AccountType.EQUITY),
    ("Salary", AccountType.REVENUE),
    ("Food", AccountType.EXPENSE),
    ("Transportation", AccountType.EXPENSE),
    ("Utilities", AccountType.EXPENSE),
]


def seed_initial_accounts(store: LedgerStore, currency: str = DEFAULT_CURRENCY) -> list[Account]:
    """Create the default accounts, skipping names that already exist.

    Returns:
        The accounts that were created
    """
    existing_names = {account.name for account in store.get_accounts()}
    created = []
    for name, account_type in INITIAL_ACCOUNTS:
        if name in existing_names:
            logger.debug("Skipping existing account '%s'", name)
            continue
        created.append(store.create_account(name=name, type=account_type, currency=currency))
    return created
