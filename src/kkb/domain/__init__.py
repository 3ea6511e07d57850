"""Domain layer for kkb application."""

from kkb.domain.entities import (
    Account,
    AccountType,
    Entry,
    LedgerSnapshot,
    Transaction,
)
from kkb.domain.errors import DomainError, ValidationError
from kkb.domain.ledger import LedgerStore
from kkb.domain.reports import (
    ReportService,
    account_balance,
    balance_sheet,
    income_statement,
)

__all__ = [
    "Account",
    "AccountType",
    "Entry",
    "LedgerSnapshot",
    "Transaction",
    "DomainError",
    "ValidationError",
    "LedgerStore",
    "ReportService",
    "account_balance",
    "balance_sheet",
    "income_statement",
]
