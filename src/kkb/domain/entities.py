"""Domain model entities for kkb.

These are pure, immutable data classes representing bookkeeping concepts,
independent of how the ledger is persisted. Because every entity is frozen and
every collection is a tuple, values handed out by the ledger store can be
shared freely without risk of corrupting its internal state.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

DATA_VERSION = "1.0.0"
DEFAULT_CURRENCY = "JPY"
BALANCE_TOLERANCE = Decimal("0.01")


class AccountType(str, Enum):
    """The five account types of the chart of accounts."""

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSE = "expense"

    @property
    def is_debit_normal(self) -> bool:
        """Whether debits increase the balance of accounts of this type."""
        return self in (AccountType.ASSET, AccountType.EXPENSE)

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class Account:
    """Account in the chart of accounts."""

    id: str
    name: str
    type: AccountType
    parent_id: Optional[str]
    currency: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Entry:
    """Journal line of a transaction.

    Exactly one of ``debit`` and ``credit`` is positive; the other is zero.
    Amounts are typed ``Any`` because the store validates raw input before
    normalizing it to ``Decimal``.
    """

    account_id: str
    debit: Any = Decimal("0")
    credit: Any = Decimal("0")


@dataclass(frozen=True)
class Transaction:
    """Balanced double-entry transaction."""

    id: str
    date: date
    description: str
    entries: tuple[Entry, ...]
    created_at: datetime
    updated_at: datetime

    @property
    def total_debit(self) -> Decimal:
        return sum((entry.debit for entry in self.entries), Decimal("0"))

    @property
    def total_credit(self) -> Decimal:
        return sum((entry.credit for entry in self.entries), Decimal("0"))

    def references(self, account_id: str) -> bool:
        """Return True if any entry of this transaction posts to the account."""
        return any(entry.account_id == account_id for entry in self.entries)


@dataclass(frozen=True)
class LedgerSnapshot:
    """Complete ledger state; the unit of persistence."""

    version: str
    last_modified: datetime
    accounts: tuple[Account, ...] = ()
    transactions: tuple[Transaction, ...] = ()


@dataclass(frozen=True)
class AccountTreeNode:
    """Account with nested children for hierarchical display."""

    account: Account
    children: tuple["AccountTreeNode", ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class AccountBalance:
    """Balance line of a financial statement."""

    account_id: str
    account_name: str
    balance: Decimal


@dataclass(frozen=True)
class IncomeStatement:
    """Revenue and expense for a period."""

    start_date: date
    end_date: date
    revenue: tuple[AccountBalance, ...]
    expense: tuple[AccountBalance, ...]
    total_revenue: Decimal
    total_expense: Decimal
    net_income: Decimal


@dataclass(frozen=True)
class BalanceSheet:
    """Assets, liabilities and equity as of a date."""

    as_of: date
    assets: tuple[AccountBalance, ...]
    liabilities: tuple[AccountBalance, ...]
    equity: tuple[AccountBalance, ...]
    total_assets: Decimal
    total_liabilities: Decimal
    total_equity: Decimal

    @property
    def difference(self) -> Decimal:
        """Assets minus liabilities and equity."""
        return self.total_assets - (self.total_liabilities + self.total_equity)

    @property
    def is_balanced(self) -> bool:
        """Whether assets equal liabilities plus equity within tolerance.

        Income and expense accounts are not closed into equity, so a ledger
        with period activity normally reports unbalanced here.
        """
        return abs(self.difference) <= BALANCE_TOLERANCE
