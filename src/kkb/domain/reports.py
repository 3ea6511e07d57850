"""Financial statements derived from accounts and transactions.

The functions here are pure: they read whatever accounts and transactions they
are given and never touch a store. Callers may pre-filter transactions (for
instance by date) before asking for balances.
"""

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from kkb.domain.entities import (
    Account,
    AccountBalance,
    AccountType,
    BalanceSheet,
    IncomeStatement,
    Transaction,
)
from kkb.domain.ledger import LedgerStore

ZERO = Decimal("0")


def account_balance(
    account_id: str,
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
    as_of: Optional[date] = None,
) -> Decimal:
    """Calculate the balance of an account.

    Asset and expense accounts are debit-normal (debits minus credits);
    liability, equity and revenue accounts are credit-normal (credits minus
    debits).

    Args:
        account_id: Account ID
        accounts: All accounts
        transactions: Transactions to include
        as_of: Optional inclusive end date; all transactions when omitted

    Returns:
        The balance, or 0 if the account does not exist
    """
    account = next((acc for acc in accounts if acc.id == account_id), None)
    if account is None:
        return ZERO

    total_debit = ZERO
    total_credit = ZERO
    for txn in transactions:
        if as_of is not None and txn.date > as_of:
            continue
        for entry in txn.entries:
            if entry.account_id == account_id:
                total_debit += entry.debit
                total_credit += entry.credit

    if AccountType(account.type).is_debit_normal:
        return total_debit - total_credit
    return total_credit - total_debit


def _balance_lines(
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
    account_type: AccountType,
    as_of: Optional[date] = None,
) -> tuple[tuple[AccountBalance, ...], Decimal]:
    """Balance lines of active accounts of one type, skipping zero balances."""
    lines = []
    total = ZERO
    for account in accounts:
        if account.type != account_type or not account.is_active:
            continue
        balance = account_balance(account.id, accounts, transactions, as_of)
        if balance != 0:
            lines.append(
                AccountBalance(account_id=account.id, account_name=account.name, balance=balance)
            )
            total += balance
    return tuple(lines), total


def income_statement(
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
    start_date: date,
    end_date: date,
) -> IncomeStatement:
    """Generate an income statement for a period.

    Args:
        accounts: All accounts
        transactions: All transactions
        start_date: First day of the period (inclusive)
        end_date: Last day of the period (inclusive)

    Returns:
        IncomeStatement with revenue and expense lines and net income
    """
    period_transactions = [txn for txn in transactions if start_date <= txn.date <= end_date]

    revenue, total_revenue = _balance_lines(accounts, period_transactions, AccountType.REVENUE)
    expense, total_expense = _balance_lines(accounts, period_transactions, AccountType.EXPENSE)

    return IncomeStatement(
        start_date=start_date,
        end_date=end_date,
        revenue=revenue,
        expense=expense,
        total_revenue=total_revenue,
        total_expense=total_expense,
        net_income=total_revenue - total_expense,
    )


def balance_sheet(
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
    as_of: date,
) -> BalanceSheet:
    """Generate a balance sheet as of a date (inclusive).

    The accounting equation is not enforced; see ``BalanceSheet.is_balanced``.
    """
    assets, total_assets = _balance_lines(accounts, transactions, AccountType.ASSET, as_of)
    liabilities, total_liabilities = _balance_lines(
        accounts, transactions, AccountType.LIABILITY, as_of
    )
    equity, total_equity = _balance_lines(accounts, transactions, AccountType.EQUITY, as_of)

    return BalanceSheet(
        as_of=as_of,
        assets=assets,
        liabilities=liabilities,
        equity=equity,
        total_assets=total_assets,
        total_liabilities=total_liabilities,
        total_equity=total_equity,
    )


class ReportService:
    """Service for building reports from the current state of a ledger."""

    def __init__(self, store: LedgerStore):
        """Initialize report service.

        Args:
            store: Ledger store to report on
        """
        self.store = store

    def account_balance(self, account_id: str, as_of: Optional[date] = None) -> Decimal:
        snapshot = self.store.get_snapshot()
        return account_balance(account_id, snapshot.accounts, snapshot.transactions, as_of)

    def income_statement(self, start_date: date, end_date: date) -> IncomeStatement:
        snapshot = self.store.get_snapshot()
        return income_statement(snapshot.accounts, snapshot.transactions, start_date, end_date)

    def balance_sheet(self, as_of: date) -> BalanceSheet:
        snapshot = self.store.get_snapshot()
        return balance_sheet(snapshot.accounts, snapshot.transactions, as_of)
