"""Account management commands."""

import click
from kkb.cli.account_resolution import resolve_account_or_exit
from kkb.cli.error_handling import fail, handle_domain_error, save_ledger
from kkb.domain.account_tree import account_path, build_account_tree
from kkb.domain.entities import AccountType, DEFAULT_CURRENCY
from kkb.domain.errors import DomainError
from kkb.domain.reports import ReportService
from kkb.utils.amount_parser import format_amount
from kkb.utils.date_parser import parse_date

ACCOUNT_TYPES = [account_type.value for account_type in AccountType]


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--type", "account_type", required=True, type=click.Choice(ACCOUNT_TYPES), help="Account type"
)
@click.option("--parent", help="Parent account name or ID (must have the same type)")
@click.option("--currency", default=DEFAULT_CURRENCY, show_default=True, help="Currency code")
@click.pass_context
def create_account(ctx, name: str, account_type: str, parent: str | None, currency: str):
    """Create a new account.

    Examples:
        kkb account create "Cash" --type asset
        kkb account create "Groceries" --type expense --parent "Food"
    """
    store = ctx.obj["store"]

    parent_id = None
    if parent is not None:
        parent_id = resolve_account_or_exit(ctx, store, parent)

    try:
        created = store.create_account(
            name=name, type=account_type, parent_id=parent_id, currency=currency
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    save_ledger(ctx)

    click.echo(f"Created account '{created.name}' (ID: {created.id})")
    if parent_id is not None:
        click.echo(f"  Path: {account_path(store.get_accounts(), created.id)}")


@account_group.command("list")
@click.option("--all", "show_all", is_flag=True, help="Include archived accounts")
@click.option("--type", "account_type", type=click.Choice(ACCOUNT_TYPES), help="Only this type")
@click.pass_context
def list_accounts(ctx, show_all: bool, account_type: str | None):
    """List accounts."""
    store = ctx.obj["store"]
    accounts = store.get_accounts(active_only=not show_all)
    if account_type is not None:
        accounts = [acc for acc in accounts if acc.type == account_type]

    if not accounts:
        click.echo("No accounts found.")
        return

    all_accounts = store.get_accounts()
    click.echo("\nAccounts:")
    click.echo("-" * 80)
    for acc in accounts:
        status = "" if acc.is_active else " (archived)"
        click.echo(
            f"{acc.id[:8]} | {acc.type.value:9s} | {acc.currency:3s} | "
            f"{account_path(all_accounts, acc.id)}{status}"
        )


@account_group.command("tree")
@click.option("--all", "show_all", is_flag=True, help="Include archived accounts")
@click.pass_context
def account_tree(ctx, show_all: bool):
    """Show the chart of accounts as a tree, grouped by type."""
    store = ctx.obj["store"]
    roots = build_account_tree(store.get_accounts(), active_only=not show_all)
    if not roots:
        click.echo("No accounts found.")
        return

    INDENT_SIZE = 4

    def display(nodes, indent):
        for node in nodes:
            status = "" if node.account.is_active else " (archived)"
            click.echo(f"{' ' * (INDENT_SIZE * indent)}{node.account.name}{status}")
            display(node.children, indent + 1)

    is_first = True
    for account_type in AccountType:
        typed_roots = [node for node in roots if node.account.type == account_type]
        if not typed_roots:
            continue
        if not is_first:
            click.echo()
        is_first = False
        click.echo(f"{account_type.label}:")
        display(typed_roots, 1)


@account_group.command("update")
@click.argument("account", metavar="ACCOUNT")
@click.option("--name", help="New account name")
@click.option("--parent", help="New parent account name or ID")
@click.option("--root", "make_root", is_flag=True, help="Move the account to the top level")
@click.option("--currency", help="New currency code")
@click.option("--active/--inactive", "is_active", default=None, help="Reactivate or archive")
@click.pass_context
def update_account(
    ctx,
    account: str,
    name: str | None,
    parent: str | None,
    make_root: bool,
    currency: str | None,
    is_active: bool | None,
) -> None:
    """Update an account.

    ACCOUNT can be an account name or ID. The account type cannot be changed.

    Examples:
        kkb account update "Cash" --name "Wallet"
        kkb account update "Groceries" --root
    """
    store = ctx.obj["store"]
    account_id = resolve_account_or_exit(ctx, store, account)

    if parent is not None and make_root:
        fail(ctx, "--parent cannot be combined with --root")

    changes = {}
    if name is not None:
        changes["name"] = name
    if parent is not None:
        changes["parent_id"] = resolve_account_or_exit(ctx, store, parent)
    if make_root:
        changes["parent_id"] = None
    if currency is not None:
        changes["currency"] = currency
    if is_active is not None:
        changes["is_active"] = is_active

    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        updated = store.update_account(account_id, **changes)
    except DomainError as e:
        handle_domain_error(ctx, e)
    save_ledger(ctx)
    click.echo(f"Updated account '{updated.name}'")


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account.

    ACCOUNT can be an account name or ID.

    Accounts used by any transaction, or with only archived
    child accounts, are archived instead of removed. An
    account with active child accounts cannot be deleted.

    Examples:
        kkb account delete "Cash"
    """
    store = ctx.obj["store"]
    account_id = resolve_account_or_exit(ctx, store, account)
    account_obj = store.get_account(account_id)

    if not yes and not click.confirm(f"Are you sure you want to delete account '{account_obj.name}'?"):
        click.echo("Deletion cancelled.")
        return

    referenced = any(txn.references(account_id) for txn in store.get_transactions())
    try:
        store.delete_account(account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    save_ledger(ctx)

    if store.get_account(account_id) is None:
        click.echo(f"Deleted account '{account_obj.name}'")
    elif referenced:
        click.echo(f"Archived account '{account_obj.name}' (it has transactions)")
    else:
        click.echo(f"Archived account '{account_obj.name}' (it has archived child accounts)")


@account_group.command("balance")
@click.argument("account", metavar="ACCOUNT")
@click.option("--as-of", help="Balance as of date (inclusive, YYYY-MM-DD or relative)")
@click.pass_context
def account_balance(ctx, account: str, as_of: str | None) -> None:
    """Show the balance of an account."""
    store = ctx.obj["store"]
    account_id = resolve_account_or_exit(ctx, store, account)

    as_of_date = None
    if as_of is not None:
        try:
            as_of_date = parse_date(as_of)
        except ValueError as e:
            fail(ctx, f"Invalid date format: {e}")

    account_obj = store.get_account(account_id)
    balance = ReportService(store).account_balance(account_id, as_of=as_of_date)
    suffix = f" as of {as_of_date}" if as_of_date is not None else ""
    click.echo(f"{account_obj.name}: {format_amount(balance)} {account_obj.currency}{suffix}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
