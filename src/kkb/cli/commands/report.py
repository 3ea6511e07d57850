"""Financial statement commands."""

from datetime import date

import click
from kkb.cli.date_filters import period_options, resolve_cli_date_range
from kkb.cli.error_handling import fail
from kkb.domain.reports import ReportService
from kkb.utils.amount_parser import format_amount
from kkb.utils.date_parser import get_date_range, parse_date

LINE_WIDTH = 60


def _display_section(title: str, lines, total_label: str, total) -> None:
    click.echo(f"{title}:")
    if not lines:
        click.echo("    (none)")
    for line in lines:
        click.echo(f"    {line.account_name:<40s} {format_amount(line.balance):>15s}")
    click.echo(f"  {total_label:<42s} {format_amount(total):>15s}")


@click.group()
def report_group():
    """Produce financial statements."""
    pass


@report_group.command("income")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@period_options
@click.pass_context
def income(ctx, start_date: str | None, end_date: str | None, **periods: bool) -> None:
    """Show the income statement for a period (defaults to this month)."""
    store = ctx.obj["store"]
    period_flags = {name.replace("_", "-"): is_set for name, is_set in periods.items()}
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags,
        default_range=get_date_range("this-month"),
    )
    if start is None:
        start = date.min
    if end is None:
        end = date.today()
    if start > end:
        fail(ctx, "Start date must not be after end date.")

    statement = ReportService(store).income_statement(start, end)

    period_label = f"{start} to {end}" if start != date.min else f"through {end}"
    click.echo(f"\nIncome Statement ({period_label})")
    click.echo("=" * LINE_WIDTH)
    _display_section("Revenue", statement.revenue, "Total revenue", statement.total_revenue)
    click.echo()
    _display_section("Expenses", statement.expense, "Total expenses", statement.total_expense)
    click.echo("-" * LINE_WIDTH)
    click.echo(f"  {'Net income':<42s} {format_amount(statement.net_income):>15s}")


@report_group.command("balance")
@click.option("--as-of", help="Balance sheet date (inclusive, defaults to today)")
@click.pass_context
def balance(ctx, as_of: str | None) -> None:
    """Show the balance sheet as of a date."""
    store = ctx.obj["store"]

    as_of_date = date.today()
    if as_of is not None:
        try:
            as_of_date = parse_date(as_of)
        except ValueError as e:
            fail(ctx, f"Invalid date format: {e}")

    sheet = ReportService(store).balance_sheet(as_of_date)

    click.echo(f"\nBalance Sheet (as of {as_of_date})")
    click.echo("=" * LINE_WIDTH)
    _display_section("Assets", sheet.assets, "Total assets", sheet.total_assets)
    click.echo()
    _display_section("Liabilities", sheet.liabilities, "Total liabilities", sheet.total_liabilities)
    click.echo()
    _display_section("Equity", sheet.equity, "Total equity", sheet.total_equity)
    click.echo("-" * LINE_WIDTH)
    click.echo(
        f"  {'Liabilities + equity':<42s} "
        f"{format_amount(sheet.total_liabilities + sheet.total_equity):>15s}"
    )
    if not sheet.is_balanced:
        click.echo(
            f"  Difference of {format_amount(sheet.difference)} "
            "(revenue and expenses are not closed into equity)"
        )


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
