"""CLI helpers for choosing report and listing date ranges."""

from datetime import date

import click

from kkb.cli.error_handling import fail
from kkb.utils.date_parser import PERIOD_NAMES, get_date_range, parse_date

PERIOD_FLAGS = ", ".join(f"--{period}" for period in PERIOD_NAMES)


def period_options(command):
    """Decorate a command with one flag per named period (--this-month, ...)."""
    for period in reversed(PERIOD_NAMES):
        label = period.replace("-", " ")
        command = click.option(f"--{period}", is_flag=True, help=f"Limit to {label}")(command)
    return command


def _parse_or_exit(ctx, label: str, value: str | None) -> date | None:
    if not value:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        fail(ctx, f"Invalid {label} date: {e}")


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    default_range: tuple[date, date] | None = None,
) -> tuple[date | None, date | None]:
    """Resolve a date range from period flags or explicit dates.

    At most one period flag may be set, and not together with explicit
    dates. Without any of them ``default_range`` is used (which may be None
    for an open range). Exits with status 1 on invalid input.
    """
    chosen = [period for period, is_set in period_flags.items() if is_set]

    if len(chosen) > 1:
        fail(ctx, f"Only one period option ({PERIOD_FLAGS}) can be specified at a time.")

    if chosen:
        if start_date or end_date:
            fail(ctx, "Period options cannot be combined with --start-date or --end-date.")
        return get_date_range(chosen[0])

    start = _parse_or_exit(ctx, "start", start_date)
    end = _parse_or_exit(ctx, "end", end_date)

    if start is None and end is None and default_range is not None:
        return default_range

    if start is not None and end is not None and start > end:
        fail(ctx, f"Start date {start} is after end date {end}.")

    return start, end
