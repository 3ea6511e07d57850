"""Utility functions for kkb."""

from kkb.utils.ids import generate_id
from kkb.utils.date_parser import (
    current_timestamp,
    format_timestamp,
    parse_date,
    parse_iso_date,
    parse_timestamp,
)
from kkb.utils.amount_parser import parse_amount, format_amount

__all__ = [
    "generate_id",
    "current_timestamp",
    "format_timestamp",
    "parse_date",
    "parse_iso_date",
    "parse_timestamp",
    "parse_amount",
    "format_amount",
]
