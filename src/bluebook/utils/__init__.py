"""Utility functions for bluebook."""

from bluebook.utils.date_parser import parse_date
from bluebook.utils.amount_parser import parse_amount, parse_ratio

__all__ = ["parse_date", "parse_amount", "parse_ratio"]
