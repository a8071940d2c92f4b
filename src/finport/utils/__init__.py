"""Utility functions for finport."""

from finport.utils.date_parser import parse_date, parse_statement_date
from finport.utils.amount_parser import parse_amount, parse_optional_amount

__all__ = ["parse_date", "parse_statement_date", "parse_amount", "parse_optional_amount"]
