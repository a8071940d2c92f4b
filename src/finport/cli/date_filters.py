"""CLI helpers for date options."""

from datetime import date, datetime

import click

from finport.utils.date_parser import parse_date


def parse_date_option(ctx: click.Context, value: str | None, label: str) -> date | None:
    """Parse a date option (absolute or relative like 'last month'), or exit."""
    if not value:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def start_of_day(value: date | None) -> datetime | None:
    """Return midnight of a date, for filtering on timestamps."""
    if value is None:
        return None
    return datetime.combine(value, datetime.min.time())
