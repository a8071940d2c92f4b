"""CLI helpers for account resolution."""

from __future__ import annotations

import click
from finport.cli.error_handling import handle_domain_error
from finport.domain.account import AccountService
from finport.domain.errors import NotFoundError
from finport.utils.account_resolver import resolve_account


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, account: str | int
) -> int:
    """Resolve account name or ID, or exit with a CLI error."""
    try:
        return resolve_account(account_service, account)
    except NotFoundError as exc:
        handle_domain_error(ctx, exc)
