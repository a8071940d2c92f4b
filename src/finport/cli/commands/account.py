"""Account management commands."""

import click
from finport.cli.account_resolution import resolve_account_or_exit
from finport.cli.error_handling import handle_domain_error
from finport.domain.account import AccountService
from finport.utils.amount_parser import parse_amount


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--bank", help="Bank name (defaults to account name if not provided)")
@click.option("--opening-balance", help="Balance before the first imported transaction (default 0)")
@click.pass_context
def create_account(ctx, name: str, bank: str | None, opening_balance: str | None):
    """Create a new account to import statements into.

    Examples:
        finport account create "Everyday"
        finport account create "Joint Savings" --bank "Westpac" --opening-balance 1250.00
    """
    service = AccountService(ctx.obj["db"])

    try:
        balance = parse_amount(opening_balance) if opening_balance else None
        account_id = service.create_account(name=name, bank_name=bank or "", opening_balance=balance)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created account '{name.strip()}' (ID: {account_id})")


@account_group.command("set-opening-balance")
@click.argument("account")
@click.argument("amount")
@click.pass_context
def set_opening_balance(ctx, account: str, amount: str):
    """Change an account's opening balance and recompute running balances.

    Examples:
        finport account set-opening-balance "Everyday" 1250.00
        finport account set-opening-balance 1 -- -40.00
    """
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, account)

    try:
        updated = service.set_opening_balance(account_id, parse_amount(amount))
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(
        f"Account '{updated.name}': opening balance {updated.opening_balance:,.2f}, "
        f"current balance {updated.current_balance:,.2f}"
    )


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts."""
    service = AccountService(ctx.obj["db"])

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 80)
    for acc in accounts:
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:20s} | Bank: {acc.bank_name:15s} | "
            f"Balance: {acc.current_balance:,.2f}"
        )


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
