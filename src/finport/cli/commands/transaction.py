"""Transaction listing command."""

import click
from finport.cli.account_resolution import resolve_account_or_exit
from finport.cli.date_filters import parse_date_option
from finport.cli.error_handling import handle_domain_error
from finport.domain.account import AccountService
from finport.domain.errors import DomainError
from finport.domain.transaction import TransactionService


def format_balance(balance) -> str:
    """Format a running balance, or "-" when none is stored."""
    return "-" if balance is None else f"{balance:,.2f}"


@click.group()
def transaction_group():
    """View imported transactions."""
    pass


@transaction_group.command("list")
@click.option("--account", help="Account name or ID")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--batch", "batch_id", help="Only transactions from this import batch")
@click.pass_context
def list_transactions(ctx, account: str | None, start_date: str | None, end_date: str | None, batch_id: str | None):
    """List transactions with optional filters.

    Account can be specified by name or ID.
    """
    db = ctx.obj["db"]
    service = TransactionService(db)
    account_service = AccountService(db)

    start = parse_date_option(ctx, start_date, "start date")
    end = parse_date_option(ctx, end_date, "end date")

    account_id = None
    if account:
        account_id = resolve_account_or_exit(ctx, account_service, account)

    try:
        transactions = service.list_transactions(
            account_id=account_id, start_date=start, end_date=end, batch_id=batch_id
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not transactions:
        click.echo("No transactions found.")
        return

    accounts = {acc.id: acc.name for acc in account_service.list_accounts()}

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 113)
    click.echo(
        f"{'ID':<6} {'Date':<12} {'Debit':>12} {'Credit':>12} {'Balance':>12} "
        f"{'Account':<20} {'Description':<30}"
    )
    click.echo("-" * 113)

    for txn in transactions:
        click.echo(
            f"{txn.id:<6} {str(txn.transaction_date):<12} {txn.debit_amount:>12,.2f} "
            f"{txn.credit_amount:>12,.2f} {format_balance(txn.balance_after):>12} "
            f"{accounts.get(txn.account_id, 'Unknown'):<20} "
            f"{txn.description[:30]:<30}"
        )

    total_debit = sum(txn.debit_amount for txn in transactions)
    total_credit = sum(txn.credit_amount for txn in transactions)
    click.echo("-" * 113)
    click.echo(
        f"{'TOTAL':<6} {'':<12} {total_debit:>12,.2f} {total_credit:>12,.2f} {'':>12} "
        f"Count: {len(transactions)}"
    )


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
