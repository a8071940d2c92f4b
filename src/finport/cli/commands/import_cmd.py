"""CSV import commands."""

from pathlib import Path
from typing import Optional

import click
from finport.cli.account_resolution import resolve_account_or_exit
from finport.cli.commands.transaction import format_balance
from finport.cli.date_filters import parse_date_option, start_of_day
from finport.cli.error_handling import handle_domain_error
from finport.domain.account import AccountService
from finport.domain.entities import ImportResult
from finport.domain.errors import DomainError
from finport.importing.mapping import ColumnMapping
from finport.importing.service import ImportPreview, ImportService

MAPPING_FIELDS = ("date", "description", "debit", "credit", "amount")


def mapping_options(func):
    """Attach the per-field mapping override options to a command."""
    options = [
        click.option("--mapping", "mapping_json", help='Full mapping as JSON, e.g. \'{"date": "Date", ...}\''),
        click.option("--amount", help="Column holding a signed amount (clears debit/credit)"),
        click.option("--credit", help="Column holding credit amounts"),
        click.option("--debit", help="Column holding debit amounts"),
        click.option("--description", help="Column holding the description"),
        click.option("--date", help="Column holding the transaction date"),
    ]
    for option in options:
        func = option(func)
    return func


def build_mapping(
    base: Optional[ColumnMapping], mapping_json: Optional[str], overrides: dict
) -> ColumnMapping:
    """Combine a base mapping, an optional JSON mapping and field overrides.

    The JSON mapping replaces the base entirely; individual field options
    are applied on top. Passing --amount clears debit and credit unless
    they are also given, and vice versa.
    """
    mapping = ColumnMapping.from_json(mapping_json) if mapping_json else (base or ColumnMapping())
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides.get("amount"):
        overrides.setdefault("debit", "")
        overrides.setdefault("credit", "")
    elif overrides.get("debit") or overrides.get("credit"):
        overrides.setdefault("amount", "")
    return mapping.with_overrides(**overrides)


def _echo_mapping(mapping: ColumnMapping) -> None:
    for name in MAPPING_FIELDS:
        click.echo(f"  {name:<12} {getattr(mapping, name) or '-'}")
    missing = mapping.missing_fields()
    if missing:
        click.echo(f"  Still needed: {', '.join(missing)}")


def _echo_preview(preview: ImportPreview) -> None:
    click.echo(f"\nColumns ({preview.delimiter!r} delimited): {', '.join(preview.headers)}")
    click.echo(f"Rows: {preview.total_rows}")

    click.echo("\nSample rows:")
    click.echo("-" * 80)
    for row in preview.preview:
        click.echo(" | ".join(row.get(header, "") for header in preview.headers))
    click.echo("-" * 80)

    click.echo("\nSuggested mapping:")
    _echo_mapping(preview.suggested_mapping)

    if preview.warnings:
        click.echo(f"\nWarnings: {len(preview.warnings)}")
        for warning in preview.warnings:
            click.echo(f"  Row {warning.row}: {warning.reason}", err=True)


def _echo_result(result: ImportResult) -> None:
    click.echo("\nImport complete:")
    click.echo(f"  Batch: {result.batch_id}")
    click.echo(f"  Imported: {result.imported} transactions")
    click.echo(f"  Skipped: {result.duplicates_skipped} duplicates")
    if result.errors:
        click.echo(f"  Errors: {len(result.errors)}")
        for error in result.errors:
            click.echo(f"    Row {error.row}: [{error.code}] {error.message}", err=True)


@click.group()
def import_group():
    """Import transactions from CSV statement exports."""
    pass


@import_group.command("preview")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--account", required=True, help="Account name or ID")
@click.option("--delimiter", help="Field delimiter (detected when omitted)")
@click.option("--rows", "preview_rows", type=click.IntRange(min=1), help="Number of sample rows to show")
@click.pass_context
def preview_import(ctx, csv_file: str, account: str, delimiter: str | None, preview_rows: int | None):
    """Parse a CSV file and suggest a column mapping.

    Nothing is imported. The printed session ID is passed to 'import commit'.

    Examples:
        finport import preview statement.csv --account "Everyday"
        finport import preview export.txt --account 1 --delimiter ";"
    """
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)
    path = Path(csv_file)

    try:
        preview = ImportService(db).preview(
            path.read_bytes(),
            account_id,
            filename=path.name,
            delimiter=delimiter,
            preview_rows=preview_rows,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    _echo_preview(preview)
    click.echo(f"\nSession: {preview.session_id}")
    click.echo(f"Commit with: finport import commit {preview.session_id}")


@import_group.command("commit")
@click.argument("session_id")
@mapping_options
@click.pass_context
def commit_import(ctx, session_id: str, mapping_json: str | None, **overrides):
    """Commit a previewed file.

    The suggested mapping is used unless --mapping or field options change it.

    Examples:
        finport import commit 3f2a... --description "Narrative"
        finport import commit 3f2a... --amount "Value"
    """
    try:
        service = ImportService(ctx.obj["db"])
        session = service.sessions.get(session_id)
        mapping = build_mapping(service.sessions.stored_mapping(session), mapping_json, overrides)
        result = service.commit_session(session_id, mapping)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    _echo_result(result)


@import_group.command("file")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--account", required=True, help="Account name or ID")
@click.option("--delimiter", help="Field delimiter (detected when omitted)")
@mapping_options
@click.pass_context
def import_file(ctx, csv_file: str, account: str, delimiter: str | None, mapping_json: str | None, **overrides):
    """Preview and commit a CSV file in one step.

    Examples:
        finport import file statement.csv --account "Everyday"
        finport import file statement.csv --account 1 --date "Posted"
    """
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)
    path = Path(csv_file)

    try:
        service = ImportService(db)
        preview = service.preview(path.read_bytes(), account_id, filename=path.name, delimiter=delimiter)
        mapping = build_mapping(preview.suggested_mapping, mapping_json, overrides)
        click.echo("Using mapping:")
        _echo_mapping(mapping)
        result = service.commit_session(preview.session_id, mapping)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    _echo_result(result)


@import_group.command("history")
@click.option("--account", help="Account name or ID")
@click.option("--since", help="Only batches imported on or after this date")
@click.pass_context
def import_history(ctx, account: str | None, since: str | None):
    """List past imports, newest first."""
    db = ctx.obj["db"]
    account_id = None
    if account:
        account_id = resolve_account_or_exit(ctx, AccountService(db), account)
    since_date = parse_date_option(ctx, since, "since date")

    try:
        batches = ImportService(db).list_batches(account_id=account_id, since=start_of_day(since_date))
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not batches:
        click.echo("No imports found.")
        return

    click.echo("\nImports:")
    click.echo("-" * 100)
    for batch in batches:
        click.echo(
            f"{batch.batch_id} | {batch.imported_at:%Y-%m-%d %H:%M} | account {batch.account_id} | "
            f"{batch.filename or '-'} | rows {batch.row_count}, imported {batch.imported_count}, "
            f"duplicates {batch.duplicate_count}, errors {batch.error_count}"
        )


@import_group.command("show")
@click.argument("batch_id")
@click.pass_context
def show_import(ctx, batch_id: str):
    """Show one import and the transactions it created."""
    try:
        details = ImportService(ctx.obj["db"]).get_batch(batch_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    batch = details.batch
    click.echo(f"\nBatch {batch.batch_id}")
    click.echo(f"  File: {batch.filename or '-'}")
    click.echo(f"  Account: {batch.account_id}")
    click.echo(f"  Imported at: {batch.imported_at:%Y-%m-%d %H:%M:%S}")
    click.echo(
        f"  Rows: {batch.row_count} | Imported: {batch.imported_count} | "
        f"Duplicates: {batch.duplicate_count} | Errors: {batch.error_count}"
    )

    if details.transactions:
        click.echo("-" * 80)
        for txn in details.transactions:
            click.echo(
                f"{str(txn.transaction_date):<12} {txn.debit_amount:>10,.2f} "
                f"{txn.credit_amount:>10,.2f} {format_balance(txn.balance_after):>12}  {txn.description}"
            )


def register_commands(cli):
    """Register import commands with main CLI."""
    cli.add_command(import_group, name="import")
