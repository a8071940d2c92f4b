"""Main CLI entry point."""

import click
from finport.database.factories import create_sqlite_database
from finport.logging_setup import configure_logging

# Import and register all commands at module level
from finport.cli.commands import account, import_cmd, transaction


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides FINPORT_DB_PATH environment variable)",
    envvar="FINPORT_DB_PATH",
)
@click.option(
    "--log-level",
    help="Log level name or number (overrides FINPORT_LOG_LEVEL environment variable)",
    envvar="FINPORT_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str | None):
    """Finport - Bank statement import.

    Preview a CSV statement export, review the suggested column mapping,
    and commit the transactions into an account.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
import_cmd.register_commands(cli)
transaction.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
