"""Main CLI entry point."""

import logging

import click
from clinicbooks.database.factories import create_sqlite_database
from clinicbooks.logging_config import configure_logging

# Import and register all commands at module level
from clinicbooks.cli.commands import books, catalog, records


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides CLINICBOOKS_DB_PATH environment variable)",
    envvar="CLINICBOOKS_DB_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Clinicbooks - Double-entry books for a medical clinic.

    Derives the general journal (Libro Diario) and ledger (Libro Mayor)
    from patient and provider invoices.
    """
    ctx.ensure_object(dict)
    configure_logging(level=logging.DEBUG if verbose else None)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
books.register_commands(cli)
catalog.register_commands(cli)
records.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
