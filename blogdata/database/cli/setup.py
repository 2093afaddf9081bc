"""
Setup & Initialization Commands
--------------------------------

Commands:
    - init: Create the database schema
"""
import click

from blogdata.core.logging_manager import handle_cli_error
from blogdata.core.exceptions import DatabaseError
from . import get_db


@click.command()
@click.pass_context
def init(ctx):
    """Create any missing database tables."""
    try:
        db = get_db(ctx)

        click.echo("🗄️  Initializing database schema...")
        db.initialize_schema()
        click.echo(f"✅ Database ready at {db.db_url}")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "init")
