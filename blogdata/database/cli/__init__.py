#!/usr/bin/env python3
"""
Blog Database CLI
------------------

Command-line interface for inspecting and curating the blog database.

This module provides the main CLI group and shared context setup
for all database commands.

Command Structure:
    - Setup (init)
    - Stats (stats)
    - Query & Browse (query)
    - Taxonomy assignment (assign)

Usage:
    # Get general help
    blogdb --help

    # Latest posts of a category
    blogdb query latest --category python --count 5

    # Replace a post's tags
    blogdb assign tags hello-world 1 4 9
"""
import click
from pathlib import Path

from blogdata.core.paths import DB_PATH, LOG_DIR
from blogdata.database import BlogDB


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    default=str(DB_PATH),
    help="Path to database file",
)
@click.option(
    "--log-dir",
    type=click.Path(),
    default=str(LOG_DIR),
    help="Path to log directory",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Show detailed errors and tracebacks",
)
@click.pass_context
def cli(ctx, db_path, log_dir, verbose):
    """Blog Database Management CLI"""
    ctx.ensure_object(dict)
    ctx.obj["db_path"] = Path(db_path)
    ctx.obj["log_dir"] = Path(log_dir)
    ctx.obj["verbose"] = verbose


def get_db(ctx) -> BlogDB:
    """Get or create database instance from context."""
    if "db" not in ctx.obj:
        db = BlogDB(db_path=ctx.obj["db_path"], log_dir=ctx.obj["log_dir"])
        ctx.obj["db"] = db
        ctx.obj["logger"] = db.logger
        ctx.call_on_close(db.dispose)
    return ctx.obj["db"]


# Import and register command modules
# These imports must come after CLI group definition
from .setup import init  # noqa: E402
from .maintenance import stats  # noqa: E402
from .query import query  # noqa: E402
from .assign import assign  # noqa: E402

# Register top-level commands
cli.add_command(init)
cli.add_command(stats)

# Register command groups
cli.add_command(query)
cli.add_command(assign)


if __name__ == "__main__":
    cli(obj={})
