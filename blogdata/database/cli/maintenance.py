"""
Statistics Commands
--------------------

Commands:
    - stats: Display post and taxonomy counts
"""
import click

from blogdata.core.logging_manager import handle_cli_error
from blogdata.core.exceptions import DatabaseError
from . import get_db


@click.command()
@click.pass_context
def stats(ctx):
    """Display database statistics."""
    try:
        db = get_db(ctx)
        with db.session_scope() as session:
            repo = db.content(session)
            published = repo.published_count()
            unpublished = repo.unpublished_count()
            categories = len(repo.categories())
            in_use = len(repo.categories_in_use())
            tags = len(repo.tags())

        click.echo("\n📊 Database Statistics")
        click.echo("=" * 50)

        click.echo("\nPosts:")
        click.echo(f"  Published: {published}")
        click.echo(f"  Unpublished: {unpublished}")

        click.echo("\nTaxonomy:")
        click.echo(f"  Categories: {categories} ({in_use} in use)")
        click.echo(f"  Tags: {tags}")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "stats")
