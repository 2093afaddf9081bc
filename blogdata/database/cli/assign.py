"""
Taxonomy Assignment Commands
-----------------------------

Replace the categories or tags of a post.

Commands:
    - categories: Replace a post's category set
    - tags: Replace a post's tag set

Ids that do not match a row are ignored. Passing no ids clears the set.
"""
import click

from blogdata.core.logging_manager import handle_cli_error
from blogdata.core.exceptions import DatabaseError, ValidationError
from . import get_db


@click.group()
@click.pass_context
def assign(ctx: click.Context) -> None:
    """Replace the categories or tags of a post."""
    pass


@assign.command("categories")
@click.argument("slug")
@click.argument("ids", nargs=-1, type=int)
@click.pass_context
def assign_categories(ctx, slug, ids):
    """Set the categories of post SLUG to IDS."""
    try:
        db = get_db(ctx)

        with db.session_scope() as session:
            repo = db.content(session)
            post = repo.get_by_slug(slug)
            assigned = repo.set_categories(post, ids)

        click.echo(f"✅ {slug}: {len(assigned)} categories assigned")
        for category in assigned:
            click.echo(f"  • {category.slug}")

    except (DatabaseError, ValidationError) as e:
        handle_cli_error(
            ctx, e, "assign_categories", additional_context={"slug": slug, "ids": list(ids)}
        )


@assign.command("tags")
@click.argument("slug")
@click.argument("ids", nargs=-1, type=int)
@click.pass_context
def assign_tags(ctx, slug, ids):
    """Set the tags of post SLUG to IDS."""
    try:
        db = get_db(ctx)

        with db.session_scope() as session:
            repo = db.content(session)
            post = repo.get_by_slug(slug)
            assigned = repo.set_tags(post, ids)

        click.echo(f"✅ {slug}: {len(assigned)} tags assigned")
        for tag in assigned:
            click.echo(f"  • {tag.slug}")

    except (DatabaseError, ValidationError) as e:
        handle_cli_error(
            ctx, e, "assign_tags", additional_context={"slug": slug, "ids": list(ids)}
        )
