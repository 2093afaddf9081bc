"""
Query & Browse Commands
------------------------

Database browsing and query commands.

Commands:
    - latest: Latest posts, optionally scoped to a category or tag
    - month: Published posts of a calendar month
    - post: Full post graph as YAML
    - category: Category with its posts as YAML
    - tag: Tag with its posts as YAML
    - categories: List categories
    - tags: List tags
    - archive: Post counts per year and month
"""
from typing import Any, Dict, List, Optional

import click
import yaml

from blogdata.core.logging_manager import handle_cli_error
from blogdata.core.exceptions import DatabaseError, ValidationError
from blogdata.database.models import Category, Post
from . import get_db


# ----- Formatting helpers -----
def _category_ref(category: Optional[Category]) -> Optional[Dict[str, Any]]:
    if category is None:
        return None
    return {
        "slug": category.slug,
        "title": category.title,
        "parent": category.parent.slug if category.parent else None,
    }


def _post_summary(post: Post) -> Dict[str, Any]:
    return {
        "slug": post.slug,
        "title": post.title,
        "date": post.published_at.isoformat(),
        "main_category": _category_ref(post.main_category),
    }


def _post_detail(post: Post) -> Dict[str, Any]:
    data = _post_summary(post)
    data["published"] = post.published
    data["categories"] = [c.slug for c in sorted(post.categories, key=lambda c: (c.title, c.id))]
    data["tags"] = [t.slug for t in sorted(post.tags, key=lambda t: (t.title, t.id))]
    return data


def _sorted_posts(posts: List[Post]) -> List[Post]:
    return sorted(posts, key=lambda p: (p.unix_date, p.id), reverse=True)


def _dump(data: Dict[str, Any]) -> str:
    return yaml.dump(
        data,
        allow_unicode=True,
        default_flow_style=False,
        sort_keys=False,
    ).strip()


def _echo_post_line(post: Post) -> None:
    category = post.main_category.title if post.main_category else "-"
    click.echo(f"  {post.published_at:%Y-%m-%d}  {post.slug}  [{category}]  {post.title}")


# ----- Commands -----
@click.group()
@click.pass_context
def query(ctx: click.Context) -> None:
    """Browse and query database content."""
    pass


@query.command("latest")
@click.option("--count", type=int, default=10, show_default=True, help="Posts per page")
@click.option("--offset", type=int, default=0, show_default=True, help="Posts to skip")
@click.option("--unpublished", is_flag=True, help="List drafts instead of published posts")
@click.option("--category", "category_slug", help="Only posts filed under this category")
@click.option("--tag", "tag_slug", help="Only posts carrying this tag")
@click.pass_context
def latest(ctx, count, offset, unpublished, category_slug, tag_slug):
    """List the latest posts, newest first."""
    if category_slug and tag_slug:
        raise click.UsageError("--category and --tag are mutually exclusive")
    if unpublished and (category_slug or tag_slug):
        raise click.UsageError("--unpublished cannot be combined with --category or --tag")

    try:
        db = get_db(ctx)

        with db.session_scope() as session:
            repo = db.content(session)
            if category_slug:
                category = repo.get_category(category_slug)
                posts = repo.latest_posts_for_category(category, count, offset)
                total = repo.published_count_for_category(category)
                heading = f"Category: {category.title}"
            elif tag_slug:
                tag = repo.get_tag(tag_slug)
                posts = repo.latest_posts_for_tag(tag, count, offset)
                total = repo.published_count_for_tag(tag)
                heading = f"Tag: {tag.title}"
            elif unpublished:
                posts = repo.latest_posts(count, offset, published=False)
                total = repo.unpublished_count()
                heading = "Drafts"
            else:
                posts = repo.latest_posts(count, offset)
                total = repo.published_count()
                heading = "Latest posts"

            click.echo(f"\n📰 {heading} ({len(posts)} of {total})\n")
            for post in posts:
                _echo_post_line(post)

    except (DatabaseError, ValidationError) as e:
        handle_cli_error(
            ctx,
            e,
            "latest",
            additional_context={"category": category_slug, "tag": tag_slug},
        )


@query.command("month")
@click.argument("year", type=int)
@click.argument("month", type=int)
@click.option("--count", type=int, default=10, show_default=True, help="Posts per page")
@click.option("--offset", type=int, default=0, show_default=True, help="Posts to skip")
@click.pass_context
def month(ctx, year, month, count, offset):
    """List the published posts of YEAR/MONTH."""
    try:
        db = get_db(ctx)

        with db.session_scope() as session:
            repo = db.content(session)
            posts = repo.latest_posts_for_month(year, month, count, offset)
            total = repo.published_count_for_month(year, month)

            click.echo(f"\n📅 {year}-{month:02d} ({len(posts)} of {total})\n")
            for post in posts:
                _echo_post_line(post)

    except (DatabaseError, ValidationError) as e:
        handle_cli_error(
            ctx, e, "month", additional_context={"year": year, "month": month}
        )


@query.command("post")
@click.argument("slug")
@click.pass_context
def post(ctx, slug):
    """Display a post with its categories and tags."""
    try:
        db = get_db(ctx)

        with db.session_scope() as session:
            entity = db.content(session).get_by_slug(slug)
            click.echo(_dump(_post_detail(entity)))

    except DatabaseError as e:
        handle_cli_error(ctx, e, "post", additional_context={"slug": slug})


@query.command("category")
@click.argument("slug")
@click.pass_context
def category(ctx, slug):
    """Display a category and its posts."""
    try:
        db = get_db(ctx)

        with db.session_scope() as session:
            entity = db.content(session).get_category(slug)
            data = _category_ref(entity)
            data["posts"] = [_post_summary(p) for p in _sorted_posts(entity.posts)]
            click.echo(_dump(data))

    except DatabaseError as e:
        handle_cli_error(ctx, e, "category", additional_context={"slug": slug})


@query.command("tag")
@click.argument("slug")
@click.pass_context
def tag(ctx, slug):
    """Display a tag and its posts."""
    try:
        db = get_db(ctx)

        with db.session_scope() as session:
            entity = db.content(session).get_tag(slug)
            data = {
                "slug": entity.slug,
                "title": entity.title,
                "posts": [_post_summary(p) for p in _sorted_posts(entity.posts)],
            }
            click.echo(_dump(data))

    except DatabaseError as e:
        handle_cli_error(ctx, e, "tag", additional_context={"slug": slug})


@query.command("categories")
@click.option("--in-use", is_flag=True, help="Only categories with at least one post")
@click.pass_context
def categories(ctx, in_use):
    """List categories alphabetically."""
    try:
        db = get_db(ctx)

        with db.session_scope() as session:
            repo = db.content(session)
            items = repo.categories_in_use() if in_use else repo.categories()

            click.echo(f"\n📁 Categories ({len(items)})\n")
            for item in items:
                click.echo(f"  {item.id:4d}  {item.slug}  {item.title}")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "categories")


@query.command("tags")
@click.pass_context
def tags(ctx):
    """List tags alphabetically."""
    try:
        db = get_db(ctx)

        with db.session_scope() as session:
            items = db.content(session).tags()

            click.echo(f"\n🏷️  Tags ({len(items)})\n")
            for item in items:
                click.echo(f"  {item.id:4d}  {item.slug}  {item.title}")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "tags")


@query.command("archive")
@click.pass_context
def archive(ctx):
    """Show published post counts per year and month."""
    try:
        db = get_db(ctx)

        with db.session_scope() as session:
            counts = db.content(session).month_counts()

        click.echo("\n🗓️  Archive\n")
        for year, months in counts.items():
            click.echo(f"  {year}: {sum(months.values()):4d} posts")
            for month_number, total in months.items():
                click.echo(f"    {month_number:02d}: {total:4d}")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "archive")
