#!/usr/bin/env python3
"""
content_repository.py
---------------------
Query and mutation layer for posts, categories and tags.

The repository turns domain questions ("latest published posts in
category X", "categories used by this page of posts") into SQLAlchemy
queries and returns fully hydrated model instances.

Key Features:
    - Slug lookup with explicit fetch plans (never returns None)
    - One shared paginated listing for the global, category and tag axes
    - Month-window listing and counting
    - Batch category/tag resolution for a set of posts in a single query
    - Count queries executed by the database, not by loading rows
    - Replace-all mutation of a post's category and tag sets

Usage:
    repo = ContentRepository(session, logger)

    # Lookup
    post = repo.get_by_slug("hello-world")
    post.main_category.ancestors       # loaded with the post

    # Listing
    page = repo.latest_posts(count=10, offset=20)
    in_category = repo.latest_posts_for_category(repo.get_category("python"))

    # Batch resolution (one query however many posts)
    categories = repo.categories_for_posts(page)
    for post in page:
        print(post.title, [c.title for c in categories[post]])

    # Mutation
    repo.set_tags(post, [1, 4, 9])

Notes:
    - Month windows are computed in UTC and include both the first instant
      of the month and the first instant of the following month.
    - Nothing is cached: every call queries the session.
    - Every category returned, directly or through a post, comes with its
      whole ancestor chain loaded.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import calendar
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple, Type

# --- Third party imports ---
from sqlalchemy import desc, extract, func, inspect
from sqlalchemy.orm import Query
from sqlalchemy.orm.attributes import set_committed_value

# --- Local imports ---
from blogdata.core.exceptions import ValidationError
from blogdata.core.validators import DataValidator
from blogdata.database.decorators import log_database_operation
from blogdata.database.fetch_plans import (
    CATEGORY_DETAIL,
    POST_DETAIL,
    POST_MONTH,
    POST_SUMMARY,
    TAG_DETAIL,
)
from blogdata.database.models import Category, Post, PostCategory, PostTag, Tag
from .base_repository import BaseRepository


def month_window(year: int, month: int) -> Tuple[int, int]:
    """
    Unix timestamps bounding a calendar month (UTC).

    Args:
        year: Calendar year
        month: Month number (1-12)

    Returns:
        (first instant of the month, first instant of the next month)

    Raises:
        ValidationError: If month or year is out of range

    Examples:
        >>> month_window(2024, 2)
        (1706745600, 1709251200)
        >>> month_window(2023, 12)
        (1701388800, 1704067200)
    """
    DataValidator.validate_year_month(year, month)
    next_year, next_month = (year + 1, 1) if month == 12 else (year, month + 1)
    first = calendar.timegm((year, month, 1, 0, 0, 0))
    last = calendar.timegm((next_year, next_month, 1, 0, 0, 0))
    return first, last


class ContentRepository(BaseRepository):
    """
    Repository for the blog's posts, categories and tags.

    Reads Post, Category and Tag rows and writes only the PostCategory and
    PostTag join rows. Category hierarchy is never modified here.
    """

    # -------------------------------------------------------------------------
    # Lookup by slug
    # -------------------------------------------------------------------------

    @log_database_operation("get_post_by_slug")
    def get_by_slug(self, slug: str) -> Post:
        """
        Get a post by slug with its full relationship graph.

        Loads the main category with its whole ancestor chain, plus every
        associated category and tag.

        Args:
            slug: The post slug

        Returns:
            The post

        Raises:
            NotFoundError: If no post has this slug
        """
        post = self._get_by_slug(Post, slug, POST_DETAIL)
        self._load_ancestors(POST_DETAIL.collect([post]))
        return post

    @log_database_operation("get_category")
    def get_category(self, slug: str) -> Category:
        """
        Get a category by slug.

        Loads the category's ancestors and all of its posts, each with its
        main category and that category's ancestors.

        Raises:
            NotFoundError: If no category has this slug
        """
        category = self._get_by_slug(Category, slug, CATEGORY_DETAIL)
        self._load_ancestors(CATEGORY_DETAIL.collect([category]))
        return category

    @log_database_operation("get_tag")
    def get_tag(self, slug: str) -> Tag:
        """
        Get a tag by slug.

        Loads all of the tag's posts, each with its main category and that
        category's ancestors.

        Raises:
            NotFoundError: If no tag has this slug
        """
        tag = self._get_by_slug(Tag, slug, TAG_DETAIL)
        self._load_ancestors(TAG_DETAIL.collect([tag]))
        return tag

    # -------------------------------------------------------------------------
    # Relationship resolution
    # -------------------------------------------------------------------------

    @log_database_operation("categories_for_post")
    def categories_for_post(self, post: Optional[Post]) -> List[Category]:
        """
        Get the categories a post is filed under.

        Args:
            post: The post; None or an unsaved post yields an empty list

        Returns:
            Categories ordered by title
        """
        return self._terms_for_post(Category, PostCategory.category_id, PostCategory, post)

    @log_database_operation("tags_for_post")
    def tags_for_post(self, post: Optional[Post]) -> List[Tag]:
        """
        Get the tags a post carries.

        Args:
            post: The post; None or an unsaved post yields an empty list

        Returns:
            Tags ordered by title
        """
        return self._terms_for_post(Tag, PostTag.tag_id, PostTag, post)

    @log_database_operation("categories_for_posts")
    def categories_for_posts(self, posts: Iterable[Post]) -> Dict[Post, List[Category]]:
        """
        Get the categories of many posts using a single query.

        Parents not yet in the session are fetched afterwards, one query per
        missing hierarchy level.

        Args:
            posts: Posts to resolve

        Returns:
            Mapping of every input post to its categories (ordered by title);
            posts without categories map to an empty list

        Examples:
            >>> page = repo.latest_posts(count=20)
            >>> categories = repo.categories_for_posts(page)   # 1 query
            >>> categories[page[0]]
            [<Category(id=3, slug='python', title='Python')>]
        """
        return self._terms_for_posts(Category, PostCategory.category_id, PostCategory, posts)

    @log_database_operation("tags_for_posts")
    def tags_for_posts(self, posts: Iterable[Post]) -> Dict[Post, List[Tag]]:
        """
        Get the tags of many posts using a single query.

        Returns:
            Mapping of every input post to its tags (ordered by title)
        """
        return self._terms_for_posts(Tag, PostTag.tag_id, PostTag, posts)

    def _terms_for_post(
        self, model: Type, term_key: Any, association: Type, post: Optional[Post]
    ) -> List[Any]:
        if post is None or not post.id:
            return []

        terms = (
            self.session.query(model)
            .join(association, term_key == model.id)
            .filter(association.post_id == post.id)
            .order_by(model.title, model.id)
            .all()
        )
        self._load_ancestors(terms)
        return terms

    def _terms_for_posts(
        self, model: Type, term_key: Any, association: Type, posts: Iterable[Post]
    ) -> Dict[Post, List[Any]]:
        posts = [post for post in posts if post is not None]
        if not posts:
            return {}

        post_ids = {post.id for post in posts if post.id}
        terms_by_post_id: Dict[int, List[Any]] = defaultdict(list)

        if post_ids:
            # Each row is (term, post_id): one row per join row in the set
            rows = (
                self.session.query(model, association.post_id)
                .join(association, term_key == model.id)
                .filter(association.post_id.in_(post_ids))
                .order_by(model.title, model.id)
                .all()
            )
            for term, post_id in rows:
                terms_by_post_id[post_id].append(term)
            self._load_ancestors(term for term, _ in rows)

        return {post: list(terms_by_post_id.get(post.id, [])) for post in posts}

    # -------------------------------------------------------------------------
    # Listing
    # -------------------------------------------------------------------------

    @log_database_operation("latest_posts")
    def latest_posts(
        self, count: int = 10, offset: int = 0, published: bool = True
    ) -> List[Post]:
        """
        Get the latest posts.

        Args:
            count: Maximum number of posts to return
            offset: Number of posts to skip
            published: True for published posts, False for drafts

        Returns:
            Posts, newest first, each with main category and its parent
        """
        return self._latest_posts(self.session.query(Post), count, offset, published)

    @log_database_operation("latest_posts_for_category")
    def latest_posts_for_category(
        self, category: Category, count: int = 10, offset: int = 0
    ) -> List[Post]:
        """
        Get the latest published posts filed under a category.

        Args:
            category: Category to list
            count: Maximum number of posts to return
            offset: Number of posts to skip
        """
        query = (
            self.session.query(Post)
            .join(PostCategory, PostCategory.post_id == Post.id)
            .filter(PostCategory.category_id == category.id)
        )
        return self._latest_posts(query, count, offset)

    @log_database_operation("latest_posts_for_tag")
    def latest_posts_for_tag(
        self, tag: Tag, count: int = 10, offset: int = 0
    ) -> List[Post]:
        """
        Get the latest published posts carrying a tag.

        Args:
            tag: Tag to list
            count: Maximum number of posts to return
            offset: Number of posts to skip
        """
        query = (
            self.session.query(Post)
            .join(PostTag, PostTag.post_id == Post.id)
            .filter(PostTag.tag_id == tag.id)
        )
        return self._latest_posts(query, count, offset)

    def _latest_posts(
        self, query: Query, count: int, offset: int, published: bool = True
    ) -> List[Post]:
        """
        Filter, order and paginate a post query.

        Args:
            query: Base post query (possibly scoped by a join)
            count: Maximum number of posts to return
            offset: Number of posts to skip
            published: Publication state to keep

        Returns:
            Posts ordered by date descending (id descending on ties)

        Raises:
            ValidationError: If count or offset is negative
        """
        DataValidator.validate_paging(count, offset)

        query = (
            query.filter(Post.published == published)
            .order_by(Post.unix_date.desc(), Post.id.desc())
            .offset(offset)
            .limit(count)
        )
        posts = self._apply_plan(query, Post, POST_SUMMARY).all()
        self._load_ancestors(POST_SUMMARY.collect(posts))
        return posts

    @log_database_operation("latest_posts_for_month")
    def latest_posts_for_month(
        self, year: int, month: int, count: int = 10, offset: int = 0
    ) -> List[Post]:
        """
        Get the latest published posts of a calendar month.

        The window includes a post dated exactly at the first instant of the
        next month, so such a post is listed under both months.

        Args:
            year: Year to list
            month: Month to list (1-12)
            count: Maximum number of posts to return
            offset: Number of posts to skip

        Returns:
            Posts, newest first, each with its main category
        """
        DataValidator.validate_paging(count, offset)
        first, last = month_window(year, month)

        query = (
            self.session.query(Post)
            .filter(
                Post.published.is_(True),
                Post.unix_date >= first,
                Post.unix_date <= last,
            )
            .order_by(Post.unix_date.desc(), Post.id.desc())
            .offset(offset)
            .limit(count)
        )
        posts = self._apply_plan(query, Post, POST_MONTH).all()
        self._load_ancestors(POST_MONTH.collect(posts))
        return posts

    # -------------------------------------------------------------------------
    # Counting
    # -------------------------------------------------------------------------

    @log_database_operation("published_count")
    def published_count(self) -> int:
        """Total number of published posts."""
        return self.session.query(Post).filter(Post.published.is_(True)).count()

    @log_database_operation("unpublished_count")
    def unpublished_count(self) -> int:
        """Total number of posts not yet published."""
        return self.session.query(Post).filter(Post.published.is_(False)).count()

    @log_database_operation("published_count_for_category")
    def published_count_for_category(self, category: Category) -> int:
        """Number of published posts filed under a category."""
        return (
            self.session.query(Post)
            .join(PostCategory, PostCategory.post_id == Post.id)
            .filter(PostCategory.category_id == category.id, Post.published.is_(True))
            .count()
        )

    @log_database_operation("published_count_for_tag")
    def published_count_for_tag(self, tag: Tag) -> int:
        """Number of published posts carrying a tag."""
        return (
            self.session.query(Post)
            .join(PostTag, PostTag.post_id == Post.id)
            .filter(PostTag.tag_id == tag.id, Post.published.is_(True))
            .count()
        )

    @log_database_operation("published_count_for_month")
    def published_count_for_month(self, year: int, month: int) -> int:
        """
        Number of published posts in a calendar month.

        Uses the same inclusive window as latest_posts_for_month().
        """
        first, last = month_window(year, month)
        return (
            self.session.query(Post)
            .filter(
                Post.published.is_(True),
                Post.unix_date >= first,
                Post.unix_date <= last,
            )
            .count()
        )

    @log_database_operation("month_counts")
    def month_counts(self) -> Dict[int, Dict[int, int]]:
        """
        Count published posts for every year and month that has any.

        Each post is counted once, in the UTC month it was published. The
        database does the grouping, so one row comes back per month.

        Returns:
            {year: {month: count}}, years and months in descending order

        Examples:
            >>> repo.month_counts()
            {2024: {3: 2, 1: 5}, 2023: {12: 1}}
        """
        moment = self._utc_moment(Post.unix_date)
        rows = (
            self.session.query(
                extract("year", moment).label("post_year"),
                extract("month", moment).label("post_month"),
                func.count(Post.id),
            )
            .filter(Post.published.is_(True))
            .group_by("post_year", "post_month")
            .order_by(desc("post_year"), desc("post_month"))
            .all()
        )

        results: Dict[int, Dict[int, int]] = {}
        for year, month, total in rows:
            results.setdefault(int(year), {})[int(month)] = total
        return results

    def _utc_moment(self, unix_date: Any) -> Any:
        """SQL expression turning a unix timestamp column into a UTC timestamp."""
        if self.session.get_bind().dialect.name == "sqlite":
            return func.datetime(unix_date, "unixepoch")
        return func.timezone("UTC", func.to_timestamp(unix_date))

    # -------------------------------------------------------------------------
    # Enumeration
    # -------------------------------------------------------------------------

    @log_database_operation("get_categories")
    def categories(self) -> List[Category]:
        """All categories in alphabetical order of title."""
        categories = self.session.query(Category).order_by(Category.title, Category.id).all()
        self._load_ancestors(categories)
        return categories

    @log_database_operation("get_categories_in_use")
    def categories_in_use(self) -> List[Category]:
        """Categories with at least one post, in alphabetical order of title."""
        categories = (
            self.session.query(Category)
            .filter(Category.post_categories.any())
            .order_by(Category.title, Category.id)
            .all()
        )
        self._load_ancestors(categories)
        return categories

    @log_database_operation("get_tags")
    def tags(self) -> List[Tag]:
        """All tags in alphabetical order of title."""
        return self.session.query(Tag).order_by(Tag.title, Tag.id).all()

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    @log_database_operation("set_categories")
    def set_categories(self, post: Post, category_ids: Iterable[int]) -> List[Category]:
        """
        Replace the set of categories a post is filed under.

        Existing join rows are deleted and one row is added per category
        whose id is in ``category_ids``. Unknown ids are ignored. The change
        is committed as one unit of work.

        Args:
            post: The post to update
            category_ids: Ids of the categories to assign

        Returns:
            The categories now assigned, ordered by id

        Raises:
            ValidationError: If the post was never saved
        """
        post = self._attach(post)
        categories = self._get_by_ids(Category, category_ids)

        with self._unit_of_work():
            post.post_categories.clear()
            self.session.flush()
            for category in categories:
                post.post_categories.append(PostCategory(category=category))

        self._load_ancestors(categories)
        return categories

    @log_database_operation("set_tags")
    def set_tags(self, post: Post, tag_ids: Iterable[int]) -> List[Tag]:
        """
        Replace the set of tags a post carries.

        Same semantics as set_categories().

        Args:
            post: The post to update
            tag_ids: Ids of the tags to assign

        Returns:
            The tags now assigned, ordered by id

        Raises:
            ValidationError: If the post was never saved
        """
        post = self._attach(post)
        tags = self._get_by_ids(Tag, tag_ids)

        with self._unit_of_work():
            post.post_tags.clear()
            self.session.flush()
            for tag in tags:
                post.post_tags.append(PostTag(tag=tag))

        return tags

    def _attach(self, post: Post) -> Post:
        """
        Return the instance of ``post`` that belongs to this session.

        Only saved posts are accepted: a post from another session is merged
        by identity, but a post without an id is never inserted here.

        Raises:
            ValidationError: If the post has no id
        """
        if post is None or not post.id:
            raise ValidationError("Cannot assign categories or tags to an unsaved post")
        if post in self.session:
            return post
        return self.session.merge(post)

    # -------------------------------------------------------------------------
    # Category hierarchy
    # -------------------------------------------------------------------------

    def _load_ancestors(self, objects: Iterable[Any]) -> None:
        """
        Hydrate the full parent chain of every category in ``objects``.

        Parents that are already loaded are followed in memory. Missing
        parents are looked up in the session first, and whatever is left
        is fetched with one query per hierarchy level. Afterwards
        ``category.ancestors`` never lazy-loads, even once detached.

        Non-category objects are ignored.
        """
        seen: Set[int] = set()
        frontier = [obj for obj in objects if isinstance(obj, Category)]
        mapper = inspect(Category)

        while frontier:
            following: List[Category] = []
            pending: List[Category] = []

            for category in frontier:
                if id(category) in seen:
                    continue
                seen.add(id(category))

                if "parent" not in inspect(category).unloaded:
                    if category.parent is not None:
                        following.append(category.parent)
                    continue

                parent = None
                if category.parent_id is not None:
                    key = mapper.identity_key_from_primary_key((category.parent_id,))
                    parent = self.session.identity_map.get(key)
                    if parent is None:
                        pending.append(category)
                        continue
                    following.append(parent)
                set_committed_value(category, "parent", parent)

            if pending:
                parent_ids = {category.parent_id for category in pending}
                parents = {
                    parent.id: parent
                    for parent in self.session.query(Category)
                    .filter(Category.id.in_(parent_ids))
                    .all()
                }
                for category in pending:
                    parent = parents.get(category.parent_id)
                    set_committed_value(category, "parent", parent)
                    if parent is not None:
                        following.append(parent)

            frontier = following
