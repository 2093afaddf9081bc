#!/usr/bin/env python3
"""
fetch_plans.py
--------------
Explicit eager-loading plans for repository queries.

A FetchPlan names which related entities a query hydrates, and how many
hops deep, as plain attribute paths. The repository passes a plan with each
query instead of hard-coding loader options, so the eager graph of every
operation is visible in one place.

Key Concepts:
    N+1 Problem:
        Without a plan:
            posts = session.query(Post).all()            # 1 query
            for post in posts:
                parent = post.main_category.parent       # 2N more queries

        With a plan:
            posts = (
                session.query(Post)
                .options(*POST_SUMMARY.options(Post))    # 1 + 2 queries
                .all()
            )
            for post in posts:
                parent = post.main_category.parent       # already loaded

    Paths:
        Each path is a tuple of relationship names walked from the root
        model. ("main_category", "parent") loads Post.main_category and then
        Category.parent on every loaded category. Every prefix of a path is
        loaded, so one path covers a whole chain.

    Loading strategy:
        Paths become chained selectinload() options: one extra SELECT per
        hop, regardless of how many rows the root query returned.

Plans:
    POST_DETAIL:      main category + parent, categories, tags
    POST_SUMMARY:     main category + parent
    POST_MONTH:       main category only
    CATEGORY_DETAIL:  parent, posts + each post's main category + parent
    TAG_DETAIL:       posts + each post's main category + parent

Usage Examples:
    >>> plan = FetchPlan.of(("main_category", "parent"))
    >>> session.query(Post).options(*plan.options(Post)).all()

    >>> (POST_SUMMARY + FetchPlan.of(("post_tags", "tag"))).paths
    (('main_category', 'parent'), ('post_tags', 'tag'))
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Tuple, Type

from sqlalchemy import inspect
from sqlalchemy.orm import selectinload

Path = Tuple[str, ...]


@dataclass(frozen=True)
class FetchPlan:
    """
    Immutable set of relationship paths to hydrate eagerly.

    Attributes:
        paths: Relationship name chains, in declaration order
    """

    paths: Tuple[Path, ...] = ()

    @classmethod
    def of(cls, *paths: Path) -> "FetchPlan":
        """Build a plan from one or more relationship paths."""
        for path in paths:
            if not path:
                raise ValueError("Fetch plan paths must name at least one relationship")
        return cls(tuple(tuple(path) for path in paths))

    def __add__(self, other: "FetchPlan") -> "FetchPlan":
        merged = list(self.paths)
        for path in other.paths:
            if path not in merged:
                merged.append(path)
        return FetchPlan(tuple(merged))

    def __bool__(self) -> bool:
        return bool(self.paths)

    def options(self, model: Type) -> List[Any]:
        """
        Translate the plan into SQLAlchemy loader options for a root model.

        Args:
            model: Mapped class the query is rooted at

        Returns:
            List of chained selectinload() options

        Raises:
            ValueError: If a path names something that is not a relationship
        """
        loaders = []
        for path in self.paths:
            current = model
            loader = None
            for name in path:
                relationships = inspect(current).relationships
                if name not in relationships:
                    raise ValueError(
                        f"{current.__name__} has no relationship named '{name}'"
                    )
                relationship = relationships[name]
                attribute = getattr(current, name)
                loader = (
                    selectinload(attribute)
                    if loader is None
                    else loader.selectinload(attribute)
                )
                current = relationship.mapper.class_
            loaders.append(loader)
        return loaders

    def collect(self, roots: Iterable[Any]) -> List[Any]:
        """
        Gather the objects a loaded graph reaches along the plan's paths.

        Only attributes that are already loaded are followed, so collecting
        never queries.

        Args:
            roots: Root instances (None entries are skipped)

        Returns:
            Roots and every reached object, each once, in discovery order
        """
        roots = [root for root in roots if root is not None]
        found: Dict[int, Any] = {id(root): root for root in roots}

        for path in self.paths:
            level = roots
            for name in path:
                reached = []
                for obj in level:
                    if name in inspect(obj).unloaded:
                        continue
                    value = getattr(obj, name)
                    if value is None:
                        continue
                    reached.extend(value if isinstance(value, list) else [value])
                for obj in reached:
                    found.setdefault(id(obj), obj)
                level = reached
        return list(found.values())


POST_DETAIL = FetchPlan.of(
    ("main_category", "parent"),
    ("post_categories", "category"),
    ("post_tags", "tag"),
)

POST_SUMMARY = FetchPlan.of(("main_category", "parent"))

POST_MONTH = FetchPlan.of(("main_category",))

CATEGORY_DETAIL = FetchPlan.of(
    ("parent",),
    ("post_categories", "post", "main_category", "parent"),
)

TAG_DETAIL = FetchPlan.of(("post_tags", "post", "main_category", "parent"))
