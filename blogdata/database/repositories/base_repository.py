#!/usr/bin/env python3
"""
base_repository.py
--------------------
Base repository providing shared query helpers.
All repositories should inherit from this class.

Key Features:
    - Session and logger wiring
    - Slug lookup that raises instead of returning None
    - Fetch-plan application
    - Id resolution that silently skips unknown ids
    - Commit-or-rollback unit of work (_unit_of_work)

Store failures propagate to the caller exactly as SQLAlchemy raised them;
nothing is retried.

Example:
    class ContentRepository(BaseRepository):
        def get_tag(self, slug: str) -> Tag:
            return self._get_by_slug(Tag, slug, TAG_DETAIL)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from abc import ABC
from contextlib import contextmanager
from typing import Any, Iterable, Iterator, List, Optional, Protocol, Type, TypeVar

# --- Third party imports ---
from sqlalchemy.orm import Mapped, Query, Session

# --- Local imports ---
from blogdata.core.exceptions import NotFoundError
from blogdata.core.logging_manager import BlogLogger, safe_logger
from blogdata.core.validators import DataValidator
from blogdata.database.fetch_plans import FetchPlan


class HasSlug(Protocol):
    """Protocol for models identified externally by a slug."""

    id: Mapped[int]
    slug: Mapped[str]


T = TypeVar("T", bound=HasSlug)


class BaseRepository(ABC):
    """
    Abstract base repository.

    Attributes:
        session: SQLAlchemy session the repository queries through
        logger: Optional logger for operation tracking
    """

    def __init__(self, session: Session, logger: Optional[BlogLogger] = None):
        """
        Initialize the repository.

        Args:
            session: SQLAlchemy session
            logger: Optional logger for operation tracking
        """
        self.session = session
        self.logger = logger

    # -------------------------------------------------------------------------
    # Query Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _apply_plan(query: Query, model: Type, plan: Optional[FetchPlan]) -> Query:
        """Attach the loader options described by a fetch plan."""
        if not plan:
            return query
        return query.options(*plan.options(model))

    def _get_by_slug(
        self, model_class: Type[T], slug: Optional[str], plan: Optional[FetchPlan] = None
    ) -> T:
        """
        Get the unique entity with the given slug.

        Args:
            model_class: ORM model class
            slug: Slug to look up (surrounding whitespace is ignored)
            plan: Relationships to hydrate along with the entity

        Returns:
            The matching entity

        Raises:
            NotFoundError: If no entity has that slug
        """
        normalized = DataValidator.normalize_string(slug)
        if normalized is None:
            raise NotFoundError(model_class.__name__, slug)

        query = self.session.query(model_class).filter(model_class.slug == normalized)
        entity = self._apply_plan(query, model_class, plan).first()

        if entity is None:
            safe_logger(self.logger).log_debug(
                f"{model_class.__name__} lookup missed", {"slug": normalized}
            )
            raise NotFoundError(model_class.__name__, normalized)
        return entity

    def _get_by_ids(self, model_class: Type[T], ids: Iterable[Any]) -> List[T]:
        """
        Load every entity whose id is in ``ids``.

        Ids that match nothing are skipped without error.

        Args:
            model_class: ORM model class
            ids: Target identifiers

        Returns:
            Matching entities ordered by id
        """
        normalized = DataValidator.normalize_ids(ids)
        if not normalized:
            return []

        found = (
            self.session.query(model_class)
            .filter(model_class.id.in_(normalized))
            .order_by(model_class.id)
            .all()
        )

        if len(found) != len(normalized):
            missing = sorted(set(normalized) - {entity.id for entity in found})
            safe_logger(self.logger).log_debug(
                f"Ignoring unknown {model_class.__name__} ids", {"ids": missing}
            )
        return found

    # -------------------------------------------------------------------------
    # Unit of Work
    # -------------------------------------------------------------------------

    @contextmanager
    def _unit_of_work(self) -> Iterator[None]:
        """
        Run the enclosed mutations as one commit.

        Commits when the block exits normally; on any exception the session
        is rolled back and the exception re-raised unchanged.

        Usage:
            with self._unit_of_work():
                post.post_tags.clear()
                ...
        """
        try:
            yield
            self.session.commit()
        except Exception as e:
            self.session.rollback()
            safe_logger(self.logger).log_error(e, {"operation": "unit_of_work_rollback"})
            raise
