#!/usr/bin/env python3
"""
exceptions.py
--------------------
Custom exception classes for the blog data layer.

Exception Hierarchy:
    Exception (built-in)
    ├── DatabaseError - Base for all database-related errors
    │   └── NotFoundError - Slug lookup matched nothing
    └── ValidationError - Invalid arguments (paging, month, ...)

Errors raised by SQLAlchemy itself are not wrapped: they reach the caller
as-is.

Usage:
    from blogdata.core.exceptions import NotFoundError

    try:
        post = repo.get_by_slug("hello-world")
    except NotFoundError as e:
        logger.error(f"No such post: {e.slug}")
"""
from typing import Optional


class DatabaseError(Exception):
    """
    Base exception for database-related errors.

    Catch this to handle any error raised by the data layer itself, or
    catch a subclass for more granular handling.

    Examples:
        >>> raise DatabaseError("TagRepository requires an active session")
    """

    pass


class NotFoundError(DatabaseError):
    """
    Exception for slug lookups with no matching row.

    Lookups never return None; a miss is always reported through this
    exception so callers do not need to null-check.

    Attributes:
        entity: Name of the entity type that was looked up
        slug: The slug that matched nothing

    Examples:
        >>> raise NotFoundError("Post", "hello-world")
    """

    def __init__(self, entity: str, slug: Optional[str]) -> None:
        self.entity = entity
        self.slug = slug
        super().__init__(f"{entity} not found: {slug!r}")


class ValidationError(Exception):
    """
    Exception for invalid arguments.

    Raised when input fails validation checks:
    - Negative count or offset
    - Month outside 1-12
    - Non-integer identifiers

    Examples:
        >>> raise ValidationError("count must be non-negative, got -1")
        >>> raise ValidationError("month must be between 1 and 12, got 13")
    """

    pass
