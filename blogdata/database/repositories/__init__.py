"""
Repositories Package
---------------------

Query layers over the blog models.

- base_repository: Shared session/logger wiring and query helpers
- content_repository: Posts, categories and tags

Usage:
    from blogdata.database.repositories import ContentRepository

    with db.session_scope() as session:
        repo = ContentRepository(session, db.logger)
        post = repo.get_by_slug("hello-world")
"""
from .base_repository import BaseRepository
from .content_repository import ContentRepository, month_window

__all__ = [
    "BaseRepository",
    "ContentRepository",
    "month_window",
]
