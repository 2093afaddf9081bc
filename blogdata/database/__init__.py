"""
Blog Database Package
----------------------

SQLAlchemy models, fetch plans and repositories for the blog content store.

Usage:
    from blogdata.database import BlogDB

    db = BlogDB("data/blog.db")
    with db.session_scope() as session:
        repo = db.content(session)
        latest = repo.latest_posts(count=5)
"""
from .fetch_plans import (
    CATEGORY_DETAIL,
    POST_DETAIL,
    POST_MONTH,
    POST_SUMMARY,
    TAG_DETAIL,
    FetchPlan,
)
from .manager import BlogDB
from .models import Base, Category, Post, PostCategory, PostTag, Tag
from .repositories import ContentRepository

__all__ = [
    "BlogDB",
    "ContentRepository",
    "FetchPlan",
    "POST_DETAIL",
    "POST_SUMMARY",
    "POST_MONTH",
    "CATEGORY_DETAIL",
    "TAG_DETAIL",
    "Base",
    "Post",
    "Category",
    "Tag",
    "PostCategory",
    "PostTag",
]
