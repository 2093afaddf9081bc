"""
Database Models Package
------------------------

SQLAlchemy ORM models for the blog content database.

- base: Declarative base
- post: Post
- taxonomy: Category, Tag
- associations: PostCategory, PostTag join entities

Usage:
    from blogdata.database.models import Post, Category, Tag
"""
from .base import Base
from .associations import PostCategory, PostTag
from .post import Post
from .taxonomy import Category, Tag

__all__ = [
    "Base",
    "Post",
    "Category",
    "Tag",
    "PostCategory",
    "PostTag",
]
