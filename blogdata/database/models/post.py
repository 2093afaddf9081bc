"""
Post Model
-----------

The blog post, the primary model of the content domain.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .associations import PostCategory, PostTag
    from .taxonomy import Category, Tag


class Post(Base):
    """
    A blog post.

    Attributes:
        id: Primary key
        slug: URL-safe external identifier (unique)
        title: Post title
        content: Post body
        published: Whether the post is publicly visible
        unix_date: Publication timestamp in seconds since epoch (column ``date``)
        main_category_id: Foreign key to the primary category

    Relationships:
        main_category: Many-to-one with Category (shown alongside the post)
        post_categories: One-to-many with PostCategory (owned join rows)
        post_tags: One-to-many with PostTag (owned join rows)

    The main category is tracked independently of the category set; it does
    not have to appear in ``post_categories``.
    """

    __tablename__ = "blog_posts"
    __table_args__ = (
        CheckConstraint("slug != ''", name="non_empty_slug"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    content: Mapped[Optional[str]] = mapped_column(Text)
    published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    unix_date: Mapped[int] = mapped_column(
        "date", Integer, nullable=False, default=0, index=True
    )
    main_category_id: Mapped[int] = mapped_column(
        ForeignKey("blog_categories.id"), nullable=False
    )

    main_category: Mapped["Category"] = relationship(
        "Category", foreign_keys=[main_category_id]
    )
    post_categories: Mapped[List["PostCategory"]] = relationship(
        "PostCategory", back_populates="post", cascade="all, delete-orphan"
    )
    post_tags: Mapped[List["PostTag"]] = relationship(
        "PostTag", back_populates="post", cascade="all, delete-orphan"
    )

    @property
    def categories(self) -> List["Category"]:
        """Categories this post is filed under."""
        return [pc.category for pc in self.post_categories]

    @property
    def tags(self) -> List["Tag"]:
        """Tags this post is tagged with."""
        return [pt.tag for pt in self.post_tags]

    @property
    def published_at(self) -> datetime:
        """Publication time as an aware UTC datetime."""
        return datetime.fromtimestamp(self.unix_date, tz=timezone.utc)

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, slug='{self.slug}', published={self.published})>"
