"""
Association Models
-------------------

Join entities for the many-to-many relationships of the blog database.

Models:
    - PostCategory: Links a post to one of its categories
    - PostTag: Links a post to one of its tags

Both use a composite primary key, so a given pair can appear at most once.
They are mapped as association objects (rather than plain ``secondary``
tables) so that a post owns its join rows: clearing ``Post.post_categories``
deletes the rows on flush.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import TYPE_CHECKING

# --- Third party imports ---
from sqlalchemy import ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

# --- Local imports ---
from .base import Base

if TYPE_CHECKING:
    from .post import Post
    from .taxonomy import Category, Tag


class PostCategory(Base):
    """
    Association between a post and a category.

    Attributes:
        post_id: Foreign key to the post
        category_id: Foreign key to the category
    """

    __tablename__ = "blog_post_categories"
    __table_args__ = (
        Index("idx_post_categories_category", "category_id"),
    )

    post_id: Mapped[int] = mapped_column(
        ForeignKey("blog_posts.id", ondelete="CASCADE"), primary_key=True
    )
    category_id: Mapped[int] = mapped_column(
        ForeignKey("blog_categories.id", ondelete="CASCADE"), primary_key=True
    )

    post: Mapped["Post"] = relationship("Post", back_populates="post_categories")
    category: Mapped["Category"] = relationship(
        "Category", back_populates="post_categories"
    )

    def __repr__(self) -> str:
        return f"<PostCategory(post_id={self.post_id}, category_id={self.category_id})>"


class PostTag(Base):
    """
    Association between a post and a tag.

    Attributes:
        post_id: Foreign key to the post
        tag_id: Foreign key to the tag
    """

    __tablename__ = "blog_post_tags"
    __table_args__ = (
        Index("idx_post_tags_tag", "tag_id"),
    )

    post_id: Mapped[int] = mapped_column(
        ForeignKey("blog_posts.id", ondelete="CASCADE"), primary_key=True
    )
    tag_id: Mapped[int] = mapped_column(
        ForeignKey("blog_tags.id", ondelete="CASCADE"), primary_key=True
    )

    post: Mapped["Post"] = relationship("Post", back_populates="post_tags")
    tag: Mapped["Tag"] = relationship("Tag", back_populates="post_tags")

    def __repr__(self) -> str:
        return f"<PostTag(post_id={self.post_id}, tag_id={self.tag_id})>"
