"""
Taxonomy Models
----------------

Models for classifying posts.

Models:
    - Category: Hierarchical categories (optional parent)
    - Tag: Flat keyword labels
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import TYPE_CHECKING, List, Optional

# --- Third party imports ---
from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

# --- Local imports ---
from .base import Base

if TYPE_CHECKING:
    from .associations import PostCategory, PostTag
    from .post import Post


class Category(Base):
    """
    A blog category.

    Categories form a tree through the self-referential ``parent_id``.
    The hierarchy is fixed when a category is created; the repository only
    reads it.

    Attributes:
        id: Primary key
        slug: URL-safe external identifier (unique)
        title: Display title (used for alphabetical ordering)
        parent_id: Reference to the parent category

    Relationships:
        parent: Parent category
        children: Child categories
        post_categories: One-to-many with PostCategory
    """

    __tablename__ = "blog_categories"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    parent_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("blog_categories.id"), nullable=True
    )

    parent: Mapped[Optional["Category"]] = relationship(
        "Category", back_populates="children", remote_side="Category.id"
    )
    children: Mapped[List["Category"]] = relationship(
        "Category", back_populates="parent"
    )
    post_categories: Mapped[List["PostCategory"]] = relationship(
        "PostCategory", back_populates="category"
    )

    @property
    def posts(self) -> List["Post"]:
        """Posts filed under this category."""
        return [pc.post for pc in self.post_categories]

    @property
    def ancestors(self) -> List["Category"]:
        """
        Ancestor categories, nearest first.

        Returns:
            List of ancestors starting from the immediate parent
        """
        ancestors = []
        current = self.parent
        while current is not None:
            ancestors.append(current)
            current = current.parent
        return ancestors

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, slug='{self.slug}', title='{self.title}')>"


class Tag(Base):
    """
    A blog tag.

    Attributes:
        id: Primary key
        slug: URL-safe external identifier (unique)
        title: Display title (used for alphabetical ordering)

    Relationships:
        post_tags: One-to-many with PostTag
    """

    __tablename__ = "blog_tags"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)

    post_tags: Mapped[List["PostTag"]] = relationship(
        "PostTag", back_populates="tag"
    )

    @property
    def posts(self) -> List["Post"]:
        """Posts carrying this tag."""
        return [pt.post for pt in self.post_tags]

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, slug='{self.slug}', title='{self.title}')>"
