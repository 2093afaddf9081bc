"""
Base Classes
------------

Foundational ORM classes for the blog database.

Classes:
    - Base: Declarative base for all SQLAlchemy models
"""
# --- Annotations ---
from __future__ import annotations

# --- Third party ---
from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

# Naming convention for database constraints
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """
    Base class for all ORM models.

    Serves as the declarative base for SQLAlchemy models and provides
    access to the metadata object for table creation.
    """

    metadata = MetaData(naming_convention=convention)
