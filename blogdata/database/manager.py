#!/usr/bin/env python3
"""
manager.py
--------------------
Database manager for the blog content store.

Provides the BlogDB class, which owns the SQLAlchemy engine and session
factory and hands out repositories bound to a session.

Handles:
    - Initialization of the database engine and sessionmaker
    - Transactional session scopes with logging
    - Schema creation from the ORM models
    - Repository construction (content)

Notes
==============
- Schema evolution is out of scope: initialize_schema() only creates
  missing tables.
- Sessions are created with expire_on_commit=False so entities returned by
  a repository stay readable after the scope commits.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional, Union

# --- Third party ---
from sqlalchemy import Engine, create_engine, inspect
from sqlalchemy.orm import Session, sessionmaker

# --- Local imports ---
from blogdata.core.exceptions import DatabaseError
from blogdata.core.logging_manager import BlogLogger
from blogdata.core.paths import DB_PATH
from .models import Base
from .repositories import ContentRepository


class BlogDB:
    """
    Main database manager for the blog content database.

    Attributes:
        db_url (str): SQLAlchemy URL the engine connects to
        db_path (Path | None): SQLite file path, when not given a URL
        engine (Engine): SQLAlchemy engine instance
        SessionLocal (sessionmaker): SQLAlchemy session factory
        logger (BlogLogger | None): Operation logger

    Usage:
        db = BlogDB("~/blog/data/blog.db", log_dir="~/blog/logs")
        db.initialize_schema()
        with db.session_scope() as session:
            repo = db.content(session)
            post = repo.get_by_slug("hello-world")
    """

    def __init__(
        self,
        db_path: Optional[Union[str, Path]] = None,
        db_url: Optional[str] = None,
        log_dir: Optional[Union[str, Path]] = None,
        echo: bool = False,
    ) -> None:
        """
        Initialize database engine and session factory.

        Args:
            db_path: Path to the SQLite file (default: DB_PATH)
            db_url: Full SQLAlchemy URL; takes precedence over db_path
            log_dir: Directory for log files (optional)
            echo: Echo SQL statements through SQLAlchemy's logger
        """
        if db_url:
            self.db_path: Optional[Path] = None
            self.db_url = db_url
        else:
            self.db_path = Path(db_path or DB_PATH).expanduser().resolve()
            self.db_url = f"sqlite:///{self.db_path}"

        if log_dir:
            self.log_dir: Optional[Path] = Path(log_dir).expanduser().resolve()
            self.logger: Optional[BlogLogger] = BlogLogger(
                self.log_dir, component_name="database"
            )
        else:
            self.log_dir = None
            self.logger = None

        self.echo = echo
        self._setup_engine()

    def _setup_engine(self) -> None:
        """Initialize database engine and session factory."""
        try:
            if self.logger:
                self.logger.log_operation("database_init_start", {"db_url": self.db_url})

            if self.db_path is not None:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)

            self.engine: Engine = create_engine(
                self.db_url,
                echo=self.echo,
                pool_pre_ping=True,
            )

            self.SessionLocal: sessionmaker = sessionmaker(
                bind=self.engine,
                autoflush=True,
                expire_on_commit=False,
            )

            if self.logger:
                self.logger.log_operation("database_init_complete", {"success": True})

        except Exception as e:
            if self.logger:
                self.logger.log_error(e, {"operation": "database_init"})
            raise DatabaseError(f"Database initialization failed: {e}") from e

    # ---- Session Management ----
    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """
        Provide a transactional scope around operations with logging.

        Commits on normal exit; rolls back and re-raises on error; always
        closes the session.

        Usage:
            with db.session_scope() as session:
                repo = db.content(session)
                repo.set_tags(post, [1, 2])
        """
        session = self.SessionLocal()
        session_id = datetime.now().strftime("%Y%m%d_%H%M%S_%f")

        if self.logger:
            self.logger.log_debug("session_start", {"session_id": session_id})

        try:
            yield session
            session.commit()
            if self.logger:
                self.logger.log_debug("session_commit", {"session_id": session_id})

        except Exception as e:
            session.rollback()
            if self.logger:
                self.logger.log_error(
                    e, {"operation": "session_rollback", "session_id": session_id}
                )
            raise
        finally:
            session.close()
            if self.logger:
                self.logger.log_debug("session_close", {"session_id": session_id})

    def get_session(self) -> Session:
        """Create and return a new SQLAlchemy session."""
        return self.SessionLocal()

    def content(self, session: Session) -> ContentRepository:
        """Return a ContentRepository bound to ``session``."""
        return ContentRepository(session, self.logger)

    # ---- Schema ----
    def initialize_schema(self) -> None:
        """
        Create any missing tables from the ORM models.

        Existing tables are left untouched.
        """
        try:
            existing = set(inspect(self.engine).get_table_names())
            Base.metadata.create_all(bind=self.engine)
            created = sorted(set(Base.metadata.tables) - existing)

            if self.logger:
                self.logger.log_operation(
                    "schema_initialized",
                    {"tables_created": created, "tables_existing": len(existing)},
                )
        except Exception as e:
            if self.logger:
                self.logger.log_error(e, {"operation": "initialize_schema"})
            raise DatabaseError(f"Could not initialize database: {e}") from e

    def dispose(self) -> None:
        """Release pooled connections and close log handlers."""
        self.engine.dispose()
        if self.logger:
            self.logger.close()

    # ----- Context Manager Support -----
    def __enter__(self) -> "BlogDB":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        del exc_type, exc_val, exc_tb
        self.dispose()
