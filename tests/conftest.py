"""
conftest.py
-----------
Shared pytest fixtures for blogdata tests.

Provides fixtures for:
- Database setup and teardown
- A seeded blog graph
- Statement counting against the test engine
"""
import calendar
import pytest
from pathlib import Path
from tempfile import TemporaryDirectory

from sqlalchemy import event


def utc_ts(year, month, day, hour=0, minute=0, second=0):
    """Unix timestamp of a UTC wall-clock time."""
    return calendar.timegm((year, month, day, hour, minute, second))


# ----- Path Fixtures -----

@pytest.fixture
def tmp_dir():
    """Create a temporary directory for test file operations."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_db_path(tmp_dir):
    """Create temporary test database path."""
    return tmp_dir / "test.db"


# ----- Database Fixtures -----

@pytest.fixture
def test_db(test_db_path):
    """
    Create test database instance with schema.

    Returns a BlogDB instance with an initialized schema.
    Database is torn down after the test.
    """
    from blogdata.database.manager import BlogDB

    db = BlogDB(db_path=test_db_path)
    db.initialize_schema()

    yield db

    db.dispose()


@pytest.fixture
def db_session(test_db):
    """
    Create a database session for tests.

    Provides a session with automatic rollback after test.
    """
    with test_db.session_scope() as session:
        yield session
        session.rollback()


@pytest.fixture
def content_repository(db_session):
    """Create ContentRepository instance for testing."""
    from blogdata.database.repositories import ContentRepository
    return ContentRepository(db_session)


class QueryCounter:
    """Records SQL statements executed on an engine."""

    def __init__(self):
        self.statements = []

    @property
    def count(self):
        return len(self.statements)

    def reset(self):
        self.statements = []

    def __call__(self, conn, cursor, statement, parameters, context, executemany):
        self.statements.append(statement)


@pytest.fixture
def query_counter(test_db):
    """Count statements sent to the test database."""
    counter = QueryCounter()
    event.listen(test_db.engine, "before_cursor_execute", counter)
    yield counter
    event.remove(test_db.engine, "before_cursor_execute", counter)


# ----- Seed Data -----

@pytest.fixture
def blog_graph(test_db):
    """
    Seed a small blog and return its entities keyed by slug.

    Categories:
        technology (Technology)
        └── python (Python)
            └── sqlalchemy (SQLAlchemy)   main category of draft only
        life (Life)
        archive (Archive)           no posts

    Tags: sql (SQL), orm (ORM), misc (Misc, no posts)

    Posts (UTC):
        first-post   2023-12-15 12:00  published  main=life        cats=[life]              tags=[]
        orm-intro    2024-01-10 09:30  published  main=python      cats=[python,technology] tags=[orm,sql]
        sql-tips     2024-01-20 08:00  published  main=technology  cats=[technology]        tags=[sql]
        draft        2024-01-25 10:00  draft      main=sqlalchemy  cats=[python]            tags=[orm]
        new-year     2024-02-01 00:00  published  main=life        cats=[]                  tags=[]
        same-day     2024-01-20 08:00  published  main=technology  cats=[technology]        tags=[]

    ``new-year`` sits exactly on the January/February boundary;
    ``same-day`` shares its timestamp with ``sql-tips``.
    """
    from blogdata.database.models import Category, Post, PostCategory, PostTag, Tag

    with test_db.session_scope() as session:
        technology = Category(slug="technology", title="Technology")
        python = Category(slug="python", title="Python", parent=technology)
        sqlalchemy = Category(slug="sqlalchemy", title="SQLAlchemy", parent=python)
        life = Category(slug="life", title="Life")
        archive = Category(slug="archive", title="Archive")

        sql = Tag(slug="sql", title="SQL")
        orm = Tag(slug="orm", title="ORM")
        misc = Tag(slug="misc", title="Misc")

        session.add_all([technology, python, sqlalchemy, life, archive, sql, orm, misc])
        session.flush()

        def make_post(slug, date, main, categories, tags, published=True):
            post = Post(
                slug=slug,
                title=slug.replace("-", " ").title(),
                content=f"Body of {slug}",
                published=published,
                unix_date=date,
                main_category=main,
            )
            post.post_categories = [PostCategory(category=c) for c in categories]
            post.post_tags = [PostTag(tag=t) for t in tags]
            session.add(post)
            session.flush()
            return post

        posts = [
            make_post("first-post", utc_ts(2023, 12, 15, 12), life, [life], []),
            make_post("orm-intro", utc_ts(2024, 1, 10, 9, 30), python, [python, technology], [orm, sql]),
            make_post("sql-tips", utc_ts(2024, 1, 20, 8), technology, [technology], [sql]),
            make_post("draft", utc_ts(2024, 1, 25, 10), sqlalchemy, [python], [orm], published=False),
            make_post("new-year", utc_ts(2024, 2, 1), life, [], []),
            make_post("same-day", utc_ts(2024, 1, 20, 8), technology, [technology], []),
        ]

        entities = {
            "categories": {c.slug: c for c in (technology, python, sqlalchemy, life, archive)},
            "tags": {t.slug: t for t in (sql, orm, misc)},
            "posts": {p.slug: p for p in posts},
        }

    return entities
