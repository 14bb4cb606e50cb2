# tests/conftest.py
import pytest
from decimal import Decimal
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
import os
import sys

# Add the src directory to the Python path to allow imports
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
src_path = os.path.join(project_root, 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from inkwell.core.config import settings
from inkwell.db.session import Base
# Import all models to ensure they are registered with Base
from inkwell import models  # noqa: F401
from inkwell.models.book import Author, Book
from inkwell.crud.crud_user import create_user
from inkwell.schemas.user import UserCreate

# --- Test Database Setup ---
# In-memory SQLite, one fresh database per test. StaticPool keeps a single
# connection so the API test client and the test share the same database.
TEST_DATABASE_URL = "sqlite://"


@pytest.fixture(autouse=True)
def jwt_secret(monkeypatch):
    monkeypatch.setattr(settings, "JWT_SECRET", "test-secret")


@pytest.fixture(scope="function")
def db_engine():
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session_factory(db_engine):
    """Returns a SQLAlchemy session factory."""
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db_session(db_session_factory):
    """Provides a session on the per-test database."""
    session = db_session_factory()
    try:
        yield session
    finally:
        session.close()


# --- Helper Fixtures ---
@pytest.fixture
def author(db_session):
    author = Author(name="Frank Herbert", about="American science fiction author.")
    db_session.add(author)
    db_session.commit()
    db_session.refresh(author)
    return author


@pytest.fixture
def make_book(db_session, author):
    """Factory for catalog books. Prices are Decimals, as the catalog stores them."""
    counter = {"n": 0}

    def _make_book(slug, price="10.00", stock=5, title=None, **kwargs):
        counter["n"] += 1
        book = Book(
            slug=slug,
            title=title or slug.replace("-", " ").title(),
            author_id=kwargs.pop("author_id", author.id),
            isbn=kwargs.pop("isbn", f"978000000{counter['n']:04d}"),
            price=Decimal(price),
            stock=stock,
            cover_image_url=kwargs.pop("cover_image_url", f"/covers/{slug}.jpg"),
            **kwargs,
        )
        db_session.add(book)
        db_session.commit()
        db_session.refresh(book)
        return book

    return _make_book


@pytest.fixture
def dune(make_book):
    return make_book("dune", price="12.99", stock=2, title="Dune", genre="Science Fiction")


@pytest.fixture
def test_user(db_session):
    return create_user(db_session, UserCreate(
        first_name="Paul", last_name="Atreides", email="paul@example.com", password="password"
    ))


@pytest.fixture
def test_user_2(db_session):
    return create_user(db_session, UserCreate(
        first_name="Chani", last_name="Kynes", email="chani@example.com", password="password"
    ))
