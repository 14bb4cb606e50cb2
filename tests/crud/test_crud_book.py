# tests/crud/test_crud_book.py
import pytest
from decimal import Decimal

from inkwell.core.errors import AuthorNotFoundError, ConflictError, ValidationError
from inkwell.crud import (
    create_book,
    get_average_ratings,
    get_book_by_slug,
    get_books_page,
    get_random_books,
    search_books,
    upsert_review,
)
from inkwell.crud.crud_book import generate_unique_slug, get_books_by_slugs, looks_like_book_id, slugify
from inkwell.schemas.book import AuthorCreate, BookCreate
from inkwell.schemas.review import ReviewCreate


@pytest.mark.parametrize("title, expected", [
    ("Dune", "dune"),
    ("The Left Hand of Darkness", "the-left-hand-of-darkness"),
    ("Cien años de soledad", "cien-anos-de-soledad"),
    ("  What?! -- Really  ", "what-really"),
    ("!!!", "book"),
])
def test_slugify(title, expected):
    assert slugify(title) == expected


def test_looks_like_book_id():
    assert looks_like_book_id("42")
    assert not looks_like_book_id("dune")
    assert not looks_like_book_id("42a")


def test_generate_unique_slug(db_session, make_book):
    assert generate_unique_slug(db_session, "Dune") == "dune"
    make_book("dune")
    make_book("dune-2")

    assert generate_unique_slug(db_session, "Dune") == "dune-3"
    assert generate_unique_slug(db_session, "Dune Messiah") == "dune-messiah"


def test_create_book_with_existing_author(db_session, author):
    book = create_book(db_session, BookCreate(title="Dune", author=author.id, price=12.99, stock=4, isbn="9780441013593"))

    assert book.slug == "dune"
    assert book.price == Decimal("12.99")
    assert book.stock == 4
    assert book.author.name == "Frank Herbert"
    assert book.reviews_number == 0


def test_create_book_with_new_author(db_session):
    book = create_book(db_session, BookCreate(
        title="Emma", author=AuthorCreate(name="Jane Austen", about="English novelist."), price=7.5
    ))

    assert book.author.id is not None
    assert book.author.name == "Jane Austen"
    assert book.stock == 0


def test_create_book_same_title_gets_new_slug(db_session, author):
    create_book(db_session, BookCreate(title="Dune", author=author.id, price=12.99))
    second = create_book(db_session, BookCreate(title="Dune", author=author.id, price=9.99))

    assert second.slug == "dune-2"


def test_create_book_unknown_author(db_session):
    with pytest.raises(AuthorNotFoundError):
        create_book(db_session, BookCreate(title="Orphan", author=999, price=1))


def test_create_book_duplicate_isbn(db_session, author):
    create_book(db_session, BookCreate(title="Dune", author=author.id, price=12.99, isbn="9780441013593"))

    with pytest.raises(ConflictError) as excinfo:
        create_book(db_session, BookCreate(title="Dune Again", author=author.id, price=12.99, isbn="9780441013593"))
    assert excinfo.value.message == "A book with this ISBN already exists"
    assert get_book_by_slug(db_session, "dune-again") is None


def test_create_book_slug_taken_between_check_and_insert(db_session, dune, monkeypatch):
    from inkwell.crud import crud_book
    from inkwell.models.book import Book

    monkeypatch.setattr(crud_book, "generate_unique_slug", lambda db, title: "dune")

    with pytest.raises(ConflictError) as excinfo:
        create_book(db_session, BookCreate(title="Dune", author=dune.author_id, price=12.99))

    assert excinfo.value.message == "A book with this slug already exists, please retry"
    assert db_session.query(Book).filter(Book.title == "Dune").count() == 1


def test_get_books_page(db_session, make_book):
    for i in range(5):
        make_book(f"book-{i}")

    books, total_pages = get_books_page(db_session, page=2, limit=2)

    assert [b.slug for b in books] == ["book-2", "book-3"]
    assert total_pages == 3


def test_get_books_page_clamps_limit(db_session, make_book):
    for i in range(3):
        make_book(f"book-{i}")

    books, total_pages = get_books_page(db_session, page=1, limit=0)
    assert len(books) == 1
    assert total_pages == 3

    books, total_pages = get_books_page(db_session, page=1, limit=1000)
    assert len(books) == 3
    assert total_pages == 1


def test_search_books(db_session, dune, make_book):
    make_book("emma", title="Emma", genre="Romance")

    assert [b.slug for b in search_books(db_session, "DUN")] == ["dune"]
    assert [b.slug for b in search_books(db_session, "romance")] == ["emma"]
    assert [b.slug for b in search_books(db_session, "frank")] == ["dune", "emma"]
    assert search_books(db_session, "zzz") == []


def test_search_books_by_author(db_session, dune):
    other = create_book(db_session, BookCreate(
        title="Persuasion", author=AuthorCreate(name="Jane Austen", about="English novelist."), price=6
    ))

    assert [b.slug for b in search_books(db_session, "austen")] == [other.slug]
    assert [b.slug for b in search_books(db_session, "herbert")] == ["dune"]


def test_search_books_requires_query(db_session):
    with pytest.raises(ValidationError):
        search_books(db_session, "   ")


def test_get_random_books(db_session, make_book):
    for i in range(6):
        make_book(f"book-{i}")

    assert len(get_random_books(db_session)) == 4
    assert len(get_random_books(db_session, count=100)) == 6
    assert len(get_random_books(db_session, count=0)) == 1


def test_get_books_by_slugs(db_session, dune, make_book):
    make_book("emma")

    books = get_books_by_slugs(db_session, ["dune", "emma", "ghost"])

    assert set(books) == {"dune", "emma"}
    assert get_books_by_slugs(db_session, []) == {}


def test_get_average_ratings(db_session, test_user, test_user_2, dune, make_book):
    emma = make_book("emma")
    upsert_review(db_session, ReviewCreate(rating=5), user_id=test_user.id, book_id=dune.id)
    upsert_review(db_session, ReviewCreate(rating=2), user_id=test_user_2.id, book_id=dune.id)

    assert get_average_ratings(db_session, [dune.id, emma.id]) == {dune.id: 3.5, emma.id: 0.0}
