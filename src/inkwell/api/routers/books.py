"""Catalog routes and the book-scoped review submission."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from inkwell import crud
from inkwell.core.errors import BookNotFoundError
from inkwell.crud.crud_book import DEFAULT_PAGE_SIZE, DEFAULT_RANDOM_COUNT
from inkwell.crud.crud_review import review_to_schema
from inkwell.schemas.book import BookCreate, BookDetailSchema, BookSchema
from inkwell.schemas.review import ReviewCreate

from ..deps import get_current_user_id, get_db

router = APIRouter(prefix="/books", tags=["books"])


def _books_out(db: Session, books) -> list:
    ratings = crud.get_average_ratings(db, [b.id for b in books])
    return [BookSchema.from_book(b, ratings[b.id]) for b in books]


@router.get("")
def list_books(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1),
    db: Session = Depends(get_db),
):
    books, total_pages = crud.get_books_page(db, page=page, limit=limit)
    return {
        "success": True,
        "data": _books_out(db, books),
        "total_pages": total_pages,
        "current_page": page,
    }


@router.post("", status_code=201)
def create_book(
    payload: BookCreate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    book = crud.create_book(db, payload)
    return {"success": True, "data": BookSchema.from_book(book)}


@router.get("/search")
def search_books(q: Optional[str] = None, db: Session = Depends(get_db)):
    books = crud.search_books(db, q or "")
    return {"success": True, "data": _books_out(db, books)}


@router.get("/random")
def random_books(count: int = Query(DEFAULT_RANDOM_COUNT, ge=1), db: Session = Depends(get_db)):
    return _books_out(db, crud.get_random_books(db, count))


@router.get("/{slug}")
def get_book(slug: str, db: Session = Depends(get_db)):
    book = crud.get_book_by_slug(db, slug)
    if book is None:
        raise BookNotFoundError(slug)
    detail = BookSchema.from_book(book, crud.get_average_rating(db, book.id))
    reviews = crud.get_reviews_for_book(db, book.id)
    return {"success": True, "data": BookDetailSchema(**detail.model_dump(), reviews=reviews)}


@router.post("/{slug}/reviews", status_code=201)
def submit_review(
    slug: str,
    payload: ReviewCreate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    book = crud.get_book_by_slug(db, slug)
    if book is None:
        raise BookNotFoundError(slug)
    review, created = crud.upsert_review(db, payload, user_id=user_id, book_id=book.id)
    return {
        "success": True,
        "message": "Review submitted successfully" if created else "Review updated successfully",
        "review": review_to_schema(review),
        "average_rating": crud.get_average_rating(db, book.id),
    }
