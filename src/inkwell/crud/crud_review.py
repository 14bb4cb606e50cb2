from sqlalchemy.orm import Session
from sqlalchemy import desc, func
from sqlalchemy.exc import IntegrityError
from typing import List, Optional, Tuple
import datetime
import logging

from ..core.errors import BookNotFoundError, ConflictError, ForbiddenError, ReviewNotFoundError, ValidationError
from ..models.review import Review
from ..models.user import User
from ..models.book import Book
from ..schemas.review import ReviewCreate, ReviewSchema, UserReviewSchema
from .crud_book import decrement_reviews_number, increment_reviews_number

logger = logging.getLogger(__name__)


def _get_book(db: Session, book_id: int) -> Book:
    book = db.get(Book, book_id)
    if book is None:
        raise BookNotFoundError(book_id)
    return book


def get_average_rating(db: Session, book_id: int) -> float:
    """
    Calculates the average rating of a book on read, rounded to one decimal.
    An unreviewed book reports 0.
    """
    avg_rating = db.query(func.avg(Review.rating))\
                   .filter(Review.book_id == book_id)\
                   .scalar()
    return round(float(avg_rating), 1) if avg_rating is not None else 0.0


def get_user_review(db: Session, book_id: int, user_id: int) -> Optional[Review]:
    """Obtiene la reseña de un usuario para un libro, si existe."""
    return db.query(Review).\
        filter(Review.book_id == book_id, Review.user_id == user_id).\
        first()


def _apply_update(db_review: Review, review: ReviewCreate) -> None:
    db_review.rating = review.rating
    db_review.comment = review.comment
    db_review.created_at = datetime.datetime.now(datetime.timezone.utc)


def _commit_review(db: Session, db_review: Review, book_id: int, user_id: int, action: str) -> None:
    try:
        db.commit()
        db.refresh(db_review)
        logger.info(f"Review {db_review.id} {action} for book {book_id} by user {user_id}.")
    except Exception as e:
        logger.exception(f"Error committing review for book {book_id} by user {user_id}: {e}")
        db.rollback()
        raise # Re-raise the exception after rollback


def upsert_review(db: Session, review: ReviewCreate, user_id: int, book_id: int) -> Tuple[Review, bool]:
    """
    Creates the user's review for a book, or updates it if one already exists.

    A user has at most one review per book: a second submission replaces the
    rating, comment and timestamp of the first. Only a new review increments
    the book's cached review count, and the increment is done in SQL so that
    concurrent reviews of the same book are all counted.

    If a concurrent submission by the same user inserts first, the unique
    constraint rejects this insert and the submission becomes an update.

    Returns:
        (review, created): created is False when an existing review was updated.

    Raises:
        ConflictError: If the insert collides and the competing review cannot be found.
    """
    if not 1 <= review.rating <= 5:
        raise ValidationError("Rating must be between 1 and 5")
    _get_book(db, book_id)

    db_review = get_user_review(db, book_id, user_id)
    if db_review is not None:
        _apply_update(db_review, review)
        _commit_review(db, db_review, book_id, user_id, "updated")
        return db_review, False

    db_review = Review(
        **review.model_dump(include={"rating", "comment"}),
        user_id=user_id,
        book_id=book_id,
    )
    db.add(db_review)
    increment_reviews_number(db, book_id)
    try:
        db.commit() # Commit review and cached count together
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Concurrent review by user {user_id} on book {book_id}; updating instead: {e.orig}")
        db_review = get_user_review(db, book_id, user_id)
        if db_review is None:
            raise ConflictError("Review already exists") from e
        _apply_update(db_review, review)
        _commit_review(db, db_review, book_id, user_id, "updated")
        return db_review, False
    except Exception as e:
        logger.exception(f"Error committing review for book {book_id} by user {user_id}: {e}")
        db.rollback()
        raise

    db.refresh(db_review)
    logger.info(f"Review {db_review.id} created for book {book_id} by user {user_id}.")
    return db_review, True


def _user_name(user: Optional[User]) -> str:
    if user is None:
        return "Anonymous"
    return user.full_name or "Anonymous"


def review_to_schema(review: Review) -> ReviewSchema:
    return ReviewSchema(
        id=review.id,
        user_id=review.user_id,
        user_name=_user_name(review.user),
        book_id=review.book_id,
        rating=review.rating,
        comment=review.comment,
        created_at=review.created_at,
    )


def get_reviews_for_book(db: Session, book_id: int, skip: int = 0, limit: Optional[int] = None) -> List[ReviewSchema]:
    """Returns the reviews of a book, newest first, with the reviewer's display name."""
    _get_book(db, book_id)
    query = db.query(Review, User).\
            outerjoin(User, Review.user_id == User.id).\
            filter(Review.book_id == book_id).\
            order_by(desc(Review.created_at), desc(Review.id)).\
            offset(skip)
    if limit is not None:
        query = query.limit(limit)
    return [review_to_schema(review) for review, _ in query.all()]


def get_reviews_for_user(db: Session, user_id: int) -> List[UserReviewSchema]:
    """
    Returns every review written by a user, newest first, with the book's
    title, slug and cover denormalized into each row.
    """
    rows = db.query(Review, Book).\
            join(Book, Review.book_id == Book.id).\
            filter(Review.user_id == user_id).\
            order_by(desc(Review.created_at), desc(Review.id)).\
            all()
    return [
        UserReviewSchema(
            review_id=review.id,
            book_id=book.id,
            book_title=book.title,
            book_slug=book.slug,
            book_cover=book.cover_image_url,
            rating=review.rating,
            comment=review.comment,
            created_at=review.created_at,
        )
        for review, book in rows
    ]


def get_review_by_id(db: Session, review_id: int) -> Review | None:
     """Obtiene una reseña específica por su ID."""
     return db.get(Review, review_id)


def delete_review(db: Session, book_id: int, review_id: int, requesting_user_id: int) -> None:
    """
    Deletes a review. Only its author may delete it.

    Raises:
        BookNotFoundError: If the book does not exist.
        ReviewNotFoundError: If the review does not exist on that book.
        ForbiddenError: If the requester did not write the review.
    """
    _get_book(db, book_id)
    db_review = get_review_by_id(db, review_id)

    if not db_review or db_review.book_id != book_id:
        logger.warning(f"Attempted delete of non-existent review ID {review_id} on book {book_id}")
        raise ReviewNotFoundError(review_id)

    # --- Permission Check ---
    if db_review.user_id != requesting_user_id:
        logger.error(f"Unauthorized attempt: User {requesting_user_id} tried to delete review {review_id} owned by {db_review.user_id}")
        raise ForbiddenError("Not authorized to delete this review")

    try:
        db.delete(db_review)
        decrement_reviews_number(db, book_id)
        db.commit() # Commit deletion and cached count together
        logger.info(f"Review {review_id} deleted by user {requesting_user_id} from book {book_id}.")
    except Exception as e:
        logger.exception(f"Error committing delete for review ID {review_id}: {e}")
        db.rollback()
        raise
