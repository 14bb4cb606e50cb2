"""Review routes. Submission always uses the identity from the bearer token."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from inkwell import crud
from inkwell.crud.crud_review import review_to_schema
from inkwell.schemas.review import ReviewCreate, ReviewSubmit

from ..deps import get_current_user_id, get_db

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.post("", status_code=201)
def submit_review(
    payload: ReviewSubmit,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    review, created = crud.upsert_review(
        db,
        ReviewCreate(rating=payload.rating, comment=payload.comment),
        user_id=user_id,
        book_id=payload.book_id,
    )
    return {
        "success": True,
        "message": "Review submitted successfully" if created else "Review updated successfully",
        "review": review_to_schema(review),
    }


@router.get("/book/{book_id}")
def get_book_reviews(book_id: int, db: Session = Depends(get_db)):
    reviews = crud.get_reviews_for_book(db, book_id)
    return {
        "success": True,
        "count": len(reviews),
        "average_rating": crud.get_average_rating(db, book_id),
        "reviews": reviews,
    }


@router.get("/user")
def get_user_reviews(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    reviews = crud.get_reviews_for_user(db, user_id)
    return {"success": True, "count": len(reviews), "reviews": reviews}


@router.delete("/{book_id}/{review_id}")
def delete_review(
    book_id: int,
    review_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    crud.delete_review(db, book_id=book_id, review_id=review_id, requesting_user_id=user_id)
    return {"success": True, "message": "Review deleted successfully"}
