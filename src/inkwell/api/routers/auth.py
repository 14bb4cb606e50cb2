"""Account routes: registration, login, profile, wishlist and password reset."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from inkwell import crud
from inkwell.clients.mailersend import send_password_reset_email
from inkwell.core.security import create_access_token
from inkwell.schemas.book import BookSchema
from inkwell.schemas.user import (
    ForgotPasswordRequest,
    ProfileSchema,
    ProfileUpdate,
    ResetPasswordRequest,
    TokenSchema,
    UserCreate,
    UserLogin,
    WishlistAdd,
)

from ..deps import get_current_user_id, get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

GENERIC_RESET_MESSAGE = "If your email is registered, you will receive password reset instructions shortly"


def _wishlist_out(db: Session, books) -> list:
    ratings = crud.get_average_ratings(db, [b.id for b in books])
    return [BookSchema.from_book(b, ratings[b.id]) for b in books]


@router.post("/register", response_model=TokenSchema, status_code=201)
def register(payload: UserCreate, db: Session = Depends(get_db)):
    user = crud.create_user(db, payload)
    return TokenSchema(token=create_access_token(user.id))


@router.post("/login", response_model=TokenSchema)
def login(payload: UserLogin, db: Session = Depends(get_db)):
    user = crud.authenticate_user(db, payload.email, payload.password)
    return TokenSchema(token=create_access_token(user.id))


@router.get("/profile", response_model=ProfileSchema)
def get_profile(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return crud.get_profile(db, user_id)


@router.put("/profile", response_model=ProfileSchema)
def update_profile(
    payload: ProfileUpdate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return crud.update_profile(db, user_id, payload)


@router.get("/wishlist")
def get_wishlist(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return _wishlist_out(db, crud.get_wishlist(db, user_id))


@router.post("/wishlist")
def add_to_wishlist(
    payload: WishlistAdd,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    books = crud.add_to_wishlist(db, user_id, payload.book_id)
    return {"success": True, "message": "Book added to wishlist", "wishlist": _wishlist_out(db, books)}


@router.delete("/wishlist/{book_id}")
def remove_from_wishlist(
    book_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    books = crud.remove_from_wishlist(db, user_id, book_id)
    return {"success": True, "message": "Book removed from wishlist", "wishlist": _wishlist_out(db, books)}


@router.post("/forgot-password")
async def forgot_password(payload: ForgotPasswordRequest, db: Session = Depends(get_db)):
    """
    Starts a password reset. The response is the same whether or not the email
    is registered, and whether or not the email could be sent.
    """
    issued = crud.create_password_reset(db, payload.email)
    if issued is not None:
        user, token = issued
        sent = await send_password_reset_email(user.email, token)
        if not sent:
            logger.error(f"Failed to send password reset email to user {user.id}")
    return {"success": True, "message": GENERIC_RESET_MESSAGE}


@router.post("/reset-password")
def reset_password(payload: ResetPasswordRequest, db: Session = Depends(get_db)):
    crud.reset_password(db, payload.token, payload.new_password)
    return {"success": True, "message": "Password has been reset successfully"}
