"""Cart routes. Every response is the reconciled cart."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from inkwell import crud
from inkwell.schemas.cart import CartAdd, CartQuantityUpdate, CartSchema, CartUpdate

from ..deps import get_current_user_id, get_db

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=CartSchema)
def get_cart(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return CartSchema(items=crud.get_cart(db, user_id))


@router.put("", response_model=CartSchema)
def set_cart(
    payload: CartUpdate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return CartSchema(items=crud.set_cart(db, user_id, payload.items))


@router.delete("", response_model=CartSchema)
def clear_cart(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    crud.clear_cart(db, user_id)
    return CartSchema(items=[])


@router.post("/items", response_model=CartSchema)
def add_item(
    payload: CartAdd,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return CartSchema(items=crud.add_to_cart(db, user_id, payload.slug))


@router.patch("/items/{slug}", response_model=CartSchema)
def update_item(
    slug: str,
    payload: CartQuantityUpdate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return CartSchema(items=crud.update_cart_item(db, user_id, slug, payload.quantity))


@router.delete("/items/{slug}", response_model=CartSchema)
def remove_item(
    slug: str,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return CartSchema(items=crud.remove_from_cart(db, user_id, slug))
