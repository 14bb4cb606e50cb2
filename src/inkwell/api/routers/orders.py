"""Checkout and order history routes."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from inkwell import crud
from inkwell.crud.crud_book import DEFAULT_PAGE_SIZE, get_books_by_slugs
from inkwell.crud.crud_order import order_to_schema
from inkwell.schemas.order import OrderCreate, OrderPage

from ..deps import get_current_user_id, get_db

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", status_code=201)
def place_order(
    payload: OrderCreate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    order = crud.place_order(db, user_id, payload.items)
    books = get_books_by_slugs(db, [item.book_slug for item in order.items])
    return {
        "success": True,
        "message": "Order placed successfully",
        "order": order_to_schema(order, books),
    }


@router.get("", response_model=OrderPage)
def list_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    orders, total, total_pages = crud.get_orders(db, user_id, page=page, limit=limit)
    return OrderPage(orders=orders, total=total, page=page, total_pages=total_pages)
