"""
Order placement and order history for Inkwell.

An order is validated line by line against the current catalog (existence,
exact price, stock), then committed in a single transaction: conditional stock
decrements, the order snapshot with purchase prices, and pruning of the
ordered slugs from the cart. Any failure rolls the whole transaction back.
"""

import logging
import math
from decimal import Decimal
from typing import List, Sequence, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from ..core.errors import (
    BookNotFoundError,
    InsufficientStockError,
    PriceMismatchError,
    ValidationError,
)
from ..models.book import Book
from ..models.order import Order, OrderItem, generate_order_id
from ..schemas.common import CENT, to_money
from ..schemas.order import OrderItemIn, OrderItemSchema, OrderSchema
from .crud_book import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    decrement_stock,
    get_books_by_slugs,
)
from .crud_cart import prune_cart
from .crud_user import get_user

logger = logging.getLogger(__name__)


def _validate_lines(db: Session, items: Sequence[OrderItemIn]) -> List[Tuple[Book, OrderItemIn, Decimal]]:
    """
    Checks every line against the catalog, stopping at the first violation.

    Returns:
        List of (book, line, catalog price) in input order.
    """
    books = get_books_by_slugs(db, [item.book_slug for item in items])
    validated = []
    for item in items:
        book = books.get(item.book_slug)
        if book is None:
            raise BookNotFoundError(item.book_slug)
        submitted = to_money(item.price)
        if submitted != book.price:
            logger.warning(
                f"Price mismatch for '{book.slug}': submitted {submitted}, catalog {book.price}"
            )
            raise PriceMismatchError(book.slug, submitted, book.price)
        if book.stock < item.quantity:
            raise InsufficientStockError(book.slug, item.quantity, book.stock)
        validated.append((book, item, book.price))
    return validated


def place_order(db: Session, user_id: int, items: Sequence[OrderItemIn]) -> Order:
    """
    Converts a list of order lines into a persisted order.

    Args:
        db (Session): SQLAlchemy session.
        user_id (int): Authenticated buyer.
        items (Sequence[OrderItemIn]): Non-empty list of {book_slug, quantity, price}.

    Returns:
        Order: The persisted order with its public id, lines and total.

    Raises:
        ValidationError: If `items` is empty.
        BookNotFoundError: If a slug does not exist.
        PriceMismatchError: If a submitted price differs from the catalog price.
        InsufficientStockError: If stock is short, either at validation time or
            because a concurrent order took it before the decrement.
    """
    if not items:
        raise ValidationError("Items must be a non-empty array")
    user = get_user(db, user_id)

    validated = _validate_lines(db, items)

    try:
        for book, item, _ in validated:
            if not decrement_stock(db, book.id, item.quantity):
                logger.warning(
                    f"Stock for '{book.slug}' changed during checkout of user {user_id}; rolling back."
                )
                raise InsufficientStockError(book.slug, item.quantity)

        total = sum((price * item.quantity for _, item, price in validated), Decimal("0"))
        order = Order(
            order_id=generate_order_id(),
            user_id=user.id,
            total=total.quantize(CENT),
            items=[
                OrderItem(book_slug=book.slug, quantity=item.quantity, price=price)
                for book, item, price in validated
            ],
        )
        db.add(order)
        prune_cart(db, user.id, [book.slug for book, _, _ in validated])
        db.commit()
    except InsufficientStockError:
        db.rollback()
        raise
    except Exception as e:
        logger.exception(f"Error committing order for user {user_id}: {e}")
        db.rollback()
        raise

    db.refresh(order)
    logger.info(f"Order {order.order_id} placed by user {user_id} for {order.total}.")
    return order


def order_to_schema(order: Order, books_by_slug: dict) -> OrderSchema:
    """Builds the display form of an order, enriching lines with current book data."""
    lines = []
    for item in order.items:
        book = books_by_slug.get(item.book_slug)
        lines.append(OrderItemSchema(
            book_slug=item.book_slug,
            quantity=item.quantity,
            price=item.price,
            title=book.title if book else None,
            cover_image_url=book.cover_image_url if book else None,
            author=book.author.name if book and book.author else None,
        ))
    return OrderSchema(
        order_id=order.order_id,
        items=lines,
        total=order.total,
        created_at=order.created_at,
    )


def get_orders(db: Session, user_id: int, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> Tuple[List[OrderSchema], int, int]:
    """
    Returns one page of the user's order history, newest first.

    Returns:
        Tuple of (orders, total order count, total pages).
    """
    get_user(db, user_id)
    page = max(page, 1)
    limit = min(max(limit, 1), MAX_PAGE_SIZE)

    total = db.execute(select(func.count(Order.id)).where(Order.user_id == user_id)).scalar_one()
    orders = db.execute(
        select(Order)
        .where(Order.user_id == user_id)
        .options(selectinload(Order.items))
        .order_by(Order.created_at.desc(), Order.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    ).scalars().all()

    books = get_books_by_slugs(db, {item.book_slug for order in orders for item in order.items})
    return [order_to_schema(order, books) for order in orders], total, math.ceil(total / limit)
