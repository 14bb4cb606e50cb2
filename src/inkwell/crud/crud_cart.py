"""
Cart reconciliation for Inkwell.

A cart is a list of (item key, quantity) pairs held by the client and mirrored
on the user record. Before it is shown or stored it is reconciled against the
catalog: keys are resolved by slug, then by internal book id for carts cached
by older clients, and keys that resolve to nothing become placeholder lines so
the user never gets an empty or failing cart.
"""

import logging
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from ..core.errors import BookNotFoundError, CartItemNotFoundError
from ..models.book import Book
from ..models.cart import CartItem
from ..schemas.cart import (
    CartItemIn,
    CartLine,
    PLACEHOLDER_AUTHOR,
    PLACEHOLDER_IMAGE,
    PLACEHOLDER_TITLE,
)
from .crud_book import get_book_by_slug, get_books_by_ids, get_books_by_slugs, looks_like_book_id
from .crud_user import get_user

logger = logging.getLogger(__name__)


def _resolve_keys(db: Session, keys: Sequence[str]) -> Dict[str, Book]:
    """Maps each key to its book: by slug first, then by id for numeric keys."""
    by_slug = get_books_by_slugs(db, keys)
    resolved: Dict[str, Book] = {key: by_slug[key] for key in keys if key in by_slug}

    fallback = {key: int(key) for key in keys if key not in resolved and looks_like_book_id(key)}
    if fallback:
        by_id = get_books_by_ids(db, fallback.values())
        for key, book_id in fallback.items():
            if book_id in by_id:
                logger.info(f"Cart key '{key}' resolved by id to slug '{by_id[book_id].slug}'.")
                resolved[key] = by_id[book_id]
    return resolved


def _line_for(book: Optional[Book], key: str, quantity: int) -> CartLine:
    if book is None:
        return CartLine(
            slug=key,
            title=PLACEHOLDER_TITLE,
            price=Decimal("0"),
            cover_image_url=PLACEHOLDER_IMAGE,
            author=PLACEHOLDER_AUTHOR,
            quantity=quantity,
        )
    return CartLine(
        slug=book.slug,
        title=book.title or PLACEHOLDER_TITLE,
        price=book.price if book.price is not None else Decimal("0"),
        cover_image_url=book.cover_image_url or PLACEHOLDER_IMAGE,
        author=book.author.name if book.author else PLACEHOLDER_AUTHOR,
        quantity=quantity,
    )


def reconcile_cart(db: Session, items: Sequence[CartItemIn]) -> List[CartLine]:
    """
    Reconciles a cart against the current catalog.

    Lines with quantity <= 0 are dropped. Lines that resolve to the same book
    are merged into the first one, summing quantities. Input order is kept.
    Keys that don't resolve produce a placeholder line with price 0.

    Reconciling the (slug, quantity) pairs of the result gives the same result.
    """
    wanted = [item for item in items if item.quantity > 0]
    resolved = _resolve_keys(db, [item.slug for item in wanted])

    merged: Dict[str, Tuple[Optional[Book], int]] = {}
    for item in wanted:
        book = resolved.get(item.slug)
        key = book.slug if book is not None else item.slug
        if key in merged:
            merged[key] = (book, merged[key][1] + item.quantity)
        else:
            merged[key] = (book, item.quantity)

    unresolved = [key for key, (book, _) in merged.items() if book is None]
    if unresolved:
        logger.warning(f"Cart contains keys missing from the catalog: {unresolved}")

    return [_line_for(book, key, quantity) for key, (book, quantity) in merged.items()]


def _stored_items(db: Session, user_id: int) -> List[CartItemIn]:
    user = get_user(db, user_id)
    return [CartItemIn(slug=item.item_key, quantity=item.quantity) for item in user.cart_items]


def _store(db: Session, user_id: int, lines: Sequence[CartLine]) -> None:
    user = get_user(db, user_id)
    # Se vacía y se hace flush antes de insertar para no chocar con uq_user_cart_item
    user.cart_items = []
    db.flush()
    user.cart_items = [
        CartItem(item_key=line.slug, quantity=line.quantity, position=position)
        for position, line in enumerate(lines)
    ]
    try:
        db.commit()
    except Exception as e:
        logger.exception(f"Error saving cart for user {user_id}: {e}")
        db.rollback()
        raise


def get_cart(db: Session, user_id: int) -> List[CartLine]:
    """Returns the user's stored cart, reconciled for display."""
    return reconcile_cart(db, _stored_items(db, user_id))


def set_cart(db: Session, user_id: int, items: Sequence[CartItemIn]) -> List[CartLine]:
    """
    Replaces the user's cart with a client-submitted list.

    What gets stored is the reconciled list (canonical slugs, merged
    duplicates, non-positive quantities dropped), not the raw input.
    Concurrent submissions for the same user are last-write-wins.
    """
    lines = reconcile_cart(db, items)
    _store(db, user_id, lines)
    logger.info(f"Cart for user {user_id} replaced with {len(lines)} line(s).")
    return lines


def add_to_cart(db: Session, user_id: int, slug: str) -> List[CartLine]:
    """Adds one unit of a book: a new line with quantity 1, or +1 on an existing line."""
    book = get_book_by_slug(db, slug)
    if book is None:
        raise BookNotFoundError(slug)
    items = _stored_items(db, user_id)
    for item in items:
        if item.slug == book.slug:
            item.quantity += 1
            break
    else:
        items.append(CartItemIn(slug=book.slug, quantity=1))
    return set_cart(db, user_id, items)


def update_cart_item(db: Session, user_id: int, slug: str, quantity: int) -> List[CartLine]:
    """Sets the quantity of a cart line; a quantity <= 0 removes it."""
    items = _stored_items(db, user_id)
    for item in items:
        if item.slug == slug:
            item.quantity = quantity
            break
    else:
        raise CartItemNotFoundError(slug)
    return set_cart(db, user_id, items)


def remove_from_cart(db: Session, user_id: int, slug: str) -> List[CartLine]:
    items = [item for item in _stored_items(db, user_id) if item.slug != slug]
    return set_cart(db, user_id, items)


def clear_cart(db: Session, user_id: int) -> None:
    _store(db, user_id, [])
    logger.info(f"Cart for user {user_id} cleared.")


def prune_cart(db: Session, user_id: int, slugs) -> None:
    """
    Removes the given slugs from the user's cart without committing.
    Used by order placement inside its own transaction.
    """
    user = get_user(db, user_id)
    slugs = set(slugs)
    user.cart_items = [item for item in user.cart_items if item.item_key not in slugs]
