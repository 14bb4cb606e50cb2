# tests/crud/test_crud_cart.py
import pytest
from decimal import Decimal

from inkwell.core.errors import BookNotFoundError, CartItemNotFoundError
from inkwell.crud import (
    add_to_cart,
    clear_cart,
    get_cart,
    reconcile_cart,
    remove_from_cart,
    set_cart,
    update_cart_item,
)
from inkwell.models.cart import CartItem
from inkwell.schemas.cart import CartItemIn


def _items(*pairs):
    return [CartItemIn(slug=slug, quantity=qty) for slug, qty in pairs]


def _pairs(lines):
    return [(line.slug, line.quantity) for line in lines]


def test_reconcile_known_book(db_session, dune):
    lines = reconcile_cart(db_session, _items(("dune", 2)))

    assert len(lines) == 1
    line = lines[0]
    assert line.slug == "dune"
    assert line.title == "Dune"
    assert line.author == "Frank Herbert"
    assert line.price == Decimal("12.99")
    assert line.cover_image_url == "/covers/dune.jpg"
    assert line.quantity == 2


def test_reconcile_unknown_slug_becomes_placeholder(db_session, dune):
    lines = reconcile_cart(db_session, _items(("dune", 1), ("ghost-book", 3)))

    assert _pairs(lines) == [("dune", 1), ("ghost-book", 3)]
    ghost = lines[1]
    assert ghost.title == "Unknown Title"
    assert ghost.author == "Unknown Author"
    assert ghost.price == Decimal("0")
    assert ghost.cover_image_url == "/placeholder.svg"


def test_reconcile_numeric_key_falls_back_to_id(db_session, dune):
    lines = reconcile_cart(db_session, _items((str(dune.id), 1)))

    assert _pairs(lines) == [("dune", 1)]
    assert lines[0].title == "Dune"


def test_reconcile_unknown_numeric_key(db_session, dune):
    lines = reconcile_cart(db_session, _items(("99999", 1)))

    assert _pairs(lines) == [("99999", 1)]
    assert lines[0].title == "Unknown Title"


def test_reconcile_slug_wins_over_id(db_session, make_book):
    # A book whose slug is all digits must resolve by slug, not by id.
    first = make_book("first-book")
    numeric = make_book(str(first.id), title="1984-ish")

    lines = reconcile_cart(db_session, _items((str(first.id), 1)))

    assert lines[0].title == numeric.title


def test_reconcile_drops_non_positive_quantities(db_session, dune, make_book):
    make_book("emma")
    lines = reconcile_cart(db_session, _items(("dune", 0), ("emma", -2), ("ghost", 0)))

    assert lines == []


def test_reconcile_merges_duplicates_keeping_first_position(db_session, dune, make_book):
    make_book("emma")
    lines = reconcile_cart(db_session, _items(("dune", 1), ("emma", 1), (str(dune.id), 2), ("dune", 1)))

    assert _pairs(lines) == [("dune", 4), ("emma", 1)]


def test_reconcile_preserves_input_order(db_session, make_book):
    for slug in ("a-book", "b-book", "c-book"):
        make_book(slug)

    lines = reconcile_cart(db_session, _items(("c-book", 1), ("ghost", 1), ("a-book", 1), ("b-book", 1)))

    assert [line.slug for line in lines] == ["c-book", "ghost", "a-book", "b-book"]


def test_reconcile_is_idempotent(db_session, dune, make_book):
    make_book("emma")
    first = reconcile_cart(db_session, _items((str(dune.id), 2), ("ghost", 1), ("emma", 0), ("dune", 1)))
    second = reconcile_cart(db_session, _items(*_pairs(first)))

    assert second == first


def test_reconcile_uses_current_price(db_session, dune):
    dune.price = Decimal("14.50")
    db_session.commit()

    lines = reconcile_cart(db_session, _items(("dune", 1)))

    assert lines[0].price == Decimal("14.50")


def test_set_cart_stores_reconciled_lines(db_session, test_user, dune):
    lines = set_cart(db_session, test_user.id, _items((str(dune.id), 1), ("ghost", 2), ("dune", 1), ("gone", 0)))

    assert _pairs(lines) == [("dune", 2), ("ghost", 2)]
    stored = db_session.query(CartItem).filter(CartItem.user_id == test_user.id).order_by(CartItem.position).all()
    assert [(i.item_key, i.quantity, i.position) for i in stored] == [("dune", 2, 0), ("ghost", 2, 1)]


def test_get_cart_returns_stored_cart(db_session, test_user, dune):
    set_cart(db_session, test_user.id, _items(("dune", 2), ("ghost", 1)))

    lines = get_cart(db_session, test_user.id)

    assert _pairs(lines) == [("dune", 2), ("ghost", 1)]
    assert lines[1].title == "Unknown Title"


def test_set_cart_replaces_previous_cart(db_session, test_user, dune, make_book):
    make_book("emma")
    set_cart(db_session, test_user.id, _items(("dune", 1), ("emma", 1)))

    set_cart(db_session, test_user.id, _items(("emma", 3)))

    assert _pairs(get_cart(db_session, test_user.id)) == [("emma", 3)]


def test_empty_cart(db_session, test_user):
    assert get_cart(db_session, test_user.id) == []


def test_add_to_cart(db_session, test_user, dune):
    add_to_cart(db_session, test_user.id, "dune")
    lines = add_to_cart(db_session, test_user.id, "dune")

    assert _pairs(lines) == [("dune", 2)]


def test_add_to_cart_unknown_book(db_session, test_user):
    with pytest.raises(BookNotFoundError):
        add_to_cart(db_session, test_user.id, "ghost")


def test_update_cart_item(db_session, test_user, dune, make_book):
    make_book("emma")
    set_cart(db_session, test_user.id, _items(("dune", 1), ("emma", 1)))

    lines = update_cart_item(db_session, test_user.id, "dune", 5)
    assert _pairs(lines) == [("dune", 5), ("emma", 1)]

    lines = update_cart_item(db_session, test_user.id, "dune", 0)
    assert _pairs(lines) == [("emma", 1)]


def test_update_cart_item_not_in_cart(db_session, test_user, dune):
    with pytest.raises(CartItemNotFoundError):
        update_cart_item(db_session, test_user.id, "dune", 2)


def test_remove_from_cart_and_clear(db_session, test_user, dune, make_book):
    make_book("emma")
    set_cart(db_session, test_user.id, _items(("dune", 1), ("emma", 1), ("ghost", 1)))

    lines = remove_from_cart(db_session, test_user.id, "ghost")
    assert _pairs(lines) == [("dune", 1), ("emma", 1)]

    clear_cart(db_session, test_user.id)
    assert get_cart(db_session, test_user.id) == []
