from .crud_user import (
    get_user_by_email,
    get_user,
    create_user,
    authenticate_user,
    get_users,
    get_profile,
    update_profile,
    get_wishlist,
    add_to_wishlist,
    remove_from_wishlist,
    create_password_reset,
    reset_password,
)
from .crud_book import (
    create_book,
    get_book_by_id,
    get_book_by_slug,
    get_books_page,
    search_books,
    get_random_books,
    get_average_ratings,
    decrement_stock,
)
from .crud_review import (
    upsert_review,
    get_average_rating,
    get_reviews_for_book,
    get_reviews_for_user,
    get_review_by_id,
    delete_review,
)
from .crud_cart import (
    reconcile_cart,
    get_cart,
    set_cart,
    add_to_cart,
    update_cart_item,
    remove_from_cart,
    clear_cart,
)
from .crud_order import place_order, get_orders

__all__ = [
    "get_user_by_email",
    "get_user",
    "create_user",
    "authenticate_user",
    "get_users",
    "get_profile",
    "update_profile",
    "get_wishlist",
    "add_to_wishlist",
    "remove_from_wishlist",
    "create_password_reset",
    "reset_password",
    "create_book",
    "get_book_by_id",
    "get_book_by_slug",
    "get_books_page",
    "search_books",
    "get_random_books",
    "get_average_ratings",
    "decrement_stock",
    "upsert_review",
    "get_average_rating",
    "get_reviews_for_book",
    "get_reviews_for_user",
    "get_review_by_id",
    "delete_review",
    "reconcile_cart",
    "get_cart",
    "set_cart",
    "add_to_cart",
    "update_cart_item",
    "remove_from_cart",
    "clear_cart",
    "place_order",
    "get_orders",
]
