"""Domain exceptions for Inkwell and their HTTP status codes."""


class InkwellError(Exception):
    """Base exception for all Inkwell errors."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(InkwellError):
    """Raised when input is malformed or a required field is missing."""

    status_code = 400


class InvalidCredentialsError(InkwellError):
    """Raised when an email/password pair does not match a user."""

    status_code = 400

    def __init__(self):
        super().__init__("Invalid credentials")


class ConflictError(InkwellError):
    """Raised on duplicate email, ISBN or wishlist entry."""

    status_code = 400


class PriceMismatchError(InkwellError):
    """Raised when a submitted order price differs from the catalog price."""

    status_code = 400

    def __init__(self, slug: str, submitted, current):
        self.slug = slug
        self.submitted = submitted
        self.current = current
        super().__init__(f"Price mismatch for book {slug}")


class InsufficientStockError(InkwellError):
    """Raised when a book does not have enough stock for an order line."""

    status_code = 400

    def __init__(self, slug: str, requested: int, available: int | None = None):
        self.slug = slug
        self.requested = requested
        self.available = available
        super().__init__(f"Insufficient stock for book {slug}")


class UnauthorizedError(InkwellError):
    """Raised when the bearer credential is missing, invalid or expired."""

    status_code = 401


class ForbiddenError(InkwellError):
    """Raised when a user acts on a resource owned by someone else."""

    status_code = 403


class NotFoundError(InkwellError):
    """Raised when a referenced record does not exist."""

    status_code = 404


class BookNotFoundError(NotFoundError):
    def __init__(self, key):
        self.key = key
        super().__init__(f"Book {key} not found")


class AuthorNotFoundError(NotFoundError):
    def __init__(self, author_id: int):
        self.author_id = author_id
        super().__init__("Author not found")


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__("User not found")


class ReviewNotFoundError(NotFoundError):
    def __init__(self, review_id: int):
        self.review_id = review_id
        super().__init__("Review not found")


class CartItemNotFoundError(NotFoundError):
    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"Item {slug} is not in the cart")


class ConfigurationError(InkwellError):
    """Raised when a required setting is missing."""

    status_code = 500
