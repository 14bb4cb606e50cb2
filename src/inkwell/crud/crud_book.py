"""
Operaciones CRUD para el catálogo (Book y Author) en la base de datos.
Incluye búsquedas, paginación, alta de libros con generación de slug y el
decremento condicional de stock que usa la confirmación de pedidos.
"""

import logging
import math
import re
import unicodedata
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import select, or_, func, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.errors import AuthorNotFoundError, ConflictError, ValidationError
from ..models.book import Author, Book
from ..models.review import Review
from ..schemas.book import AuthorCreate, BookCreate
from ..schemas.common import to_money

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 50
DEFAULT_RANDOM_COUNT = 4
MAX_RANDOM_COUNT = 20

_ID_PATTERN = re.compile(r"^\d+$")


def slugify(text: str) -> str:
    """Convierte un título en un slug apto para URL (ASCII, minúsculas, guiones)."""
    text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    text = text.lower().strip()
    text = re.sub(r"[^\w\s-]", "", text)
    text = re.sub(r"[\s_-]+", "-", text)
    return text.strip("-") or "book"


def looks_like_book_id(key: str) -> bool:
    return bool(_ID_PATTERN.match(key))


def generate_unique_slug(db: Session, title: str) -> str:
    """
    Genera un slug a partir del título que no exista todavía en el catálogo.

    Ante colisión añade un sufijo numérico: `dune`, `dune-2`, `dune-3`...

    Args:
        db (Session): Sesión de base de datos SQLAlchemy.
        title (str): Título del libro.

    Returns:
        str: Slug libre.
    """
    base = slugify(title)
    taken = set(
        db.execute(
            select(Book.slug).where(or_(Book.slug == base, Book.slug.like(f"{base}-%")))
        ).scalars()
    )
    if base not in taken:
        return base
    suffix = 2
    while f"{base}-{suffix}" in taken:
        suffix += 1
    return f"{base}-{suffix}"


def create_author(db: Session, author: AuthorCreate) -> Author:
    db_author = Author(name=author.name, about=author.about)
    db.add(db_author)
    db.commit()
    db.refresh(db_author)
    return db_author


def _conflict_message(error: IntegrityError) -> str:
    # El texto del driver nombra la columna o el índice: books.isbn, ix_books_slug...
    detail = str(error.orig).lower()
    if "isbn" in detail:
        return "A book with this ISBN already exists"
    if "slug" in detail:
        return "A book with this slug already exists, please retry"
    return "Book conflicts with an existing book"


def create_book(db: Session, book: BookCreate) -> Book:
    """
    Da de alta un libro, creando el autor si se envían sus datos.

    Args:
        db (Session): Sesión de base de datos SQLAlchemy.
        book (BookCreate): Datos del libro.

    Returns:
        Book: El libro creado, con su slug asignado.

    Raises:
        AuthorNotFoundError: Si se referencia un autor que no existe.
        ConflictError: Si el ISBN o el slug ya existen.
    """
    if isinstance(book.author, int):
        author = db.get(Author, book.author)
        if author is None:
            raise AuthorNotFoundError(book.author)
    else:
        author = Author(name=book.author.name, about=book.author.about)
        db.add(author)

    data = book.model_dump(exclude={"author", "price"})
    db_book = Book(
        **data,
        price=to_money(book.price),
        author=author,
        slug=generate_unique_slug(db, book.title),
        reviews_number=0,
    )
    db.add(db_book)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Book '{book.title}' rejected by a unique constraint: {e.orig}")
        raise ConflictError(_conflict_message(e)) from e
    db.refresh(db_book)
    logger.info(f"Book {db_book.id} created with slug '{db_book.slug}'.")
    return db_book


def get_book_by_id(db: Session, book_id: int) -> Optional[Book]:
    """
    Recupera un libro por su ID primario.

    Returns:
        Optional[Book]: El objeto Book si se encuentra, None si no existe.
    """
    return db.get(Book, book_id)


def get_book_by_slug(db: Session, slug: str) -> Optional[Book]:
    """
    Recupera un libro por su slug.

    Returns:
        Optional[Book]: El objeto Book si se encuentra, None si no existe.
    """
    return db.execute(select(Book).where(Book.slug == slug)).scalars().first()


def get_book_by_isbn(db: Session, isbn: str) -> Optional[Book]:
    return db.execute(select(Book).where(Book.isbn == isbn)).scalars().first()


def get_books_by_slugs(db: Session, slugs: Iterable[str]) -> Dict[str, Book]:
    """Recupera en una sola consulta los libros de un conjunto de slugs, indexados por slug."""
    slugs = set(slugs)
    if not slugs:
        return {}
    books = db.execute(select(Book).where(Book.slug.in_(slugs))).unique().scalars().all()
    return {b.slug: b for b in books}


def get_books_by_ids(db: Session, book_ids: Iterable[int]) -> Dict[int, Book]:
    """Recupera en una sola consulta los libros de un conjunto de IDs, indexados por ID."""
    book_ids = set(book_ids)
    if not book_ids:
        return {}
    books = db.execute(select(Book).where(Book.id.in_(book_ids))).unique().scalars().all()
    return {b.id: b for b in books}


def get_books_page(db: Session, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> Tuple[List[Book], int]:
    """
    Devuelve una página del catálogo ordenada por ID.

    El tamaño de página se limita a [1, MAX_PAGE_SIZE].

    Returns:
        Tuple[List[Book], int]: Libros de la página y número total de páginas.
    """
    page = max(page, 1)
    limit = min(max(limit, 1), MAX_PAGE_SIZE)
    total_books = db.execute(select(func.count(Book.id))).scalar_one()
    books = db.execute(
        select(Book).order_by(Book.id).offset((page - 1) * limit).limit(limit)
    ).unique().scalars().all()
    return books, math.ceil(total_books / limit)


def search_books(db: Session, query: str, limit: int = MAX_PAGE_SIZE) -> List[Book]:
    """
    Busca libros cuyo título, género o nombre de autor contenga `query`,
    sin distinguir mayúsculas.

    Raises:
        ValidationError: Si la consulta está vacía.
    """
    if not query or not query.strip():
        raise ValidationError("Query parameter is required")
    term = f"%{query.strip()}%"
    stmt = (
        select(Book)
        .join(Author, Book.author_id == Author.id)
        .where(or_(
            Book.title.ilike(term),
            Book.genre.ilike(term),
            Author.name.ilike(term),
        ))
        .order_by(Book.title)
        .limit(limit)
    )
    return db.execute(stmt).unique().scalars().all()


def get_random_books(db: Session, count: int = DEFAULT_RANDOM_COUNT) -> List[Book]:
    count = min(max(count, 1), MAX_RANDOM_COUNT)
    return db.execute(select(Book).order_by(func.random()).limit(count)).unique().scalars().all()


def get_average_ratings(db: Session, book_ids: Iterable[int]) -> Dict[int, float]:
    """
    Calcula la valoración media de varios libros en una sola consulta.

    Returns:
        Dict[int, float]: Media redondeada a un decimal por ID; 0 para libros sin reseñas.
    """
    book_ids = list(book_ids)
    averages = {book_id: 0.0 for book_id in book_ids}
    if not book_ids:
        return averages
    rows = db.execute(
        select(Review.book_id, func.avg(Review.rating))
        .where(Review.book_id.in_(book_ids))
        .group_by(Review.book_id)
    ).all()
    for book_id, avg in rows:
        averages[book_id] = round(float(avg), 1)
    return averages


def decrement_stock(db: Session, book_id: int, quantity: int) -> bool:
    """
    Resta `quantity` unidades del stock solo si hay suficientes.

    Es una única sentencia UPDATE condicional, así que dos pedidos concurrentes
    no pueden dejar el stock en negativo. No hace commit: la llamada forma
    parte de la transacción del pedido.

    Returns:
        bool: True si se descontó el stock, False si no había suficiente.
    """
    result = db.execute(
        update(Book)
        .where(Book.id == book_id, Book.stock >= quantity)
        .values(stock=Book.stock - quantity)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def increment_reviews_number(db: Session, book_id: int) -> None:
    """
    Suma una reseña al contador cacheado del libro en la propia sentencia SQL,
    sin leer el valor que haya en la sesión. No hace commit.
    """
    db.execute(
        update(Book)
        .where(Book.id == book_id)
        .values(reviews_number=Book.reviews_number + 1)
        .execution_options(synchronize_session=False)
    )


def decrement_reviews_number(db: Session, book_id: int) -> None:
    """Resta una reseña del contador cacheado; nunca baja de cero. No hace commit."""
    db.execute(
        update(Book)
        .where(Book.id == book_id, Book.reviews_number > 0)
        .values(reviews_number=Book.reviews_number - 1)
        .execution_options(synchronize_session=False)
    )
