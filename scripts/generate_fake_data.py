"""
Script para generación de datos falsos en la base de datos de Inkwell.

Este módulo crea autores, libros (con precio y stock), usuarios y reseñas de
prueba utilizando Faker y las funciones CRUD del proyecto. Está pensado para
poblar entornos de desarrollo con datos realistas y variados.

Uso:
    Ejecutar directamente este script. Requiere que la base de datos esté
    configurada (DATABASE_URL) y que las tablas existan o puedan crearse.

Nota:
    - Los usuarios generados tendrán una contraseña común definida en FAKE_PASSWORD.
    - Las reseñas usan la misma lógica de alta/actualización que la API.
"""

import random
import logging
import sys
from decimal import Decimal
from typing import List, Optional

from faker import Faker
from sqlalchemy.orm import Session

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

try:
    from inkwell.db.session import Base, engine, session_scope
    from inkwell.models.book import Book
    from inkwell.schemas.book import AuthorCreate, BookCreate
    from inkwell.schemas.user import UserCreate
    from inkwell.schemas.review import ReviewCreate
    from inkwell.crud.crud_book import create_author, create_book
    from inkwell.crud.crud_user import create_user, get_user_by_email
    from inkwell.crud.crud_review import upsert_review
    from inkwell.core.errors import ConflictError
except ImportError as e:
    logger.error(f"Error importando módulos: {e}.")
    logger.error("Asegúrate de haber ejecutado 'pip install -e .[dev]'")
    sys.exit(1)

NUM_AUTHORS: int = 15
NUM_BOOKS: int = 60
NUM_FAKE_USERS: int = 30
MAX_REVIEWS_PER_USER: int = 10
MIN_REVIEWS_PER_USER: int = 1
FAKE_PASSWORD: str = "password123"

GENRES: List[str] = [
    "Science Fiction", "Fantasy", "Mystery", "Romance", "Biography",
    "History", "Poetry", "Thriller", "Classics", "Self-Help",
]
LANGUAGES: List[str] = ["English", "Spanish", "French"]

fake = Faker(['en_US', 'es_ES'])


def _fake_price() -> Decimal:
    return Decimal(random.randint(499, 3999)) / 100


def generate_catalog(db: Session) -> List[int]:
    """
    Crea autores y libros falsos.

    Returns:
        List[int]: IDs de los libros creados.
    """
    logger.info(f"--- Fase 1: Creando {NUM_AUTHORS} autores y {NUM_BOOKS} libros ---")
    author_ids = [
        create_author(db, AuthorCreate(name=fake.name(), about=fake.paragraph(nb_sentences=3))).id
        for _ in range(NUM_AUTHORS)
    ]
    book_ids: List[int] = []
    for i in range(NUM_BOOKS):
        book_in = BookCreate(
            title=fake.sentence(nb_words=random.randint(1, 5)).rstrip("."),
            author=random.choice(author_ids),
            description=fake.paragraph(nb_sentences=4),
            synopsis=fake.paragraph(nb_sentences=2),
            genre=random.choice(GENRES),
            language=random.choice(LANGUAGES),
            publisher=fake.company(),
            isbn=fake.unique.isbn13(separator=""),
            page_count=random.randint(80, 900),
            publication_year=random.randint(1900, 2025),
            price=float(_fake_price()),
            stock=random.randint(0, 40),
            cover_image_url=f"/covers/{i + 1}.jpg",
        )
        try:
            book = create_book(db, book_in)
            book_ids.append(book.id)
        except ConflictError as e:
            logger.warning(f"  Libro '{book_in.title}' omitido: {e}")
    logger.info(f"--- Fase 1 Completada: {len(book_ids)} libros creados. ---")
    return book_ids


def generate_users(db: Session) -> List[int]:
    logger.info(f"--- Fase 2: Creando/Verificando {NUM_FAKE_USERS} usuarios falsos ---")
    user_ids: List[int] = []
    for i in range(NUM_FAKE_USERS):
        fake_email: str = fake.unique.safe_email()
        existing_user = get_user_by_email(db, email=fake_email)
        if existing_user:
            user_ids.append(existing_user.id)
            continue
        user_in = UserCreate(
            first_name=fake.first_name(),
            last_name=fake.last_name(),
            email=fake_email,
            password=FAKE_PASSWORD,
        )
        try:
            new_user = create_user(db=db, user=user_in)
            user_ids.append(new_user.id)
            logger.info(f"  ({i+1}/{NUM_FAKE_USERS}) Usuario creado: {new_user.email} (ID: {new_user.id})")
        except ConflictError:
            logger.warning(f"  ({i+1}/{NUM_FAKE_USERS}) {fake_email} ya existe.")
    logger.info(f"--- Fase 2 Completada: {len(user_ids)} usuarios listos. ---")
    return user_ids


def generate_reviews(db: Session, user_ids: List[int], book_ids: List[int]) -> int:
    logger.info(f"--- Fase 3: Generando reseñas ({MIN_REVIEWS_PER_USER}-{MAX_REVIEWS_PER_USER} por usuario) ---")
    total_reviews_added: int = 0
    for user_id in user_ids:
        count = min(random.randint(MIN_REVIEWS_PER_USER, MAX_REVIEWS_PER_USER), len(book_ids))
        for book_id in random.sample(book_ids, count):
            comment: Optional[str] = fake.paragraph(nb_sentences=random.randint(1, 4)) if random.random() < 0.7 else None
            _, created = upsert_review(
                db,
                ReviewCreate(rating=random.randint(1, 5), comment=comment),
                user_id=user_id,
                book_id=book_id,
            )
            total_reviews_added += int(created)
    logger.info(f"--- Fase 3 Completada: {total_reviews_added} reseñas añadidas. ---")
    return total_reviews_added


def generate_data() -> None:
    """
    Genera catálogo, usuarios y reseñas falsas en la base de datos.
    Si ya hay libros, reutiliza los existentes en lugar de crear otros.
    """
    logger.info("=============================================")
    logger.info(" Iniciando script de generación de datos falsos")
    logger.info("=============================================")

    Base.metadata.create_all(bind=engine)
    try:
        with session_scope() as db:
            book_ids = [row[0] for row in db.query(Book.id).all()]
            if book_ids:
                logger.info(f"Se encontraron {len(book_ids)} libros; se omite la creación del catálogo.")
            else:
                book_ids = generate_catalog(db)
            user_ids = generate_users(db)
            if user_ids and book_ids:
                generate_reviews(db, user_ids, book_ids)
    except Exception as e:
        logger.error(f"Error CRÍTICO durante la generación de datos: {e}")


if __name__ == "__main__":
    generate_data()
    logger.info("============================================")
    logger.info(" Script de Generación de Datos Finalizado")
    logger.info("============================================")
