"""
Operaciones CRUD para el modelo User en la base de datos de Inkwell.
Incluye alta y autenticación de usuarios, perfil, lista de deseos y el
flujo de restablecimiento de contraseña.
Pensado para ser utilizado por la capa de API.
"""

import datetime
import logging
from typing import Any, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.errors import (
    BookNotFoundError,
    ConflictError,
    InvalidCredentialsError,
    UserNotFoundError,
    ValidationError,
)
from ..core.security import (
    create_password_reset_token,
    decode_password_reset_token,
    get_password_hash,
    verify_password,
)
from ..models.book import Book
from ..models.order import Order, OrderItem
from ..models.user import User
from ..models.wishlist import WishlistItem
from ..schemas.user import ProfileUpdate, UserCreate

logger = logging.getLogger(__name__)


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def _as_utc(value: datetime.datetime) -> datetime.datetime:
    # SQLite devuelve fechas sin zona horaria; se guardan siempre en UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """
    Obtiene un usuario por su email.

    Args:
        db (Session): Sesión de base de datos SQLAlchemy.
        email (str): Email del usuario a buscar.

    Returns:
        Optional[User]: El usuario si existe, None si no.
    """
    return db.query(User).filter(User.email == email).first()


def get_user(db: Session, user_id: int) -> User:
    """
    Obtiene un usuario por su ID.

    Raises:
        UserNotFoundError: Si no existe.
    """
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return user


def create_user(db: Session, user: UserCreate) -> User:
    """
    Crea un nuevo usuario en la base de datos.

    Args:
        db (Session): Sesión de base de datos SQLAlchemy.
        user (UserCreate): Objeto con los datos del usuario a crear.

    Returns:
        User: El usuario creado.

    Raises:
        ConflictError: Si el email ya está registrado.
    """
    if get_user_by_email(db, user.email) is not None:
        raise ConflictError("User already exists")
    hashed_password: str = get_password_hash(user.password)
    db_user: User = User(
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        hashed_password=hashed_password,
    )
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError("User already exists") from e
    db.refresh(db_user)
    logger.info(f"User {db_user.id} registered.")
    return db_user


def authenticate_user(db: Session, email: str, password: str) -> User:
    """
    Comprueba un par email/contraseña.

    Raises:
        InvalidCredentialsError: Si el email no existe o la contraseña no coincide.
    """
    user = get_user_by_email(db, email)
    if user is None or not verify_password(password, user.hashed_password):
        logger.warning(f"Failed login attempt for {email}")
        raise InvalidCredentialsError()
    return user


def get_users(db: Session, skip: int = 0, limit: int = 100) -> List[Any]:
    """
    Obtiene una lista de usuarios, opcionalmente con paginación.
    NO devuelve la contraseña hasheada.

    Returns:
        List[Any]: Lista de Rows/Tuplas con los campos seleccionados del usuario.
    """
    return db.query(
        User.id,
        User.email,
        User.is_active,
        User.created_at,
        User.updated_at
    ).order_by(User.id).offset(skip).limit(limit).all()


def count_ordered_items(db: Session, user_id: int) -> int:
    """Suma de unidades compradas por el usuario en todos sus pedidos."""
    total = db.execute(
        select(func.coalesce(func.sum(OrderItem.quantity), 0))
        .join(Order, OrderItem.order_id == Order.id)
        .where(Order.user_id == user_id)
    ).scalar_one()
    return int(total)


def get_profile(db: Session, user_id: int) -> dict:
    user = get_user(db, user_id)
    return {
        "name": user.full_name,
        "email": user.email,
        "created_at": user.created_at,
        "wishlist_items": len(user.wishlist_items),
        "ordered_items": count_ordered_items(db, user_id),
    }


def update_profile(db: Session, user_id: int, changes: ProfileUpdate) -> dict:
    """
    Actualiza nombre, apellido o email. Los campos vacíos se ignoran.

    Raises:
        ConflictError: Si el nuevo email pertenece a otro usuario.
    """
    user = get_user(db, user_id)
    if changes.email and changes.email != user.email:
        other = get_user_by_email(db, changes.email)
        if other is not None:
            raise ConflictError("Email already in use")
        user.email = changes.email
    if changes.first_name:
        user.first_name = changes.first_name
    if changes.last_name:
        user.last_name = changes.last_name
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError("Email already in use") from e
    db.refresh(user)
    return get_profile(db, user_id)


# --- Wishlist ---

def get_wishlist(db: Session, user_id: int) -> List[Book]:
    user = get_user(db, user_id)
    return [item.book for item in user.wishlist_items if item.book is not None]


def add_to_wishlist(db: Session, user_id: int, book_id: int) -> List[Book]:
    """
    Añade un libro a la lista de deseos.

    Raises:
        BookNotFoundError: Si el libro no existe.
        ConflictError: Si el libro ya estaba en la lista.
    """
    user = get_user(db, user_id)
    if db.get(Book, book_id) is None:
        raise BookNotFoundError(book_id)
    if any(item.book_id == book_id for item in user.wishlist_items):
        raise ConflictError("Book already in wishlist")
    user.wishlist_items.append(WishlistItem(book_id=book_id))
    try:
        db.commit()
    except Exception as e:
        logger.exception(f"Error adding book {book_id} to wishlist of user {user_id}: {e}")
        db.rollback()
        raise
    db.refresh(user)
    return get_wishlist(db, user_id)


def remove_from_wishlist(db: Session, user_id: int, book_id: int) -> List[Book]:
    """Quita un libro de la lista de deseos; no falla si no estaba."""
    user = get_user(db, user_id)
    user.wishlist_items = [item for item in user.wishlist_items if item.book_id != book_id]
    db.commit()
    db.refresh(user)
    return get_wishlist(db, user_id)


# --- Password reset ---

def create_password_reset(db: Session, email: str) -> Optional[Tuple[User, str]]:
    """
    Genera y guarda un token de restablecimiento para el email indicado.

    Returns:
        Optional[Tuple[User, str]]: Usuario y token, o None si el email no está
        registrado (quien llama no debe revelarlo).
    """
    user = get_user_by_email(db, email)
    if user is None:
        logger.info("Password reset requested for an unknown email.")
        return None
    token = create_password_reset_token(user.id)
    user.reset_password_token = token
    user.reset_password_expires = _utcnow() + datetime.timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES)
    db.add(user)
    db.commit()
    logger.info(f"Password reset token issued for user {user.id}.")
    return user, token


def reset_password(db: Session, token: str, new_password: str) -> User:
    """
    Cambia la contraseña usando un token de restablecimiento vigente.
    El token solo sirve una vez.

    Raises:
        ValidationError: Si el token es inválido, ha caducado, ya se usó o la
            contraseña es demasiado corta.
    """
    if len(new_password) < 6:
        raise ValidationError("Password must be at least 6 characters")
    user_id = decode_password_reset_token(token)
    user = db.get(User, user_id)
    if (
        user is None
        or user.reset_password_token != token
        or user.reset_password_expires is None
        or _as_utc(user.reset_password_expires) <= _utcnow()
    ):
        raise ValidationError("Invalid or expired reset token")
    user.hashed_password = get_password_hash(new_password)
    user.reset_password_token = None
    user.reset_password_expires = None
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Password reset completed for user {user.id}.")
    return user
