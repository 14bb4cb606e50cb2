"""
Modelo ORM para la entidad User en la base de datos de Inkwell.
Define los campos principales de un usuario y su relación con las reseñas,
el carrito, la lista de deseos y el historial de pedidos.
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, func
from sqlalchemy.orm import relationship
from inkwell.db.session import Base

class User(Base):
    """
    Representa un usuario registrado en el sistema.

    Atributos:
        id (int): Identificador primario del usuario.
        first_name (str): Nombre.
        last_name (str): Apellido.
        email (str): Correo electrónico único del usuario.
        hashed_password (str): Contraseña almacenada de forma segura (hash).
        is_active (bool): Indica si el usuario está activo.
        reset_password_token (str): Token de restablecimiento pendiente, si existe.
        reset_password_expires (datetime): Caducidad del token de restablecimiento.
        created_at (datetime): Fecha de creación del usuario.
        updated_at (datetime): Fecha de última actualización del usuario.
        reviews (List[Review]): Reseñas realizadas por el usuario.
        cart_items (List[CartItem]): Carrito, en orden de visualización.
        wishlist_items (List[WishlistItem]): Libros guardados en la lista de deseos.
        orders (List[Order]): Historial de pedidos, solo se añaden.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    first_name = Column(String(100), nullable=False, default="")
    last_name = Column(String(100), nullable=False, default="")
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    reset_password_token = Column(String(512), nullable=True)
    reset_password_expires = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=func.now(), onupdate=func.now(), nullable=False)

    reviews = relationship(
        "Review",
        back_populates="user",
        cascade="all, delete-orphan"
    )
    cart_items = relationship(
        "CartItem",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="CartItem.position"
    )
    wishlist_items = relationship(
        "WishlistItem",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="WishlistItem.added_at"
    )
    orders = relationship(
        "Order",
        back_populates="user",
        order_by="Order.created_at.desc()"
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    def __repr__(self) -> str:
        """
        Representación legible del objeto User para depuración.

        Returns:
            str: Cadena representando el usuario.
        """
        return f"<User(id={self.id}, email='{self.email}')>"
