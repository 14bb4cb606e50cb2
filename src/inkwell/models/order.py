"""
Modelos ORM para los pedidos de Inkwell.

Un pedido guarda una instantánea de cada línea con el precio en el momento
de la compra; no se modifica ni se borra una vez creado.
"""

import datetime
import uuid
from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, DateTime, CheckConstraint
from sqlalchemy.orm import relationship
from inkwell.db.session import Base


def generate_order_id() -> str:
    return f"ORD-{uuid.uuid4()}"


class Order(Base):
    """
    Pedido confirmado de un usuario.

    Atributos:
        id (int): Identificador primario interno.
        order_id (str): Identificador público `ORD-<uuid4>`, único.
        user_id (int): Usuario que realizó el pedido.
        total (Decimal): Suma de precio x cantidad de las líneas.
        created_at (datetime): Momento de la compra.
        items (List[OrderItem]): Líneas del pedido.
    """
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    order_id = Column(String(64), unique=True, index=True, nullable=False, default=generate_order_id)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    total = Column(Numeric(10, 2), nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.datetime.now(datetime.timezone.utc),
        nullable=False,
    )

    user = relationship("User", back_populates="orders")
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id"
    )

    def __repr__(self) -> str:
        return f"<Order(order_id='{self.order_id}', user_id={self.user_id}, total={self.total})>"


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    book_slug = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)

    order = relationship("Order", back_populates="items")

    __table_args__ = (
        CheckConstraint('quantity >= 1', name='order_item_quantity_check'),
        CheckConstraint('price >= 0', name='order_item_price_check'),
    )

    def __repr__(self) -> str:
        return f"<OrderItem(book_slug='{self.book_slug}', quantity={self.quantity}, price={self.price})>"
