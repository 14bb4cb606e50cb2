# src/inkwell/models/cart.py
from sqlalchemy import Column, Integer, String, ForeignKey, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship
from inkwell.db.session import Base


class CartItem(Base):
    """
    Línea del carrito de un usuario.

    `item_key` es normalmente el slug del libro. Puede contener una clave
    antigua que el catálogo ya no resuelve; se conserva para que el usuario
    la vea como línea de reemplazo hasta que la elimine.
    """
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    item_key = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    position = Column(Integer, nullable=False, default=0)

    user = relationship("User", back_populates="cart_items")

    __table_args__ = (
        CheckConstraint('quantity >= 1', name='cart_item_quantity_check'),
        UniqueConstraint('user_id', 'item_key', name='uq_user_cart_item'),
    )

    def __repr__(self):
        return f"<CartItem(user_id={self.user_id}, item_key='{self.item_key}', quantity={self.quantity})>"
