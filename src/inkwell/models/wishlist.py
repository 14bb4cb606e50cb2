# src/inkwell/models/wishlist.py
import datetime
from sqlalchemy import Column, Integer, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from inkwell.db.session import Base


class WishlistItem(Base):
    __tablename__ = "wishlist_items"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    book_id = Column(Integer, ForeignKey("books.id"), nullable=False, index=True)
    added_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.datetime.now(datetime.timezone.utc),
        nullable=False,
    )

    user = relationship("User", back_populates="wishlist_items")
    book = relationship("Book")

    __table_args__ = (
        UniqueConstraint('user_id', 'book_id', name='uq_user_wishlist_book'),
    )

    def __repr__(self):
        return f"<WishlistItem(user_id={self.user_id}, book_id={self.book_id})>"
