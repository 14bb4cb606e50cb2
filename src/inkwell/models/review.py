# src/inkwell/models/review.py
import datetime
from sqlalchemy import (Column, Integer, Text, ForeignKey, DateTime,
                        CheckConstraint, UniqueConstraint)
from sqlalchemy.orm import relationship
from inkwell.db.session import Base


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    # Se reescribe cuando el mismo usuario vuelve a reseñar el libro
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    book_id = Column(Integer, ForeignKey("books.id"), nullable=False, index=True)

    user = relationship("User", back_populates="reviews")
    book = relationship("Book", back_populates="reviews")

    __table_args__ = (
        # Ensure rating is between 1 and 5
        CheckConstraint('rating >= 1 AND rating <= 5', name='review_rating_check'),
        # Ensure a user can review a specific book only once
        UniqueConstraint('user_id', 'book_id', name='uq_user_book_review'),
    )

    def __repr__(self):
        return f"<Review(id={self.id}, book_id={self.book_id}, user_id={self.user_id}, rating={self.rating})>"
