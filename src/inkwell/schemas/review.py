"""
Esquemas Pydantic de reseñas: entrada (valoración 1-5 y comentario) y las dos
vistas de salida, por libro y por usuario.
"""

import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_COMMENT_LENGTH = 5000


class ReviewBase(BaseModel):
    """
    Atributos:
        rating (int): Valoración entera entre 1 y 5.
        comment (Optional[str]): Texto libre; una cadena en blanco se guarda como None.
    """
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=MAX_COMMENT_LENGTH)

    @field_validator("comment")
    @classmethod
    def blank_comment_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        return value or None


class ReviewCreate(ReviewBase):
    """Reseña enviada desde la ficha del libro: el libro sale de la URL y el usuario del token."""


class ReviewSubmit(ReviewBase):
    book_id: int


class ReviewSchema(ReviewBase):
    """
    Reseña tal como se muestra en la ficha de un libro.

    `created_at` se reescribe cuando el autor edita la reseña, así que es la
    fecha de la última versión.
    """
    id: int
    user_id: int
    user_name: str = "Anonymous"
    book_id: int
    created_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)


class UserReviewSchema(BaseModel):
    """Reseña de un usuario con título, slug y portada del libro para listarla en su perfil."""
    review_id: int
    book_id: int
    book_title: str
    book_slug: str
    book_cover: Optional[str] = None
    rating: int
    comment: Optional[str] = None
    created_at: datetime.datetime
