"""
Esquemas Pydantic para el catálogo (libros y autores) en la API de Inkwell.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, Field, ConfigDict

from .common import Money
from .review import ReviewSchema


class AuthorCreate(BaseModel):
    """
    Autor nuevo que se crea junto con un libro.

    Atributos:
        name (str): Nombre del autor.
        about (str): Biografía breve.
    """
    name: str = Field(..., min_length=1)
    about: str = Field(..., min_length=1)


class BookCreate(BaseModel):
    """
    Esquema para dar de alta un libro.

    El autor puede ser el ID de un autor existente o los datos de uno nuevo.
    El slug se genera en el servidor a partir del título.
    """
    title: str = Field(..., min_length=1)
    author: Union[int, AuthorCreate]
    description: Optional[str] = None
    synopsis: Optional[str] = None
    genre: Optional[str] = None
    language: Optional[str] = None
    publisher: Optional[str] = None
    isbn: Optional[str] = None
    page_count: Optional[int] = Field(None, ge=1)
    publication_year: Optional[int] = Field(None, ge=1000)
    price: float = Field(..., ge=0)
    stock: int = Field(0, ge=0)
    cover_image_url: Optional[str] = None


class BookSchema(BaseModel):
    """
    Esquema de salida para un libro, con el autor desnormalizado.

    Atributos:
        author (str): Nombre del autor.
        author_bio (str): Biografía del autor.
        average_rating (float): Media de valoraciones redondeada a un decimal, 0 sin reseñas.
    """
    id: int
    slug: str
    title: str
    author: str
    author_bio: str = ""
    description: Optional[str] = None
    synopsis: Optional[str] = None
    genre: Optional[str] = None
    language: Optional[str] = None
    publisher: Optional[str] = None
    isbn: Optional[str] = None
    page_count: Optional[int] = None
    publication_year: Optional[int] = None
    price: Money
    stock: int
    cover_image_url: Optional[str] = None
    reviews_number: int = 0
    average_rating: float = 0

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_book(cls, book, average_rating: float = 0) -> "BookSchema":
        return cls(
            id=book.id,
            slug=book.slug,
            title=book.title,
            author=book.author.name if book.author else "Unknown Author",
            author_bio=(book.author.about or "") if book.author else "",
            description=book.description,
            synopsis=book.synopsis,
            genre=book.genre,
            language=book.language,
            publisher=book.publisher,
            isbn=book.isbn,
            page_count=book.page_count,
            publication_year=book.publication_year,
            price=book.price,
            stock=book.stock,
            cover_image_url=book.cover_image_url,
            reviews_number=book.reviews_number or 0,
            average_rating=average_rating,
        )


class BookDetailSchema(BookSchema):
    reviews: List[ReviewSchema] = []
