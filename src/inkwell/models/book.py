"""
Modelos ORM para el catálogo de Inkwell: libros y autores.
Define los campos principales de un libro, su relación con el autor y con las reseñas.
"""

from sqlalchemy import Column, Integer, String, Text, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from inkwell.db.session import Base

class Author(Base):
    """
    Representa un autor del catálogo.

    Atributos:
        id (int): Identificador primario del autor.
        name (str): Nombre del autor.
        about (str): Biografía breve.
        books (List[Book]): Libros escritos por el autor.
    """
    __tablename__ = "authors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), index=True, nullable=False)
    about = Column(Text, nullable=False)

    books = relationship("Book", back_populates="author")

    def __repr__(self) -> str:
        return f"<Author(id={self.id}, name='{self.name}')>"

class Book(Base):
    """
    Representa un libro a la venta.

    Atributos:
        id (int): Identificador primario del libro.
        slug (str): Clave pública única derivada del título; estable una vez asignada.
        title (str): Título del libro.
        author_id (int): Referencia al autor.
        description (str): Descripción del libro.
        synopsis (str): Sinopsis.
        genre (str): Género literario.
        language (str): Idioma de la edición.
        publisher (str): Editorial.
        isbn (str): ISBN único del libro.
        page_count (int): Número de páginas.
        publication_year (int): Año de publicación.
        price (Decimal): Precio actual de venta, nunca negativo.
        stock (int): Unidades disponibles, nunca negativo.
        cover_image_url (str): URL de la imagen de portada.
        reviews_number (int): Número de reseñas, cacheado.
        reviews (List[Review]): Lista de reseñas asociadas al libro.
    """
    __tablename__ = "books"

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String(255), unique=True, index=True, nullable=False)
    title = Column(String(255), index=True, nullable=False)
    author_id = Column(Integer, ForeignKey("authors.id"), nullable=False, index=True)
    description = Column(Text, nullable=True)
    synopsis = Column(Text, nullable=True)
    genre = Column(String(100), index=True, nullable=True)
    language = Column(String(50), nullable=True)
    publisher = Column(String(255), nullable=True)
    isbn = Column(String(20), unique=True, index=True, nullable=True)
    page_count = Column(Integer, nullable=True)
    publication_year = Column(Integer, nullable=True)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    stock = Column(Integer, nullable=False, default=0)
    cover_image_url = Column(String(512), nullable=True)
    reviews_number = Column(Integer, nullable=False, default=0)

    author = relationship("Author", back_populates="books", lazy="joined")
    reviews = relationship(
        "Review",
        back_populates="book",
        cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint('stock >= 0', name='book_stock_check'),
        CheckConstraint('price >= 0', name='book_price_check'),
    )

    def __repr__(self) -> str:
        """
        Representación legible del objeto Book para depuración.

        Returns:
            str: Cadena representando el libro.
        """
        return f"<Book(id={self.id}, slug='{self.slug}', stock={self.stock})>"
