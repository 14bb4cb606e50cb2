"""
Esquemas Pydantic para el carrito de Inkwell.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from .common import Money

PLACEHOLDER_TITLE = "Unknown Title"
PLACEHOLDER_AUTHOR = "Unknown Author"
PLACEHOLDER_IMAGE = "/placeholder.svg"


class CartItemIn(BaseModel):
    """
    Línea de carrito enviada por el cliente.

    Atributos:
        slug (str): Slug del libro; carritos antiguos pueden traer el ID interno.
        quantity (int): Cantidad; cero o negativa elimina la línea.
    """
    slug: str = Field(..., min_length=1)
    quantity: int


class CartUpdate(BaseModel):
    items: List[CartItemIn]


class CartAdd(BaseModel):
    slug: str = Field(..., min_length=1)


class CartQuantityUpdate(BaseModel):
    quantity: int


class CartLine(BaseModel):
    """
    Línea de carrito lista para mostrar, con precio y autor actuales.
    Las claves que el catálogo no resuelve llevan valores de reemplazo y precio 0.
    """
    slug: str
    title: str
    price: Money
    cover_image_url: Optional[str] = None
    author: str
    quantity: int


class CartSchema(BaseModel):
    items: List[CartLine]
