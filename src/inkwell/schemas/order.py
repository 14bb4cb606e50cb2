"""
Esquemas Pydantic para los pedidos de Inkwell.
"""

import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, ConfigDict

from .common import Money


class OrderItemIn(BaseModel):
    """
    Línea de pedido propuesta por el cliente.

    Atributos:
        book_slug (str): Slug del libro.
        quantity (int): Unidades, al menos 1.
        price (float): Precio que el cliente vio; debe coincidir con el del catálogo.
    """
    book_slug: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)
    price: float = Field(..., ge=0)


class OrderCreate(BaseModel):
    items: List[OrderItemIn] = Field(..., min_length=1)


class OrderItemSchema(BaseModel):
    """
    Línea de un pedido confirmado. `price` es el precio de compra; título,
    portada y autor reflejan el catálogo actual y son None si el libro ya no existe.
    """
    book_slug: str
    quantity: int
    price: Money
    title: Optional[str] = None
    cover_image_url: Optional[str] = None
    author: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class OrderSchema(BaseModel):
    order_id: str
    items: List[OrderItemSchema]
    total: Money
    created_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)


class OrderPage(BaseModel):
    orders: List[OrderSchema]
    total: int
    page: int
    total_pages: int
