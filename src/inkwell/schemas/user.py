"""
Esquemas Pydantic para la entidad User en la API de Inkwell.
Define los modelos de entrada y salida para registro, login, perfil,
lista de deseos y restablecimiento de contraseña.
"""

import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, ConfigDict, Field

class UserCreate(BaseModel):
    """
    Esquema para la creación de un usuario.

    Atributos:
        first_name (str): Nombre.
        last_name (str): Apellido.
        email (EmailStr): Correo electrónico del usuario.
        password (str): Contraseña en texto plano (será hasheada antes de almacenar).
    """
    first_name: str = ""
    last_name: str = ""
    email: EmailStr
    password: str = Field(..., min_length=1)

class UserLogin(BaseModel):
    email: EmailStr
    password: str

class UserSchema(BaseModel):
    """
    Esquema de salida para un usuario (sin contraseña).

    Atributos:
        id (int): ID del usuario.
        email (EmailStr): Correo electrónico del usuario.
        is_active (bool): Estado de activación del usuario.
    """
    id: int
    email: EmailStr
    is_active: bool

    model_config = ConfigDict(from_attributes=True)

class TokenSchema(BaseModel):
    token: str

class ProfileSchema(BaseModel):
    """
    Resumen del perfil del usuario autenticado.

    Atributos:
        name (str): Nombre completo.
        email (str): Correo electrónico.
        created_at (datetime): Fecha de alta.
        wishlist_items (int): Libros en la lista de deseos.
        ordered_items (int): Unidades compradas en todos los pedidos.
    """
    name: str
    email: EmailStr
    created_at: datetime.datetime
    wishlist_items: int
    ordered_items: int

class ProfileUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[EmailStr] = None

class WishlistAdd(BaseModel):
    book_id: int

class ForgotPasswordRequest(BaseModel):
    email: EmailStr

class ResetPasswordRequest(BaseModel):
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)
