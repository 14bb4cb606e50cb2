"""
Utilidades de seguridad para Inkwell.

Este módulo proporciona funciones para el hasheo y verificación de contraseñas
utilizando bcrypt a través de passlib, y para emitir y verificar los tokens
firmados (JWT, HS256) que identifican al usuario en cada petición y en el
flujo de restablecimiento de contraseña.

Funciones:
    verify_password(plain_password: str, hashed_password: str) -> bool
    get_password_hash(password: str) -> str
    create_access_token(user_id: int) -> str
    decode_access_token(token: str) -> int
    create_password_reset_token(user_id: int) -> str
    decode_password_reset_token(token: str) -> int
"""

import datetime
import logging

import jwt
from passlib.context import CryptContext

from inkwell.core.config import settings, NO_JWT_SECRET
from inkwell.core.errors import ConfigurationError, UnauthorizedError, ValidationError

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ALGORITHM = "HS256"
ACCESS_PURPOSE = "access"
RESET_PURPOSE = "password_reset"

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verifica una contraseña en texto plano contra su versión hasheada.

    Args:
        plain_password (str): Contraseña en texto plano a verificar.
        hashed_password (str): Contraseña hasheada para comparar.

    Returns:
        bool: True si la contraseña coincide con el hash, False en caso contrario.
    """
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    """
    Genera un hash seguro para una contraseña dada.

    Args:
        password (str): Contraseña en texto plano a hashear.

    Returns:
        str: Contraseña hasheada.
    """
    return pwd_context.hash(password)

def _secret() -> str:
    if settings.JWT_SECRET == NO_JWT_SECRET:
        logger.error("JWT_SECRET no está configurado.")
        raise ConfigurationError("Server configuration error")
    return settings.JWT_SECRET

def _encode(user_id: int, purpose: str, minutes: int) -> str:
    now = datetime.datetime.now(datetime.timezone.utc)
    payload = {
        "sub": str(user_id),
        "purpose": purpose,
        "iat": now,
        "exp": now + datetime.timedelta(minutes=minutes),
    }
    return jwt.encode(payload, _secret(), algorithm=ALGORITHM)

def _decode(token: str, purpose: str) -> int:
    """Devuelve el id de usuario del token o lanza jwt.InvalidTokenError."""
    payload = jwt.decode(token, _secret(), algorithms=[ALGORITHM])
    if payload.get("purpose") != purpose:
        raise jwt.InvalidTokenError(f"Unexpected token purpose: {payload.get('purpose')}")
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError) as exc:
        raise jwt.InvalidTokenError("Token has no user id") from exc

def create_access_token(user_id: int) -> str:
    """
    Emite el token bearer de sesión para un usuario.

    Args:
        user_id (int): ID del usuario autenticado.

    Returns:
        str: Token firmado con caducidad ACCESS_TOKEN_EXPIRE_MINUTES.
    """
    return _encode(user_id, ACCESS_PURPOSE, settings.ACCESS_TOKEN_EXPIRE_MINUTES)

def decode_access_token(token: str) -> int:
    """
    Verifica un token bearer y devuelve el id del usuario.

    Raises:
        UnauthorizedError: Si el token es inválido, ha caducado o no es de sesión.
    """
    try:
        return _decode(token, ACCESS_PURPOSE)
    except jwt.InvalidTokenError as exc:
        logger.warning(f"Token de acceso rechazado: {exc}")
        raise UnauthorizedError("Invalid token") from exc

def create_password_reset_token(user_id: int) -> str:
    return _encode(user_id, RESET_PURPOSE, settings.RESET_TOKEN_EXPIRE_MINUTES)

def decode_password_reset_token(token: str) -> int:
    """
    Verifica un token de restablecimiento de contraseña.

    Raises:
        ValidationError: Si el token es inválido o ha caducado.
    """
    try:
        return _decode(token, RESET_PURPOSE)
    except jwt.InvalidTokenError as exc:
        logger.warning(f"Token de restablecimiento rechazado: {exc}")
        raise ValidationError("Invalid or expired reset token") from exc
