"""Dependencias compartidas por los routers de la API."""

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from inkwell.core.errors import UnauthorizedError
from inkwell.core.security import decode_access_token
from inkwell.db.session import get_db
from inkwell.models.user import User

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> int:
    """
    Devuelve el ID del usuario del token `Authorization: Bearer <token>`.

    Raises:
        UnauthorizedError: Si falta el token, no es válido o su usuario ya no existe.
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("No token provided")
    user_id = decode_access_token(credentials.credentials)
    if db.get(User, user_id) is None:
        logger.warning(f"Token presented for missing user {user_id}")
        raise UnauthorizedError("Invalid token")
    return user_id
