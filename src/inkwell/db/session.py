"""
Motor, fábrica de sesiones y clase base ORM de Inkwell.

`get_db` es la dependencia de FastAPI que abre una sesión por petición;
`session_scope` es el equivalente para scripts, con commit/rollback incluidos.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from inkwell.core.config import settings

logger = logging.getLogger(__name__)


def _build_engine(url: str) -> Engine:
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True)

    sqlite_engine = create_engine(url, connect_args={"check_same_thread": False})

    @event.listens_for(sqlite_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        # SQLite no aplica las claves foráneas salvo que se active por conexión
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return sqlite_engine


engine = _build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db() -> Iterator[Session]:
    """Sesión por petición; se cierra siempre al terminar."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope() -> Iterator[Session]:
    """
    Sesión para scripts: hace commit al salir y rollback si hay una excepción,
    que se vuelve a lanzar.
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception as e:
        logger.exception(f"Rolling back session after error: {e}")
        db.rollback()
        raise
    finally:
        db.close()
