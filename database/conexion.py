from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker, declarative_base

import config

# Declarative base
Base = declarative_base()


class BaseDatos:
    """
    Handle de almacenamiento: engine + fábrica de sesiones.
    Se crea una sola vez al iniciar la app (lifespan) y se libera al apagarla.
    """

    def __init__(self, url: Optional[str] = None, echo: bool = config.SQL_ECHO):
        self.url = url or config.DATABASE_URL
        connect_args = {}
        if self.url.startswith("sqlite"):
            # Una sesión por request, posiblemente en distintos threads del pool de FastAPI
            connect_args = {"check_same_thread": False, "timeout": 30}
        self.engine = create_engine(self.url, pool_pre_ping=True, echo=echo, connect_args=connect_args)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def crear_tablas(self) -> None:
        import models  # noqa: F401  asegura que todos los modelos estén registrados
        Base.metadata.create_all(bind=self.engine)

    def sesion(self) -> Session:
        return self.SessionLocal()

    def cerrar(self) -> None:
        self.engine.dispose()


@contextmanager
def transaccion(db: Session) -> Iterator[Session]:
    """Commit si el bloque termina bien, rollback completo ante cualquier excepción."""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


# Función para obtener la sesión
def get_db(request: Request):
    db = request.app.state.bd.sesion()
    try:
        yield db
    finally:
        db.close()
