import os
import sys
from pathlib import Path

# Agregar directorio raíz al PYTHONPATH para imports
sys.path.insert(0, str(Path(__file__).parent.parent))
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from database.conexion import BaseDatos
from main import create_app
from models.habitacion import Habitacion
from schemas.reservas import ReservaCreate


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'hotel_test.db'}"


@pytest.fixture
def bd(database_url):
    base = BaseDatos(database_url)
    base.crear_tablas()
    yield base
    base.cerrar()


@pytest.fixture
def db(bd):
    sesion = bd.sesion()
    yield sesion
    sesion.close()


@pytest.fixture
def client(database_url, bd):
    with TestClient(create_app(database_url)) as test_client:
        yield test_client


@pytest.fixture
def crear_habitacion(db):
    def _crear(numero="101", capacidad=2, precio="100.00", estado="disponible", nombre=None):
        habitacion = Habitacion(
            numero=numero,
            nombre=nombre or f"Habitación {numero}",
            tipo="doble",
            capacidad=capacidad,
            precio=Decimal(precio),
            estado=estado,
        )
        db.add(habitacion)
        db.commit()
        db.refresh(habitacion)
        return habitacion
    return _crear


@pytest.fixture
def armar_solicitud():
    def _armar(
        habitacion_id: int,
        entrada: date,
        salida: date,
        adultos: int = 2,
        ninos: int = 0,
        total: str = "200.00",
        estado_pago: str = "completado",
        email: str = "ana.perez@correo.com",
    ) -> ReservaCreate:
        return ReservaCreate(
            habitacion_id=habitacion_id,
            datos_personales={
                "nombre": "Ana",
                "apellido": "Pérez",
                "email": email,
                "telefono": "1122334455",
                "nacionalidad": "Argentina",
            },
            datos_busqueda={
                "entrada": entrada,
                "salida": salida,
                "adultos": adultos,
                "ninos": ninos,
            },
            pago_id="pago_test_123",
            total=Decimal(total),
            estado_pago=estado_pago,
        )
    return _armar


@pytest.fixture
def payload_reserva():
    def _payload(habitacion_id: int, entrada: date, salida: date, adultos: int = 2, ninos: int = 0,
                 total: float = 200.0, email: str = "ana.perez@correo.com") -> dict:
        return {
            "habitacion_id": habitacion_id,
            "datos_personales": {
                "nombre": "Ana",
                "apellido": "Pérez",
                "email": email,
                "telefono": "1122334455",
                "nacionalidad": "Argentina",
            },
            "datos_busqueda": {
                "entrada": entrada.isoformat(),
                "salida": salida.isoformat(),
                "adultos": adultos,
                "ninos": ninos,
            },
            "pago_id": "pago_test_123",
            "total": total,
        }
    return _payload
