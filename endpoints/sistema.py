"""
Endpoints de estado del sistema
"""
from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import conexion
from models.habitacion import Habitacion
from models.reembolso import Reembolso
from models.reserva import Reserva, FechaReservada
from utils.logging_utils import log_error


router = APIRouter(tags=["Sistema"])


@router.get("/")
def read_root():
    return {"message": "Servidor de reservas funcionando", "status": "online"}


@router.get("/api/status")
def obtener_status(db: Session = Depends(conexion.get_db)):
    try:
        db.execute(text("SELECT 1"))
        counts = {
            "habitaciones": db.query(Habitacion).count(),
            "reservas": db.query(Reserva).count(),
            "fechas_reservadas": db.query(FechaReservada).count(),
            "reembolsos": db.query(Reembolso).count(),
        }
    except SQLAlchemyError as e:
        log_error("sistema", "Status", e)
        return {
            "status": "online",
            "database": "error",
            "timestamp": datetime.utcnow().isoformat(),
        }
    return {
        "status": "online",
        "database": "conectada",
        "counts": counts,
        "timestamp": datetime.utcnow().isoformat(),
    }
