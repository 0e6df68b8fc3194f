"""
Endpoints para consulta de disponibilidad de habitaciones
"""
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from database import conexion
from schemas.habitacion import HabitacionRead
from schemas.reservas import BusquedaDisponibilidad
from services.disponibilidad_service import ANIO_MAXIMO, ANIO_MINIMO, DisponibilidadService


router = APIRouter(prefix="/api/habitaciones", tags=["Disponibilidad"])


@router.post("/disponibles")
def buscar_habitaciones_disponibles(
    busqueda: BusquedaDisponibilidad,
    db: Session = Depends(conexion.get_db),
):
    """
    Habitaciones libres para [entrada, salida) con capacidad suficiente, ordenadas por precio
    """
    habitaciones = DisponibilidadService.buscar_habitaciones_disponibles(
        db,
        busqueda.entrada,
        busqueda.salida,
        busqueda.adultos,
        busqueda.ninos,
    )
    return {
        "success": True,
        "data": [HabitacionRead.model_validate(habitacion) for habitacion in habitaciones],
    }


@router.get("/disponibilidad/{habitacion_id}")
def obtener_calendario_disponibilidad(
    habitacion_id: int = Path(..., gt=0),
    mes: Optional[int] = Query(None, ge=1, le=12, description="Mes (1-12); por defecto el actual"),
    anio: Optional[int] = Query(None, alias="año", ge=ANIO_MINIMO, le=ANIO_MAXIMO, description="Año; por defecto el actual"),
    db: Session = Depends(conexion.get_db),
):
    """
    Calendario del mes: estado por día y reservas confirmadas que se cruzan con el mes
    """
    calendario = DisponibilidadService.calendario_mensual(db, habitacion_id, mes, anio)
    return {"success": True, "data": calendario}
