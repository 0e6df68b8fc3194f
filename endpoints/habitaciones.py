"""
Endpoints del catálogo de habitaciones y acciones manuales del operador
"""
from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from database import conexion
from schemas.habitacion import (
    HabitacionConReservasRead,
    HabitacionCreate,
    HabitacionEstadoUpdate,
    HabitacionRead,
    HabitacionUpdate,
)
from services.habitacion_service import HabitacionService


router = APIRouter(prefix="/api/habitaciones", tags=["Habitaciones"])
resumen_router = APIRouter(prefix="/api", tags=["Habitaciones"])


@router.get("")
def listar_habitaciones(db: Session = Depends(conexion.get_db)):
    habitaciones = HabitacionService.listar_habitaciones(db)
    return {"success": True, "data": [HabitacionRead.model_validate(h) for h in habitaciones]}


@router.post("", status_code=status.HTTP_201_CREATED)
def crear_habitacion(datos: HabitacionCreate, db: Session = Depends(conexion.get_db)):
    habitacion = HabitacionService.crear_habitacion(db, datos)
    return {
        "success": True,
        "message": "Habitación creada exitosamente",
        "habitacionId": habitacion.id,
        "data": HabitacionRead.model_validate(habitacion),
    }


@router.get("/{habitacion_id}")
def obtener_habitacion(
    habitacion_id: int = Path(..., gt=0),
    db: Session = Depends(conexion.get_db),
):
    habitacion = HabitacionService.obtener_habitacion(db, habitacion_id)
    return {"success": True, "data": HabitacionRead.model_validate(habitacion)}


@router.put("/{habitacion_id}")
def actualizar_habitacion(
    cambios: HabitacionUpdate,
    habitacion_id: int = Path(..., gt=0),
    db: Session = Depends(conexion.get_db),
):
    habitacion = HabitacionService.actualizar_habitacion(db, habitacion_id, cambios)
    return {
        "success": True,
        "message": "Habitación actualizada exitosamente",
        "data": HabitacionRead.model_validate(habitacion),
    }


@router.patch("/{habitacion_id}/estado")
def cambiar_estado_habitacion(
    cambio: HabitacionEstadoUpdate,
    habitacion_id: int = Path(..., gt=0),
    db: Session = Depends(conexion.get_db),
):
    habitacion = HabitacionService.cambiar_estado(db, habitacion_id, cambio.estado)
    return {
        "success": True,
        "message": f"Estado cambiado a {habitacion.estado}",
        "data": HabitacionRead.model_validate(habitacion),
    }


@router.patch("/{habitacion_id}/checkin")
def checkin_habitacion(
    habitacion_id: int = Path(..., gt=0),
    db: Session = Depends(conexion.get_db),
):
    habitacion = HabitacionService.checkin(db, habitacion_id)
    return {"success": True, "message": f"Check-in realizado para habitación {habitacion.numero}"}


@router.patch("/{habitacion_id}/checkout")
def checkout_habitacion(
    habitacion_id: int = Path(..., gt=0),
    db: Session = Depends(conexion.get_db),
):
    habitacion = HabitacionService.checkout(db, habitacion_id)
    return {"success": True, "message": f"Check-out realizado para habitación {habitacion.numero}"}


@router.delete("/{habitacion_id}")
def eliminar_habitacion(
    habitacion_id: int = Path(..., gt=0),
    db: Session = Depends(conexion.get_db),
):
    HabitacionService.eliminar_habitacion(db, habitacion_id)
    return {"success": True, "message": "Habitación eliminada exitosamente"}


@resumen_router.get("/habitaciones-con-reservas")
def listar_habitaciones_con_reservas(db: Session = Depends(conexion.get_db)):
    filas = HabitacionService.listar_habitaciones_con_reservas(db)
    return {
        "success": True,
        "data": [
            HabitacionConReservasRead.model_validate(habitacion).model_copy(update={"reservas_activas": cantidad})
            for habitacion, cantidad in filas
        ],
    }
