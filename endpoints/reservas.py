from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Request, status
from sqlalchemy.orm import Session

from database import conexion
from models.reserva import Reserva
from schemas.reservas import CancelacionRequest, ReembolsoRead, ReservaCreate, ReservaRead
from services.cancelacion_service import CancelacionService
from services.reembolso_service import ReembolsoService
from services.reserva_service import ReservaService, resumen_reserva
from utils.rate_limiter import limiter, limite_reservas


router = APIRouter(prefix="/api", tags=["Reservas"])


def _enriquecer_reserva(reserva: Reserva) -> ReservaRead:
    """Agrega alias y datos derivados usados por el frontend."""
    if reserva.habitacion:
        reserva.habitacion_numero = reserva.habitacion.numero
        reserva.habitacion_nombre = reserva.habitacion.nombre
    reserva.fechas_reservadas = [fila.fecha for fila in reserva.fechas]
    return ReservaRead.model_validate(reserva)


def _enriquecer_lista(reservas: List[Reserva]) -> List[ReservaRead]:
    return [_enriquecer_reserva(reserva) for reserva in reservas]


@router.post("/reservas/crear", status_code=status.HTTP_201_CREATED)
@limiter.limit(limite_reservas)
def crear_reserva(
    request: Request,
    solicitud: ReservaCreate,
    db: Session = Depends(conexion.get_db),
):
    reserva = ReservaService.crear_reserva(db, solicitud)
    return {
        "success": True,
        "reservaId": reserva.id,
        "reserva": resumen_reserva(reserva),
        "message": "Reserva creada exitosamente",
    }


@router.patch("/reservas/{reserva_id}/cancelar")
def cancelar_reserva(
    reserva_id: int = Path(..., gt=0),
    cancelacion: Optional[CancelacionRequest] = None,
    db: Session = Depends(conexion.get_db),
):
    resultado = CancelacionService.cancelar_reserva(db, reserva_id, cancelacion.motivo if cancelacion else None)
    return {
        "success": True,
        "message": "Reserva cancelada exitosamente",
        "reembolso": resultado.reembolso_info(),
    }


@router.patch("/reservas/{reserva_id}/cancelar-admin")
def cancelar_reserva_admin(
    reserva_id: int = Path(..., gt=0),
    cancelacion: Optional[CancelacionRequest] = None,
    db: Session = Depends(conexion.get_db),
):
    resultado = CancelacionService.cancelar_reserva_admin(db, reserva_id, cancelacion.motivo if cancelacion else None)
    return {
        "success": True,
        "message": "Reserva cancelada exitosamente",
        "reembolso": resultado.reembolso_info(),
    }


@router.get("/reservas")
def listar_reservas(db: Session = Depends(conexion.get_db)):
    return {"success": True, "data": _enriquecer_lista(ReservaService.listar_reservas(db))}


@router.get("/reservas/habitacion/{habitacion_id}")
def reservas_por_habitacion(
    habitacion_id: int = Path(..., gt=0),
    db: Session = Depends(conexion.get_db),
):
    reservas = ReservaService.reservas_por_habitacion(db, habitacion_id)
    return {"success": True, "data": _enriquecer_lista(reservas)}


@router.get("/reservas/{reserva_id}")
def obtener_reserva(
    reserva_id: int = Path(..., gt=0),
    db: Session = Depends(conexion.get_db),
):
    return {"success": True, "data": _enriquecer_reserva(ReservaService.obtener_reserva(db, reserva_id))}


@router.get("/reservas/{reserva_id}/reembolsos")
def reembolsos_de_reserva(
    reserva_id: int = Path(..., gt=0),
    db: Session = Depends(conexion.get_db),
):
    ReservaService.obtener_reserva(db, reserva_id)
    reembolsos = ReembolsoService.listar_reembolsos(db, reserva_id)
    return {"success": True, "data": [ReembolsoRead.model_validate(r) for r in reembolsos]}


@router.get("/reembolsos")
def listar_reembolsos(db: Session = Depends(conexion.get_db)):
    reembolsos = ReembolsoService.listar_reembolsos(db)
    return {"success": True, "data": [ReembolsoRead.model_validate(r) for r in reembolsos]}


@router.get("/usuarios/{email}/reservas")
def reservas_por_usuario(
    email: str = Path(..., min_length=3, max_length=150),
    db: Session = Depends(conexion.get_db),
):
    return {"success": True, "data": _enriquecer_lista(ReservaService.reservas_por_email(db, email))}
