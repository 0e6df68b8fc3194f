"""
Catálogo de habitaciones
Alta/baja/modificación y acciones manuales del operador (estado, check-in, check-out).
El estado manual nunca se toca desde el flujo de reservas.
"""

from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy import and_, case, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from database.conexion import transaccion
from models.habitacion import Habitacion, EstadoHabitacionEnum
from models.reserva import Reserva, EstadoReservaEnum
from schemas.habitacion import HabitacionCreate, HabitacionUpdate
from utils.errores import (
    AlmacenamientoError,
    ConflictoError,
    EstadoInvalidoError,
    NoEncontradoError,
    NumeroDuplicadoError,
    ValidacionError,
)
from utils.logging_utils import log_error, log_event
from utils.timezone import get_hotel_today

ESTADOS_VALIDOS = tuple(e.value for e in EstadoHabitacionEnum)
ESTADOS_RESERVA_ACTIVOS = (EstadoReservaEnum.PENDIENTE.value, EstadoReservaEnum.CONFIRMADA.value)


def _orden_por_estado():
    return case(
        (Habitacion.estado == EstadoHabitacionEnum.DISPONIBLE.value, 1),
        (Habitacion.estado == EstadoHabitacionEnum.OCUPADA.value, 2),
        (Habitacion.estado == EstadoHabitacionEnum.MANTENIMIENTO.value, 3),
        else_=4,
    )


def _validar_estado(estado: str) -> str:
    if estado not in ESTADOS_VALIDOS:
        raise ValidacionError(f"Estado no válido. Use: {', '.join(ESTADOS_VALIDOS)}")
    return estado


class HabitacionService:

    @staticmethod
    def listar_habitaciones(db: Session) -> List[Habitacion]:
        return db.query(Habitacion).order_by(_orden_por_estado(), Habitacion.numero).all()

    @staticmethod
    def listar_habitaciones_con_reservas(db: Session, hoy: Optional[date] = None) -> List[Tuple[Habitacion, int]]:
        """Habitaciones con la cantidad de reservas confirmadas que todavía no salieron."""
        hoy = hoy or get_hotel_today()
        activas = func.count(
            case(
                (and_(
                    Reserva.estado == EstadoReservaEnum.CONFIRMADA.value,
                    Reserva.fecha_salida >= hoy,
                ), Reserva.id),
            )
        ).label("reservas_activas")
        try:
            filas = (
                db.query(Habitacion, activas)
                .outerjoin(Reserva, Reserva.habitacion_id == Habitacion.id)
                .group_by(Habitacion.id)
                .order_by(_orden_por_estado(), Habitacion.numero)
                .all()
            )
        except SQLAlchemyError as e:
            log_error("habitaciones", "Listar habitaciones con reservas", e)
            raise AlmacenamientoError()
        return [(habitacion, cantidad) for habitacion, cantidad in filas]

    @staticmethod
    def obtener_habitacion(db: Session, habitacion_id: int) -> Habitacion:
        habitacion = db.query(Habitacion).filter(Habitacion.id == habitacion_id).first()
        if not habitacion:
            raise NoEncontradoError("Habitación no encontrada")
        return habitacion

    @staticmethod
    def _verificar_numero_libre(db: Session, numero: str, excluir_id: int = None) -> None:
        query = db.query(Habitacion.id).filter(Habitacion.numero == numero)
        if excluir_id is not None:
            query = query.filter(Habitacion.id != excluir_id)
        if query.first():
            raise NumeroDuplicadoError(f"El número de habitación {numero} ya existe")

    @staticmethod
    def crear_habitacion(db: Session, datos: HabitacionCreate, usuario: str = "admin") -> Habitacion:
        _validar_estado(datos.estado)
        try:
            with transaccion(db):
                HabitacionService._verificar_numero_libre(db, datos.numero)
                habitacion = Habitacion(**datos.model_dump(exclude_none=True))
                db.add(habitacion)
                db.flush()
        except IntegrityError:
            # Alta concurrente con el mismo número
            raise NumeroDuplicadoError(f"El número de habitación {datos.numero} ya existe")
        except SQLAlchemyError as e:
            log_error("habitaciones", "Crear habitacion", e)
            raise AlmacenamientoError()
        db.refresh(habitacion)
        log_event("habitaciones", usuario, "Crear habitacion", f"id={habitacion.id} numero={habitacion.numero}")
        return habitacion

    @staticmethod
    def actualizar_habitacion(db: Session, habitacion_id: int, cambios: HabitacionUpdate, usuario: str = "admin") -> Habitacion:
        datos = cambios.model_dump(exclude_unset=True)
        if "estado" in datos:
            _validar_estado(datos["estado"])
        try:
            with transaccion(db):
                habitacion = HabitacionService.obtener_habitacion(db, habitacion_id)
                if "numero" in datos and datos["numero"] != habitacion.numero:
                    HabitacionService._verificar_numero_libre(db, datos["numero"], excluir_id=habitacion_id)
                for campo, valor in datos.items():
                    setattr(habitacion, campo, valor)
        except IntegrityError:
            raise NumeroDuplicadoError(f"El número de habitación {datos.get('numero')} ya existe")
        except SQLAlchemyError as e:
            log_error("habitaciones", "Actualizar habitacion", e)
            raise AlmacenamientoError()
        db.refresh(habitacion)
        log_event("habitaciones", usuario, "Actualizar habitacion", f"id={habitacion_id} campos={sorted(datos)}")
        return habitacion

    @staticmethod
    def _transicion_manual(db: Session, habitacion_id: int, requerido, nuevo: str, accion: str, usuario: str) -> Habitacion:
        try:
            with transaccion(db):
                habitacion = (
                    db.query(Habitacion)
                    .filter(Habitacion.id == habitacion_id)
                    .with_for_update()
                    .first()
                )
                if not habitacion:
                    raise NoEncontradoError("Habitación no encontrada")
                if requerido is not None and habitacion.estado != requerido:
                    raise EstadoInvalidoError(
                        f"No se puede hacer {accion}. La habitación está en estado: {habitacion.estado}"
                    )
                estado_anterior = habitacion.estado
                habitacion.estado = nuevo
        except SQLAlchemyError as e:
            log_error("habitaciones", accion, e)
            raise AlmacenamientoError()
        db.refresh(habitacion)
        log_event(
            "habitaciones",
            usuario,
            accion,
            f"numero={habitacion.numero} {estado_anterior}->{nuevo}",
        )
        return habitacion

    @staticmethod
    def cambiar_estado(db: Session, habitacion_id: int, estado: str, usuario: str = "admin") -> Habitacion:
        _validar_estado(estado)
        return HabitacionService._transicion_manual(db, habitacion_id, None, estado, "Cambiar estado", usuario)

    @staticmethod
    def checkin(db: Session, habitacion_id: int, usuario: str = "admin") -> Habitacion:
        return HabitacionService._transicion_manual(
            db,
            habitacion_id,
            EstadoHabitacionEnum.DISPONIBLE.value,
            EstadoHabitacionEnum.OCUPADA.value,
            "check-in",
            usuario,
        )

    @staticmethod
    def checkout(db: Session, habitacion_id: int, usuario: str = "admin") -> Habitacion:
        return HabitacionService._transicion_manual(
            db,
            habitacion_id,
            EstadoHabitacionEnum.OCUPADA.value,
            EstadoHabitacionEnum.DISPONIBLE.value,
            "check-out",
            usuario,
        )

    @staticmethod
    def eliminar_habitacion(db: Session, habitacion_id: int, usuario: str = "admin") -> None:
        try:
            with transaccion(db):
                habitacion = HabitacionService.obtener_habitacion(db, habitacion_id)
                activas = (
                    db.query(Reserva.id)
                    .filter(
                        Reserva.habitacion_id == habitacion_id,
                        Reserva.estado.in_(ESTADOS_RESERVA_ACTIVOS),
                    )
                    .first()
                )
                if activas:
                    raise ConflictoError("No se puede eliminar la habitación porque tiene reservas activas")
                numero = habitacion.numero
                db.delete(habitacion)
        except IntegrityError:
            # Quedan reservas históricas (canceladas/completadas) que la referencian
            raise ConflictoError("No se puede eliminar la habitación porque tiene reservas asociadas")
        except SQLAlchemyError as e:
            log_error("habitaciones", "Eliminar habitacion", e)
            raise AlmacenamientoError()
        log_event("habitaciones", usuario, "Eliminar habitacion", f"id={habitacion_id} numero={numero}")
