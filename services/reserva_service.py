"""
Alta de reservas
Verificar y escribir en una sola transacción: la habitación se bloquea
(SELECT ... FOR UPDATE), se revalida estado, capacidad y fechas, y se insertan
la reserva y una FechaReservada por noche. Si algo falla no queda nada escrito.
"""

from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from config import NACIONALIDAD_DEFAULT
from database.conexion import transaccion
from models.habitacion import Habitacion, EstadoHabitacionEnum
from models.reserva import Reserva, FechaReservada, EstadoReservaEnum, EstadoPagoEnum, UQ_FECHA_RESERVADA
from schemas.reservas import ReservaCreate
from services.disponibilidad_service import (
    fechas_ocupadas_query,
    noches_del_rango,
    validar_ocupantes,
    validar_rango,
)
from utils.errores import (
    AlmacenamientoError,
    ConflictoFechasError,
    HabitacionNoDisponibleError,
    NoEncontradoError,
    ValidacionError,
)
from utils.logging_utils import log_error, log_event

ESTADOS_PAGO_VALIDOS = tuple(e.value for e in EstadoPagoEnum if e != EstadoPagoEnum.REEMBOLSADO)
ESTADOS_VISIBLES_HABITACION = (EstadoReservaEnum.CONFIRMADA.value, EstadoReservaEnum.COMPLETADA.value)
# Texto con el que SQLite reporta la violación de la restricción única (no incluye el nombre)
_COLUMNAS_UQ_FECHA_RESERVADA = "fechas_reservadas.habitacion_id, fechas_reservadas.fecha"


def es_conflicto_de_fechas(error: IntegrityError) -> bool:
    """True si la violación es la de (habitacion_id, fecha) y no otra restricción."""
    diag = getattr(error.orig, "diag", None)
    constraint = getattr(diag, "constraint_name", None)
    if constraint:
        return constraint == UQ_FECHA_RESERVADA
    mensaje = str(error.orig)
    return UQ_FECHA_RESERVADA in mensaje or _COLUMNAS_UQ_FECHA_RESERVADA in mensaje


def resumen_reserva(reserva: Reserva) -> dict:
    habitacion = reserva.habitacion
    return {
        "id": reserva.id,
        "habitacion": habitacion.nombre if habitacion else None,
        "numero": habitacion.numero if habitacion else None,
        "cliente": reserva.cliente_nombre_completo,
        "email": reserva.cliente_email,
        "entrada": reserva.fecha_entrada.isoformat(),
        "salida": reserva.fecha_salida.isoformat(),
        "noches": reserva.noches,
        "adultos": reserva.adultos,
        "ninos": reserva.ninos,
        "total": float(reserva.total),
        "pagoId": reserva.pago_id,
        "estado": reserva.estado,
        "estadoPago": reserva.estado_pago,
    }


class ReservaService:

    @staticmethod
    def crear_reserva(db: Session, solicitud: ReservaCreate, usuario: str = "web") -> Reserva:
        busqueda = solicitud.datos_busqueda
        personales = solicitud.datos_personales
        validar_rango(busqueda.entrada, busqueda.salida)
        capacidad = validar_ocupantes(busqueda.adultos, busqueda.ninos)
        if solicitud.estado_pago not in ESTADOS_PAGO_VALIDOS:
            raise ValidacionError(f"Estado de pago inválido. Use: {', '.join(ESTADOS_PAGO_VALIDOS)}")

        try:
            with transaccion(db):
                # 1. Habitación bloqueada mientras dura la transacción
                habitacion = (
                    db.query(Habitacion)
                    .filter(Habitacion.id == solicitud.habitacion_id)
                    .with_for_update()
                    .first()
                )
                if not habitacion:
                    raise NoEncontradoError("Habitación no encontrada")
                if habitacion.estado != EstadoHabitacionEnum.DISPONIBLE.value:
                    raise HabitacionNoDisponibleError("Habitación no disponible")
                if habitacion.capacidad < capacidad:
                    raise HabitacionNoDisponibleError(
                        f"La habitación {habitacion.numero} admite hasta {habitacion.capacidad} huéspedes"
                    )

                # 2. Ninguna noche del rango tomada por una reserva confirmada
                conflicto = (
                    fechas_ocupadas_query(db, busqueda.entrada, busqueda.salida)
                    .filter(FechaReservada.habitacion_id == habitacion.id)
                    .first()
                )
                if conflicto:
                    raise ConflictoFechasError(
                        f"La habitación ya está reservada en esas fechas (reserva #{conflicto.reserva_id})"
                    )

                # Noches que conserva una reserva que ya no está confirmada (completada por fuera del motor)
                liberadas = (
                    db.query(FechaReservada)
                    .filter(
                        FechaReservada.habitacion_id == habitacion.id,
                        FechaReservada.fecha >= busqueda.entrada,
                        FechaReservada.fecha < busqueda.salida,
                        FechaReservada.reserva_id.in_(
                            select(Reserva.id).where(Reserva.estado != EstadoReservaEnum.CONFIRMADA.value)
                        ),
                    )
                    .delete(synchronize_session=False)
                )

                # 3. Reserva confirmada con el pago ya verificado
                reserva = Reserva(
                    habitacion_id=habitacion.id,
                    cliente_nombre=personales.nombre,
                    cliente_apellido=personales.apellido,
                    cliente_email=personales.email,
                    cliente_telefono=personales.telefono,
                    cliente_nacionalidad=personales.nacionalidad or NACIONALIDAD_DEFAULT,
                    fecha_entrada=busqueda.entrada,
                    fecha_salida=busqueda.salida,
                    adultos=busqueda.adultos,
                    ninos=busqueda.ninos or 0,
                    total=solicitud.total,
                    pago_id=solicitud.pago_id,
                    estado_pago=solicitud.estado_pago,
                    estado=EstadoReservaEnum.CONFIRMADA.value,
                )
                db.add(reserva)
                db.flush()

                # 4. Una fila por noche en [entrada, salida)
                db.add_all([
                    FechaReservada(habitacion_id=habitacion.id, reserva_id=reserva.id, fecha=noche)
                    for noche in noches_del_rango(busqueda.entrada, busqueda.salida)
                ])
                db.flush()
        except IntegrityError as e:
            if not es_conflicto_de_fechas(e):
                log_error("reservas", "Crear reserva (integridad)", e)
                raise AlmacenamientoError("Error al crear la reserva")
            # Otra transacción confirmó primero alguna de estas noches
            log_event(
                "reservas",
                usuario,
                "Conflicto concurrente al crear reserva",
                f"habitacion_id={solicitud.habitacion_id} entrada={busqueda.entrada} salida={busqueda.salida}",
            )
            raise ConflictoFechasError("La habitación ya está reservada en esas fechas")
        except SQLAlchemyError as e:
            log_error("reservas", "Crear reserva", e)
            raise AlmacenamientoError("Error al crear la reserva")

        db.refresh(reserva)
        log_event(
            "reservas",
            usuario,
            "Crear reserva",
            f"id={reserva.id} habitacion={reserva.habitacion.numero} "
            f"entrada={reserva.fecha_entrada} salida={reserva.fecha_salida} email={reserva.cliente_email} "
            f"noches_liberadas={liberadas}",
        )
        return reserva

    @staticmethod
    def obtener_reserva(db: Session, reserva_id: int) -> Reserva:
        reserva = (
            db.query(Reserva)
            .options(joinedload(Reserva.habitacion), selectinload(Reserva.fechas))
            .filter(Reserva.id == reserva_id)
            .first()
        )
        if not reserva:
            raise NoEncontradoError("Reserva no encontrada")
        return reserva

    @staticmethod
    def listar_reservas(db: Session) -> List[Reserva]:
        return (
            db.query(Reserva)
            .options(joinedload(Reserva.habitacion), selectinload(Reserva.fechas))
            .order_by(Reserva.fecha_reserva.desc(), Reserva.id.desc())
            .all()
        )

    @staticmethod
    def reservas_por_habitacion(db: Session, habitacion_id: int) -> List[Reserva]:
        if not db.query(Habitacion.id).filter(Habitacion.id == habitacion_id).first():
            raise NoEncontradoError("Habitación no encontrada")
        return (
            db.query(Reserva)
            .options(joinedload(Reserva.habitacion), selectinload(Reserva.fechas))
            .filter(
                Reserva.habitacion_id == habitacion_id,
                Reserva.estado.in_(ESTADOS_VISIBLES_HABITACION),
            )
            .order_by(Reserva.fecha_entrada.asc())
            .all()
        )

    @staticmethod
    def reservas_por_email(db: Session, email: str) -> List[Reserva]:
        return (
            db.query(Reserva)
            .options(joinedload(Reserva.habitacion), selectinload(Reserva.fechas))
            .filter(Reserva.cliente_email == email)
            .order_by(Reserva.fecha_reserva.desc(), Reserva.id.desc())
            .all()
        )
