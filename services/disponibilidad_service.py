"""
Cálculo de disponibilidad (solo lectura)
- Búsqueda de habitaciones libres para un rango [entrada, salida)
- Calendario mensual de una habitación a partir de las fechas reservadas
"""

from datetime import date, timedelta
from typing import List, Optional

from dateutil.relativedelta import relativedelta
from sqlalchemy import and_, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.habitacion import Habitacion, EstadoHabitacionEnum
from models.reserva import Reserva, FechaReservada, EstadoReservaEnum
from utils.errores import AlmacenamientoError, NoEncontradoError, ValidacionError
from utils.logging_utils import log_error, log_event
from utils.timezone import get_hotel_today

ANIO_MINIMO = 1900
ANIO_MAXIMO = 2200


def validar_rango(entrada: Optional[date], salida: Optional[date]) -> int:
    """Devuelve la cantidad de noches; salida es exclusiva."""
    if not entrada or not salida:
        raise ValidacionError("Las fechas de entrada y salida son requeridas")
    if salida <= entrada:
        raise ValidacionError("La fecha de salida debe ser posterior a la de entrada")
    return (salida - entrada).days


def validar_ocupantes(adultos: Optional[int], ninos: Optional[int]) -> int:
    if adultos is None or adultos < 1:
        raise ValidacionError("Debe haber al menos un adulto")
    if ninos is not None and ninos < 0:
        raise ValidacionError("La cantidad de niños no puede ser negativa")
    return adultos + (ninos or 0)


def noches_del_rango(entrada: date, salida: date) -> List[date]:
    return [entrada + timedelta(days=i) for i in range((salida - entrada).days)]


def fechas_ocupadas_query(db: Session, entrada: date, salida: date):
    """FechaReservada de reservas confirmadas con fecha en [entrada, salida)."""
    return (
        db.query(FechaReservada)
        .join(Reserva, FechaReservada.reserva_id == Reserva.id)
        .filter(
            Reserva.estado == EstadoReservaEnum.CONFIRMADA.value,
            FechaReservada.fecha >= entrada,
            FechaReservada.fecha < salida,
        )
    )


class DisponibilidadService:

    @staticmethod
    def buscar_habitaciones_disponibles(
        db: Session,
        entrada: Optional[date],
        salida: Optional[date],
        adultos: Optional[int],
        ninos: Optional[int] = 0,
    ) -> List[Habitacion]:
        validar_rango(entrada, salida)
        capacidad = validar_ocupantes(adultos, ninos)
        try:
            ocupadas = (
                select(FechaReservada.habitacion_id)
                .join(Reserva, FechaReservada.reserva_id == Reserva.id)
                .where(
                    Reserva.estado == EstadoReservaEnum.CONFIRMADA.value,
                    FechaReservada.fecha >= entrada,
                    FechaReservada.fecha < salida,
                )
            )
            habitaciones = (
                db.query(Habitacion)
                .filter(
                    Habitacion.estado == EstadoHabitacionEnum.DISPONIBLE.value,
                    Habitacion.capacidad >= capacidad,
                    ~Habitacion.id.in_(ocupadas),
                )
                .order_by(Habitacion.precio.asc(), Habitacion.numero.asc())
                .all()
            )
        except SQLAlchemyError as e:
            log_error("disponibilidad", "Buscar habitaciones disponibles", e)
            raise AlmacenamientoError()

        log_event(
            "disponibilidad",
            "anonimo",
            "Buscar habitaciones disponibles",
            f"entrada={entrada} salida={salida} capacidad={capacidad} disponibles={len(habitaciones)}",
        )
        return habitaciones

    @staticmethod
    def calendario_mensual(
        db: Session,
        habitacion_id: int,
        mes: Optional[int] = None,
        anio: Optional[int] = None,
    ) -> dict:
        if mes is not None and not 1 <= mes <= 12:
            raise ValidacionError("El mes debe estar entre 1 y 12")
        if anio is not None and not ANIO_MINIMO <= anio <= ANIO_MAXIMO:
            raise ValidacionError(f"El año debe estar entre {ANIO_MINIMO} y {ANIO_MAXIMO}")
        if mes is None or anio is None:
            hoy = get_hotel_today()
            mes = mes or hoy.month
            anio = anio or hoy.year

        primer_dia = date(anio, mes, 1)
        ultimo_dia = primer_dia + relativedelta(months=1) - timedelta(days=1)

        try:
            habitacion = db.query(Habitacion).filter(Habitacion.id == habitacion_id).first()
            if not habitacion:
                raise NoEncontradoError("Habitación no encontrada")

            reservadas = {
                fila.fecha
                for fila in fechas_ocupadas_query(db, primer_dia, ultimo_dia + timedelta(days=1))
                .filter(FechaReservada.habitacion_id == habitacion_id)
                .with_entities(FechaReservada.fecha)
                .all()
            }

            reservas = (
                db.query(Reserva)
                .filter(
                    Reserva.habitacion_id == habitacion_id,
                    Reserva.estado == EstadoReservaEnum.CONFIRMADA.value,
                    or_(
                        Reserva.fecha_entrada.between(primer_dia, ultimo_dia),
                        Reserva.fecha_salida.between(primer_dia, ultimo_dia),
                        and_(Reserva.fecha_entrada <= primer_dia, Reserva.fecha_salida >= ultimo_dia),
                    ),
                )
                .order_by(Reserva.fecha_entrada.asc())
                .all()
            )
        except SQLAlchemyError as e:
            log_error("disponibilidad", "Calendario mensual", e)
            raise AlmacenamientoError()

        dias = []
        for dia in noches_del_rango(primer_dia, ultimo_dia + timedelta(days=1)):
            dias.append({
                "fecha": dia.isoformat(),
                "dia": dia.day,
                # 0 = domingo
                "diaSemana": (dia.weekday() + 1) % 7,
                "estado": "reservada" if dia in reservadas else "disponible",
            })

        log_event(
            "disponibilidad",
            "anonimo",
            "Calendario mensual",
            f"habitacion_id={habitacion_id} mes={mes} anio={anio} reservadas={len(reservadas)}",
        )
        return {
            "mes": mes,
            "año": anio,
            "dias": dias,
            "reservas": [
                {
                    "id": reserva.id,
                    "cliente_nombre": reserva.cliente_nombre,
                    "cliente_apellido": reserva.cliente_apellido,
                    "fecha_entrada": reserva.fecha_entrada.isoformat(),
                    "fecha_salida": reserva.fecha_salida.isoformat(),
                    "estado": reserva.estado,
                }
                for reserva in reservas
            ],
            "totalReservas": len(reservas),
        }
