"""
Ciclo de vida de la reserva: cancelación
confirmada -> cancelada es la única transición controlada. En la misma
transacción se cambia el estado, se liberan las fechas reservadas y, si el
pago estaba completado, se registra el reembolso.
"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import MOTIVO_CANCELACION_ADMIN, MOTIVO_CANCELACION_DEFAULT
from database.conexion import transaccion
from models.reembolso import Reembolso
from models.reserva import Reserva, FechaReservada, EstadoReservaEnum, EstadoPagoEnum
from services.reembolso_service import ReembolsoService
from utils.errores import AlmacenamientoError, EstadoInvalidoError, NoEncontradoError
from utils.logging_utils import log_error, log_event
from utils.timezone import get_hotel_today


class ResultadoCancelacion:
    def __init__(self, reserva: Reserva, fechas_liberadas: int, reembolso: Optional[Reembolso]):
        self.reserva = reserva
        self.fechas_liberadas = fechas_liberadas
        self.reembolso = reembolso

    def reembolso_info(self) -> Optional[dict]:
        if not self.reembolso:
            return None
        return {
            "monto": float(self.reembolso.monto_reembolsado),
            "motivo": self.reembolso.motivo,
        }


class CancelacionService:

    @staticmethod
    def validar_cancelacion(reserva: Reserva, hoy: date, respetar_ventana: bool = True) -> None:
        if reserva.estado == EstadoReservaEnum.CANCELADA.value:
            raise EstadoInvalidoError("La reserva ya está cancelada")
        if reserva.estado != EstadoReservaEnum.CONFIRMADA.value:
            raise EstadoInvalidoError(
                f"Solo se pueden cancelar reservas confirmadas (está: {reserva.estado})"
            )
        if respetar_ventana and (reserva.fecha_entrada - hoy).days <= 0:
            raise EstadoInvalidoError(
                "No se puede cancelar una reserva el mismo día del check-in o después"
            )

    @staticmethod
    def _cancelar(
        db: Session,
        reserva_id: int,
        motivo: str,
        hoy: date,
        respetar_ventana: bool,
        usuario: str,
    ) -> ResultadoCancelacion:
        try:
            with transaccion(db):
                reserva = (
                    db.query(Reserva)
                    .filter(Reserva.id == reserva_id)
                    .with_for_update()
                    .first()
                )
                if not reserva:
                    raise NoEncontradoError("Reserva no encontrada")
                CancelacionService.validar_cancelacion(reserva, hoy, respetar_ventana)

                pago_completado = reserva.estado_pago == EstadoPagoEnum.COMPLETADO.value
                cambios = {
                    Reserva.estado: EstadoReservaEnum.CANCELADA.value,
                    Reserva.motivo_cancelacion: motivo,
                    Reserva.fecha_cancelacion: datetime.utcnow(),
                }
                if pago_completado:
                    cambios[Reserva.estado_pago] = EstadoPagoEnum.REEMBOLSADO.value

                # Update condicionado: solo una transacción pasa de confirmada a cancelada
                actualizadas = (
                    db.query(Reserva)
                    .filter(
                        Reserva.id == reserva_id,
                        Reserva.estado == EstadoReservaEnum.CONFIRMADA.value,
                    )
                    .update(cambios, synchronize_session=False)
                )
                if actualizadas != 1:
                    raise EstadoInvalidoError("La reserva ya está cancelada")

                liberadas = (
                    db.query(FechaReservada)
                    .filter(FechaReservada.reserva_id == reserva_id)
                    .delete(synchronize_session=False)
                )

                reembolso = None
                if pago_completado:
                    reembolso = ReembolsoService.registrar_reembolso(db, reserva, motivo)
        except SQLAlchemyError as e:
            log_error("reservas", "Cancelar reserva", e)
            raise AlmacenamientoError("Error al cancelar la reserva")

        db.refresh(reserva)
        log_event(
            "reservas",
            usuario,
            "Cancelar reserva",
            f"id={reserva_id} fechas_liberadas={liberadas} "
            f"reembolso={reembolso.monto_reembolsado if reembolso else 'no'} motivo={motivo}",
        )
        return ResultadoCancelacion(reserva, liberadas, reembolso)

    @staticmethod
    def cancelar_reserva(
        db: Session,
        reserva_id: int,
        motivo: Optional[str] = None,
        hoy: Optional[date] = None,
        usuario: str = "huesped",
    ) -> ResultadoCancelacion:
        """Cancelación del huésped: solo antes del día de entrada."""
        return CancelacionService._cancelar(
            db,
            reserva_id,
            motivo or MOTIVO_CANCELACION_DEFAULT,
            hoy or get_hotel_today(),
            respetar_ventana=True,
            usuario=usuario,
        )

    @staticmethod
    def cancelar_reserva_admin(
        db: Session,
        reserva_id: int,
        motivo: Optional[str] = None,
        usuario: str = "admin",
    ) -> ResultadoCancelacion:
        """Cancelación administrativa: sin ventana de fechas, mismas reglas de reembolso."""
        return CancelacionService._cancelar(
            db,
            reserva_id,
            motivo or MOTIVO_CANCELACION_ADMIN,
            get_hotel_today(),
            respetar_ventana=False,
            usuario=usuario,
        )
