"""
Modelos de Reserva
Incluye: estados tipados, datos del huésped, pago verificado externamente y
el índice de fechas reservadas (una fila por noche) que detecta conflictos
"""

from sqlalchemy import (
    Column, Integer, String, ForeignKey, Date, DateTime, Numeric, Text,
    Index, UniqueConstraint
)
from sqlalchemy.orm import relationship
from database.conexion import Base
from datetime import datetime
from enum import Enum


# ========================================================================
# ENUMS
# ========================================================================

class EstadoReservaEnum(str, Enum):
    """Ciclo de vida de la reserva"""
    PENDIENTE = "pendiente"
    CONFIRMADA = "confirmada"
    CANCELADA = "cancelada"
    COMPLETADA = "completada"


class EstadoPagoEnum(str, Enum):
    PENDIENTE = "pendiente"
    COMPLETADO = "completado"
    REEMBOLSADO = "reembolsado"


# ----------- RESERVA -----------
class Reserva(Base):
    __tablename__ = "reservas"
    __table_args__ = (
        Index('idx_reserva_habitacion', 'habitacion_id'),
        Index('idx_reserva_estado', 'estado'),
        Index('idx_reserva_email', 'cliente_email'),
        Index('idx_reserva_fechas', 'fecha_entrada', 'fecha_salida'),
    )

    id = Column(Integer, primary_key=True, index=True)
    habitacion_id = Column(Integer, ForeignKey("habitaciones.id"), nullable=False)

    # Huésped (pass-through, no se gestiona como cliente acá)
    cliente_nombre = Column(String(100), nullable=False)
    cliente_apellido = Column(String(100), nullable=False)
    cliente_email = Column(String(150), nullable=False)
    cliente_telefono = Column(String(30), nullable=True)
    cliente_nacionalidad = Column(String(60), nullable=True, default="No especificada")

    # Fechas: salida es exclusiva (noches en [entrada, salida))
    fecha_entrada = Column(Date, nullable=False)
    fecha_salida = Column(Date, nullable=False)

    # Ocupantes
    adultos = Column(Integer, nullable=False, default=1)
    ninos = Column(Integer, nullable=False, default=0)

    # Pago (ya validado por la pasarela)
    total = Column(Numeric(12, 2), nullable=False, default=0)
    pago_id = Column(String(100), nullable=True)
    estado_pago = Column(String(20), nullable=False, default=EstadoPagoEnum.PENDIENTE.value)

    estado = Column(String(20), nullable=False, default=EstadoReservaEnum.CONFIRMADA.value)
    motivo_cancelacion = Column(Text, nullable=True)
    fecha_cancelacion = Column(DateTime, nullable=True)

    # Auditoría
    fecha_reserva = Column(DateTime, default=datetime.utcnow)

    # Relaciones
    habitacion = relationship("Habitacion", back_populates="reservas")
    fechas = relationship(
        "FechaReservada",
        back_populates="reserva",
        cascade="all, delete-orphan",
        order_by="FechaReservada.fecha",
    )
    reembolsos = relationship("Reembolso", back_populates="reserva")

    @property
    def noches(self) -> int:
        return (self.fecha_salida - self.fecha_entrada).days

    @property
    def cliente_nombre_completo(self) -> str:
        return f"{self.cliente_nombre} {self.cliente_apellido}"

    def __repr__(self):
        return f"<Reserva(id={self.id}, habitacion_id={self.habitacion_id}, estado='{self.estado}')>"


UQ_FECHA_RESERVADA = "uq_fecha_reservada_habitacion"


# ----------- FECHA RESERVADA (una fila por noche) -----------
class FechaReservada(Base):
    __tablename__ = "fechas_reservadas"
    __table_args__ = (
        # Dos reservas vivas nunca comparten noche en la misma habitación
        UniqueConstraint('habitacion_id', 'fecha', name=UQ_FECHA_RESERVADA),
        Index('idx_fecha_resv_reserva', 'reserva_id'),
    )

    id = Column(Integer, primary_key=True, index=True)
    habitacion_id = Column(Integer, ForeignKey("habitaciones.id"), nullable=False)
    reserva_id = Column(Integer, ForeignKey("reservas.id", ondelete="CASCADE"), nullable=False)
    fecha = Column(Date, nullable=False)

    # Relaciones
    reserva = relationship("Reserva", back_populates="fechas")
    habitacion = relationship("Habitacion", back_populates="fechas_reservadas")

    def __repr__(self):
        return f"<FechaReservada(habitacion_id={self.habitacion_id}, fecha={self.fecha})>"
