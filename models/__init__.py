"""
Archivo de inicialización del paquete models.
Expone todas las clases para que SQLAlchemy (Base.metadata) las detecte al importar 'models'.
"""

from .habitacion import Habitacion, EstadoHabitacionEnum
from .reserva import Reserva, FechaReservada, EstadoReservaEnum, EstadoPagoEnum
from .reembolso import Reembolso

__all__ = [
    "Habitacion", "EstadoHabitacionEnum",
    "Reserva", "FechaReservada", "EstadoReservaEnum", "EstadoPagoEnum",
    "Reembolso",
]
