"""
Servicios de negocio del motor de reservas
"""

from .habitacion_service import HabitacionService
from .disponibilidad_service import DisponibilidadService
from .reserva_service import ReservaService
from .cancelacion_service import CancelacionService, ResultadoCancelacion
from .reembolso_service import ReembolsoService

__all__ = [
    "HabitacionService",
    "DisponibilidadService",
    "ReservaService",
    "CancelacionService",
    "ResultadoCancelacion",
    "ReembolsoService",
]
