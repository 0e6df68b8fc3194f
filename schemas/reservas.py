from typing import Optional, List
from datetime import date, datetime
from pydantic import BaseModel, EmailStr, Field, constr, condecimal, ConfigDict


class BusquedaDisponibilidad(BaseModel):
    """Rango [entrada, salida) y ocupantes. El orden de fechas lo valida el servicio."""
    entrada: date
    salida: date
    adultos: int = 1
    ninos: int = 0


class DatosPersonales(BaseModel):
    nombre: constr(strip_whitespace=True, min_length=1, max_length=100)
    apellido: constr(strip_whitespace=True, min_length=1, max_length=100)
    email: EmailStr
    telefono: Optional[constr(strip_whitespace=True, max_length=30)] = None
    nacionalidad: Optional[constr(strip_whitespace=True, max_length=60)] = None


class ReservaCreate(BaseModel):
    habitacion_id: int = Field(..., gt=0)
    datos_personales: DatosPersonales
    datos_busqueda: BusquedaDisponibilidad
    pago_id: Optional[constr(strip_whitespace=True, max_length=100)] = None
    total: condecimal(ge=0, max_digits=12, decimal_places=2)
    # El pago llega verificado por la pasarela; "pendiente" queda para reservas manuales
    estado_pago: str = Field("completado", min_length=1, max_length=20)


class CancelacionRequest(BaseModel):
    motivo: Optional[constr(strip_whitespace=True, max_length=500)] = None


class FechaReservadaRead(BaseModel):
    fecha: date

    model_config = ConfigDict(from_attributes=True)


class ReservaRead(BaseModel):
    id: int
    habitacion_id: int
    cliente_nombre: str
    cliente_apellido: str
    cliente_email: str
    cliente_telefono: Optional[str] = None
    cliente_nacionalidad: Optional[str] = None
    fecha_entrada: date
    fecha_salida: date
    adultos: int
    ninos: int
    total: condecimal(max_digits=12, decimal_places=2)
    pago_id: Optional[str] = None
    estado_pago: str
    estado: str
    motivo_cancelacion: Optional[str] = None
    fecha_cancelacion: Optional[datetime] = None
    fecha_reserva: Optional[datetime] = None
    noches: int
    # Campos calculados para el frontend
    habitacion_numero: Optional[str] = None
    habitacion_nombre: Optional[str] = None
    fechas_reservadas: List[date] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class ReembolsoRead(BaseModel):
    id: int
    reserva_id: int
    monto_reembolsado: condecimal(max_digits=12, decimal_places=2)
    motivo: Optional[str] = None
    fecha_reembolso: datetime

    model_config = ConfigDict(from_attributes=True)
