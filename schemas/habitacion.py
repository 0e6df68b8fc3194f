from typing import Optional
from datetime import datetime
from pydantic import BaseModel, PositiveInt, Field, condecimal, constr, model_validator, ConfigDict


class HabitacionBase(BaseModel):
    numero: constr(strip_whitespace=True, min_length=1, max_length=10) = Field(..., description="Número único de habitación")
    nombre: Optional[constr(strip_whitespace=True, max_length=100)] = None
    tipo: Optional[constr(strip_whitespace=True, max_length=50)] = None
    descripcion: Optional[str] = None
    capacidad: PositiveInt = Field(..., description="Cantidad máxima de huéspedes")
    precio: condecimal(gt=0, max_digits=10, decimal_places=2) = Field(..., description="Precio por noche")
    imagen: Optional[str] = Field(None, max_length=255)


class HabitacionCreate(HabitacionBase):
    estado: str = Field("disponible", min_length=1, max_length=20)


class HabitacionUpdate(BaseModel):
    numero: Optional[constr(strip_whitespace=True, min_length=1, max_length=10)] = None
    nombre: Optional[constr(strip_whitespace=True, max_length=100)] = None
    tipo: Optional[constr(strip_whitespace=True, max_length=50)] = None
    descripcion: Optional[str] = None
    capacidad: Optional[PositiveInt] = None
    precio: Optional[condecimal(gt=0, max_digits=10, decimal_places=2)] = None
    imagen: Optional[str] = Field(None, max_length=255)
    estado: Optional[str] = Field(None, min_length=1, max_length=20)

    @model_validator(mode="before")
    def validar_datos(cls, data):
        if isinstance(data, dict) and data:
            return data
        raise ValueError("Se requiere al menos un campo para actualizar")


class HabitacionEstadoUpdate(BaseModel):
    estado: str = Field(..., min_length=1, max_length=20)


class HabitacionRead(HabitacionBase):
    id: int
    estado: str
    creado_en: Optional[datetime] = None
    actualizado_en: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class HabitacionConReservasRead(HabitacionRead):
    reservas_activas: int = 0
