"""
Modelo de Habitación
El estado es un flag manual del operador, independiente del calendario de fechas reservadas
"""

from sqlalchemy import Column, Integer, String, DateTime, Numeric, Text, Index
from sqlalchemy.orm import relationship
from database.conexion import Base
from datetime import datetime
from enum import Enum


class EstadoHabitacionEnum(str, Enum):
    """Estados manuales de habitación"""
    DISPONIBLE = "disponible"
    OCUPADA = "ocupada"
    MANTENIMIENTO = "mantenimiento"


class Habitacion(Base):
    __tablename__ = "habitaciones"
    __table_args__ = (
        Index('idx_habitacion_estado', 'estado'),
        Index('idx_habitacion_precio', 'precio'),
    )

    id = Column(Integer, primary_key=True, index=True)
    numero = Column(String(10), nullable=False, unique=True, index=True)
    nombre = Column(String(100), nullable=True)
    tipo = Column(String(50), nullable=True)
    descripcion = Column(Text, nullable=True)
    capacidad = Column(Integer, nullable=False, default=2)
    precio = Column(Numeric(10, 2), nullable=False)
    imagen = Column(String(255), nullable=True, default="doble1.jpg")
    estado = Column(String(20), nullable=False, default=EstadoHabitacionEnum.DISPONIBLE.value)

    # Auditoría
    creado_en = Column(DateTime, default=datetime.utcnow)
    actualizado_en = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relaciones
    reservas = relationship("Reserva", back_populates="habitacion")
    fechas_reservadas = relationship("FechaReservada", back_populates="habitacion")

    def __repr__(self):
        return f"<Habitacion(id={self.id}, numero='{self.numero}', estado='{self.estado}')>"
