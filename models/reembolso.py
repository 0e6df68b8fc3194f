"""
Libro de reembolsos (append-only)
Registro contable para conciliar con la pasarela de pagos; acá no se mueve dinero
"""

from sqlalchemy import Column, Integer, ForeignKey, DateTime, Numeric, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from database.conexion import Base
from datetime import datetime


class Reembolso(Base):
    __tablename__ = "reembolsos"
    __table_args__ = (
        UniqueConstraint('reserva_id', name='uq_reembolso_reserva'),
    )

    id = Column(Integer, primary_key=True, index=True)
    reserva_id = Column(Integer, ForeignKey("reservas.id"), nullable=False)
    monto_reembolsado = Column(Numeric(12, 2), nullable=False)
    motivo = Column(Text, nullable=True)
    fecha_reembolso = Column(DateTime, default=datetime.utcnow, nullable=False)

    reserva = relationship("Reserva", back_populates="reembolsos")

    def __repr__(self):
        return f"<Reembolso(reserva_id={self.reserva_id}, monto={self.monto_reembolsado})>"
