"""
Libro de reembolsos
Se escribe una sola vez por cancelación con pago completado, dentro de la
misma transacción que la cancelación. No hay update ni delete.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from models.reembolso import Reembolso
from models.reserva import Reserva


class ReembolsoService:

    @staticmethod
    def registrar_reembolso(db: Session, reserva: Reserva, motivo: str) -> Reembolso:
        """Agrega el asiento a la transacción abierta por quien llama; no hace commit."""
        reembolso = Reembolso(
            reserva_id=reserva.id,
            monto_reembolsado=reserva.total,
            motivo=motivo,
            fecha_reembolso=datetime.utcnow(),
        )
        db.add(reembolso)
        db.flush()
        return reembolso

    @staticmethod
    def listar_reembolsos(db: Session, reserva_id: Optional[int] = None) -> List[Reembolso]:
        query = db.query(Reembolso)
        if reserva_id is not None:
            query = query.filter(Reembolso.reserva_id == reserva_id)
        return query.order_by(Reembolso.fecha_reembolso.desc(), Reembolso.id.desc()).all()
