"""
Tests de cancelación: ventana de fechas, liberación de noches y reembolso
"""
from datetime import date, timedelta
from decimal import Decimal

import pytest

from models.reembolso import Reembolso
from models.reserva import FechaReservada, Reserva
from services.cancelacion_service import CancelacionService
from services.reserva_service import ReservaService
from utils.errores import EstadoInvalidoError, NoEncontradoError
from utils.timezone import get_hotel_today


ENTRADA = date(2025, 6, 10)
SALIDA = date(2025, 6, 13)


@pytest.fixture
def reserva(db, crear_habitacion, armar_solicitud):
    habitacion = crear_habitacion("101")
    return ReservaService.crear_reserva(db, armar_solicitud(habitacion.id, ENTRADA, SALIDA, total="300.00"))


class TestCancelarReserva:

    def test_cancela_libera_fechas_y_reembolsa(self, db, reserva):
        resultado = CancelacionService.cancelar_reserva(db, reserva.id, hoy=date(2025, 6, 1))

        assert resultado.reserva.estado == "cancelada"
        assert resultado.reserva.estado_pago == "reembolsado"
        assert resultado.reserva.motivo_cancelacion == "Cancelación voluntaria"
        assert resultado.reserva.fecha_cancelacion is not None
        assert resultado.fechas_liberadas == 3
        assert db.query(FechaReservada).count() == 0
        assert resultado.reembolso_info() == {"monto": 300.0, "motivo": "Cancelación voluntaria"}

        reembolsos = db.query(Reembolso).all()
        assert len(reembolsos) == 1
        assert reembolsos[0].monto_reembolsado == Decimal("300.00")

    def test_motivo_propio(self, db, reserva):
        resultado = CancelacionService.cancelar_reserva(db, reserva.id, motivo="Cambio de planes", hoy=date(2025, 6, 1))
        assert resultado.reserva.motivo_cancelacion == "Cambio de planes"
        assert resultado.reembolso.motivo == "Cambio de planes"

    def test_dia_anterior_a_la_entrada_se_permite(self, db, reserva):
        resultado = CancelacionService.cancelar_reserva(db, reserva.id, hoy=ENTRADA - timedelta(days=1))
        assert resultado.reserva.estado == "cancelada"

    @pytest.mark.parametrize("hoy", [ENTRADA, ENTRADA + timedelta(days=1), SALIDA + timedelta(days=5)])
    def test_fuera_de_ventana(self, db, reserva, hoy):
        with pytest.raises(EstadoInvalidoError):
            CancelacionService.cancelar_reserva(db, reserva.id, hoy=hoy)

        db.expire_all()
        assert db.get(Reserva, reserva.id).estado == "confirmada"
        assert db.query(FechaReservada).count() == 3
        assert db.query(Reembolso).count() == 0

    def test_ya_cancelada(self, db, reserva):
        CancelacionService.cancelar_reserva(db, reserva.id, hoy=date(2025, 6, 1))
        with pytest.raises(EstadoInvalidoError):
            CancelacionService.cancelar_reserva(db, reserva.id, hoy=date(2025, 6, 1))
        assert db.query(Reembolso).count() == 1

    @pytest.mark.parametrize("estado", ["completada", "pendiente"])
    def test_solo_confirmadas(self, db, reserva, estado):
        reserva.estado = estado
        db.commit()
        with pytest.raises(EstadoInvalidoError):
            CancelacionService.cancelar_reserva(db, reserva.id, hoy=date(2025, 6, 1))

    def test_reserva_inexistente(self, db):
        with pytest.raises(NoEncontradoError):
            CancelacionService.cancelar_reserva(db, 999, hoy=date(2025, 6, 1))

    def test_pago_pendiente_sin_reembolso(self, db, crear_habitacion, armar_solicitud):
        habitacion = crear_habitacion("101")
        reserva = ReservaService.crear_reserva(
            db, armar_solicitud(habitacion.id, ENTRADA, SALIDA, estado_pago="pendiente")
        )

        resultado = CancelacionService.cancelar_reserva(db, reserva.id, hoy=date(2025, 6, 1))
        assert resultado.reembolso is None
        assert resultado.reembolso_info() is None
        assert resultado.reserva.estado_pago == "pendiente"
        assert db.query(Reembolso).count() == 0
        assert db.query(FechaReservada).count() == 0

    def test_fechas_liberadas_se_pueden_volver_a_reservar(self, db, reserva, armar_solicitud):
        CancelacionService.cancelar_reserva(db, reserva.id, hoy=date(2025, 6, 1))

        nueva = ReservaService.crear_reserva(
            db, armar_solicitud(reserva.habitacion_id, ENTRADA, SALIDA, email="otro@correo.com")
        )
        assert nueva.estado == "confirmada"
        assert db.query(FechaReservada).count() == 3


class TestCancelarReservaAdmin:

    def test_ignora_la_ventana(self, db, crear_habitacion, armar_solicitud):
        habitacion = crear_habitacion("101")
        hoy = get_hotel_today()
        reserva = ReservaService.crear_reserva(db, armar_solicitud(habitacion.id, hoy, hoy + timedelta(days=2)))

        resultado = CancelacionService.cancelar_reserva_admin(db, reserva.id)
        assert resultado.reserva.estado == "cancelada"
        assert resultado.reserva.motivo_cancelacion == "Cancelación administrativa"
        assert resultado.reembolso is not None
        assert db.query(FechaReservada).count() == 0

    def test_ya_cancelada(self, db, reserva):
        CancelacionService.cancelar_reserva_admin(db, reserva.id)
        with pytest.raises(EstadoInvalidoError):
            CancelacionService.cancelar_reserva_admin(db, reserva.id)


class TestEndpointsCancelacion:

    def _crear(self, client, payload_reserva, habitacion_id, dias_hasta_entrada):
        entrada = get_hotel_today() + timedelta(days=dias_hasta_entrada)
        response = client.post(
            "/api/reservas/crear",
            json=payload_reserva(habitacion_id, entrada, entrada + timedelta(days=2)),
        )
        assert response.status_code == 201
        return response.json()["reservaId"]

    def test_cancelar(self, client, db, crear_habitacion, payload_reserva):
        habitacion = crear_habitacion("101")
        reserva_id = self._crear(client, payload_reserva, habitacion.id, 10)

        response = client.patch(f"/api/reservas/{reserva_id}/cancelar", json={"motivo": "Viaje suspendido"})
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["reembolso"] == {"monto": 200.0, "motivo": "Viaje suspendido"}

        db.expire_all()
        assert db.get(Reserva, reserva_id).estado == "cancelada"
        assert db.query(FechaReservada).count() == 0

    def test_cancelar_sin_body(self, client, crear_habitacion, payload_reserva):
        habitacion = crear_habitacion("101")
        reserva_id = self._crear(client, payload_reserva, habitacion.id, 10)

        response = client.patch(f"/api/reservas/{reserva_id}/cancelar")
        assert response.status_code == 200
        assert response.json()["reembolso"]["motivo"] == "Cancelación voluntaria"

    def test_cancelar_el_dia_de_entrada(self, client, crear_habitacion, payload_reserva):
        habitacion = crear_habitacion("101")
        reserva_id = self._crear(client, payload_reserva, habitacion.id, 0)

        response = client.patch(f"/api/reservas/{reserva_id}/cancelar")
        assert response.status_code == 400
        assert response.json()["codigo"] == "STATE_ERROR"

        admin = client.patch(f"/api/reservas/{reserva_id}/cancelar-admin")
        assert admin.status_code == 200
        assert admin.json()["reembolso"]["motivo"] == "Cancelación administrativa"

    def test_cancelar_inexistente(self, client):
        response = client.patch("/api/reservas/999/cancelar")
        assert response.status_code == 404
        assert response.json()["codigo"] == "NOT_FOUND"

    def test_cancelar_dos_veces(self, client, crear_habitacion, payload_reserva):
        habitacion = crear_habitacion("101")
        reserva_id = self._crear(client, payload_reserva, habitacion.id, 10)

        assert client.patch(f"/api/reservas/{reserva_id}/cancelar").status_code == 200
        response = client.patch(f"/api/reservas/{reserva_id}/cancelar")
        assert response.status_code == 400
        assert response.json()["codigo"] == "STATE_ERROR"
