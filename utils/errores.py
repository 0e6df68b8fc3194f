"""
Errores de dominio del motor de reservas
Cada error lleva un código estable y el status HTTP con el que se responde
"""
from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from utils.logging_utils import log_event


class HotelError(Exception):
    codigo = "ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, mensaje: str):
        super().__init__(mensaje)
        self.mensaje = mensaje


class ValidacionError(HotelError):
    codigo = "VALIDATION_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST


class NoEncontradoError(HotelError):
    codigo = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND


class ConflictoError(HotelError):
    codigo = "CONFLICT"
    status_code = status.HTTP_409_CONFLICT


class HabitacionNoDisponibleError(ConflictoError):
    codigo = "ROOM_NOT_AVAILABLE"


class ConflictoFechasError(ConflictoError):
    codigo = "DATE_CONFLICT"


class NumeroDuplicadoError(ConflictoError):
    codigo = "DUPLICATE_ROOM_NUMBER"


class EstadoInvalidoError(HotelError):
    codigo = "STATE_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST


class AlmacenamientoError(HotelError):
    codigo = "STORAGE_ERROR"

    def __init__(self, mensaje: str = "Error interno de almacenamiento"):
        super().__init__(mensaje)


def _respuesta_error(codigo: str, mensaje: str, status_code: int, detalle=None) -> JSONResponse:
    contenido = {"success": False, "codigo": codigo, "error": mensaje}
    if detalle:
        contenido["detalle"] = detalle
    return JSONResponse(status_code=status_code, content=jsonable_encoder(contenido))


async def hotel_error_handler(request: Request, exc: HotelError) -> JSONResponse:
    return _respuesta_error(exc.codigo, exc.mensaje, exc.status_code)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    detalle = [
        f"{'.'.join(str(parte) for parte in error.get('loc', ()))}: {error.get('msg', '')}"
        for error in exc.errors()
    ]
    log_event("validacion", "anonimo", "Request invalido", f"path={request.url.path} errores={len(detalle)}")
    return _respuesta_error(
        ValidacionError.codigo,
        "Datos de la solicitud inválidos",
        ValidacionError.status_code,
        detalle=detalle,
    )


def setup_error_handlers(app) -> None:
    app.add_exception_handler(HotelError, hotel_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
