from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config
from database.conexion import BaseDatos
from utils.errores import setup_error_handlers
from utils.logging_utils import log_event
from utils.rate_limiter import setup_rate_limiting


def create_app(database_url: Optional[str] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Un solo handle de base de datos por proceso: se crea al iniciar, se libera al apagar
        bd = BaseDatos(database_url)
        bd.crear_tablas()
        app.state.bd = bd
        log_event("sistema", "sistema", "Inicio", f"db={bd.engine.url.render_as_string(hide_password=True)}")
        try:
            yield
        finally:
            bd.cerrar()
            log_event("sistema", "sistema", "Apagado")

    app = FastAPI(title="Hotel Reservas API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    setup_rate_limiting(app)
    setup_error_handlers(app)

    from endpoints import disponibilidad, habitaciones, reservas, sistema
    app.include_router(sistema.router)
    app.include_router(disponibilidad.router)
    app.include_router(habitaciones.router)
    app.include_router(habitaciones.resumen_router)
    app.include_router(reservas.router)
    return app


app = create_app()
