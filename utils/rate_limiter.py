"""
Rate Limiting
Protección contra abuso de los endpoints públicos de reserva
"""
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
import os

import config

# Configurar limiter
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[config.RATE_LIMIT_DEFAULT],
    storage_uri=os.getenv("REDIS_URL", "memory://"),  # Usar Redis en producción
    strategy="fixed-window",
    enabled=config.RATE_LIMIT_ENABLED,
)


def limite_reservas() -> str:
    return config.RATE_LIMIT_RESERVAS


def setup_rate_limiting(app):
    """Configurar rate limiting en la aplicación FastAPI"""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    return limiter
