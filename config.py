"""
Configuración del backend de reservas
Variables de entorno (cargadas desde .env) expuestas como constantes de módulo
"""
import os

from dotenv import load_dotenv

load_dotenv()


def _bool_env(nombre: str, default: str = "false") -> bool:
    return os.getenv(nombre, default).strip().lower() in ("1", "true", "yes", "si")


def _database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    # Conexión clásica por partes (PostgreSQL via psycopg2)
    if os.getenv("DB_HOST"):
        return (
            f"postgresql://{os.getenv('DB_USER')}:{os.getenv('DB_PASSWORD')}"
            f"@{os.getenv('DB_HOST')}:{os.getenv('DB_PORT', '5432')}/{os.getenv('DB_NAME', 'hotel_vinedo')}"
        )
    return "sqlite:///./hotel_reservas.db"


# Base de datos
DATABASE_URL = _database_url()
SQL_ECHO = _bool_env("SQL_ECHO")

# Zona horaria del hotel (define "hoy" para la ventana de cancelación)
HOTEL_TIMEZONE = os.getenv("HOTEL_TIMEZONE", "America/Argentina/Buenos_Aires")

# Logging
LOG_FILE = os.getenv("LOG_FILE", "hotel_logs.txt")

# CORS
CORS_ORIGINS = [
    origen.strip()
    for origen in os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000,http://localhost:3001",
    ).split(",")
    if origen.strip()
]

# Rate limiting
RATE_LIMIT_ENABLED = _bool_env("RATE_LIMIT_ENABLED", "true")
RATE_LIMIT_DEFAULT = os.getenv("RATE_LIMIT_DEFAULT", "100/minute")
RATE_LIMIT_RESERVAS = os.getenv("RATE_LIMIT_RESERVAS", "20/minute")

# Reservas
NACIONALIDAD_DEFAULT = "No especificada"
MOTIVO_CANCELACION_DEFAULT = "Cancelación voluntaria"
MOTIVO_CANCELACION_ADMIN = "Cancelación administrativa"
