import sys
from decimal import Decimal
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from database.conexion import BaseDatos
from models.habitacion import Habitacion


HABITACIONES = [
    {"numero": "101", "nombre": "Doble Clásica", "tipo": "doble", "capacidad": 2, "precio": Decimal("100.00")},
    {"numero": "102", "nombre": "Doble Superior", "tipo": "doble", "capacidad": 2, "precio": Decimal("120.00")},
    {"numero": "201", "nombre": "Triple Jardín", "tipo": "triple", "capacidad": 3, "precio": Decimal("150.00")},
    {"numero": "301", "nombre": "Suite Viñedo", "tipo": "suite", "capacidad": 4, "precio": Decimal("220.00")},
]


# Simple upsert helper

def get_or_create(db, model, defaults=None, **kwargs):
    defaults = defaults or {}
    instance = db.query(model).filter_by(**kwargs).first()
    if instance:
        changed = False
        for k, v in defaults.items():
            if getattr(instance, k) != v:
                setattr(instance, k, v)
                changed = True
        if changed:
            db.add(instance)
        return instance, False
    params = {**kwargs, **defaults}
    instance = model(**params)
    db.add(instance)
    return instance, True


def ensure_sample_rooms(database_url=None):
    bd = BaseDatos(database_url)
    bd.crear_tablas()
    db = bd.sesion()
    try:
        creadas = 0
        for datos in HABITACIONES:
            numero = datos["numero"]
            defaults = {k: v for k, v in datos.items() if k != "numero"}
            _, creada = get_or_create(db, Habitacion, defaults=defaults, numero=numero)
            creadas += int(creada)
        db.commit()
        print(f"[OK] Habitaciones de ejemplo listas ({creadas} nuevas)")
    except Exception as e:
        db.rollback()
        print(f"[ERROR] seed: {e}")
        raise
    finally:
        db.close()
        bd.cerrar()


if __name__ == "__main__":
    ensure_sample_rooms(sys.argv[1] if len(sys.argv) > 1 else None)
