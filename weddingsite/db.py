# weddingsite/db.py
# =================================================================================
# 🗄️ CONFIGURACIÓN Y CONEXIÓN A LA BASE DE DATOS
# ---------------------------------------------------------------------------------
# Centraliza la conexión con SQLAlchemy para todos los tenants (eventos):
# - PostgreSQL en producción (DATABASE_URL).
# - SQLite en desarrollo/tests (FORCE_DB distinto de 'postgres').
# - SQLite en memoria usa StaticPool para que todas las sesiones vean la misma BD.
# =================================================================================

# --- Importaciones de Módulos ---
import os
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from loguru import logger

# --- Lógica de URL de la Base de Datos ---
DATABASE_URL = os.getenv("DATABASE_URL", "").strip()

# Lee la variable para forzar un motor de BD específico (por defecto 'postgres').
FORCE_DB = os.getenv("FORCE_DB", "postgres").strip().lower()

# Placeholder de la plataforma de despliegue sin resolver → se trata como vacío.
if DATABASE_URL.startswith("${{") and DATABASE_URL.endswith("}}"):
    logger.warning("DATABASE_URL parece un placeholder sin resolver: {}", DATABASE_URL)
    DATABASE_URL = ""

# Algunos proveedores entregan 'postgres://', que SQLAlchemy ya no acepta.
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = "postgresql://" + DATABASE_URL[len("postgres://"):]

if not DATABASE_URL:
    if FORCE_DB == "postgres":
        # Se detiene el arranque para evitar usar una BD incorrecta en producción.
        raise RuntimeError(
            "FATAL: DATABASE_URL no está disponible y FORCE_DB=postgres. "
            "Se aborta para evitar un fallback accidental a SQLite en producción."
        )
    logger.warning("DATABASE_URL está vacía. Usando fallback a SQLite local.")
    current_dir = os.path.dirname(os.path.abspath(__file__))
    project_root = os.path.abspath(os.path.join(current_dir, ".."))
    db_path = os.path.join(project_root, "weddingsite.db")
    DATABASE_URL = f"sqlite:///{db_path}"


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:")


# --- Creación del Engine con lógica condicional ---
if DATABASE_URL.startswith("sqlite"):
    logger.info("DB in use → SQLite")
    engine_kwargs = {
        "connect_args": {"check_same_thread": False},
        "pool_pre_ping": True,
    }
    if _is_memory_sqlite(DATABASE_URL):
        engine_kwargs["poolclass"] = StaticPool  # Una única conexión compartida (tests).
    engine = create_engine(DATABASE_URL, **engine_kwargs)

    # SQLite no aplica ON DELETE CASCADE / SET NULL sin este PRAGMA.
    @event.listens_for(engine, "connect")
    def _sqlite_fk_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
else:
    logger.info("DB in use → PostgreSQL (o no-SQLite)")
    engine = create_engine(DATABASE_URL, pool_pre_ping=True)

# --- Fábrica de Sesiones y Base Declarativa ---
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    """Dependencia de FastAPI para inyectar una sesión de BD por petición."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# =================================================================================
# 🔎 UTILIDAD: LOGUEAR EL MOTOR REAL DE LA BASE DE DATOS EN STARTUP
# =================================================================================
def log_db_path_on_startup() -> None:
    """Escribe en los logs qué motor de base de datos se está utilizando al arrancar."""
    try:
        url = engine.url
        logger.info("DB driver in use → {}", url.drivername)
        if url.drivername == "sqlite":
            db_file = getattr(url, "database", None)
            abs_path = os.path.abspath(db_file) if db_file else "<memory>"
            logger.info("DB path → {} (abs={})", db_file, abs_path)
    except Exception as e:
        logger.warning("No se pudo resolver la información de la BD: {}", e)
