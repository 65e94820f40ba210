#migrations/env.py
from logging.config import fileConfig
import os
import sys

from alembic import context

# ---- Asegurar que podamos importar el paquete "weddingsite" ----
# (asume que "migrations" está en la raíz del proyecto junto a "weddingsite/")
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from dotenv import load_dotenv

load_dotenv(os.path.join(ROOT_DIR, ".env"))

# Engine y Base del proyecto; importar models registra las tablas en Base.metadata.
from weddingsite.db import engine, Base
from weddingsite import models  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """
    Modo 'offline': configura el contexto con la URL del engine real.
    No crea Engine/DBAPI; emite SQL al output.
    """
    context.configure(
        url=str(engine.url),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        render_as_batch=engine.url.drivername.startswith("sqlite"),
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Modo 'online': ejecuta contra la BD usando el Engine real."""
    with engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=connection.dialect.name == "sqlite",  # ALTER limitado en SQLite.
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
