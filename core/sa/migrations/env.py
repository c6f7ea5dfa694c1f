# core/sa/migrations/env.py
import logging
from alembic import context
from sqlalchemy import engine_from_config, pool
from core.config import DATABASE_URL
from core.sa.models import Base

config = context.config
logger = logging.getLogger("alembic.env")

target_metadata = Base.metadata

def _url() -> str:
    return config.get_main_option("sqlalchemy.url") or DATABASE_URL

def run_migrations_offline() -> None:
    """Emit SQL to stdout without a live connection"""
    context.configure(
        url=_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        render_as_batch=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()

def run_migrations_online() -> None:
    section = config.get_section(config.config_ini_section, {})
    section["sqlalchemy.url"] = _url()
    connectable = engine_from_config(section, prefix="sqlalchemy.", poolclass=pool.NullPool)

    with connectable.connect() as connection:
        # SQLite needs batch mode for ALTER TABLE
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=True,
        )
        with context.begin_transaction():
            context.run_migrations()

if context.is_offline_mode():
    run_migrations_offline()
else:
    logger.info(f"Running migrations against {_url()}")
    run_migrations_online()
