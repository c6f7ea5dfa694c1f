# core/sa/migrations/__init__.py
import logging
from pathlib import Path
from alembic import command
from alembic.config import Config

logger = logging.getLogger(__name__)

# Scripts ship inside this package so installed copies can migrate too
MIGRATIONS_DIR = Path(__file__).resolve().parent

def alembic_config(connection_string: str) -> Config:
    """Build an Alembic config pointing at the bundled migrations"""
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    config.set_main_option("sqlalchemy.url", connection_string)
    return config

def upgrade_database(connection_string: str, revision: str = "head") -> None:
    logger.info(f"Upgrading {connection_string} to {revision}")
    command.upgrade(alembic_config(connection_string), revision)

def downgrade_database(connection_string: str, revision: str) -> None:
    logger.info(f"Downgrading {connection_string} to {revision}")
    command.downgrade(alembic_config(connection_string), revision)
