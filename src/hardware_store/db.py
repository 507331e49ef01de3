import logging
from contextlib import contextmanager

from sqlalchemy import BigInteger, Integer, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from hardware_store.core.config import DatabaseConfig

logger = logging.getLogger(__name__)

Base = declarative_base()


def create_db_engine(db_config: DatabaseConfig) -> Engine:
    """
    Build the SQLAlchemy engine for the configured database.

    Pool sizing only applies to server databases; SQLite (used by the test
    suite and local demos) gets SQLAlchemy's default pool.
    """
    url = db_config.url
    # Heroku-style URLs still use the old scheme name
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)

    if url.startswith("sqlite"):
        return create_engine(
            url,
            echo=db_config.echo,
            connect_args={"check_same_thread": False},
        )

    return create_engine(
        url,
        echo=db_config.echo,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_recycle=db_config.pool_recycle,
        pool_pre_ping=True,
    )


def init_db(engine: Engine) -> None:
    """Create all tables declared on Base.metadata (no-op for existing tables)."""
    # Importing the models registers them with Base.metadata
    import hardware_store.models  # noqa: F401

    Base.metadata.create_all(engine)
    logger.info("Database schema ensured")


@contextmanager
def get_connection(engine: Engine):
    """Yield a connection; uncommitted work is rolled back on close."""
    with engine.connect() as conn:
        yield conn


# SQLite only autoincrements INTEGER primary keys, not BIGINT ones
BigIntegerPK = BigInteger().with_variant(Integer, "sqlite")
