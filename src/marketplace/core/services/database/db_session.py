"""Database engine and session factory used across the application."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from loguru import logger
from sqlalchemy import StaticPool, text
from sqlalchemy.engine import Engine, make_url
from sqlmodel import Session, create_engine

from src.marketplace.runtime.config.config_data import DatabaseConfig


def _is_memory_sqlite(url: str) -> bool:
    parsed = make_url(url)
    return parsed.get_backend_name() == "sqlite" and parsed.database in (None, "", ":memory:")


def build_engine(db_config: DatabaseConfig, environment: str = "development") -> Engine:
    """Create the SQLAlchemy engine for the configured backend."""
    engine_kwargs: dict[str, Any] = {
        "echo": db_config.echo,
        "connect_args": _get_connect_args(db_config, environment),
    }

    if _is_memory_sqlite(db_config.url):
        # One shared connection, otherwise every checkout sees an empty database
        engine_kwargs["poolclass"] = StaticPool
    else:
        engine_kwargs.update(
            {
                "pool_size": db_config.pool_size,
                "max_overflow": db_config.max_overflow,
                "pool_timeout": db_config.pool_timeout,
                "pool_recycle": db_config.pool_recycle,
                "pool_pre_ping": True,
            }
        )

    logger.info("Initializing {} database engine", db_config.backend)
    return create_engine(db_config.url, **engine_kwargs)


def _get_connect_args(db_config: DatabaseConfig, environment: str) -> dict:
    """Get database-specific connection arguments."""
    connect_args: dict[str, Any] = {}

    if db_config.backend == "postgresql":
        connect_args.update(
            {
                "application_name": f"{environment}_marketplace_api",
                "connect_timeout": 30,
            }
        )

    elif db_config.backend == "sqlite":
        connect_args.update(
            {
                "check_same_thread": False,
                "timeout": 20,
            }
        )

        if environment == "production":
            logger.warning(
                "SQLite is not recommended for production use. "
                "Consider PostgreSQL for better performance and reliability."
            )

    return connect_args


class DbSessionService:
    def __init__(self, db_config: DatabaseConfig, environment: str = "development", engine: Engine | None = None):
        """Initialize the shared database engine and session factory."""
        self._engine = engine or build_engine(db_config, environment)

    @property
    def engine(self) -> Engine:
        return self._engine

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(
            self._engine,
            expire_on_commit=False,
            autoflush=True,
        )

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Yield a session that is committed on success and rolled back on error."""
        db = self.get_session()
        try:
            yield db
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(
                "Database transaction failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise
        finally:
            db.close()

    def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                return True
        except Exception as e:
            logger.error(
                "Database health check failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return False

    def dispose(self) -> None:
        self._engine.dispose()
