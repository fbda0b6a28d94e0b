"""Database initialization script."""

from src.marketplace.core.services.database.db_manage import DbManageService
from src.marketplace.core.services.database.db_session import DbSessionService
from src.marketplace.runtime.context import get_config


def init_db() -> None:
    """Create all database tables for the configured database."""
    config = get_config()
    db_service = DbSessionService(config.database, config.app.environment)
    try:
        DbManageService(db_service.engine).create_all()
    finally:
        db_service.dispose()


if __name__ == "__main__":
    init_db()
