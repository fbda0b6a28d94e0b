from __future__ import annotations

from collections.abc import Generator

import pytest
from sqlalchemy import Engine, StaticPool
from sqlmodel import Session, create_engine

from src.marketplace.core.services import DbManageService
from src.marketplace.runtime.config.config_data import (
    AuthConfig,
    ConfigData,
    ConstantsConfig,
    DatabaseConfig,
    LoggingConfig,
)

TEST_JWT_SECRET = "test-secret-key-for-marketplace"


@pytest.fixture
def test_config() -> ConfigData:
    """Configuration for an isolated in-memory deployment with fast hashing."""
    return ConfigData(
        logging=LoggingConfig(level="WARNING"),
        database=DatabaseConfig(url="sqlite://"),
        constants=ConstantsConfig(
            auth=AuthConfig(jwt_secret=TEST_JWT_SECRET, password_cost=4),
        ),
    )


@pytest.fixture
def engine() -> Generator[Engine]:
    """Create a fresh in-memory database with all tables."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    DbManageService(engine).create_all()
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Generator[Session]:
    """Create a fresh database session for testing."""
    with Session(engine, expire_on_commit=False) as session:
        try:
            yield session
        finally:
            session.rollback()
