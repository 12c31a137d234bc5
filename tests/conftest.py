"""
Pytest configuration and shared fixtures for the finance tracker tests.
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from finance_tracker.config import reset_global_settings
from finance_tracker.database.base import Base, reset_engine
from finance_tracker.repository import FinanceRepository


@pytest.fixture
def db_engine(tmp_path):
    """Create a SQLite database for testing."""
    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    """Session factory bound to the test database."""
    return sessionmaker(bind=db_engine, expire_on_commit=False)


@pytest.fixture
def repository(session_factory):
    """Repository over the test database."""
    return FinanceRepository(session_factory)


@pytest.fixture
def app_env(tmp_path, monkeypatch):
    """Environment for an application backed by temporary storage."""
    monkeypatch.setenv("SECRET_KEY", "test-secret-key-123")
    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.setenv("DB_URL", f"sqlite:///{tmp_path / 'app.db'}")
    monkeypatch.setenv("STORAGE_TYPE", "local")
    monkeypatch.setenv("STORAGE_BASE_PATH", str(tmp_path / "snapshots"))
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    reset_global_settings()
    reset_engine()
    yield
    reset_engine()
    reset_global_settings()


@pytest.fixture
def app(app_env):
    """Create the Flask application."""
    from finance_tracker import create_app

    return create_app()


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()
