"""
Pytest configuration and fixtures.

This file is automatically loaded by pytest and provides
shared fixtures for all tests.
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from leaguelo.db.models import Base
from leaguelo.db.repository import LeagueRepository


@pytest.fixture
def test_engine():
    """
    Create a fresh SQLite in-memory database with all tables.

    StaticPool keeps a single connection so the same in-memory database is
    visible from every session and thread (the API tests need that).
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return sessionmaker(bind=test_engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(session_factory):
    """A database session for a test; the database is discarded afterwards."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def repo(db_session):
    return LeagueRepository(db_session)
