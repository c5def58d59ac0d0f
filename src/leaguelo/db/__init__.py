"""
Database module for leaguelo.

Provides SQLAlchemy ORM models, session management and the league
repository used by the API and the result service.

Usage:
    from leaguelo.db import get_session, LeagueRepository

    with get_session() as session:
        teams = LeagueRepository(session).list_teams()
"""

from leaguelo.db.models import (
    Base,
    League,
    Team,
    Schedule,
    AdminUser,
)
from leaguelo.db.repository import DuplicateRecord, LeagueRepository
from leaguelo.db.session import get_session, get_engine, get_db, SessionLocal

__all__ = [
    # Base
    "Base",
    # Models
    "League",
    "Team",
    "Schedule",
    "AdminUser",
    # Repository
    "LeagueRepository",
    "DuplicateRecord",
    # Session
    "get_session",
    "get_engine",
    "get_db",
    "SessionLocal",
]
