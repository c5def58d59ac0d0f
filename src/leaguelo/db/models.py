"""
SQLAlchemy ORM models for leaguelo.

This module defines all database tables. The schema mirrors a document
store: leagues, teams and schedules reference each other by plain string
identifiers rather than foreign keys, so a schedule may point at a team
that no longer exists (the result service reports that as TeamNotFound).

Key design decisions:
- Identifiers are strings; clients may supply their own, otherwise a
  random hex id is generated
- A team's elo_rating is only changed by the result service
- Single schedules table handles the full lifecycle (scheduled -> completed)

Tables:
- leagues: League master data
- teams: Teams with their current Elo rating
- schedules: Matches between two teams, with final scores once completed
- admin_users: Operator accounts for the admin API
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from leaguelo.elo.constants import DEFAULT_ELO
from leaguelo.schedule_statuses import ALL_SCHEDULE_STATUSES, COMPLETED, SCHEDULED


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (how timestamps are stored)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id() -> str:
    return uuid.uuid4().hex


_STATUS_LIST = ", ".join(f"'{status}'" for status in ALL_SCHEDULE_STATUSES)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


# =============================================================================
# League Models
# =============================================================================

class League(Base):
    """A competition that teams and schedules belong to."""

    __tablename__ = "leagues"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    logo_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    def __repr__(self) -> str:
        return f"<League(id='{self.id}', name='{self.name}')>"


class Team(Base):
    """
    A team and its current Elo rating.

    New teams start at DEFAULT_ELO (1500.0). The rating changes only when
    a schedule involving the team is completed.
    """

    __tablename__ = "teams"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    league_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    elo_rating: Mapped[float] = mapped_column(Float, nullable=False, default=DEFAULT_ELO)

    # Public path of an uploaded logo, e.g. '/uploads/<team_id>.png'
    logo_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("idx_teams_league", "league_id"),
    )

    def __repr__(self) -> str:
        return f"<Team(id='{self.id}', name='{self.name}', elo={self.elo_rating:.2f})>"


# =============================================================================
# Schedule Models
# =============================================================================

class Schedule(Base):
    """
    A match between a home and an away team.

    Status lifecycle:
    - 'scheduled': Fixture awaiting a result
    - 'completed': Result recorded, ratings updated (immutable from here)
    - 'canceled': Will not be played

    home_score/away_score/updated_at are set when the result is recorded.
    """

    __tablename__ = "schedules"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    league_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    # Not required to differ, and not foreign keys
    home_team_id: Mapped[str] = mapped_column(String(64), nullable=False)
    away_team_id: Mapped[str] = mapped_column(String(64), nullable=False)

    match_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=SCHEDULED)

    home_score: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    away_score: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    __table_args__ = (
        CheckConstraint(f"status IN ({_STATUS_LIST})", name="ck_schedules_status"),
        Index("idx_schedules_league", "league_id"),
        Index("idx_schedules_status", "status"),
    )

    @property
    def is_completed(self) -> bool:
        return self.status == COMPLETED

    def __repr__(self) -> str:
        return (
            f"<Schedule(id='{self.id}', {self.home_team_id} vs {self.away_team_id}, "
            f"status='{self.status}')>"
        )


# =============================================================================
# Admin Models
# =============================================================================

class AdminUser(Base):
    """Operator account for the admin API."""

    __tablename__ = "admin_users"

    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default="true",
    )
    last_login_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow
    )

    __table_args__ = (
        Index("idx_admin_users_active", "is_active"),
    )

    def __repr__(self) -> str:
        return f"<AdminUser(username='{self.username}', active={self.is_active})>"
