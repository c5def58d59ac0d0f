"""
League repository - the persistence layer behind the API and result service.

All reads and writes of leagues, teams and schedules go through
LeagueRepository. Methods flush but never commit; the caller owns the
transaction (request handlers commit after creates, the result service
commits the rating update as one unit).

The operations the result service depends on:
- get_schedule(id)
- get_team(id) / lock_teams(ids)
- set_team_rating(id, rating)
- complete_schedule(id, home_score, away_score, timestamp)
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from leaguelo.db.models import League, Schedule, Team, utcnow
from leaguelo.elo.constants import DEFAULT_ELO
from leaguelo.schedule_statuses import COMPLETED, SCHEDULED, is_valid_status


class DuplicateRecord(Exception):
    """Raised when creating a record whose id is already taken."""

    def __init__(self, kind: str, record_id: str):
        super().__init__(f"{kind} '{record_id}' already exists")
        self.kind = kind
        self.record_id = record_id


class LeagueRepository:
    """
    Data access for leagues, teams and schedules.

    Usage:
        repo = LeagueRepository(session)
        team = repo.create_team(name="Rovers", league_id=league.id)
        session.commit()
    """

    def __init__(self, db: Session):
        self.db = db

    # =========================================================================
    # Leagues
    # =========================================================================

    def list_leagues(self) -> list[League]:
        return self.db.query(League).order_by(League.name.asc(), League.id.asc()).all()

    def create_league(
        self,
        name: str,
        logo_url: Optional[str] = None,
        league_id: Optional[str] = None,
    ) -> League:
        if league_id and self.db.get(League, league_id) is not None:
            raise DuplicateRecord("League", league_id)

        league = League(name=name, logo_url=logo_url)
        if league_id:
            league.id = league_id
        self.db.add(league)
        self.db.flush()
        return league

    # =========================================================================
    # Teams
    # =========================================================================

    def list_teams(self, league_id: Optional[str] = None) -> list[Team]:
        query = self.db.query(Team)
        if league_id:
            query = query.filter(Team.league_id == league_id)
        return query.order_by(Team.name.asc(), Team.id.asc()).all()

    def get_team(self, team_id: str) -> Optional[Team]:
        return self.db.get(Team, team_id)

    def lock_teams(self, team_ids: Iterable[str]) -> dict[str, Team]:
        """
        Load teams with a row lock, refreshing any copies already in the session.

        Rows are locked in sorted id order so two concurrent updates touching
        the same pair of teams cannot deadlock. Missing ids are simply absent
        from the returned mapping.
        """
        ids = sorted(set(team_ids))
        teams = (
            self.db.query(Team)
            .filter(Team.id.in_(ids))
            .order_by(Team.id.asc())
            .with_for_update()
            .populate_existing()
            .all()
        )
        return {team.id: team for team in teams}

    def create_team(
        self,
        name: str,
        league_id: Optional[str] = None,
        logo_url: Optional[str] = None,
        team_id: Optional[str] = None,
    ) -> Team:
        """Create a team at the default rating."""
        if team_id and self.db.get(Team, team_id) is not None:
            raise DuplicateRecord("Team", team_id)

        team = Team(
            name=name,
            league_id=league_id,
            logo_url=logo_url,
            elo_rating=DEFAULT_ELO,
        )
        if team_id:
            team.id = team_id
        self.db.add(team)
        self.db.flush()
        return team

    def set_team_rating(self, team_id: str, rating: float) -> None:
        """
        Overwrite a team's rating.

        Raises:
            LookupError: If no team has this id
        """
        result = self.db.execute(
            update(Team)
            .where(Team.id == team_id)
            .values(elo_rating=rating, updated_at=utcnow())
        )
        if result.rowcount != 1:
            raise LookupError(f"Team '{team_id}' not found")

    def set_team_logo(self, team_id: str, logo_url: str) -> bool:
        """Store a team's logo path. Returns False if the team doesn't exist."""
        team = self.get_team(team_id)
        if team is None:
            return False
        team.logo_url = logo_url
        self.db.flush()
        return True

    # =========================================================================
    # Schedules
    # =========================================================================

    def list_schedules(
        self,
        league_id: Optional[str] = None,
        statuses: Optional[list[str]] = None,
    ) -> list[Schedule]:
        query = self.db.query(Schedule)
        if league_id:
            query = query.filter(Schedule.league_id == league_id)
        if statuses is not None:
            query = query.filter(Schedule.status.in_(statuses))
        return query.order_by(Schedule.match_date.asc(), Schedule.id.asc()).all()

    def get_schedule(self, schedule_id: str) -> Optional[Schedule]:
        return self.db.get(Schedule, schedule_id)

    def create_schedule(
        self,
        home_team_id: str,
        away_team_id: str,
        match_date: datetime,
        league_id: Optional[str] = None,
        status: str = SCHEDULED,
        schedule_id: Optional[str] = None,
    ) -> Schedule:
        """
        Create a schedule entry.

        Team references are stored as given; they are not checked against
        the teams table and may be equal.

        Raises:
            ValueError: If status is not a known schedule status
            DuplicateRecord: If schedule_id is already taken
        """
        if not is_valid_status(status):
            raise ValueError(f"Unknown schedule status '{status}'")
        if schedule_id and self.db.get(Schedule, schedule_id) is not None:
            raise DuplicateRecord("Schedule", schedule_id)

        schedule = Schedule(
            league_id=league_id,
            home_team_id=home_team_id,
            away_team_id=away_team_id,
            match_date=match_date,
            status=status,
        )
        if schedule_id:
            schedule.id = schedule_id
        self.db.add(schedule)
        self.db.flush()
        return schedule

    def complete_schedule(
        self,
        schedule_id: str,
        home_score: int,
        away_score: int,
        completed_at: datetime,
    ) -> bool:
        """
        Mark a scheduled match as completed with its final score.

        The update is conditional on the row still being 'scheduled', so
        of two concurrent attempts only one can succeed.

        Returns:
            True if this call performed the transition, False otherwise
        """
        result = self.db.execute(
            update(Schedule)
            .where(Schedule.id == schedule_id, Schedule.status == SCHEDULED)
            .values(
                status=COMPLETED,
                home_score=home_score,
                away_score=away_score,
                updated_at=completed_at,
            )
        )
        return result.rowcount == 1
