"""
Result recording service - completes a schedule and updates both teams' Elo.

This is the only place team ratings change. Given a schedule id and the
final score it:

1. Loads the schedule (unknown id -> ScheduleNotFound)
2. Returns early if the schedule is already completed (no-op, success)
3. Rejects canceled schedules and tied scores
4. Resolves winner and loser, locking both team rows
5. Computes the new ratings from both pre-match ratings
6. Conditionally flips the schedule to 'completed' and writes both
   ratings, committing everything in one transaction

If the conditional status update finds the schedule no longer 'scheduled'
(another request completed it first), the transaction is rolled back and the
call reports the schedule as already completed, so a rating delta is never
applied twice.

Usage:
    from leaguelo.services.results import ResultRecorder

    with get_session() as session:
        outcome = ResultRecorder(LeagueRepository(session)).record(schedule_id, 3, 1)
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from leaguelo.db.models import Schedule, Team, utcnow
from leaguelo.db.repository import LeagueRepository
from leaguelo.elo.calculator import EloCalculator, EloUpdate
from leaguelo.schedule_statuses import CANCELED

logger = logging.getLogger(__name__)


class ResultError(Exception):
    """Base class for failures while recording a result."""
    pass


class ScheduleNotFound(ResultError):
    """The schedule id does not exist."""

    def __init__(self, schedule_id: str):
        super().__init__(f"Schedule '{schedule_id}' not found")
        self.schedule_id = schedule_id


class ScheduleCanceled(ResultError):
    """Results cannot be recorded for a canceled schedule."""

    def __init__(self, schedule_id: str):
        super().__init__(f"Schedule '{schedule_id}' is canceled")
        self.schedule_id = schedule_id


class UnsupportedOutcome(ResultError):
    """Tied scores; draws are not modeled."""

    def __init__(self, home_score: int, away_score: int):
        super().__init__(f"Tie games are not supported ({home_score}-{away_score})")
        self.home_score = home_score
        self.away_score = away_score


class TeamNotFound(ResultError):
    """A schedule references a team that does not exist."""

    def __init__(self, team_id: str, role: str):
        super().__init__(f"{role.capitalize()} team '{team_id}' not found")
        self.team_id = team_id
        self.role = role


class PersistenceFailure(ResultError):
    """Writing the new ratings or the completed schedule failed."""
    pass


@dataclass
class ResultOutcome:
    """
    What record() did.

    For an already-completed schedule only ``schedule`` is set and
    ``already_completed`` is True.
    """
    schedule: Schedule
    already_completed: bool = False
    winner: Optional[Team] = None
    loser: Optional[Team] = None
    update: Optional[EloUpdate] = None


def determine_winner(schedule: Schedule, home_score: int, away_score: int) -> tuple[str, str]:
    """
    Return (winner_team_id, loser_team_id) from the final score.

    Raises:
        UnsupportedOutcome: If the scores are equal
    """
    if home_score > away_score:
        return schedule.home_team_id, schedule.away_team_id
    if away_score > home_score:
        return schedule.away_team_id, schedule.home_team_id
    raise UnsupportedOutcome(home_score, away_score)


class ResultRecorder:
    """
    Applies a match result to the schedule and both teams' ratings.

    The recorder owns the transaction: it commits on success and rolls back
    on any failure after the first write.
    """

    def __init__(self, repository: LeagueRepository, calculator: Optional[EloCalculator] = None):
        self.repository = repository
        self.calculator = calculator or EloCalculator()

    def record(
        self,
        schedule_id: str,
        home_score: int,
        away_score: int,
        completed_at: Optional[datetime] = None,
    ) -> ResultOutcome:
        """
        Record the final score of a schedule.

        Args:
            schedule_id: Schedule to complete
            home_score: Non-negative home score
            away_score: Non-negative away score
            completed_at: Timestamp stored as updated_at (defaults to now, UTC)

        Returns:
            ResultOutcome with the updated teams, or already_completed=True

        Raises:
            ScheduleNotFound, ScheduleCanceled, UnsupportedOutcome,
            TeamNotFound, PersistenceFailure
            ValueError: If a score is negative
        """
        schedule = self.repository.get_schedule(schedule_id)
        if schedule is None:
            raise ScheduleNotFound(schedule_id)

        if schedule.is_completed:
            logger.info("Schedule %s already completed; ignoring result", schedule_id)
            return ResultOutcome(schedule=schedule, already_completed=True)

        if schedule.status == CANCELED:
            raise ScheduleCanceled(schedule_id)

        if home_score < 0 or away_score < 0:
            raise ValueError(f"Scores must be non-negative, got {home_score}-{away_score}")

        winner_id, loser_id = determine_winner(schedule, home_score, away_score)

        try:
            teams = self.repository.lock_teams([winner_id, loser_id])
        except SQLAlchemyError as exc:
            self.repository.db.rollback()
            raise PersistenceFailure(f"Failed to load teams: {exc}") from exc

        winner = teams.get(winner_id)
        if winner is None:
            self.repository.db.rollback()
            raise TeamNotFound(winner_id, "winner")
        loser = teams.get(loser_id)
        if loser is None:
            self.repository.db.rollback()
            raise TeamNotFound(loser_id, "loser")

        update = self.calculator.calculate(winner.elo_rating, loser.elo_rating)

        try:
            claimed = self.repository.complete_schedule(
                schedule_id,
                home_score,
                away_score,
                completed_at or utcnow(),
            )
            if not claimed:
                self.repository.db.rollback()
                logger.warning(
                    "Schedule %s was completed by another request; ratings left unchanged",
                    schedule_id,
                )
                return ResultOutcome(
                    schedule=self.repository.get_schedule(schedule_id),
                    already_completed=True,
                )

            self.repository.set_team_rating(winner_id, update.winner_after)
            # Same team on both sides: the loser write is the final value
            self.repository.set_team_rating(loser_id, update.loser_after)
            self.repository.db.commit()
        except (SQLAlchemyError, LookupError) as exc:
            self.repository.db.rollback()
            logger.error("Failed to record result for schedule %s: %s", schedule_id, exc)
            raise PersistenceFailure(
                f"Failed to record result for schedule '{schedule_id}': {exc}"
            ) from exc

        logger.info(
            "Schedule %s completed %d-%d: %s %.2f -> %.2f, %s %.2f -> %.2f",
            schedule_id,
            home_score,
            away_score,
            winner_id,
            update.winner_before,
            update.winner_after,
            loser_id,
            update.loser_before,
            update.loser_after,
        )

        return ResultOutcome(
            schedule=self.repository.get_schedule(schedule_id),
            winner=self.repository.get_team(winner_id),
            loser=self.repository.get_team(loser_id),
            update=update,
        )
