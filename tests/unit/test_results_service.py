"""
Unit tests for ResultRecorder.

Covers the rating update on a decided match, the idempotent no-op for
completed schedules, and every rejection path (tie, canceled, missing
schedule or team, write failure).
"""

from datetime import datetime

import pytest
from sqlalchemy.exc import OperationalError

from leaguelo.db.models import Schedule, Team
from leaguelo.schedule_statuses import CANCELED, COMPLETED, SCHEDULED
from leaguelo.services.results import (
    PersistenceFailure,
    ResultRecorder,
    ScheduleCanceled,
    ScheduleNotFound,
    TeamNotFound,
    UnsupportedOutcome,
    determine_winner,
)

MATCH_DATE = datetime(2026, 5, 1, 18, 0)


@pytest.fixture
def fixture_ids(repo, db_session):
    """Two fresh teams and one scheduled match between them."""
    home = repo.create_team(name="Harbour Hawks", team_id="hawks")
    away = repo.create_team(name="Valley Vipers", team_id="vipers")
    schedule = repo.create_schedule(
        home_team_id=home.id,
        away_team_id=away.id,
        match_date=MATCH_DATE,
        schedule_id="round-1",
    )
    db_session.commit()
    return home.id, away.id, schedule.id


@pytest.fixture
def recorder(repo):
    return ResultRecorder(repo)


def _rating(db_session, team_id):
    db_session.expire_all()
    return db_session.get(Team, team_id).elo_rating


class TestDetermineWinner:
    def test_home_win(self):
        schedule = Schedule(home_team_id="h", away_team_id="a")
        assert determine_winner(schedule, 2, 1) == ("h", "a")

    def test_away_win(self):
        schedule = Schedule(home_team_id="h", away_team_id="a")
        assert determine_winner(schedule, 0, 3) == ("a", "h")

    def test_tie_rejected(self):
        schedule = Schedule(home_team_id="h", away_team_id="a")
        with pytest.raises(UnsupportedOutcome):
            determine_winner(schedule, 1, 1)


class TestRecordResult:
    def test_home_win_updates_both_ratings(self, recorder, fixture_ids, db_session):
        home_id, away_id, schedule_id = fixture_ids
        completed_at = datetime(2026, 5, 1, 20, 0)

        outcome = recorder.record(schedule_id, 3, 1, completed_at=completed_at)

        assert not outcome.already_completed
        assert outcome.winner.id == home_id
        assert outcome.loser.id == away_id
        assert outcome.winner.elo_rating == 1516.0
        assert outcome.loser.elo_rating == 1484.0
        assert _rating(db_session, home_id) == 1516.0
        assert _rating(db_session, away_id) == 1484.0

        schedule = db_session.get(Schedule, schedule_id)
        assert schedule.status == COMPLETED
        assert schedule.home_score == 3
        assert schedule.away_score == 1
        assert schedule.updated_at == completed_at

    def test_away_win(self, recorder, fixture_ids, db_session):
        home_id, away_id, schedule_id = fixture_ids

        outcome = recorder.record(schedule_id, 0, 2)

        assert outcome.winner.id == away_id
        assert _rating(db_session, away_id) == 1516.0
        assert _rating(db_session, home_id) == 1484.0

    def test_uses_pre_match_ratings(self, recorder, repo, db_session):
        """Favorite at 1600 beats 1400: ~1607.69 / ~1392.31."""
        repo.create_team(name="Favorite", team_id="fav")
        repo.create_team(name="Underdog", team_id="dog")
        repo.set_team_rating("fav", 1600.0)
        repo.set_team_rating("dog", 1400.0)
        repo.create_schedule("dog", "fav", MATCH_DATE, schedule_id="upset-watch")
        db_session.commit()

        outcome = recorder.record("upset-watch", 1, 4)

        assert outcome.update.expected_winner == pytest.approx(0.7597, abs=1e-4)
        assert _rating(db_session, "fav") == pytest.approx(1607.69, abs=0.01)
        assert _rating(db_session, "dog") == pytest.approx(1392.31, abs=0.01)

    def test_rating_is_conserved(self, recorder, repo, db_session):
        repo.create_team(name="A", team_id="a")
        repo.create_team(name="B", team_id="b")
        repo.set_team_rating("a", 1433.7)
        repo.set_team_rating("b", 1581.2)
        repo.create_schedule("a", "b", MATCH_DATE, schedule_id="s")
        db_session.commit()

        recorder.record("s", 5, 4)

        total = _rating(db_session, "a") + _rating(db_session, "b")
        assert total == pytest.approx(1433.7 + 1581.2, abs=1e-9)

    def test_completed_schedule_is_noop(self, recorder, fixture_ids, db_session):
        home_id, away_id, schedule_id = fixture_ids
        recorder.record(schedule_id, 3, 1)

        # Different payload, even reversed winner: still a no-op
        outcome = recorder.record(schedule_id, 0, 5)

        assert outcome.already_completed
        assert outcome.winner is None
        assert _rating(db_session, home_id) == 1516.0
        assert _rating(db_session, away_id) == 1484.0
        schedule = db_session.get(Schedule, schedule_id)
        assert (schedule.home_score, schedule.away_score) == (3, 1)

    def test_tie_on_completed_schedule_is_noop(self, recorder, fixture_ids):
        _, _, schedule_id = fixture_ids
        recorder.record(schedule_id, 1, 0)

        outcome = recorder.record(schedule_id, 2, 2)

        assert outcome.already_completed

    def test_tie_rejected_without_changes(self, recorder, fixture_ids, db_session):
        home_id, away_id, schedule_id = fixture_ids

        with pytest.raises(UnsupportedOutcome):
            recorder.record(schedule_id, 2, 2)

        assert _rating(db_session, home_id) == 1500.0
        assert _rating(db_session, away_id) == 1500.0
        assert db_session.get(Schedule, schedule_id).status == SCHEDULED

    def test_unknown_schedule(self, recorder):
        with pytest.raises(ScheduleNotFound):
            recorder.record("missing", 1, 0)

    def test_canceled_schedule(self, recorder, repo, db_session, fixture_ids):
        home_id, away_id, _ = fixture_ids
        repo.create_schedule(home_id, away_id, MATCH_DATE, status=CANCELED, schedule_id="rained-off")
        db_session.commit()

        with pytest.raises(ScheduleCanceled):
            recorder.record("rained-off", 1, 0)

        assert _rating(db_session, home_id) == 1500.0

    def test_negative_score(self, recorder, fixture_ids):
        _, _, schedule_id = fixture_ids
        with pytest.raises(ValueError):
            recorder.record(schedule_id, -1, 0)

    def test_dangling_team_reference(self, recorder, repo, db_session):
        repo.create_team(name="Only Team", team_id="real")
        repo.create_schedule("real", "ghost", MATCH_DATE, schedule_id="orphan")
        db_session.commit()

        with pytest.raises(TeamNotFound) as excinfo:
            recorder.record("orphan", 0, 1)

        assert excinfo.value.team_id == "ghost"
        assert excinfo.value.role == "winner"
        assert _rating(db_session, "real") == 1500.0
        assert db_session.get(Schedule, "orphan").status == SCHEDULED

    def test_lost_race_leaves_ratings_untouched(self, recorder, repo, fixture_ids, db_session, monkeypatch):
        """If the conditional completion matches no row, nothing is written."""
        home_id, away_id, schedule_id = fixture_ids
        monkeypatch.setattr(repo, "complete_schedule", lambda *args, **kwargs: False)

        outcome = recorder.record(schedule_id, 3, 1)

        assert outcome.already_completed
        assert _rating(db_session, home_id) == 1500.0
        assert _rating(db_session, away_id) == 1500.0

    def test_write_failure_rolls_back(self, recorder, repo, fixture_ids, db_session, monkeypatch):
        home_id, away_id, schedule_id = fixture_ids
        calls = []
        original = repo.set_team_rating

        def flaky_set_team_rating(team_id, rating):
            calls.append(team_id)
            if len(calls) == 2:
                raise OperationalError("UPDATE teams", {}, Exception("connection lost"))
            original(team_id, rating)

        monkeypatch.setattr(repo, "set_team_rating", flaky_set_team_rating)

        with pytest.raises(PersistenceFailure):
            recorder.record(schedule_id, 3, 1)

        assert _rating(db_session, home_id) == 1500.0
        assert _rating(db_session, away_id) == 1500.0
        assert db_session.get(Schedule, schedule_id).status == SCHEDULED

    def test_same_team_on_both_sides(self, recorder, repo, db_session):
        """Permitted; the loser's write is the one that sticks."""
        repo.create_team(name="Mirror", team_id="mirror")
        repo.create_schedule("mirror", "mirror", MATCH_DATE, schedule_id="self")
        db_session.commit()

        recorder.record("self", 2, 1)

        assert _rating(db_session, "mirror") == 1484.0
