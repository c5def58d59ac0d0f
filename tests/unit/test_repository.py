"""Unit tests for LeagueRepository."""

from datetime import datetime

import pytest

from leaguelo.db.models import Schedule, Team
from leaguelo.db.repository import DuplicateRecord
from leaguelo.elo.constants import DEFAULT_ELO
from leaguelo.schedule_statuses import CANCELED, COMPLETED, SCHEDULED

MATCH_DATE = datetime(2026, 3, 14, 15, 0)


def test_create_team_defaults(repo, db_session):
    team = repo.create_team(name="Rovers", league_id="north")
    db_session.commit()

    assert team.id  # generated
    assert team.elo_rating == DEFAULT_ELO
    assert repo.get_team(team.id).name == "Rovers"


def test_duplicate_ids_rejected(repo, db_session):
    repo.create_league(name="North", league_id="north")
    repo.create_team(name="Rovers", team_id="rovers")
    repo.create_schedule("rovers", "rovers", MATCH_DATE, schedule_id="s1")
    db_session.commit()

    with pytest.raises(DuplicateRecord):
        repo.create_league(name="Other", league_id="north")
    with pytest.raises(DuplicateRecord):
        repo.create_team(name="Other", team_id="rovers")
    with pytest.raises(DuplicateRecord) as excinfo:
        repo.create_schedule("a", "b", MATCH_DATE, schedule_id="s1")
    assert excinfo.value.kind == "Schedule"


def test_list_teams_filters_by_league(repo, db_session):
    repo.create_team(name="Bravo", league_id="north")
    repo.create_team(name="Alpha", league_id="north")
    repo.create_team(name="Charlie", league_id="south")
    db_session.commit()

    assert [t.name for t in repo.list_teams()] == ["Alpha", "Bravo", "Charlie"]
    assert [t.name for t in repo.list_teams(league_id="north")] == ["Alpha", "Bravo"]


def test_list_schedules_filters(repo, db_session):
    repo.create_schedule("a", "b", datetime(2026, 3, 2), league_id="north", schedule_id="late")
    repo.create_schedule("a", "b", datetime(2026, 3, 1), league_id="north", schedule_id="early")
    repo.create_schedule("c", "d", MATCH_DATE, league_id="south", status=CANCELED, schedule_id="off")
    db_session.commit()

    assert [s.id for s in repo.list_schedules(league_id="north")] == ["early", "late"]
    assert [s.id for s in repo.list_schedules(statuses=[CANCELED])] == ["off"]
    assert len(repo.list_schedules()) == 3
    assert repo.list_schedules(statuses=[]) == []


def test_create_schedule_rejects_unknown_status(repo):
    with pytest.raises(ValueError):
        repo.create_schedule("a", "b", MATCH_DATE, status="postponed")


def test_set_team_rating(repo, db_session):
    repo.create_team(name="Rovers", team_id="rovers")
    repo.set_team_rating("rovers", 1523.25)
    db_session.commit()

    db_session.expire_all()
    assert db_session.get(Team, "rovers").elo_rating == 1523.25


def test_set_team_rating_unknown_team(repo):
    with pytest.raises(LookupError):
        repo.set_team_rating("nobody", 1400.0)


def test_set_team_logo(repo, db_session):
    repo.create_team(name="Rovers", team_id="rovers")
    db_session.commit()

    assert repo.set_team_logo("rovers", "/uploads/rovers.png")
    assert not repo.set_team_logo("nobody", "/uploads/nobody.png")
    assert repo.get_team("rovers").logo_url == "/uploads/rovers.png"


def test_lock_teams_skips_missing(repo, db_session):
    repo.create_team(name="Rovers", team_id="rovers")
    db_session.commit()

    teams = repo.lock_teams(["rovers", "ghost", "rovers"])

    assert list(teams) == ["rovers"]


def test_complete_schedule_is_conditional(repo, db_session):
    repo.create_schedule("a", "b", MATCH_DATE, schedule_id="s1")
    db_session.commit()
    finished = datetime(2026, 3, 14, 17, 0)

    assert repo.complete_schedule("s1", 2, 1, finished) is True
    # Second attempt finds no 'scheduled' row
    assert repo.complete_schedule("s1", 0, 4, finished) is False
    db_session.commit()

    db_session.expire_all()
    schedule = db_session.get(Schedule, "s1")
    assert schedule.status == COMPLETED
    assert (schedule.home_score, schedule.away_score) == (2, 1)
    assert schedule.updated_at == finished


def test_complete_schedule_ignores_canceled(repo, db_session):
    repo.create_schedule("a", "b", MATCH_DATE, status=CANCELED, schedule_id="off")
    db_session.commit()

    assert repo.complete_schedule("off", 1, 0, MATCH_DATE) is False
    assert repo.get_schedule("off").status == CANCELED


def test_new_schedule_is_scheduled(repo):
    schedule = repo.create_schedule("a", "b", MATCH_DATE)
    assert schedule.status == SCHEDULED
    assert schedule.home_score is None
    assert schedule.updated_at is None
