from contextlib import asynccontextmanager
from datetime import timedelta
import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, File, HTTPException, Query, Request, UploadFile
from fastapi.responses import JSONResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from fastapi.staticfiles import StaticFiles
from sqlalchemy.orm import Session

from leaguelo.config import settings
from leaguelo.db.models import AdminUser, League, Schedule, Team, utcnow
from leaguelo.db.repository import DuplicateRecord, LeagueRepository
from leaguelo.db.session import get_db, get_session
from leaguelo.logging_config import configure_logging
from leaguelo.schedule_statuses import SCHEDULED, normalize_status_filter
from leaguelo.services.logos import LogoTooLarge, save_team_logo
from leaguelo.services.results import (
    PersistenceFailure,
    ResultError,
    ResultRecorder,
    ScheduleCanceled,
    ScheduleNotFound,
    TeamNotFound,
    UnsupportedOutcome,
)
from leaguelo.web.admin_auth import authenticate_admin, ensure_bootstrap_admin, mark_admin_login
from leaguelo.web.schemas import LeagueCreate, ResultRequest, ScheduleCreate, TeamCreate

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
    if settings.admin_username and settings.admin_password:
        with get_session() as session:
            ensure_bootstrap_admin(session, settings.admin_username, settings.admin_password)
    logger.info("leaguelo API ready")
    yield


app = FastAPI(title="leaguelo", lifespan=lifespan)

# HTTP status for each result-recording failure
RESULT_ERROR_STATUS: dict[type, int] = {
    ScheduleNotFound: 404,
    UnsupportedOutcome: 400,
    TeamNotFound: 400,
    ScheduleCanceled: 409,
    PersistenceFailure: 500,
}


@app.exception_handler(ResultError)
async def result_error_handler(request: Request, exc: ResultError):
    status_code = RESULT_ERROR_STATUS.get(type(exc), 400)
    if status_code >= 500:
        logger.error("Result for %s failed: %s", request.url.path, exc)
    return JSONResponse({"error": str(exc)}, status_code=status_code)


@app.exception_handler(DuplicateRecord)
async def duplicate_record_handler(request: Request, exc: DuplicateRecord):
    return JSONResponse({"error": str(exc)}, status_code=409)


# =============================================================================
# Admin authentication
# =============================================================================

basic_auth = HTTPBasic(auto_error=False)


def require_admin(
    credentials: Optional[HTTPBasicCredentials] = Depends(basic_auth),
    db: Session = Depends(get_db),
) -> AdminUser:
    """
    HTTP Basic gate for the /admin routes.

    No credentials -> 401 with a Basic challenge; wrong or inactive -> 403.
    """
    if credentials is None:
        raise HTTPException(
            status_code=401,
            detail="Unauthorized",
            headers={"WWW-Authenticate": 'Basic realm="Restricted"'},
        )
    admin = authenticate_admin(db, credentials.username, credentials.password)
    if admin is None:
        logger.warning("Rejected admin credentials for '%s'", credentials.username)
        raise HTTPException(status_code=403, detail="Forbidden")
    mark_admin_login(db, admin)
    db.commit()
    return admin


# =============================================================================
# Serialization
# =============================================================================

def _isoformat(value) -> Optional[str]:
    return value.isoformat() if value else None


def _serialize_league(league: League) -> dict:
    return {
        "id": league.id,
        "name": league.name,
        "logo_url": league.logo_url,
    }


def _serialize_team(team: Team) -> dict:
    return {
        "id": team.id,
        "league_id": team.league_id,
        "name": team.name,
        "elo_rating": team.elo_rating,
        "logo_url": team.logo_url,
    }


def _serialize_schedule(schedule: Schedule) -> dict:
    return {
        "id": schedule.id,
        "league_id": schedule.league_id,
        "home_team_id": schedule.home_team_id,
        "away_team_id": schedule.away_team_id,
        "match_date": _isoformat(schedule.match_date),
        "status": schedule.status,
        "home_score": schedule.home_score,
        "away_score": schedule.away_score,
        "updated_at": _isoformat(schedule.updated_at),
    }


# =============================================================================
# Public endpoints
# =============================================================================

@app.get("/leagues")
async def list_leagues(db: Session = Depends(get_db)):
    return [_serialize_league(league) for league in LeagueRepository(db).list_leagues()]


@app.get("/teams")
async def list_teams(
    db: Session = Depends(get_db),
    league_id: Optional[str] = Query(None, description="Only teams in this league"),
):
    teams = LeagueRepository(db).list_teams(league_id=league_id)
    return [_serialize_team(team) for team in teams]


@app.get("/schedules")
async def list_schedules(
    db: Session = Depends(get_db),
    league_id: Optional[str] = Query(None, description="Only schedules in this league"),
    status: Optional[str] = Query(None, description="Comma-separated statuses: scheduled,completed,canceled"),
):
    schedules = LeagueRepository(db).list_schedules(
        league_id=league_id,
        statuses=normalize_status_filter(status),
    )
    return [_serialize_schedule(schedule) for schedule in schedules]


# =============================================================================
# Admin endpoints
# =============================================================================

admin = APIRouter(prefix="/admin", dependencies=[Depends(require_admin)])


@admin.post("/leagues", status_code=201)
async def create_league(payload: LeagueCreate, db: Session = Depends(get_db)):
    league = LeagueRepository(db).create_league(
        name=payload.name,
        logo_url=payload.logo_url,
        league_id=payload.id,
    )
    db.commit()
    logger.info("Created league %s (%s)", league.id, league.name)
    return {"message": "League created", "id": league.id}


@admin.post("/teams", status_code=201)
async def create_team(payload: TeamCreate, db: Session = Depends(get_db)):
    team = LeagueRepository(db).create_team(
        name=payload.name,
        league_id=payload.league_id,
        logo_url=payload.logo_url,
        team_id=payload.id,
    )
    db.commit()
    logger.info("Created team %s (%s)", team.id, team.name)
    return {"message": "Team created", "id": team.id}


@admin.post("/schedules", status_code=201)
async def create_schedule(payload: ScheduleCreate, db: Session = Depends(get_db)):
    match_date = payload.match_date or (
        utcnow() + timedelta(hours=settings.default_match_lead_hours)
    )
    schedule = LeagueRepository(db).create_schedule(
        home_team_id=payload.home_team_id,
        away_team_id=payload.away_team_id,
        match_date=match_date,
        league_id=payload.league_id,
        status=payload.status or SCHEDULED,
        schedule_id=payload.id,
    )
    db.commit()
    logger.info(
        "Created schedule %s: %s vs %s",
        schedule.id,
        schedule.home_team_id,
        schedule.away_team_id,
    )
    return {"message": "Schedule created", "id": schedule.id}


@admin.put("/schedules/{schedule_id}/result")
async def update_schedule_result(
    schedule_id: str,
    payload: ResultRequest,
    db: Session = Depends(get_db),
):
    """
    Record a final score and update both teams' Elo ratings.

    Resubmitting for a completed schedule succeeds without changing anything.
    """
    recorder = ResultRecorder(LeagueRepository(db))
    outcome = recorder.record(schedule_id, payload.home_score, payload.away_score)

    if outcome.already_completed:
        return {
            "message": "Schedule already completed",
            "schedule": _serialize_schedule(outcome.schedule),
        }

    return {
        "message": "Match completed and ELO updated",
        "schedule": _serialize_schedule(outcome.schedule),
        "winner": _serialize_team(outcome.winner),
        "loser": _serialize_team(outcome.loser),
        "expected_winner": outcome.update.expected_winner,
    }


@admin.post("/teams/{team_id}/logo")
async def upload_team_logo(
    team_id: str,
    logo: UploadFile = File(...),
    db: Session = Depends(get_db),
):
    repo = LeagueRepository(db)
    if repo.get_team(team_id) is None:
        raise HTTPException(status_code=404, detail="Team not found")

    # Read one byte past the limit so oversized files are detected
    content = await logo.read(settings.max_logo_bytes + 1)
    try:
        logo_url = save_team_logo(
            settings.upload_dir,
            team_id,
            logo.filename,
            content,
            max_bytes=settings.max_logo_bytes,
        )
    except LogoTooLarge as exc:
        raise HTTPException(status_code=413, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    repo.set_team_logo(team_id, logo_url)
    db.commit()
    return {"message": "Logo uploaded successfully", "logo_url": logo_url}


app.include_router(admin)


# =============================================================================
# Static files (mounted last so API routes take precedence)
# =============================================================================

app.mount(
    "/uploads",
    StaticFiles(directory=settings.upload_dir, check_dir=False),
    name="uploads",
)

web_path = Path(settings.web_dir)
if web_path.is_dir():
    app.mount("/", StaticFiles(directory=web_path, html=True), name="web")


# Only for debugging
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "leaguelo.web.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
