"""Request bodies accepted by the admin API."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from leaguelo.schedule_statuses import ALL_SCHEDULE_STATUSES

# Ids are also used as upload file names
ID_PATTERN = r"^[A-Za-z0-9_-]+$"


class LeagueCreate(BaseModel):
    id: Optional[str] = Field(default=None, max_length=64, pattern=ID_PATTERN)
    name: str = Field(min_length=1, max_length=255)
    logo_url: Optional[str] = Field(default=None, max_length=500)


class TeamCreate(BaseModel):
    """
    New team. There is no rating field: every team starts at 1500 and only
    recorded results change it. Unknown fields (including elo_rating) are
    ignored.
    """
    id: Optional[str] = Field(default=None, max_length=64, pattern=ID_PATTERN)
    league_id: Optional[str] = Field(default=None, max_length=64)
    name: str = Field(min_length=1, max_length=255)
    logo_url: Optional[str] = Field(default=None, max_length=500)


class ScheduleCreate(BaseModel):
    id: Optional[str] = Field(default=None, max_length=64, pattern=ID_PATTERN)
    league_id: Optional[str] = Field(default=None, max_length=64)
    home_team_id: str = Field(min_length=1, max_length=64)
    away_team_id: str = Field(min_length=1, max_length=64)
    match_date: Optional[datetime] = None
    status: Optional[str] = None

    @field_validator("match_date")
    @classmethod
    def to_naive_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Timestamps are stored as naive UTC."""
        if v is not None and v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        lower_v = v.strip().lower()
        if lower_v not in ALL_SCHEDULE_STATUSES:
            raise ValueError(f"status must be one of {ALL_SCHEDULE_STATUSES}")
        return lower_v


# Largest value the 32-bit score columns hold
MAX_SCORE = 2**31 - 1


class ResultRequest(BaseModel):
    home_score: int = Field(ge=0, le=MAX_SCORE)
    away_score: int = Field(ge=0, le=MAX_SCORE)
