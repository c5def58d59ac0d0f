"""
Service layer for leaguelo.

Provides:
- results: Records match results and updates team Elo ratings
- logos: Stores uploaded team logos
"""

from leaguelo.services.logos import LogoTooLarge, save_team_logo
from leaguelo.services.results import (
    PersistenceFailure,
    ResultError,
    ResultOutcome,
    ResultRecorder,
    ScheduleCanceled,
    ScheduleNotFound,
    TeamNotFound,
    UnsupportedOutcome,
)

__all__ = [
    "LogoTooLarge",
    "save_team_logo",
    "PersistenceFailure",
    "ResultError",
    "ResultOutcome",
    "ResultRecorder",
    "ScheduleCanceled",
    "ScheduleNotFound",
    "TeamNotFound",
    "UnsupportedOutcome",
]
