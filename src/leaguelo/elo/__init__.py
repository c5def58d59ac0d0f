"""
Elo rating module.

Implements the standard Elo update for two-team matches:
- Fixed K-factor of 32 for every team
- Expected score on the usual 400-point logistic scale
- Win/loss only (ties are rejected by the result service)
"""

from leaguelo.elo.calculator import EloCalculator, EloUpdate, expected_score, new_rating
from leaguelo.elo.constants import DEFAULT_ELO, ELO_K_FACTOR, ELO_SCALE

__all__ = [
    "EloCalculator",
    "EloUpdate",
    "expected_score",
    "new_rating",
    "DEFAULT_ELO",
    "ELO_K_FACTOR",
    "ELO_SCALE",
]
