"""
Elo rating calculator for team matches.

Implements the standard Elo formula:
  Expected score: E_A = 1 / (1 + 10^((R_B - R_A) / S))
  New rating: R'_A = R_A + K * (actual - expected)

Where:
  R_A, R_B = Current ratings of teams A and B
  K = How much ratings change (32 for every team)
  S = Spread factor (400)

Both sides are updated from their pre-match ratings, so the order in which
the two new ratings are computed does not matter, and whatever the winner
gains the loser gives up.
"""

import math
from dataclasses import dataclass
from typing import Optional

from leaguelo.elo.constants import ELO_K_FACTOR, ELO_SCALE, LOSS_SCORE, WIN_SCORE


def expected_score(rating: float, opponent_rating: float, scale: float = ELO_SCALE) -> float:
    """
    Probability-style expected score for a side with ``rating``.

    Saturates to 0.0 / 1.0 when the rating gap is too large for a float
    power of ten.
    """
    try:
        return 1.0 / (1.0 + 10.0 ** ((opponent_rating - rating) / scale))
    except OverflowError:
        return 0.0 if opponent_rating > rating else 1.0


def new_rating(
    rating: float,
    opponent_rating: float,
    actual: float,
    k_factor: float = ELO_K_FACTOR,
    scale: float = ELO_SCALE,
) -> float:
    """
    Rating after one match.

    Args:
        rating: This side's rating before the match
        opponent_rating: The opponent's rating before the match
        actual: 1.0 for a win, 0.0 for a loss
        k_factor: Maximum points exchanged
        scale: Spread factor
    """
    return rating + k_factor * (actual - expected_score(rating, opponent_rating, scale))


@dataclass
class EloUpdate:
    """
    Result of an Elo calculation for one decided match.

    Contains the before/after ratings of both sides and the pre-match
    expectations used to get there.
    """
    # Ratings before the match
    winner_before: float
    loser_before: float

    # Ratings after the match
    winner_after: float
    loser_after: float

    # Expected scores (before the match); they sum to 1
    expected_winner: float
    expected_loser: float

    k_factor: float

    @property
    def winner_change(self) -> float:
        return self.winner_after - self.winner_before

    @property
    def loser_change(self) -> float:
        return self.loser_after - self.loser_before

    @property
    def was_upset(self) -> bool:
        """Whether the lower-rated side won."""
        return self.winner_before < self.loser_before

    def __repr__(self) -> str:
        return (
            f"<EloUpdate(winner: {self.winner_before:.2f} -> {self.winner_after:.2f}, "
            f"loser: {self.loser_before:.2f} -> {self.loser_after:.2f})>"
        )


class EloCalculator:
    """
    Team Elo calculator with a fixed K-factor.

    Usage:
        calculator = EloCalculator()
        result = calculator.calculate(winner_rating=1600.0, loser_rating=1400.0)
        print(f"Winner: {result.winner_before} -> {result.winner_after:.2f}")
        print(f"Expected win prob: {result.expected_winner:.1%}")
    """

    def __init__(self, k_factor: Optional[float] = None, scale: Optional[float] = None):
        self.k_factor = ELO_K_FACTOR if k_factor is None else k_factor
        self.scale = ELO_SCALE if scale is None else scale

    def calculate(self, winner_rating: float, loser_rating: float) -> EloUpdate:
        """
        Calculate new ratings after a decided match.

        The loser's expectation is taken as 1 - E_winner rather than being
        recomputed, which keeps the two rating changes exactly opposite.

        Raises:
            ValueError: If either rating is not a finite number
        """
        winner_rating = float(winner_rating)
        loser_rating = float(loser_rating)
        for value in (winner_rating, loser_rating):
            if not math.isfinite(value):
                raise ValueError(f"rating must be finite, got {value}")

        exp_winner = expected_score(winner_rating, loser_rating, self.scale)
        exp_loser = 1.0 - exp_winner

        winner_after = winner_rating + self.k_factor * (WIN_SCORE - exp_winner)
        loser_after = loser_rating + self.k_factor * (LOSS_SCORE - exp_loser)

        return EloUpdate(
            winner_before=winner_rating,
            loser_before=loser_rating,
            winner_after=winner_after,
            loser_after=loser_after,
            expected_winner=exp_winner,
            expected_loser=exp_loser,
            k_factor=self.k_factor,
        )

    def get_win_probability(self, rating_a: float, rating_b: float) -> float:
        """Probability that side A beats side B (the expected score)."""
        return expected_score(float(rating_a), float(rating_b), self.scale)
