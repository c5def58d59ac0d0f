"""
Elo rating system constants.

K factor: Controls rating volatility (the most points one match can move)
  - Applied identically to every team, regardless of rating or matches played

Scale: Controls how rating differences translate to win probability
  - A 400 point gap means the stronger side is expected to score ~0.91
"""

# Points exchanged per match
ELO_K_FACTOR = 32.0

# Rating difference that corresponds to 10:1 odds
ELO_SCALE = 400.0

# Default starting rating for new teams
DEFAULT_ELO = 1500.0

# Actual scores fed into the update
WIN_SCORE = 1.0
LOSS_SCORE = 0.0
