"""
leaguelo - League, team and schedule service with Elo team ratings

A small HTTP service for managing sports leagues, their teams and match
schedules. Recording a match result updates both teams' Elo ratings.

Main components:
- config: Settings loaded from environment variables
- db: SQLAlchemy models, sessions and the league repository
- elo: Elo rating math
- services: Result recording (rating updates) and logo storage
- web: FastAPI application and admin authentication
"""

__version__ = "1.0.0"
