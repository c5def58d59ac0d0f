"""Web (FastAPI) layer for leaguelo."""
