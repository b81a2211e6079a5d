"""
Academy Calendar API module.

Provides FastAPI HTTP endpoints for the expansion engine.
"""

from academy_calendar.api.main import app, run_server

__all__ = ["app", "run_server"]
