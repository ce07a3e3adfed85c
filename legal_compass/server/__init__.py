"""
FastAPI server for the Legal Compass engine.

Provides REST API endpoints for querying the engine and managing
conversation sessions.
"""

from .main import app, create_app

__all__ = ["app", "create_app"]
