"""
Dependency injection for FastAPI.

Provides the singleton LegalEngine instance.
"""

import logging
from typing import Optional

from ..config import get_settings
from ..retrieval import LegalEngine

logger = logging.getLogger(__name__)

# Global singleton instance
_engine: Optional[LegalEngine] = None


def _init_engine() -> LegalEngine:
    """Initialize the engine (singleton)."""
    global _engine

    if _engine is None:
        _engine = LegalEngine.from_settings(get_settings())
        logger.info("Legal Compass engine loaded successfully")

    return _engine


def get_engine() -> LegalEngine:
    """
    Get the singleton engine instance.

    This is the main dependency for API endpoints.
    The index is loaded once on first call.
    """
    return _init_engine()


def set_engine(engine: Optional[LegalEngine]) -> None:
    """Replace the singleton (used by tests and custom deployments)."""
    global _engine
    _engine = engine


def startup_load():
    """
    Pre-load the engine on server startup.

    Call this in FastAPI's lifespan to ensure indices are loaded
    before handling requests.
    """
    logger.info("Pre-loading Legal Compass engine on startup...")
    _init_engine()
    logger.info("Startup complete")
