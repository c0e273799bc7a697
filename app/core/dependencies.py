"""
FastAPI dependencies shared by the routers.
"""

from app.db.session import get_db
from app.services.gemini_client import GeminiClient

__all__ = ["get_db", "get_gemini_client"]


def get_gemini_client() -> GeminiClient:
    """Gemini client built from settings; overridden in tests."""
    return GeminiClient()
