"""API routes."""

from .media import router as media_router
from .memories import router as memories_router
from .reminders import router as reminders_router
from .suggestions import router as suggestions_router

__all__ = [
    "media_router",
    "memories_router",
    "reminders_router",
    "suggestions_router",
]
