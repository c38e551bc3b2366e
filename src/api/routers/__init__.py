"""API routers for quizmark."""

from src.api.routers import quiz_router

__all__ = [
    "quiz_router",
]
