"""Version 1 API endpoints."""

from .endpoints import (
    events_router,
    lost_found_router,
    opportunities_router,
    posts_router,
    students_router,
    votes_router,
)

__all__ = [
    "posts_router",
    "votes_router",
    "events_router",
    "opportunities_router",
    "lost_found_router",
    "students_router",
]
