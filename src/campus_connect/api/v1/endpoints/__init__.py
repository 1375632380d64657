"""API endpoint modules for version 1."""

from .events import router as events_router
from .lost_found import router as lost_found_router
from .opportunities import router as opportunities_router
from .posts import router as posts_router
from .students import router as students_router
from .votes import router as votes_router

__all__ = [
    "events_router",
    "lost_found_router",
    "opportunities_router",
    "posts_router",
    "students_router",
    "votes_router",
]
