"""SQLAlchemy models for the Campus Connect application."""

from .event import Event, EventReaction, EventRegistration
from .lost_found import ItemClaim, LostFoundItem
from .opportunity import Opportunity
from .post import FavoritePost, Post
from .student import Student
from .vote import PostVote

__all__ = [
    "Event", "EventReaction", "EventRegistration",
    "ItemClaim", "LostFoundItem",
    "Opportunity",
    "FavoritePost", "Post",
    "Student",
    "PostVote",
]
