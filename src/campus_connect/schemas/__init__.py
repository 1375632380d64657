"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .common import VisibilityIn, VisibilityOut
from .event import EventCreate, EventResponse, EventUpdate, FeedEventResponse
from .lost_found import LostFoundItemResponse, LostFoundReport
from .opportunity import OpportunityCreate, OpportunityResponse, OpportunityUpdate
from .post import FeedPostResponse, PostCreate, PostResponse, PostUpdate
from .student import StudentResponse, StudentUpsert
from .vote import VoteCreate, VoteResponse

__all__ = [
    "VisibilityIn", "VisibilityOut",
    "EventCreate", "EventResponse", "EventUpdate", "FeedEventResponse",
    "LostFoundItemResponse", "LostFoundReport",
    "OpportunityCreate", "OpportunityResponse", "OpportunityUpdate",
    "FeedPostResponse", "PostCreate", "PostResponse", "PostUpdate",
    "StudentResponse", "StudentUpsert",
    "VoteCreate", "VoteResponse",
]
