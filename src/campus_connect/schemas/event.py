"""Event-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .common import VisibilityIn, VisibilityOut, orm_to_dict


class EventCreate(BaseModel):
    """Schema for creating an event."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=10000)
    poster_url: str | None = None
    location: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    visibility: VisibilityIn = Field(default_factory=VisibilityIn)


class EventUpdate(BaseModel):
    """Fields the organiser may change; omitted fields are left alone."""

    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, min_length=1, max_length=10000)
    poster_url: str | None = None
    location: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    visibility: VisibilityIn | None = None


class EventResponse(BaseModel):
    """Event returned by the API."""

    id: int
    creator_uid: str
    creator_name: str
    creator_scholar_number: str
    title: str
    description: str
    poster_url: str | None
    location: str | None
    start_time: datetime | None
    end_time: datetime | None
    event_link: str
    registration_count: int
    created_at: datetime
    visibility: VisibilityOut

    @model_validator(mode="before")
    @classmethod
    def _extract(cls, data: object) -> object:
        return orm_to_dict(cls, data)

    model_config = ConfigDict(from_attributes=True)


class FeedEventResponse(EventResponse):
    """Event decorated with the caller's registration and reaction."""

    is_registered: bool = False
    is_liked: bool = False
    is_disliked: bool = False


class RegistrationResponse(BaseModel):
    """A registration as seen by the organiser."""

    event_id: int
    attendee_uid: str
    scholar_number: str
    name: str
    email: str | None
    phone_number: str | None
    registered_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RegistrationStatus(BaseModel):
    event_id: int
    is_registered: bool


class ReactionRequest(BaseModel):
    reaction: Literal["like", "dislike"]


class ReactionResponse(BaseModel):
    """Reaction totals after a change."""

    event_id: int
    reaction: Literal["like", "dislike"] | None
    likes: int
    dislikes: int
