"""Post-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .common import VisibilityIn, VisibilityOut, orm_to_dict


class PostCreate(BaseModel):
    """Schema for creating a new post."""

    title: str = Field(..., min_length=1, max_length=200)
    body: str = Field(..., min_length=1, max_length=10000)
    image_url: str | None = Field(None, description="Image URL in object storage")
    visibility: VisibilityIn = Field(default_factory=VisibilityIn)


class PostUpdate(BaseModel):
    """Fields the author may change; omitted fields are left alone."""

    title: str | None = Field(None, min_length=1, max_length=200)
    body: str | None = Field(None, min_length=1, max_length=10000)
    image_url: str | None = None
    visibility: VisibilityIn | None = None


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: int
    author_uid: str
    author_name: str
    author_scholar_number: str
    title: str
    body: str
    image_url: str | None
    created_at: datetime
    upvotes: int
    downvotes: int
    visibility: VisibilityOut

    @model_validator(mode="before")
    @classmethod
    def _extract(cls, data: object) -> object:
        return orm_to_dict(cls, data)

    model_config = ConfigDict(from_attributes=True)


class FeedPostResponse(PostResponse):
    """Post decorated with the caller's own vote and favourite state."""

    user_vote: Literal["up", "down"] | None = None
    is_favorite: bool = False


class FavoriteToggleResponse(BaseModel):
    """Favourite state after a toggle."""

    post_id: int
    is_favorite: bool
