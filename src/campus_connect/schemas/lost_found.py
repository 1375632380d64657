"""Lost-and-found Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class LostFoundReport(BaseModel):
    """Schema for reporting a lost or a found item."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5000)
    location: str | None = None
    image_url: str | None = None
    reported_at: datetime | None = Field(
        None,
        description="When the item was lost or found; defaults to now",
    )


class LostFoundItemResponse(BaseModel):
    """Lost-and-found item returned by the API."""

    id: int
    kind: Literal["lost", "found"]
    status: Literal["active", "inactive"]
    reporter_uid: str
    reporter_name: str
    reporter_scholar_number: str
    title: str
    description: str | None
    location: str | None
    image_url: str | None
    reported_at: datetime
    created_at: datetime
    confirmed_claimer_uid: str | None
    source_item_id: int | None

    model_config = ConfigDict(from_attributes=True)


class ClaimerResponse(BaseModel):
    """A student who has claimed a found item."""

    uid: str
    name: str
    scholar_number: str
    claimed_at: datetime


class ConfirmClaimRequest(BaseModel):
    claimer_uid: str
