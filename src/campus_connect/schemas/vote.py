"""Vote-related Pydantic schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class VoteCreate(BaseModel):
    """Schema for casting, switching or withdrawing a vote."""

    post_id: int
    action: Literal["up", "down", "unvote"] = Field(
        ...,
        description="'up' or 'down' (repeating the current vote withdraws it), or 'unvote'",
    )


class VoteResponse(BaseModel):
    """Post counters after the vote was applied."""

    post_id: int
    vote: Literal["up", "down"] | None
    upvotes: int
    downvotes: int


class MyVoteResponse(BaseModel):
    """The caller's current vote on a post."""

    post_id: int
    vote: Literal["up", "down"] | None
