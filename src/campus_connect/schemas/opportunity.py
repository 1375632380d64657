"""Opportunity-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .common import VisibilityIn, VisibilityOut, orm_to_dict


class OpportunityCreate(BaseModel):
    """Schema for posting a job or internship."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=10000)
    apply_link: str = Field(..., min_length=1)
    deadline: datetime
    eligibility: VisibilityIn = Field(default_factory=VisibilityIn)


class OpportunityUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, min_length=1, max_length=10000)
    apply_link: str | None = Field(None, min_length=1)
    deadline: datetime | None = None
    eligibility: VisibilityIn | None = None


class OpportunityResponse(BaseModel):
    """Opportunity returned by the API."""

    id: int
    poster_uid: str
    poster_name: str
    poster_scholar_number: str
    title: str
    description: str
    apply_link: str
    deadline: datetime
    created_at: datetime
    eligibility: VisibilityOut

    @model_validator(mode="before")
    @classmethod
    def _extract(cls, data: object) -> object:
        extracted = orm_to_dict(cls, data)
        if "visibility" in extracted and "eligibility" not in extracted:
            extracted["eligibility"] = extracted.pop("visibility")
        return extracted

    model_config = ConfigDict(from_attributes=True)
