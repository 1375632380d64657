"""Student profile schemas."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class StudentUpsert(BaseModel):
    """Profile fields a student can set for themselves."""

    scholar_number: str = Field(..., min_length=1, max_length=32)
    name: str = Field(..., min_length=1, max_length=200)
    email: str | None = None
    phone_number: str | None = None
    branch: str = Field("Unknown", description="CSE, IT, ECE or Unknown")
    year_of_passing: int | str = Field(0, description="Graduation year")
    gender: str = Field("Unknown", description="Male, Female, Other, PreferNotToSay or Unknown")
    program_type: Literal["Undergraduate", "Postgraduate"] = "Undergraduate"


class ResumeUpdate(BaseModel):
    """New resume URL from object storage, or null to remove it."""

    resume_url: str | None = None


class StudentResponse(BaseModel):
    """Student profile returned by the API."""

    uid: str
    scholar_number: str
    name: str
    email: str | None
    phone_number: str | None
    branch: str
    year_of_passing: int
    gender: str
    program_type: str
    resume_url: str | None

    model_config = ConfigDict(from_attributes=True)
