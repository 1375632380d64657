"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from campus_connect.services.eligibility import VisibilityRule


class VisibilityIn(BaseModel):
    """Allow-lists restricting who can see an item; empty lists mean everyone."""

    branches: list[str] = Field(default_factory=list, description="Allowed branches")
    # Left loose so that a non-numeric year reaches the service as InvalidArgumentError.
    graduation_years: list[int | str] = Field(
        default_factory=list,
        description="Allowed graduation years",
    )
    genders: list[str] = Field(default_factory=list, description="Allowed genders")

    def to_rule(self) -> VisibilityRule:
        return VisibilityRule.from_lists(self.branches, self.graduation_years, self.genders)


class VisibilityOut(BaseModel):
    """Visibility rule as returned by the API."""

    branches: list[str]
    graduation_years: list[int]
    genders: list[str]


def orm_to_dict(model: type[BaseModel], data: object) -> dict[str, Any]:
    """Copy the model's fields off an ORM row and attach its visibility rule."""
    if isinstance(data, dict):
        return data
    extracted: dict[str, Any] = {}
    for field_name in model.model_fields:
        if hasattr(data, field_name):
            extracted[field_name] = getattr(data, field_name)
    rule = getattr(data, "visibility", None)
    if isinstance(rule, VisibilityRule):
        extracted["visibility"] = rule.to_lists()
    return extracted
