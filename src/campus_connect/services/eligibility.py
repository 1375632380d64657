"""Eligibility-based visibility filtering for posts, events and opportunities.

A content item carries a :class:`VisibilityRule` made of three allow-lists
(branch, graduation year, gender). An empty allow-list leaves that dimension
unrestricted; a viewer must satisfy every non-empty dimension to see the item.
Anonymous viewers only see items whose rule is fully public.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, TypeVar

from campus_connect.core.exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)


class Branch(str, Enum):
    """Academic branch of a student."""

    CSE = "CSE"
    IT = "IT"
    ECE = "ECE"
    UNKNOWN = "Unknown"


class Gender(str, Enum):
    """Self-reported gender of a student."""

    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"
    PREFER_NOT_TO_SAY = "PreferNotToSay"
    UNKNOWN = "Unknown"


_E = TypeVar("_E", Branch, Gender)


def _parse_member(enum_cls: type[_E], raw: object) -> _E:
    if isinstance(raw, enum_cls):
        return raw
    if isinstance(raw, str):
        wanted = raw.strip().replace(" ", "").lower()
        for member in enum_cls:
            if member.value.lower() == wanted:
                return member
    raise InvalidArgumentError(f"Unknown {enum_cls.__name__.lower()}: {raw!r}")


def parse_branch(raw: object) -> Branch:
    """Parse a branch name case-insensitively."""
    return _parse_member(Branch, raw)


def parse_gender(raw: object) -> Gender:
    """Parse a gender name case-insensitively (``"prefer not to say"`` is accepted)."""
    return _parse_member(Gender, raw)


def parse_year(raw: object) -> int:
    """Parse a graduation year given as an int or a numeric string."""
    if isinstance(raw, bool):
        raise InvalidArgumentError(f"Graduation year must be numeric: {raw!r}")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and raw.strip().isdigit():
        return int(raw.strip())
    raise InvalidArgumentError(f"Graduation year must be numeric: {raw!r}")


@dataclass(frozen=True)
class ViewerProfile:
    """Demographic attributes of the student requesting a feed."""

    branch: Branch = Branch.UNKNOWN
    graduation_year: int = 0
    gender: Gender = Gender.UNKNOWN


@dataclass(frozen=True)
class VisibilityRule:
    """Per-item allow-lists; an empty set means unrestricted on that dimension."""

    branches: frozenset[Branch] = field(default_factory=frozenset)
    graduation_years: frozenset[int] = field(default_factory=frozenset)
    genders: frozenset[Gender] = field(default_factory=frozenset)

    @classmethod
    def from_lists(
        cls,
        branches: Iterable[object] | None = None,
        graduation_years: Iterable[object] | None = None,
        genders: Iterable[object] | None = None,
    ) -> VisibilityRule:
        """Build a rule from loosely typed lists; ``None`` is the same as empty.

        Raises:
            InvalidArgumentError: If a year is not numeric or a branch/gender is unknown.
        """
        return cls(
            branches=frozenset(parse_branch(b) for b in branches or ()),
            graduation_years=frozenset(parse_year(y) for y in graduation_years or ()),
            genders=frozenset(parse_gender(g) for g in genders or ()),
        )

    @property
    def is_public(self) -> bool:
        return not (self.branches or self.graduation_years or self.genders)

    def to_lists(self) -> dict[str, list]:
        """Return sorted plain lists suitable for JSON storage."""
        return {
            "branches": sorted(b.value for b in self.branches),
            "graduation_years": sorted(self.graduation_years),
            "genders": sorted(g.value for g in self.genders),
        }


PUBLIC_RULE = VisibilityRule()


class HasVisibility(Protocol):
    @property
    def visibility(self) -> VisibilityRule | None: ...


_T = TypeVar("_T", bound=HasVisibility)


def is_visible(viewer: ViewerProfile | None, rule: VisibilityRule | None) -> bool:
    """Return True if ``viewer`` may see an item restricted by ``rule``.

    A missing rule means no restriction was ever set. A missing viewer
    (anonymous caller) only sees fully public items. Otherwise branch, year
    and gender must all match.
    """
    if rule is None:
        return True
    if viewer is None:
        return rule.is_public

    branch_ok = not rule.branches or viewer.branch in rule.branches
    year_ok = not rule.graduation_years or viewer.graduation_year in rule.graduation_years
    gender_ok = not rule.genders or viewer.gender in rule.genders
    return branch_ok and year_ok and gender_ok


def filter_visible(items: Iterable[_T], viewer: ViewerProfile | None) -> list[_T]:
    """Return the items ``viewer`` may see, preserving their order."""
    source = list(items)
    visible = [item for item in source if is_visible(viewer, item.visibility)]
    logger.debug("Eligibility filter kept %d of %d items", len(visible), len(source))
    return visible
