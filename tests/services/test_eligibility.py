"""Tests for the eligibility filter."""

from dataclasses import dataclass
from itertools import product

import pytest

from campus_connect.core.exceptions import InvalidArgumentError
from campus_connect.services.eligibility import (
    PUBLIC_RULE,
    Branch,
    Gender,
    ViewerProfile,
    VisibilityRule,
    filter_visible,
    is_visible,
    parse_branch,
    parse_gender,
    parse_year,
)

CSE_FEMALE_2026 = ViewerProfile(branch=Branch.CSE, graduation_year=2026, gender=Gender.FEMALE)

ALL_VIEWERS = [None] + [
    ViewerProfile(branch=branch, graduation_year=year, gender=gender)
    for branch, year, gender in product(Branch, (0, 2025, 2026, 2027), Gender)
]


@dataclass
class _Item:
    name: str
    visibility: VisibilityRule | None


def test_public_rule_is_visible_to_everyone() -> None:
    """A rule with every dimension empty shows the item to any viewer, anonymous included."""
    for viewer in ALL_VIEWERS:
        assert is_visible(viewer, PUBLIC_RULE)
        assert is_visible(viewer, VisibilityRule.from_lists([], [], []))
        assert is_visible(viewer, VisibilityRule.from_lists(None, None, None))


def test_missing_rule_is_visible_to_everyone() -> None:
    for viewer in ALL_VIEWERS:
        assert is_visible(viewer, None)


@pytest.mark.parametrize(
    "rule",
    [
        VisibilityRule.from_lists(["ECE"], [2026], ["Female"]),
        VisibilityRule.from_lists(["CSE"], [2027], ["Female"]),
        VisibilityRule.from_lists(["CSE"], [2026], ["Male"]),
        VisibilityRule.from_lists(["IT"], [], []),
        VisibilityRule.from_lists([], [2025], []),
        VisibilityRule.from_lists([], [], ["Other"]),
    ],
)
def test_each_dimension_must_match(rule: VisibilityRule) -> None:
    """Matching two dimensions is not enough when the third excludes the viewer."""
    assert not is_visible(CSE_FEMALE_2026, rule)


def test_non_matching_dimension_excludes_every_viewer() -> None:
    rule = VisibilityRule.from_lists(["CSE", "IT"], [2026], [])
    for viewer in ALL_VIEWERS[1:]:
        expected = viewer.branch in {Branch.CSE, Branch.IT} and viewer.graduation_year == 2026
        assert is_visible(viewer, rule) is expected


def test_branch_scenarios() -> None:
    assert is_visible(CSE_FEMALE_2026, VisibilityRule.from_lists(["CSE", "IT"], [], []))
    assert not is_visible(CSE_FEMALE_2026, VisibilityRule.from_lists(["ECE"], [], []))


def test_year_match_is_exact_membership() -> None:
    rule = VisibilityRule.from_lists([], [2025, 2027], [])
    assert not is_visible(CSE_FEMALE_2026, rule)
    assert is_visible(ViewerProfile(graduation_year=2027), rule)


def test_anonymous_viewer_only_sees_public_items() -> None:
    assert not is_visible(None, VisibilityRule.from_lists(["CSE"], [], []))
    assert not is_visible(None, VisibilityRule.from_lists([], [], ["Unknown"]))


def test_filter_visible_preserves_order() -> None:
    items = [
        _Item("public", PUBLIC_RULE),
        _Item("ece-only", VisibilityRule.from_lists(["ECE"], [], [])),
        _Item("unset", None),
        _Item("women-2026", VisibilityRule.from_lists([], ["2026"], ["female"])),
        _Item("men", VisibilityRule.from_lists([], [], ["Male"])),
    ]

    visible = filter_visible(items, CSE_FEMALE_2026)

    assert [item.name for item in visible] == ["public", "unset", "women-2026"]
    assert [item.name for item in filter_visible(items, None)] == ["public", "unset"]


def test_rule_parsing_is_lenient_about_case_and_spacing() -> None:
    rule = VisibilityRule.from_lists(["cse", " it "], ["2026", 2027], ["prefer not to say"])
    assert rule.branches == {Branch.CSE, Branch.IT}
    assert rule.graduation_years == {2026, 2027}
    assert rule.genders == {Gender.PREFER_NOT_TO_SAY}
    assert rule.to_lists() == {
        "branches": ["CSE", "IT"],
        "graduation_years": [2026, 2027],
        "genders": ["PreferNotToSay"],
    }


@pytest.mark.parametrize(
    ("parser", "raw"),
    [
        (parse_branch, "MECH"),
        (parse_gender, "robot"),
        (parse_year, "twenty"),
        (parse_year, True),
        (parse_year, 2026.5),
    ],
)
def test_malformed_values_are_rejected(parser, raw) -> None:
    with pytest.raises(InvalidArgumentError):
        parser(raw)
