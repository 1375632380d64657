"""Column mixins shared by content models."""

from sqlalchemy import JSON
from sqlalchemy.orm import Mapped, mapped_column

from campus_connect.services.eligibility import VisibilityRule


class VisibilityMixin:
    """Stores a visibility rule as three JSON allow-lists.

    An empty list is the only way to express "unrestricted"; the columns are
    never NULL so absent and empty cannot diverge.
    """

    visible_branches: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    visible_years: Mapped[list[int]] = mapped_column(JSON, nullable=False, default=list)
    visible_genders: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    @property
    def visibility(self) -> VisibilityRule:
        return VisibilityRule.from_lists(
            self.visible_branches,
            self.visible_years,
            self.visible_genders,
        )

    def set_visibility(self, rule: VisibilityRule) -> None:
        lists = rule.to_lists()
        self.visible_branches = lists["branches"]
        self.visible_years = lists["graduation_years"]
        self.visible_genders = lists["genders"]
