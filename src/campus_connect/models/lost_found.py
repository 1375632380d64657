"""SQLAlchemy models for the lost-and-found board."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from campus_connect.db.session import Base
from campus_connect.db.time import utcnow

KIND_LOST = "lost"
KIND_FOUND = "found"
STATUS_ACTIVE = "active"
STATUS_INACTIVE = "inactive"


class LostFoundItem(Base):
    """A lost or found report."""

    __tablename__ = "lost_found_item"
    __table_args__ = (
        CheckConstraint("kind IN ('lost', 'found')", name="ck_lost_found_kind"),
        CheckConstraint("status IN ('active', 'inactive')", name="ck_lost_found_status"),
        Index("ix_lost_found_kind_status", "kind", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    kind: Mapped[str] = mapped_column(String(8), nullable=False)
    status: Mapped[str] = mapped_column(String(8), nullable=False, default=STATUS_ACTIVE)

    reporter_uid: Mapped[str] = mapped_column(
        String(128),
        ForeignKey("student.uid"),
        nullable=False,
        index=True,
    )
    reporter_name: Mapped[str] = mapped_column(Text, nullable=False)
    reporter_scholar_number: Mapped[str] = mapped_column(String(32), nullable=False)

    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    # When the item was lost or found, as reported.
    reported_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    confirmed_claimer_uid: Mapped[str | None] = mapped_column(String(128), nullable=True)
    # Lost report this found report was raised from, if any.
    source_item_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("lost_found_item.id", ondelete="SET NULL"),
        nullable=True,
    )


class ItemClaim(Base):
    """A student's pending claim on a found item."""

    __tablename__ = "item_claim"

    item_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("lost_found_item.id", ondelete="CASCADE"),
        primary_key=True,
    )
    claimer_uid: Mapped[str] = mapped_column(
        String(128),
        ForeignKey("student.uid", ondelete="CASCADE"),
        primary_key=True,
    )
    claimed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
