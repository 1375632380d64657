"""SQLAlchemy models for events, registrations and reactions."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from campus_connect.db.session import Base
from campus_connect.db.time import utcnow
from campus_connect.models.mixins import VisibilityMixin

REACTION_LIKE = "like"
REACTION_DISLIKE = "dislike"


class Event(VisibilityMixin, Base):
    """Campus event that students can register for."""

    __tablename__ = "event"
    __table_args__ = (
        CheckConstraint("registration_count >= 0", name="ck_event_registration_count_nonneg"),
        Index("ix_event_created_at", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    creator_uid: Mapped[str] = mapped_column(
        String(128),
        ForeignKey("student.uid"),
        nullable=False,
        index=True,
    )
    creator_name: Mapped[str] = mapped_column(Text, nullable=False)
    creator_scholar_number: Mapped[str] = mapped_column(String(32), nullable=False)

    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    poster_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str | None] = mapped_column(Text, nullable=True)
    start_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    end_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Short shareable slug.
    event_link: Mapped[str] = mapped_column(String(16), unique=True, nullable=False)
    registration_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class EventRegistration(Base):
    """A student's registration for an event."""

    __tablename__ = "event_registration"

    event_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("event.id", ondelete="CASCADE"),
        primary_key=True,
    )
    attendee_uid: Mapped[str] = mapped_column(
        String(128),
        ForeignKey("student.uid", ondelete="CASCADE"),
        primary_key=True,
    )
    # Contact details copied at registration time for the organiser.
    scholar_number: Mapped[str] = mapped_column(String(32), nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str | None] = mapped_column(Text, nullable=True)
    phone_number: Mapped[str | None] = mapped_column(Text, nullable=True)
    registered_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class EventReaction(Base):
    """Like or dislike of an event; one per student."""

    __tablename__ = "event_reaction"
    __table_args__ = (
        CheckConstraint("reaction IN ('like', 'dislike')", name="ck_event_reaction_kind"),
    )

    event_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("event.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_uid: Mapped[str] = mapped_column(
        String(128),
        ForeignKey("student.uid", ondelete="CASCADE"),
        primary_key=True,
    )
    reaction: Mapped[str] = mapped_column(String(8), nullable=False)
