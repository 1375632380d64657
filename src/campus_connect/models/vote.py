"""Models capturing voting interactions on posts."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from campus_connect.db.session import Base
from campus_connect.db.time import utcnow


class PostVote(Base):
    """Per-student vote on a post."""

    __tablename__ = "post_vote"
    __table_args__ = (
        CheckConstraint("vote_type IN ('up', 'down')", name="ck_post_vote_type"),
        Index("ix_post_vote_post_id", "post_id"),
    )

    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        primary_key=True,
    )

    voter_uid: Mapped[str] = mapped_column(
        String(128),
        ForeignKey("student.uid", ondelete="CASCADE"),
        primary_key=True,
    )

    # Composite primary key prevents duplicate votes from the same student.

    vote_type: Mapped[str] = mapped_column(String(8), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
