"""SQLAlchemy models for posts and favourites."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from campus_connect.db.session import Base
from campus_connect.db.time import utcnow
from campus_connect.models.mixins import VisibilityMixin


class Post(VisibilityMixin, Base):
    """Notice or discussion post written by a student."""

    __tablename__ = "post"
    __table_args__ = (
        CheckConstraint("upvotes >= 0", name="ck_post_upvotes_nonneg"),
        CheckConstraint("downvotes >= 0", name="ck_post_downvotes_nonneg"),
        Index("ix_post_created_at", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    author_uid: Mapped[str] = mapped_column(
        String(128),
        ForeignKey("student.uid"),
        nullable=False,
        index=True,
    )
    # Denormalised for display.
    author_name: Mapped[str] = mapped_column(Text, nullable=False)
    author_scholar_number: Mapped[str] = mapped_column(String(32), nullable=False)

    title: Mapped[str] = mapped_column(Text, nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    # Only ever changed through campus_connect.services.voting.cast_vote.
    upvotes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    downvotes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class FavoritePost(Base):
    """Bookmark of a post by a student."""

    __tablename__ = "favorite_post"

    user_uid: Mapped[str] = mapped_column(
        String(128),
        ForeignKey("student.uid", ondelete="CASCADE"),
        primary_key=True,
    )
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        primary_key=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
