"""SQLAlchemy model for job and internship postings."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from campus_connect.db.session import Base
from campus_connect.db.time import utcnow
from campus_connect.models.mixins import VisibilityMixin


class Opportunity(VisibilityMixin, Base):
    """Job or internship opportunity; the visibility columns hold its eligibility."""

    __tablename__ = "opportunity"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    poster_uid: Mapped[str] = mapped_column(
        String(128),
        ForeignKey("student.uid"),
        nullable=False,
        index=True,
    )
    poster_name: Mapped[str] = mapped_column(Text, nullable=False)
    poster_scholar_number: Mapped[str] = mapped_column(String(32), nullable=False)

    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    apply_link: Mapped[str] = mapped_column(Text, nullable=False)
    deadline: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
