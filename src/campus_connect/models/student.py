"""SQLAlchemy model for student profiles."""

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from campus_connect.db.session import Base


class Student(Base):
    """Profile of a student, keyed by the identity provider's user id."""

    __tablename__ = "student"

    uid: Mapped[str] = mapped_column(String(128), primary_key=True)
    scholar_number: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str | None] = mapped_column(Text, nullable=True)
    phone_number: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Stored as the enum values of campus_connect.services.eligibility.
    branch: Mapped[str] = mapped_column(String(16), nullable=False, default="Unknown")
    year_of_passing: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    gender: Mapped[str] = mapped_column(String(16), nullable=False, default="Unknown")
    program_type: Mapped[str] = mapped_column(
        String(16), nullable=False, default="Undergraduate"
    )

    resume_url: Mapped[str | None] = mapped_column(Text, nullable=True)
