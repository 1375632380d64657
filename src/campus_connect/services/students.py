"""Student profile store."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from campus_connect.core.exceptions import (
    AlreadyExistsError,
    InvalidArgumentError,
    NotFoundError,
)
from campus_connect.models import Student
from campus_connect.schemas.student import StudentUpsert
from campus_connect.services.eligibility import (
    Branch,
    Gender,
    ViewerProfile,
    parse_branch,
    parse_gender,
    parse_year,
)

logger = logging.getLogger(__name__)


def find_student(db: Session, uid: str) -> Student | None:
    return db.get(Student, uid)


def get_student(db: Session, uid: str) -> Student:
    """Return the profile for ``uid`` or raise ``NotFoundError``."""
    student = db.get(Student, uid)
    if student is None:
        raise NotFoundError("Student", uid)
    return student


def upsert_student(db: Session, uid: str, data: StudentUpsert) -> Student:
    """Create or replace the caller's profile.

    Raises:
        InvalidArgumentError: If branch, gender or year cannot be parsed.
        AlreadyExistsError: If the scholar number belongs to another student.
    """
    branch = parse_branch(data.branch)
    gender = parse_gender(data.gender)
    year = parse_year(data.year_of_passing)

    owner = db.query(Student).filter(
        Student.scholar_number == data.scholar_number,
        Student.uid != uid,
    ).first()
    if owner is not None:
        raise AlreadyExistsError("Scholar number is already registered to another student")

    student = db.get(Student, uid)
    if student is None:
        student = Student(uid=uid)
        db.add(student)
        logger.info("Creating profile for %s", uid)

    student.scholar_number = data.scholar_number
    student.name = data.name
    student.email = data.email
    student.phone_number = data.phone_number
    student.branch = branch.value
    student.gender = gender.value
    student.year_of_passing = year
    student.program_type = data.program_type

    db.commit()
    db.refresh(student)
    return student


def viewer_profile_for(student: Student | None) -> ViewerProfile | None:
    """Project a stored profile onto the attributes used for eligibility.

    Unparseable stored values fall back to ``Unknown`` so a stale profile
    still sees public content.
    """
    if student is None:
        return None
    try:
        branch = parse_branch(student.branch)
    except InvalidArgumentError:
        branch = Branch.UNKNOWN
    try:
        gender = parse_gender(student.gender)
    except InvalidArgumentError:
        gender = Gender.UNKNOWN
    return ViewerProfile(
        branch=branch,
        graduation_year=student.year_of_passing or 0,
        gender=gender,
    )


def update_resume_url(db: Session, uid: str, resume_url: str | None) -> Student:
    """Point the caller's profile at a resume in object storage, or clear it."""
    student = get_student(db, uid)
    student.resume_url = resume_url
    db.commit()
    db.refresh(student)
    logger.info("Resume URL %s for %s", "updated" if resume_url else "cleared", uid)
    return student
