"""Student profile endpoints."""

from fastapi import APIRouter

from campus_connect.schemas.student import ResumeUpdate, StudentResponse, StudentUpsert
from campus_connect.services import students as student_service

from ..dependencies import CurrentUidDep, SessionDep

router = APIRouter(prefix="/students", tags=["students"])


@router.get("/me", response_model=StudentResponse)
def get_my_profile(uid: CurrentUidDep, db: SessionDep) -> StudentResponse:
    """Get the caller's profile.

    Args:
        uid: Authenticated caller
        db: Database session

    Returns:
        The stored profile
    """
    return StudentResponse.model_validate(student_service.get_student(db, uid))


@router.put("/me", response_model=StudentResponse)
def upsert_my_profile(profile: StudentUpsert, uid: CurrentUidDep, db: SessionDep) -> StudentResponse:
    """Create or replace the caller's profile; the uid always comes from the token."""
    return StudentResponse.model_validate(student_service.upsert_student(db, uid, profile))


@router.put("/me/resume", response_model=StudentResponse)
def update_my_resume(resume: ResumeUpdate, uid: CurrentUidDep, db: SessionDep) -> StudentResponse:
    student = student_service.update_resume_url(db, uid, resume.resume_url)
    return StudentResponse.model_validate(student)
