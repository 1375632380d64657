"""Shared API dependencies for authentication and common functionality."""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from campus_connect.core.security import decode_subject
from campus_connect.db.session import get_db
from campus_connect.models import Student
from campus_connect.services.eligibility import ViewerProfile
from campus_connect.services.students import find_student, viewer_profile_for

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()
optional_bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def _uid_from_token(token: str) -> str:
    uid = decode_subject(token)
    if uid is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )
    return uid


def get_current_uid(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
) -> str:
    """Return the uid of the authenticated caller.

    Raises:
        HTTPException: If the token is invalid or has no subject.
    """
    return _uid_from_token(credentials.credentials)


CurrentUidDep = Annotated[str, Depends(get_current_uid)]


def get_current_user(uid: CurrentUidDep, db: SessionDep) -> Student:
    """Get the authenticated caller's student profile.

    Creating content needs the denormalised author fields, so a caller who
    has not set up a profile yet is refused.

    Raises:
        HTTPException: If the caller has no profile.
    """
    student = find_student(db, uid)
    if student is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Complete your student profile first",
        )
    return student


# Type alias for current user dependency
CurrentUserDep = Annotated[Student, Depends(get_current_user)]


@dataclass(frozen=True)
class Viewer:
    """Caller of a read endpoint; both fields are None for anonymous callers."""

    uid: str | None = None
    profile: ViewerProfile | None = None


def get_optional_viewer(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(optional_bearer_scheme)],
    db: SessionDep,
) -> Viewer:
    """Resolve the caller if a token was sent; anonymous callers are allowed."""
    if credentials is None:
        return Viewer()
    uid = _uid_from_token(credentials.credentials)
    return Viewer(uid=uid, profile=viewer_profile_for(find_student(db, uid)))


ViewerDep = Annotated[Viewer, Depends(get_optional_viewer)]
