"""Typed failures raised by the service layer.

Services raise these instead of ``HTTPException`` so they can be exercised
without a request context; ``campus_connect.main`` translates them into HTTP
responses using ``status_code``.
"""

from __future__ import annotations

from typing import Any

from fastapi import status


class CampusConnectError(Exception):
    """Base exception for all Campus Connect failures."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.default_code
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"detail": self.message, "code": self.code}


class NotFoundError(CampusConnectError):
    """Target record does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_code = "NOT_FOUND"

    def __init__(self, resource_type: str, resource_id: object) -> None:
        super().__init__(
            f"{resource_type} not found",
            code=f"{resource_type.upper().replace(' ', '_')}_NOT_FOUND",
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class UnauthenticatedError(CampusConnectError):
    """The action needs a signed-in student."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_code = "UNAUTHENTICATED"

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class PermissionDeniedError(CampusConnectError):
    """The caller is signed in but does not own the record."""

    status_code = status.HTTP_403_FORBIDDEN
    default_code = "PERMISSION_DENIED"


class InvalidArgumentError(CampusConnectError):
    """Malformed input such as a non-numeric graduation year."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "INVALID_ARGUMENT"


class AlreadyExistsError(CampusConnectError):
    """A unique per-user record (registration, claim) already exists."""

    status_code = status.HTTP_409_CONFLICT
    default_code = "ALREADY_EXISTS"


class ConflictError(CampusConnectError):
    """A transaction could not commit after exhausting its retries."""

    status_code = status.HTTP_409_CONFLICT
    default_code = "CONFLICT"
