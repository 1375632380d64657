"""Bearer token helpers for the external identity provider.

The identity provider issues HS256 JWTs whose ``sub`` claim is the student's
uid. ``create_access_token`` mirrors its format for local tooling and tests.
"""
from __future__ import annotations

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from campus_connect.core.settings import settings


def create_access_token(uid: str, extra_claims: dict[str, str] | None = None) -> str:
    """Create a JWT access token for ``uid``."""
    to_encode: dict[str, object] = {"sub": uid}
    if extra_claims:
        to_encode.update(extra_claims)
    expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode["exp"] = expire
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_subject(token: str) -> str | None:
    """Return the ``sub`` claim of a valid token, or None if it is invalid."""
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        return None
    subject = payload.get("sub")
    return subject if isinstance(subject, str) and subject else None
