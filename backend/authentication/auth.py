"""
Bearer-token authentication against the external identity provider.

The provider signs JWTs with a shared secret; this module verifies them,
provisions a profile on first sight and turns the caller into an
AuthContext that is resolved once per request and handed to services.
Roles always come from the stored profile, never from token claims.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from loguru import logger
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from models.config import settings
from models.exceptions import (
    AuthenticationException,
    InsufficientPermissionsException,
)
from repositories.database import get_db
from repositories.profile_repository import ProfileRepository

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(
    subject: str,
    claims: Optional[dict[str, Any]] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Sign a token the way the identity provider does.

    Used by init_db.py to print an admin token for the moderation console,
    and by tests.
    """
    to_encode: dict[str, Any] = {"sub": subject, **(claims or {})}
    if settings.JWT_AUDIENCE:
        to_encode.setdefault("aud", settings.JWT_AUDIENCE)
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=60))
    to_encode["exp"] = expire
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    """
    Verify a bearer token and return its claims.

    Raises:
        AuthenticationException: If the token is expired, malformed or lacks a subject.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            options={"verify_aud": settings.JWT_AUDIENCE is not None},
        )
    except jwt.exceptions.ExpiredSignatureError:
        raise AuthenticationException("Session expired. Please log in again.")
    except jwt.exceptions.InvalidTokenError:
        raise AuthenticationException("Could not validate credentials")

    if not payload.get("sub"):
        raise AuthenticationException("Could not validate credentials")
    return payload


def _full_name_from_claims(payload: dict[str, Any]) -> Optional[str]:
    metadata = payload.get("user_metadata") or {}
    return metadata.get("full_name") or payload.get("full_name")


def resolve_profile(db: Session, payload: dict[str, Any]) -> db_models.Profile:
    """
    Load the caller's profile, creating it on first sight.

    Args:
        db: Database session
        payload: Verified token claims

    Returns:
        The stored profile
    """
    repo = ProfileRepository(db)
    profile_id = str(payload["sub"])
    profile = repo.get_by_id(profile_id)
    if profile is not None:
        return profile

    profile = db_models.Profile(
        id=profile_id,
        email=payload.get("email"),
        full_name=_full_name_from_claims(payload),
        role=db_models.ProfileRole.STUDENT,
    )
    logger.info(f"Provisioning profile {profile_id}")
    return repo.create(profile)


def to_auth_context(profile: db_models.Profile) -> schemas.AuthContext:
    return schemas.AuthContext(
        profile_id=profile.id,
        role=profile.role,
        email=profile.email,
        full_name=profile.full_name,
    )


async def get_optional_auth_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Optional[schemas.AuthContext]:
    """
    Resolve the caller if a bearer token was sent, otherwise None.

    A token that is sent but invalid is an error (401), not anonymous access.
    """
    if credentials is None:
        return None
    payload = decode_token(credentials.credentials)
    return to_auth_context(resolve_profile(db, payload))


async def get_auth_context(
    auth: Optional[schemas.AuthContext] = Depends(get_optional_auth_context),
) -> schemas.AuthContext:
    """
    Require an authenticated caller.

    Raises:
        AuthenticationException: If no bearer token was sent.
    """
    if auth is None:
        raise AuthenticationException("Not authenticated")
    return auth


async def get_admin_context(
    auth: schemas.AuthContext = Depends(get_auth_context),
) -> schemas.AuthContext:
    """
    Require an admin caller.

    Raises:
        InsufficientPermissionsException: If the caller's profile is not an admin.
    """
    if not auth.is_admin:
        raise InsufficientPermissionsException("Not enough permissions")
    return auth
