"""Shared route dependencies."""

import logging

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from analyzers.readiness import ReadinessAnalyzer
from config import settings
from db.models import User
from db.repositories import UserRepository
from db.session import get_db_session

logger = logging.getLogger(__name__)


def get_analyzer() -> ReadinessAnalyzer:
    """Provide a fresh analyzer per request."""
    return ReadinessAnalyzer()


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> User | None:
    """
    Resolve the signed-in user, or None for anonymous requests.

    Session handling lives in the auth gateway in front of this service.
    It forwards the identity provider's subject id in
    ``settings.identity_header`` and, optionally, the profile name and email.
    A subject seen for the first time gets a user row.
    """
    google_id = request.headers.get(settings.identity_header, "").strip()
    if not google_id:
        return None

    repo = UserRepository(db)
    user = await repo.get_by_google_id(google_id)
    if user is None:
        user = await repo.upsert(
            google_id,
            name=request.headers.get(settings.identity_name_header) or None,
            email=request.headers.get(settings.identity_email_header) or None,
        )
        logger.info(f"Registered user {user.id} on first sign-in")
    return user


async def require_user(user: User | None = Depends(get_current_user)) -> User:
    """Reject anonymous requests."""
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Please sign in",
        )
    return user
