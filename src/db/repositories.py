"""Repository pattern for database operations."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from analyzers.base import ReadinessResult
from db.models import Analysis, Lead, User


class UserRepository:
    """Handles all User-related database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_google_id(self, google_id: str) -> User | None:
        """Retrieve a user by the identity provider's subject id."""
        result = await self.session.execute(
            select(User).where(User.google_id == google_id).limit(1)
        )
        return result.scalar_one_or_none()

    async def upsert(
        self,
        google_id: str,
        name: str | None = None,
        email: str | None = None,
    ) -> User:
        """
        Create the user on first sign-in, otherwise refresh its profile.

        Name and email are only overwritten when provided.
        """
        user = await self.get_by_google_id(google_id)
        now = datetime.now(timezone.utc)

        if user:
            user.last_signed_in = now
            user.updated_at = now
            if name is not None:
                user.name = name
            if email is not None:
                user.email = email
        else:
            user = User(google_id=google_id, name=name, email=email)
            self.session.add(user)

        await self.session.flush()
        return user


class AnalysisRepository:
    """Handles all Analysis-related database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        url: str,
        result: ReadinessResult,
        user_id: uuid.UUID | None = None,
    ) -> Analysis:
        """Store an analyzer result, optionally attributed to a user."""
        analysis = Analysis(
            user_id=user_id,
            url=url,
            score=result.score,
            details=result.to_dict()["details"],
            **result.flags(),
        )
        self.session.add(analysis)
        await self.session.flush()  # Assigns the ID without committing
        return analysis

    async def get_by_id(self, analysis_id: uuid.UUID) -> Analysis | None:
        """Retrieve an analysis by its ID."""
        result = await self.session.execute(
            select(Analysis).where(Analysis.id == analysis_id)
        )
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: uuid.UUID) -> list[Analysis]:
        """Get a user's analyses, newest first."""
        result = await self.session.execute(
            select(Analysis)
            .where(Analysis.user_id == user_id)
            .order_by(Analysis.created_at.desc())
        )
        return list(result.scalars().all())

    async def link_to_user(
        self,
        analysis_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> Analysis | None:
        """Attribute an analysis to a user."""
        analysis = await self.get_by_id(analysis_id)
        if analysis:
            analysis.user_id = user_id
            await self.session.flush()
        return analysis


class LeadRepository:
    """Handles Lead database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        email: str,
        analysis_id: uuid.UUID,
        url: str,
        score: int,
    ) -> Lead:
        """Record a lead for an analysis."""
        lead = Lead(
            email=email,
            analysis_id=analysis_id,
            url=url,
            score=score,
        )
        self.session.add(lead)
        await self.session.flush()
        return lead
