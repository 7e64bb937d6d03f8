"""Readiness analysis API endpoints."""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from analyzers.base import AnalysisError
from analyzers.readiness import ReadinessAnalyzer
from api.deps import get_analyzer, get_current_user, require_user
from api.schemas import (
    AnalysisCreateRequest,
    AnalysisListResponse,
    AnalysisResponse,
)
from db.models import User
from db.repositories import AnalysisRepository
from db.session import get_db_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analyses", tags=["Analyses"])


@router.post(
    "",
    response_model=AnalysisResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Analyze a website",
    description="Probe a website for LLM readiness and store the result.",
)
async def create_analysis(
    request: AnalysisCreateRequest,
    db: AsyncSession = Depends(get_db_session),
    analyzer: ReadinessAnalyzer = Depends(get_analyzer),
    user: User | None = Depends(get_current_user),
) -> AnalysisResponse:
    """
    Analyze a website and persist the result.

    The result is attributed to the signed-in user, if any; anonymous
    results can be claimed later.
    """
    try:
        result = await analyzer.analyze(request.url)
    except AnalysisError as e:
        logger.warning(f"Analysis of {request.url} failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    repo = AnalysisRepository(db)
    analysis = await repo.create(
        url=request.url,
        result=result,
        user_id=user.id if user else None,
    )
    await db.commit()

    return AnalysisResponse.model_validate(analysis)


@router.get(
    "",
    response_model=AnalysisListResponse,
    summary="List my analyses",
    description="Get the signed-in user's analyses, newest first.",
)
async def list_analyses(
    db: AsyncSession = Depends(get_db_session),
    user: User = Depends(require_user),
) -> AnalysisListResponse:
    """List the current user's analyses."""
    repo = AnalysisRepository(db)
    analyses = await repo.list_for_user(user.id)
    return AnalysisListResponse(
        analyses=[AnalysisResponse.model_validate(a) for a in analyses],
        count=len(analyses),
    )


@router.get(
    "/{analysis_id}",
    response_model=AnalysisResponse,
    summary="Get an analysis",
    description="Get a stored analysis by ID. Results are shareable and need no sign-in.",
)
async def get_analysis(
    analysis_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
) -> AnalysisResponse:
    """Get an analysis by ID."""
    repo = AnalysisRepository(db)
    analysis = await repo.get_by_id(analysis_id)

    if not analysis:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Analysis {analysis_id} not found",
        )

    return AnalysisResponse.model_validate(analysis)


@router.post(
    "/{analysis_id}/claim",
    response_model=AnalysisResponse,
    summary="Claim an analysis",
    description="Attach an anonymous analysis to the signed-in user.",
)
async def claim_analysis(
    analysis_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
    user: User = Depends(require_user),
) -> AnalysisResponse:
    """Claim an analysis made before signing in."""
    repo = AnalysisRepository(db)
    analysis = await repo.get_by_id(analysis_id)

    if not analysis:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Analysis {analysis_id} not found",
        )

    if analysis.user_id and analysis.user_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Analysis belongs to another user",
        )

    if not analysis.user_id:
        analysis = await repo.link_to_user(analysis_id, user.id)
        await db.commit()

    return AnalysisResponse.model_validate(analysis)
