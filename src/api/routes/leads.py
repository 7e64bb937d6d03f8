"""Lead capture endpoint."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.schemas import LeadCreatedResponse, LeadCreateRequest
from db.repositories import AnalysisRepository, LeadRepository
from db.session import get_db_session

router = APIRouter(prefix="/leads", tags=["Leads"])


@router.post(
    "",
    response_model=LeadCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Leave an email",
    description="Record an email address against an analysis result.",
)
async def create_lead(
    request: LeadCreateRequest,
    db: AsyncSession = Depends(get_db_session),
) -> LeadCreatedResponse:
    """Record a lead; URL and score are copied from the analysis."""
    analysis = await AnalysisRepository(db).get_by_id(request.analysis_id)
    if not analysis:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Analysis {request.analysis_id} not found",
        )

    await LeadRepository(db).create(
        email=request.email,
        analysis_id=analysis.id,
        url=analysis.url,
        score=analysis.score,
    )
    await db.commit()

    return LeadCreatedResponse()
