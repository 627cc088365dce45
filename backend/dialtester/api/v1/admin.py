"""
Admin dashboard API endpoints.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dialtester.core.database import get_db
from dialtester.models.schemas.admin import OverviewEnvelope
from dialtester.models.schemas.sessions import SessionDetailResponse, SessionListResponse
from dialtester.services import dashboard
from dialtester.services.session_service import SessionService

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/sessions", response_model=SessionListResponse)
async def list_sessions(
    include_stats: bool = False,
    db: AsyncSession = Depends(get_db)
):
    """List all sessions, newest first, with nested data points."""
    sessions = await SessionService.list_sessions(db=db)
    responses = [SessionDetailResponse.model_validate(s) for s in sessions]

    if include_stats:
        responses = dashboard.with_stats(responses)

    return SessionListResponse(sessions=responses)


@router.get("/overview", response_model=OverviewEnvelope)
async def get_overview(db: AsyncSession = Depends(get_db)):
    """Totals across all sessions."""
    sessions = await SessionService.list_sessions(db=db)
    responses = [SessionDetailResponse.model_validate(s) for s in sessions]
    return OverviewEnvelope(overview=dashboard.overview(responses))
