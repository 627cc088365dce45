"""
Recording session API endpoints.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dialtester.core.database import get_db
from dialtester.core.logging import get_logger
from dialtester.core.websocket import manager
from dialtester.models.schemas.sessions import (
    SessionCreate, SessionUpdate, SessionResponse,
    SessionDetailResponse, SessionEnvelope, SessionDetailEnvelope
)
from dialtester.services.session_service import SessionService

logger = get_logger(__name__)

router = APIRouter(prefix="/sessions", tags=["Sessions"])


@router.post("", response_model=SessionEnvelope)
async def create_session(
    request: SessionCreate,
    db: AsyncSession = Depends(get_db)
):
    """Start a recording session for a participant."""
    session = await SessionService.create_session(db=db, email=request.email)
    response = SessionResponse.model_validate(session)

    await manager.broadcast_session_event(
        "session_created", response.id, {"session": response.model_dump(mode="json")}
    )
    return SessionEnvelope(session=response)


@router.get("/{session_id}", response_model=SessionDetailEnvelope)
async def get_session(
    session_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Fetch a session with its data points."""
    session = await SessionService.get_session(db=db, session_id=session_id)
    return SessionDetailEnvelope(session=SessionDetailResponse.model_validate(session))


@router.patch("/{session_id}", response_model=SessionEnvelope)
async def update_session(
    session_id: str,
    request: SessionUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Apply an action to a session; ``complete`` sets its end time."""
    logger.info(f"Session {session_id}: {request.action.value}")
    # COMPLETE is the only action the schema accepts
    session = await SessionService.complete_session(db=db, session_id=session_id)
    response = SessionResponse.model_validate(session)

    await manager.broadcast_session_event(
        "session_completed", response.id, {"session": response.model_dump(mode="json")}
    )
    return SessionEnvelope(session=response)
