"""
Data point API endpoints.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dialtester.core.database import get_db
from dialtester.core.websocket import manager
from dialtester.models.schemas.data_points import DataPointCreate, DataPointResponse, DataPointEnvelope
from dialtester.services.session_service import SessionService

router = APIRouter(prefix="/data-points", tags=["Data Points"])


@router.post("", response_model=DataPointEnvelope)
async def create_data_point(
    request: DataPointCreate,
    db: AsyncSession = Depends(get_db)
):
    """Persist one sampled dial value."""
    data_point = await SessionService.insert_data_point(
        db=db,
        session_id=request.session_id,
        value=request.value,
        timestamp=request.timestamp,
    )
    response = DataPointResponse.model_validate(data_point)

    await manager.broadcast_session_event(
        "data_point", response.session_id, {"data_point": response.model_dump(mode="json")}
    )
    return DataPointEnvelope(data_point=response)
