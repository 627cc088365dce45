"""
CSV export endpoints.
"""
from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from dialtester.core.database import get_db
from dialtester.services.export_service import ExportService

router = APIRouter(prefix="/export", tags=["Export"])


def _csv_response(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/sessions")
async def export_sessions(db: AsyncSession = Depends(get_db)):
    """Download all sessions as CSV."""
    return _csv_response(await ExportService.sessions_csv(db), "sessions.csv")


@router.get("/data-points")
async def export_data_points(db: AsyncSession = Depends(get_db)):
    """Download all data points as CSV."""
    return _csv_response(await ExportService.data_points_csv(db), "data_points.csv")


@router.get("/all")
async def export_all(db: AsyncSession = Depends(get_db)):
    """Download data points joined with their sessions as CSV."""
    return _csv_response(await ExportService.combined_csv(db), "complete_dataset.csv")
