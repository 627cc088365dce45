"""
CSV exports of sessions and data points.
"""
from typing import List, Optional
from datetime import datetime
import pandas as pd
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from dialtester.core.exceptions import StoreError
from dialtester.core.logging import get_logger
from dialtester.models.database import DialSession, DataPoint
from dialtester.models.schemas.common import ensure_utc

logger = get_logger(__name__)

SESSION_COLUMNS = ["ID", "Email", "Start Time", "End Time", "Created At", "Updated At"]
DATA_POINT_COLUMNS = ["ID", "Session ID", "Value", "Timestamp"]
COMBINED_COLUMNS = ["Data Point ID", "Session ID", "Email", "Emotional Value", "Timestamp", "Session Created"]


def _iso(value: Optional[datetime]) -> str:
    return ensure_utc(value).isoformat() if value else ""


def _to_csv(rows: List[list], columns: List[str]) -> str:
    return pd.DataFrame(rows, columns=columns).to_csv(index=False)


class ExportService:
    """Builds CSV documents from the store."""

    @staticmethod
    async def sessions_csv(db: AsyncSession) -> str:
        """Sessions, newest first."""
        try:
            result = await db.execute(select(DialSession).order_by(DialSession.created_at.desc()))
            sessions = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching sessions for export: {e}")
            raise StoreError("Export failed", details=str(e)) from e

        rows = [
            [s.id, s.email, _iso(s.start_time), _iso(s.end_time), _iso(s.created_at), _iso(s.updated_at)]
            for s in sessions
        ]
        logger.info(f"Exporting {len(rows)} session(s)")
        return _to_csv(rows, SESSION_COLUMNS)

    @staticmethod
    async def data_points_csv(db: AsyncSession) -> str:
        """Data points, oldest first."""
        try:
            result = await db.execute(select(DataPoint).order_by(DataPoint.timestamp.asc()))
            points = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching data points for export: {e}")
            raise StoreError("Export failed", details=str(e)) from e

        rows = [[p.id, p.session_id, p.value, _iso(p.timestamp)] for p in points]
        logger.info(f"Exporting {len(rows)} data point(s)")
        return _to_csv(rows, DATA_POINT_COLUMNS)

    @staticmethod
    async def combined_csv(db: AsyncSession) -> str:
        """Data points joined with their session, oldest first."""
        try:
            result = await db.execute(
                select(DataPoint, DialSession)
                .join(DialSession, DataPoint.session_id == DialSession.id)
                .order_by(DataPoint.timestamp.asc())
            )
            pairs = result.all()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching combined data for export: {e}")
            raise StoreError("Export failed", details=str(e)) from e

        rows = [
            [point.id, session.id, session.email, point.value, _iso(point.timestamp), _iso(session.created_at)]
            for point, session in pairs
        ]
        logger.info(f"Exporting {len(rows)} combined row(s)")
        return _to_csv(rows, COMBINED_COLUMNS)
