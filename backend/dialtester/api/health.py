"""
Health check endpoints.
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from dialtester.core.config import settings
from dialtester.core.database import get_db
from dialtester.core.websocket import manager, DASHBOARD_KEY
from dialtester.models.database import DialSession, DataPoint

router = APIRouter()


def _service_info() -> Dict[str, Any]:
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
    }


@router.get("/health")
async def health_check() -> Dict[str, Any]:
    """Liveness probe; does not touch the store."""
    return {"status": "healthy", **_service_info()}


@router.get("/health/detailed")
async def detailed_health_check(db: AsyncSession = Depends(get_db)) -> Dict[str, Any]:
    """
    Readiness probe: checks the store can be queried and reports row
    counts along with the number of live dashboard subscribers.
    """
    store: Dict[str, Any] = {"status": "unknown"}
    try:
        store["sessions"] = (await db.execute(select(func.count(DialSession.id)))).scalar_one()
        store["data_points"] = (await db.execute(select(func.count(DataPoint.id)))).scalar_one()
        store["status"] = "healthy"
    except SQLAlchemyError as e:
        store["status"] = f"unhealthy: {e}"

    return {
        "status": "healthy" if store["status"] == "healthy" else "unhealthy",
        **_service_info(),
        "checks": {
            "store": store,
            "dashboard_subscribers": manager.get_connection_count(DASHBOARD_KEY),
        },
    }
