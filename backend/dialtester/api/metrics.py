"""
Prometheus scrape endpoint.
"""
from fastapi import APIRouter, HTTPException, Response

from dialtester.core.config import settings
from dialtester.core.metrics import get_metrics, get_metrics_content_type

router = APIRouter(tags=["Metrics"])


@router.get("/metrics")
async def prometheus_metrics():
    if not settings.ENABLE_METRICS:
        raise HTTPException(status_code=404, detail="Metrics are disabled")
    return Response(content=get_metrics(), media_type=get_metrics_content_type())
