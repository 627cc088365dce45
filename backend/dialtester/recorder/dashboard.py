"""
Admin dashboard client: fetches sessions once per refresh and aggregates them.
"""
from dataclasses import dataclass
from typing import List

from dialtester.core.logging import get_logger
from dialtester.models.schemas.admin import OverviewResponse
from dialtester.models.schemas.sessions import SessionDetailResponse
from dialtester.recorder.gateway_client import GatewayClient
from dialtester.services import dashboard

logger = get_logger(__name__)


@dataclass(frozen=True)
class DashboardSnapshot:
    sessions: List[SessionDetailResponse]
    overview: OverviewResponse


class DashboardPoller:
    """Polling read path over the gateway's admin listing."""

    def __init__(self, gateway: GatewayClient):
        self.gateway = gateway

    async def refresh(self) -> DashboardSnapshot:
        """Fetch every session and compute per-session stats plus the overview."""
        sessions = await self.gateway.list_sessions()
        logger.info(f"Dashboard refreshed with {len(sessions)} session(s)")
        return DashboardSnapshot(
            sessions=dashboard.with_stats(sessions),
            overview=dashboard.overview(sessions),
        )
