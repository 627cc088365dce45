# Schemas package
from dialtester.models.schemas.data_points import (
    DataPointCreate,
    DataPointResponse,
    DataPointEnvelope,
    coerce_dial_value,
)
from dialtester.models.schemas.sessions import (
    SessionAction,
    SessionCreate,
    SessionUpdate,
    SessionStats,
    SessionResponse,
    SessionDetailResponse,
    SessionEnvelope,
    SessionDetailEnvelope,
    SessionListResponse,
)
from dialtester.models.schemas.admin import OverviewResponse, OverviewEnvelope

__all__ = [
    "DataPointCreate",
    "DataPointResponse",
    "DataPointEnvelope",
    "coerce_dial_value",
    "SessionAction",
    "SessionCreate",
    "SessionUpdate",
    "SessionStats",
    "SessionResponse",
    "SessionDetailResponse",
    "SessionEnvelope",
    "SessionDetailEnvelope",
    "SessionListResponse",
    "OverviewResponse",
    "OverviewEnvelope",
]
