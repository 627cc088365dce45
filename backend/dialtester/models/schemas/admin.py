"""
Pydantic schemas for the admin dashboard.
"""
from pydantic import BaseModel


class OverviewResponse(BaseModel):
    """Totals across every recorded session."""
    total_sessions: int
    total_data_points: int
    average_duration_minutes: int
    unique_participants: int


class OverviewEnvelope(BaseModel):
    overview: OverviewResponse
